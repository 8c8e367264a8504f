"""Exception hierarchy for privfile."""

from __future__ import annotations

from pathlib import Path


class PrivfileError(Exception):
    """Base exception for all privfile errors.

    All exceptions in this package inherit from this class,
    allowing callers to catch all privfile errors with
    a single except clause.
    """

    pass


# Provisioning Errors
class ProvisioningError(PrivfileError):
    """A private file or directory could not be provisioned."""

    def __init__(self, path: Path, message: str, cause: BaseException | None = None) -> None:
        self.path = path
        self.cause = cause
        super().__init__(message)


class CreationFailure(ProvisioningError):
    """Directory or file could not be created.

    The resource does not exist after this error.
    """

    def __init__(self, path: Path, operation: str, cause: BaseException | None = None) -> None:
        self.operation = operation
        detail = f": {cause}" if cause is not None else ""
        super().__init__(path, f"Failed to {operation} {path}{detail}", cause)


class PermissionApplicationFailure(ProvisioningError):
    """Resource exists but restricting its access rights failed."""

    def __init__(self, path: Path, model: str, cause: BaseException | None = None) -> None:
        self.model = model
        detail = f": {cause}" if cause is not None else ""
        super().__init__(
            path, f"Failed to restrict access permissions ({model}) on {path}{detail}", cause
        )


class PermissionModelUnsupported(PrivfileError):
    """No supported permission model is available for a path.

    Never raised by the provisioner; it is reported as a degraded result.
    """

    reason = "no supported permission model"

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"{self.reason}: {path}")


# Configuration Errors
class ConfigError(PrivfileError):
    """Configuration-related errors."""

    pass


class ConfigParseError(ConfigError):
    """Configuration file has invalid syntax."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid config at {path}: {detail}")


class ConfigValidationError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: object, reason: str) -> None:
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid config value for '{key}': {reason}")


# Credential Errors
class CredentialsError(PrivfileError):
    """Credential cache errors."""

    pass


class CredentialsParseError(CredentialsError):
    """Credential cache exists but cannot be decoded."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid credentials file {path}: {detail}")


# Input Errors
class InputError(PrivfileError):
    """Reading or copying a stream failed."""

    pass


class InputFileNotFoundError(InputError):
    """Named input file doesn't exist."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"File not found: {path}")
