"""Provision private files: create them, then restrict them to their owner.

The provisioner keeps no state between calls. Every call re-inspects the
filesystem, so directories left behind by an earlier run are handled the
same way as directories created by another tool.

Only objects created by the call itself are restricted. A directory or
file that already existed is left as found.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, Union

from privfile.exceptions import (
    CreationFailure,
    PermissionApplicationFailure,
    PermissionModelUnsupported,
    ProvisioningError,
)
from privfile.secure.capabilities import CapabilityQuery, PermissionModel, detect_permission_model
from privfile.secure.setters import DIRECTORY_MODE, FILE_MODE, PermissionSetter, default_setters

logger = logging.getLogger(__name__)

WarningSink = Callable[[str], None]


@dataclass(frozen=True)
class Ok:
    """File and directory exist; everything created was restricted."""

    path: Path


@dataclass(frozen=True)
class Degraded:
    """File exists but at least one object could not be restricted.

    Attributes:
        path: The object that could not be restricted (the file when both were).
        reason: Why hardening was not applied.
        affected: Every object that could not be restricted, parent first.
    """

    path: Path
    reason: str
    affected: tuple[Path, ...] = field(default=())


@dataclass(frozen=True)
class Error:
    """Provisioning failed; see ``cause`` for the operation and path."""

    cause: ProvisioningError

    @property
    def path(self) -> Path:
        return self.cause.path


Result = Union[Ok, Degraded, Error]


class ProvisioningObserver(Protocol):
    """Receives provisioning events (metrics, audit, ...)."""

    def created(self, path: Path, kind: str) -> None: ...

    def restricted(self, path: Path, model: PermissionModel) -> None: ...

    def degraded(self, path: Path, reason: str) -> None: ...

    def failed(self, path: Path, error: ProvisioningError) -> None: ...


class NullObserver:
    """Observer that ignores every event."""

    def created(self, path: Path, kind: str) -> None:
        pass

    def restricted(self, path: Path, model: PermissionModel) -> None:
        pass

    def degraded(self, path: Path, reason: str) -> None:
        pass

    def failed(self, path: Path, error: ProvisioningError) -> None:
        pass


class LoggingObserver:
    """Observer that reports events to the module logger."""

    def created(self, path: Path, kind: str) -> None:
        logger.info("Created %s %s", kind, path)

    def restricted(self, path: Path, model: PermissionModel) -> None:
        logger.info("Restricted %s to owner (%s)", path, model.value)

    def degraded(self, path: Path, reason: str) -> None:
        logger.warning("Could not restrict %s: %s", path, reason)

    def failed(self, path: Path, error: ProvisioningError) -> None:
        logger.error("Provisioning failed for %s: %s", path, error)


def _default_warning(message: str) -> None:
    from privfile.utils.output import warning

    warning(message)


class SecureFileProvisioner:
    """Create a file and its parent directory with owner-only access.

    Args:
        capability_query: Classifies the permission model of a path.
        setters: Setter to use for each supported permission model. Models
            without a setter are treated as unsupported.
        warn: Operator-visible warning sink, called once per unrestricted object.
        observer: Receives created/restricted/degraded/failed events.
    """

    def __init__(
        self,
        capability_query: CapabilityQuery | None = None,
        setters: Mapping[PermissionModel, PermissionSetter] | None = None,
        warn: WarningSink | None = None,
        observer: ProvisioningObserver | None = None,
    ) -> None:
        self._capability_query = capability_query or detect_permission_model
        self._setters = dict(setters) if setters is not None else default_setters()
        self._warn = warn or _default_warning
        self._observer = observer or NullObserver()

    def ensure(self, path: Path | str) -> Ok | Degraded:
        """Make sure *path* and its parent exist, restricting what gets created.

        Raises:
            CreationFailure: The directory or file could not be created.
            PermissionApplicationFailure: Restricting a created object failed.
        """
        path = Path(path)
        try:
            return self._ensure(path)
        except ProvisioningError as e:
            self._observer.failed(e.path, e)
            raise

    def try_ensure(self, path: Path | str) -> Result:
        """Like :meth:`ensure`, but return fatal errors as an :class:`Error`."""
        try:
            return self.ensure(path)
        except ProvisioningError as e:
            return Error(e)

    def _ensure(self, path: Path) -> Ok | Degraded:
        unrestricted: list[Path] = []
        parent = path.parent

        if self._ensure_directory(parent):
            if not self._restrict(parent, "directory"):
                unrestricted.append(parent)

        created = self._ensure_file(path)
        if created:
            if not self._restrict(path, "config file"):
                unrestricted.append(path)
        elif self._classify(path) is PermissionModel.UNSUPPORTED:
            # Pre-existing file on a filesystem that cannot express owner-only access.
            self._report_degraded(path, "config file")
            unrestricted.append(path)

        if unrestricted:
            return Degraded(
                path=unrestricted[-1],
                reason=PermissionModelUnsupported.reason,
                affected=tuple(unrestricted),
            )
        return Ok(path)

    def _ensure_directory(self, directory: Path) -> bool:
        """Create *directory* and missing ancestors. Return True if this call created it."""
        if directory.is_dir():
            return False
        try:
            directory.mkdir(mode=DIRECTORY_MODE, parents=True)
        except FileExistsError as e:
            if directory.is_dir():
                logger.debug("Directory %s appeared concurrently; leaving as found", directory)
                return False
            raise CreationFailure(directory, "create directory", e) from e
        except OSError as e:
            raise CreationFailure(directory, "create directory", e) from e
        self._observer.created(directory, "directory")
        return True

    def _ensure_file(self, path: Path) -> bool:
        """Create an empty file at *path*. Return True if this call created it."""
        if path.is_file():
            return False
        flags = os.O_WRONLY | os.O_CREAT | os.O_EXCL | getattr(os, "O_BINARY", 0)
        try:
            fd = os.open(path, flags, FILE_MODE)
        except FileExistsError as e:
            if path.is_file():
                logger.debug("File %s appeared concurrently; leaving as found", path)
                return False
            raise CreationFailure(path, "create file", e) from e
        except OSError as e:
            raise CreationFailure(path, "create file", e) from e
        os.close(fd)
        self._observer.created(path, "file")
        return True

    def _classify(self, path: Path) -> PermissionModel:
        try:
            model = self._capability_query(path)
        except OSError as e:
            raise PermissionApplicationFailure(path, "capability query", e) from e
        if model not in self._setters:
            return PermissionModel.UNSUPPORTED
        return model

    def _restrict(self, path: Path, kind: str) -> bool:
        """Apply the owner-only grant. Return False if no permission model applies."""
        model = self._classify(path)
        if model is PermissionModel.UNSUPPORTED:
            self._report_degraded(path, kind)
            return False
        try:
            self._setters[model].apply(path)
        except OSError as e:
            raise PermissionApplicationFailure(path, model.value, e) from e
        self._observer.restricted(path, model)
        return True

    def _report_degraded(self, path: Path, kind: str) -> None:
        reason = PermissionModelUnsupported.reason
        self._warn(f"Failed to restrict access permissions on {kind} {path}: {reason}")
        self._observer.degraded(path, reason)


def ensure_secure_file(
    path: Path | str,
    *,
    capability_query: CapabilityQuery | None = None,
    setters: Mapping[PermissionModel, PermissionSetter] | None = None,
    warn: WarningSink | None = None,
    observer: ProvisioningObserver | None = None,
) -> Ok | Degraded:
    """Provision *path* with a one-off :class:`SecureFileProvisioner`."""
    provisioner = SecureFileProvisioner(
        capability_query=capability_query, setters=setters, warn=warn, observer=observer
    )
    return provisioner.ensure(path)
