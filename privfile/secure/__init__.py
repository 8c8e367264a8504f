"""Owner-only provisioning of private files."""

from privfile.secure.capabilities import PermissionModel, detect_permission_model
from privfile.secure.provisioner import (
    Degraded,
    Error,
    LoggingObserver,
    NullObserver,
    Ok,
    ProvisioningObserver,
    Result,
    SecureFileProvisioner,
    ensure_secure_file,
)
from privfile.secure.setters import AclPermissionSetter, PosixPermissionSetter

__all__ = [
    "AclPermissionSetter",
    "Degraded",
    "Error",
    "LoggingObserver",
    "NullObserver",
    "Ok",
    "PermissionModel",
    "PosixPermissionSetter",
    "ProvisioningObserver",
    "Result",
    "SecureFileProvisioner",
    "detect_permission_model",
    "ensure_secure_file",
]
