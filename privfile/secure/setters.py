"""Owner-only grants, one setter per permission model."""

from __future__ import annotations

import enum
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from privfile.secure.capabilities import PermissionModel

logger = logging.getLogger(__name__)

FILE_MODE = 0o600
DIRECTORY_MODE = 0o700


class PermissionSetter(Protocol):
    """Applies the owner-only grant for one permission model."""

    model: PermissionModel

    def apply(self, path: Path) -> None: ...


class PosixPermissionSetter:
    """Replace the mode bits with owner read/write (plus traverse for directories).

    This is a full replace: any group or other bits are revoked.
    """

    model = PermissionModel.POSIX_MODE_BITS

    def apply(self, path: Path) -> None:
        mode = DIRECTORY_MODE if path.is_dir() else FILE_MODE
        os.chmod(path, mode)
        logger.debug("Set mode %o on %s", mode, path)


class AclPermission(enum.IntFlag):
    """File access rights, valued as their NT access-mask bits."""

    READ_DATA = 0x00000001
    WRITE_DATA = 0x00000002
    APPEND_DATA = 0x00000004
    READ_NAMED_ATTRS = 0x00000008
    WRITE_NAMED_ATTRS = 0x00000010
    EXECUTE = 0x00000020
    DELETE_CHILD = 0x00000040
    READ_ATTRIBUTES = 0x00000080
    WRITE_ATTRIBUTES = 0x00000100
    DELETE = 0x00010000
    READ_ACL = 0x00020000
    WRITE_ACL = 0x00040000
    WRITE_OWNER = 0x00080000
    SYNCHRONIZE = 0x00100000


# Rights needed for normal use of a private file by its owner.
OWNER_PERMISSIONS = (
    AclPermission.READ_DATA
    | AclPermission.WRITE_DATA
    | AclPermission.APPEND_DATA
    | AclPermission.READ_NAMED_ATTRS
    | AclPermission.WRITE_NAMED_ATTRS
    | AclPermission.EXECUTE
    | AclPermission.READ_ATTRIBUTES
    | AclPermission.WRITE_ATTRIBUTES
    | AclPermission.DELETE
    | AclPermission.READ_ACL
    | AclPermission.SYNCHRONIZE
)


class AclEntryType(enum.Enum):
    ALLOW = "allow"
    DENY = "deny"


@dataclass(frozen=True)
class AclEntry:
    """One access-control entry.

    Attributes:
        principal: Principal identifier (a SID string on Windows).
        type: Whether the entry grants or denies.
        permissions: Rights covered by the entry.
        flags: Platform inheritance flags, carried through unchanged.
    """

    principal: str
    type: AclEntryType
    permissions: AclPermission
    flags: int = 0


class AclView(Protocol):
    """Read/write access to the ACL of a single path."""

    def owner(self) -> str: ...

    def system_principals(self) -> frozenset[str]: ...

    def get_acl(self) -> list[AclEntry]: ...

    def set_acl(self, entries: list[AclEntry]) -> None: ...


def _default_view_factory(path: Path) -> AclView:
    from privfile.secure.windows import Win32AclView

    return Win32AclView(path)


class AclPermissionSetter:
    """Strip an ACL down to system principals plus a single owner grant.

    System principals (built-in Administrators, LocalSystem) keep their
    entries; the platform's own file-management tooling relies on them.
    """

    model = PermissionModel.ACCESS_CONTROL_LIST

    def __init__(self, view_factory: Callable[[Path], AclView] | None = None) -> None:
        self._view_factory = view_factory or _default_view_factory

    def apply(self, path: Path) -> None:
        view = self._view_factory(path)
        owner = view.owner()
        keep = view.system_principals()

        current = view.get_acl()
        acl = [entry for entry in current if entry.principal in keep]
        dropped = len(current) - len(acl)
        acl.append(
            AclEntry(principal=owner, type=AclEntryType.ALLOW, permissions=OWNER_PERMISSIONS)
        )

        view.set_acl(acl)
        logger.debug("Restricted ACL on %s to owner %s (dropped %d entries)", path, owner, dropped)


def default_setters() -> dict[PermissionModel, PermissionSetter]:
    """Return the setter used for each supported permission model."""
    return {
        PermissionModel.POSIX_MODE_BITS: PosixPermissionSetter(),
        PermissionModel.ACCESS_CONTROL_LIST: AclPermissionSetter(),
    }
