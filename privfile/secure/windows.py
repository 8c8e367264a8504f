"""Windows ACL view backed by pywin32."""

from __future__ import annotations

from pathlib import Path

import pywintypes
import win32security

from privfile.secure.setters import AclEntry, AclEntryType, AclPermission

_ACE_TYPES = {
    win32security.ACCESS_ALLOWED_ACE_TYPE: AclEntryType.ALLOW,
    win32security.ACCESS_DENIED_ACE_TYPE: AclEntryType.DENY,
}


def _sid_string(sid: object) -> str:
    return win32security.ConvertSidToStringSid(sid)


class Win32AclView:
    """Read and replace the DACL of a file or directory.

    Principals are exchanged as SID strings. Win32 errors are re-raised
    as OSError so callers see a single failure type.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def _security(self) -> object:
        try:
            return win32security.GetFileSecurity(
                str(self.path),
                win32security.OWNER_SECURITY_INFORMATION | win32security.DACL_SECURITY_INFORMATION,
            )
        except pywintypes.error as e:
            raise OSError(e.winerror, e.strerror, str(self.path)) from e

    def owner(self) -> str:
        return _sid_string(self._security().GetSecurityDescriptorOwner())

    def system_principals(self) -> frozenset[str]:
        return frozenset(
            _sid_string(win32security.CreateWellKnownSid(kind, None))
            for kind in (
                win32security.WinBuiltinAdministratorsSid,
                win32security.WinLocalSystemSid,
            )
        )

    def get_acl(self) -> list[AclEntry]:
        dacl = self._security().GetSecurityDescriptorDacl()
        if dacl is None:
            return []
        entries = []
        for index in range(dacl.GetAceCount()):
            (ace_type, ace_flags), mask, sid = dacl.GetAce(index)
            if ace_type not in _ACE_TYPES:
                continue
            entries.append(
                AclEntry(
                    principal=_sid_string(sid),
                    type=_ACE_TYPES[ace_type],
                    permissions=AclPermission(mask),
                    flags=ace_flags & ~win32security.INHERITED_ACE,
                )
            )
        return entries

    def set_acl(self, entries: list[AclEntry]) -> None:
        dacl = win32security.ACL()
        for entry in entries:
            sid = win32security.ConvertStringSidToSid(entry.principal)
            if entry.type is AclEntryType.ALLOW:
                dacl.AddAccessAllowedAceEx(
                    win32security.ACL_REVISION, entry.flags, int(entry.permissions), sid
                )
            else:
                dacl.AddAccessDeniedAceEx(
                    win32security.ACL_REVISION, entry.flags, int(entry.permissions), sid
                )
        # Protected DACL: stop the parent's inheritable entries from re-applying.
        try:
            win32security.SetNamedSecurityInfo(
                str(self.path),
                win32security.SE_FILE_OBJECT,
                win32security.DACL_SECURITY_INFORMATION
                | win32security.PROTECTED_DACL_SECURITY_INFORMATION,
                None,
                None,
                dacl,
                None,
            )
        except pywintypes.error as e:
            raise OSError(e.winerror, e.strerror, str(self.path)) from e
