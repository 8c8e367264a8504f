"""Unit tests for the permission setters."""

from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from privfile.secure.capabilities import PermissionModel
from privfile.secure.setters import (
    OWNER_PERMISSIONS,
    AclEntry,
    AclEntryType,
    AclPermission,
    AclPermissionSetter,
    PosixPermissionSetter,
    default_setters,
)

OWNER = "S-1-5-21-1000-1000-1000-1001"
OTHER_USER = "S-1-5-21-1000-1000-1000-1002"
EVERYONE = "S-1-1-0"
USERS = "S-1-5-32-545"
ADMINISTRATORS = "S-1-5-32-544"
LOCAL_SYSTEM = "S-1-5-18"


class FakeAclView:
    """In-memory ACL view."""

    def __init__(self, entries: list[AclEntry], owner: str = OWNER) -> None:
        self._owner = owner
        self.entries = list(entries)
        self.writes: list[list[AclEntry]] = []

    def owner(self) -> str:
        return self._owner

    def system_principals(self) -> frozenset[str]:
        return frozenset({ADMINISTRATORS, LOCAL_SYSTEM})

    def get_acl(self) -> list[AclEntry]:
        return list(self.entries)

    def set_acl(self, entries: list[AclEntry]) -> None:
        self.writes.append(list(entries))
        self.entries = list(entries)


def _allow(principal: str, permissions: AclPermission = AclPermission.READ_DATA) -> AclEntry:
    return AclEntry(principal=principal, type=AclEntryType.ALLOW, permissions=permissions)


@pytest.mark.skipif(os.name != "posix", reason="requires POSIX mode bits")
class TestPosixPermissionSetter:
    def test_file_gets_owner_read_write(self, tmp_path: Path) -> None:
        target = tmp_path / "creds.json"
        target.write_text("")
        target.chmod(0o777)

        PosixPermissionSetter().apply(target)

        assert stat.S_IMODE(target.stat().st_mode) == 0o600

    def test_directory_gets_owner_traverse(self, tmp_path: Path) -> None:
        target = tmp_path / "app"
        target.mkdir()
        target.chmod(0o755)

        PosixPermissionSetter().apply(target)

        assert stat.S_IMODE(target.stat().st_mode) == 0o700

    def test_revokes_special_bits(self, tmp_path: Path) -> None:
        target = tmp_path / "creds.json"
        target.write_text("")
        target.chmod(0o4755)

        PosixPermissionSetter().apply(target)

        assert stat.S_IMODE(target.stat().st_mode) == 0o600

    def test_missing_path_raises_oserror(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            PosixPermissionSetter().apply(tmp_path / "missing")


class TestAclPermissionSetter:
    def test_removes_other_principals(self, tmp_path: Path) -> None:
        view = FakeAclView(
            [
                _allow(EVERYONE),
                _allow(USERS, AclPermission.READ_DATA | AclPermission.WRITE_DATA),
                _allow(OTHER_USER),
                _allow(ADMINISTRATORS, OWNER_PERMISSIONS),
                _allow(LOCAL_SYSTEM, OWNER_PERMISSIONS),
            ]
        )

        AclPermissionSetter(lambda path: view).apply(tmp_path)

        principals = [entry.principal for entry in view.entries]
        assert principals == [ADMINISTRATORS, LOCAL_SYSTEM, OWNER]
        assert len(view.writes) == 1

    def test_appends_owner_allow_entry(self, tmp_path: Path) -> None:
        view = FakeAclView([_allow(EVERYONE)])

        AclPermissionSetter(lambda path: view).apply(tmp_path)

        owner_entry = view.entries[-1]
        assert owner_entry.principal == OWNER
        assert owner_entry.type is AclEntryType.ALLOW
        assert owner_entry.permissions == OWNER_PERMISSIONS
        assert AclPermission.READ_DATA in owner_entry.permissions
        assert AclPermission.WRITE_DATA in owner_entry.permissions
        assert AclPermission.DELETE in owner_entry.permissions
        assert AclPermission.READ_ACL in owner_entry.permissions
        assert AclPermission.WRITE_ACL not in owner_entry.permissions

    def test_replaces_existing_owner_entries(self, tmp_path: Path) -> None:
        view = FakeAclView(
            [
                AclEntry(OWNER, AclEntryType.DENY, AclPermission.WRITE_DATA),
                _allow(OWNER, AclPermission.READ_DATA),
            ]
        )

        AclPermissionSetter(lambda path: view).apply(tmp_path)

        assert view.entries == [_allow(OWNER, OWNER_PERMISSIONS)]

    def test_keeps_system_deny_entries(self, tmp_path: Path) -> None:
        deny = AclEntry(LOCAL_SYSTEM, AclEntryType.DENY, AclPermission.EXECUTE)
        view = FakeAclView([deny, _allow(EVERYONE)])

        AclPermissionSetter(lambda path: view).apply(tmp_path)

        assert view.entries[0] == deny

    def test_no_allow_entries_outside_owner_and_system(self, tmp_path: Path) -> None:
        view = FakeAclView([_allow(f"S-1-5-21-1-2-3-{rid}") for rid in range(1100, 1110)])

        AclPermissionSetter(lambda path: view).apply(tmp_path)

        allowed = {e.principal for e in view.entries if e.type is AclEntryType.ALLOW}
        assert allowed <= {OWNER, ADMINISTRATORS, LOCAL_SYSTEM}
        assert OWNER in allowed

    def test_view_errors_propagate(self, tmp_path: Path) -> None:
        class BrokenView(FakeAclView):
            def set_acl(self, entries: list[AclEntry]) -> None:
                raise PermissionError(5, "Access is denied", str(tmp_path))

        view = BrokenView([])
        with pytest.raises(PermissionError):
            AclPermissionSetter(lambda path: view).apply(tmp_path)

    def test_view_built_for_each_path(self, tmp_path: Path) -> None:
        requested: list[Path] = []

        def factory(path: Path) -> FakeAclView:
            requested.append(path)
            return FakeAclView([])

        setter = AclPermissionSetter(factory)
        setter.apply(tmp_path / "a")
        setter.apply(tmp_path / "b")

        assert requested == [tmp_path / "a", tmp_path / "b"]


def test_default_setters_cover_supported_models() -> None:
    setters = default_setters()
    assert set(setters) == {PermissionModel.POSIX_MODE_BITS, PermissionModel.ACCESS_CONTROL_LIST}
    assert isinstance(setters[PermissionModel.POSIX_MODE_BITS], PosixPermissionSetter)
    assert isinstance(setters[PermissionModel.ACCESS_CONTROL_LIST], AclPermissionSetter)
