"""Permission model classification for filesystem paths."""

from __future__ import annotations

import enum
import logging
import os
from pathlib import Path
from typing import Protocol

import psutil

logger = logging.getLogger(__name__)

# GetVolumeInformation flag: the volume preserves and enforces ACLs.
FILE_PERSISTENT_ACLS = 0x00000008

# Filesystems mounted on POSIX hosts that cannot store mode bits.
NO_MODE_BITS_FSTYPES = frozenset({"fat", "vfat", "msdos", "exfat"})


class PermissionModel(enum.Enum):
    """Mechanism a filesystem offers for expressing access rights."""

    POSIX_MODE_BITS = "posix"
    ACCESS_CONTROL_LIST = "acl"
    UNSUPPORTED = "unsupported"


class CapabilityQuery(Protocol):
    """Return the permission model supported where *path* lives."""

    def __call__(self, path: Path) -> PermissionModel: ...


def _nearest_existing(path: Path) -> Path:
    """Walk up from *path* to the closest ancestor that exists."""
    candidate = path.absolute()
    while not candidate.exists() and candidate != candidate.parent:
        candidate = candidate.parent
    return candidate


def _posix_filesystem_type(path: Path) -> str:
    """Return the type of the filesystem mounted under *path*, or "" if unknown."""
    target = _nearest_existing(path).resolve()
    best: Path | None = None
    fstype = ""
    for partition in psutil.disk_partitions(all=True):
        mountpoint = Path(partition.mountpoint)
        if mountpoint != target and mountpoint not in target.parents:
            continue
        if best is None or len(mountpoint.parts) > len(best.parts):
            best, fstype = mountpoint, partition.fstype
    logger.debug("Path %s is on %s (%s)", path, best, fstype or "unknown")
    return fstype


def _windows_volume_flags(path: Path) -> int:
    import pywintypes
    import win32api
    import win32file

    try:
        volume = win32file.GetVolumePathName(str(_nearest_existing(path)))
        _name, _serial, _max_len, flags, fs_name = win32api.GetVolumeInformation(volume)
    except pywintypes.error as e:
        raise OSError(e.winerror, e.strerror, str(path)) from e
    logger.debug("Volume %s (%s) flags=0x%08x", volume, fs_name, flags)
    return flags


def detect_permission_model(path: Path) -> PermissionModel:
    """Classify the permission model of the filesystem holding *path*.

    Evaluated on every call; different mounts may differ.
    """
    if os.name == "posix":
        if _posix_filesystem_type(path).lower() in NO_MODE_BITS_FSTYPES:
            return PermissionModel.UNSUPPORTED
        return PermissionModel.POSIX_MODE_BITS
    if os.name == "nt":
        if _windows_volume_flags(path) & FILE_PERSISTENT_ACLS:
            return PermissionModel.ACCESS_CONTROL_LIST
        return PermissionModel.UNSUPPORTED
    return PermissionModel.UNSUPPORTED
