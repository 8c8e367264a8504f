"""Shared pytest fixtures."""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from privfile.secure.capabilities import PermissionModel
from privfile.secure.provisioner import SecureFileProvisioner
from privfile.secure.setters import PosixPermissionSetter

if TYPE_CHECKING:
    from collections.abc import Generator


class WarningRecorder:
    """Warning sink that remembers every message."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)


class RecordingSetter:
    """Permission setter that records the paths it was applied to."""

    def __init__(self, model: PermissionModel = PermissionModel.POSIX_MODE_BITS) -> None:
        self.model = model
        self.applied: list[Path] = []

    def apply(self, path: Path) -> None:
        self.applied.append(path)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    path = Path(tempfile.mkdtemp())
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def warnings_sink() -> WarningRecorder:
    return WarningRecorder()


@pytest.fixture
def posix_provisioner(warnings_sink: WarningRecorder) -> SecureFileProvisioner:
    """Provisioner pinned to the POSIX mode-bit model."""
    return SecureFileProvisioner(
        capability_query=lambda path: PermissionModel.POSIX_MODE_BITS,
        setters={PermissionModel.POSIX_MODE_BITS: PosixPermissionSetter()},
        warn=warnings_sink,
    )


@pytest.fixture
def unsupported_provisioner(warnings_sink: WarningRecorder) -> SecureFileProvisioner:
    """Provisioner on a filesystem with no usable permission model."""
    return SecureFileProvisioner(
        capability_query=lambda path: PermissionModel.UNSUPPORTED,
        warn=warnings_sink,
    )


@pytest.fixture
def sample_config(temp_dir: Path) -> Path:
    """Create a sample config file."""
    config_path = temp_dir / "config.toml"
    config_path.write_text(f"""[paths]
credentials_file = "{(temp_dir / 'creds' / 'credentials.json').as_posix()}"

[display]
colored_output = false

[security]
warn_on_degraded = false
""")
    return config_path


@pytest.fixture
def recording_setter() -> RecordingSetter:
    return RecordingSetter()


@pytest.fixture(autouse=True)
def reset_output_state() -> Generator[None, None, None]:
    """Undo verbosity flags set by CLI invocations."""
    yield
    from privfile.utils.output import set_verbosity

    set_verbosity()
