"""File operations for sensitive data (credentials, config)."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path

from privfile.secure.provisioner import Degraded, Ok, SecureFileProvisioner


def secure_atomic_write(
    path: Path, content: str, provisioner: SecureFileProvisioner | None = None
) -> Ok | Degraded:
    """Write content to *path*, provisioning it as a private file first.

    On POSIX a temporary file in the same directory takes over the mode of
    the provisioned file and is renamed into place, so readers never see a
    partially-written file. Elsewhere the file is rewritten in place, since
    a rename would drop its access-control list.

    Returns:
        The provisioning result for *path*.
    """
    provisioner = provisioner or SecureFileProvisioner()
    result = provisioner.ensure(path)

    if os.name != "posix":
        path.write_text(content, encoding="utf-8")
        return result

    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=".tmp-", suffix=".tmp")
    try:
        os.fchmod(fd, stat.S_IMODE(path.stat().st_mode))
        with open(fd, "w", encoding="utf-8") as f:
            f.write(content)
        Path(tmp_path).replace(path)
    except BaseException:
        Path(tmp_path).unlink(missing_ok=True)
        raise
    return result
