"""Private credential cache.

Stores a server URL and its tokens in a JSON file that is provisioned
owner-only before anything is written to it.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path

from privfile.config import get_default_credentials_path
from privfile.exceptions import CredentialsParseError
from privfile.secure.provisioner import Degraded, Ok, SecureFileProvisioner
from privfile.utils.fileops import secure_atomic_write


@dataclass
class Credentials:
    """Cached authentication data for one server."""

    server_url: str
    token: str
    realm: str | None = None
    refresh_token: str | None = None
    expires_at: str = ""


def load_credentials(path: Path | None = None) -> Credentials | None:
    """Load credentials from the JSON cache.

    An empty file (freshly provisioned, never written) counts as no credentials.

    Returns:
        Credentials if present, None otherwise.

    Raises:
        CredentialsParseError: If the file has content that is not valid credentials.
    """
    if path is None:
        path = get_default_credentials_path()
    if not path.is_file():
        return None

    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return None

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CredentialsParseError(path, str(e)) from e

    if not isinstance(data, dict) or "server_url" not in data or "token" not in data:
        raise CredentialsParseError(path, "missing 'server_url' or 'token'")

    return Credentials(
        server_url=data["server_url"],
        token=data["token"],
        realm=data.get("realm"),
        refresh_token=data.get("refresh_token"),
        expires_at=data.get("expires_at", ""),
    )


def save_credentials(
    creds: Credentials,
    path: Path | None = None,
    provisioner: SecureFileProvisioner | None = None,
) -> Ok | Degraded:
    """Save credentials to the private JSON cache.

    Returns:
        The provisioning result, so callers can surface a degraded outcome.
    """
    if path is None:
        path = get_default_credentials_path()
    content = json.dumps(asdict(creds), indent=2) + "\n"
    return secure_atomic_write(path, content, provisioner)


def clear_credentials(path: Path | None = None) -> bool:
    """Remove the credential cache. Returns True if the file existed."""
    if path is None:
        path = get_default_credentials_path()
    if path.is_file():
        path.unlink()
        return True
    return False
