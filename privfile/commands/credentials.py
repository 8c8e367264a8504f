"""Inspect or clear the credential cache."""

from __future__ import annotations

from pathlib import Path

import click

from privfile.cli import Context, pass_context
from privfile.config import get_default_credentials_path
from privfile.credentials import clear_credentials, load_credentials
from privfile.exceptions import CredentialsError
from privfile.utils.output import error, info, success


def _credentials_path(ctx: Context) -> Path:
    if ctx.config is not None:
        return ctx.config.credentials_file
    return get_default_credentials_path()


@click.group("credentials")
def cli() -> None:
    """Manage the private credential cache."""


@cli.command("show")
@pass_context
def show(ctx: Context) -> None:
    """Show which server the cached credentials belong to.

    Tokens are never printed.
    """
    path = _credentials_path(ctx)
    try:
        creds = load_credentials(path)
    except CredentialsError as e:
        error(str(e))
        raise SystemExit(1)

    if creds is None:
        info(f"No credentials cached at {path}")
        return

    info(f"Server: {creds.server_url}")
    if creds.realm:
        info(f"Realm: {creds.realm}")
    if creds.expires_at:
        info(f"Expires: {creds.expires_at}")
    info(f"Refresh token: {'yes' if creds.refresh_token else 'no'}")


@cli.command("clear")
@pass_context
def clear(ctx: Context) -> None:
    """Delete the credential cache."""
    path = _credentials_path(ctx)
    if clear_credentials(path):
        success(f"Removed {path}")
    else:
        info(f"No credentials cached at {path}")
