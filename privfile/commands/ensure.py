"""Provision private files."""

from __future__ import annotations

from pathlib import Path

import click

from privfile.cli import Context, pass_context
from privfile.exceptions import ProvisioningError
from privfile.secure.provisioner import Degraded
from privfile.utils.output import error, print_path


@click.command("ensure")
@click.argument("paths", nargs=-1, required=True, type=click.Path(path_type=Path))
@pass_context
def cli(ctx: Context, paths: tuple[Path, ...]) -> None:
    """Create files (and parent directories) readable only by you.

    A missing parent directory and file are created and restricted to
    their owner. Only the immediate parent is made owner-only; other
    missing ancestors get the default mode from the umask. Files that
    already exist keep their content and permissions.

    Exits with code 1 if any path could not be created or restricted.
    A path that exists but could not be restricted is reported as a
    warning only.

    Examples:

    \b
      privfile ensure ~/.config/app/creds.json
    """
    provisioner = ctx.provisioner()
    failed = False

    for path in paths:
        try:
            result = provisioner.ensure(path.expanduser())
        except ProvisioningError as e:
            error(str(e))
            failed = True
            continue

        if isinstance(result, Degraded):
            if not ctx.quiet:
                print_path(str(result.path), prefix="[warning]UNPROTECTED[/warning]")
        elif not ctx.quiet:
            print_path(str(result.path), prefix="[success]OK[/success]")

    if failed:
        raise SystemExit(1)
