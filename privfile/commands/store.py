"""Write content into a private file."""

from __future__ import annotations

from pathlib import Path

import click

from privfile.cli import Context, pass_context
from privfile.exceptions import PrivfileError
from privfile.utils.fileops import secure_atomic_write
from privfile.utils.io import STDIN_MARKER, read_file_or_stdin
from privfile.utils.output import error, success


@click.command("store")
@click.argument("path", type=click.Path(path_type=Path))
@click.option(
    "--from",
    "source",
    default=STDIN_MARKER,
    show_default=True,
    help="File to read the content from ('-' for stdin)",
)
@pass_context
def cli(ctx: Context, path: Path, source: str) -> None:
    """Store content in a file only you can read.

    The target is provisioned owner-only before anything is written,
    then replaced atomically with the new content.

    Examples:

    \b
      # Copy a token file into a private location
      privfile store ~/.config/app/token --from ./token.txt

    \b
      # Read the secret from stdin
      pass show app/token | privfile store ~/.config/app/token
    """
    path = path.expanduser()
    try:
        content = read_file_or_stdin(source)
        secure_atomic_write(path, content, ctx.provisioner())
    except PrivfileError as e:
        error(str(e))
        raise SystemExit(1)
    except OSError as e:
        error(f"Failed to write {path}: {e}")
        raise SystemExit(1)

    success(f"Stored {len(content)} characters in {path}")
