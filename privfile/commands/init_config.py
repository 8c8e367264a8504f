"""Initialize configuration file for privfile."""

from __future__ import annotations

from pathlib import Path

import click

from privfile.cli import Context, pass_context
from privfile.config import DEFAULT_CONFIG_TEXT, get_default_config_path
from privfile.exceptions import ProvisioningError
from privfile.utils.fileops import secure_atomic_write
from privfile.utils.output import error, info, success


@click.command("init-config")
@click.option(
    "--force",
    "-f",
    is_flag=True,
    default=False,
    help="Overwrite existing config file",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Output path for config file (default: ~/.config/privfile/config.toml)",
)
@pass_context
def cli(ctx: Context, force: bool, output: Path | None) -> None:
    """Create a new configuration file with default settings.

    The file and its directory are created owner-only.

    Examples:

    \b
      # Create config at default location
      privfile init-config

    \b
      # Overwrite existing config
      privfile init-config --force
    """
    config_path = output if output is not None else get_default_config_path()
    config_path = config_path.expanduser().resolve()

    if config_path.exists() and not force:
        error(
            f"Config file already exists: {config_path}",
            hint="Use --force to overwrite",
        )
        raise SystemExit(1)

    try:
        secure_atomic_write(config_path, DEFAULT_CONFIG_TEXT, ctx.provisioner())
    except ProvisioningError as e:
        error(str(e))
        raise SystemExit(1)
    except OSError as e:
        error(f"Failed to write config file: {e}")
        raise SystemExit(1)

    success(f"Created config file: {config_path}")
    info("Edit this file to customize your settings.")
