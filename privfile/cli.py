"""Command-line interface for privfile."""

from __future__ import annotations

import os
from pathlib import Path

import click

from privfile import __version__
from privfile.config import Config, get_default_config_path, load_config
from privfile.secure.provisioner import LoggingObserver, SecureFileProvisioner
from privfile.utils.output import (
    error,
    info,
    set_color,
    set_verbosity,
    warning,
)


def _silent(message: str) -> None:
    pass


class Context:
    """Shared context for all commands."""

    def __init__(self) -> None:
        self.config: Config | None = None
        self.verbose: bool = False
        self.debug: bool = False
        self.quiet: bool = False

    def provisioner(self) -> SecureFileProvisioner:
        """Build a provisioner honoring the configured warning policy."""
        warn_on_degraded = self.config.warn_on_degraded if self.config is not None else True
        return SecureFileProvisioner(
            warn=warning if warn_on_degraded else _silent,
            observer=LoggingObserver(),
        )


pass_context = click.make_pass_decorator(Context, ensure=True)


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False, path_type=Path),
    help="Path to config file (default: ~/.config/privfile/config.toml)",
)
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug output (implies --verbose)",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    default=False,
    help="Suppress non-error output",
)
@click.version_option(version=__version__, prog_name="privfile")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Path | None,
    no_color: bool,
    verbose: bool,
    debug: bool,
    quiet: bool,
) -> None:
    """privfile: Keep credential and config files private to their owner.

    Creates files and their parent directories so that only the owning
    user can read or write them, using POSIX mode bits or access-control
    lists depending on the filesystem.

    Configuration is loaded from ~/.config/privfile/config.toml by default.
    Use --config to specify an alternative configuration file.

    Examples:

        # Provision a private file
        privfile ensure ~/.config/app/creds.json

        # Store a secret read from stdin
        echo "s3cr3t" | privfile store ~/.config/app/token --from -
    """
    ctx.ensure_object(Context)
    app_ctx = ctx.obj
    app_ctx.verbose = verbose or debug
    app_ctx.debug = debug
    app_ctx.quiet = quiet

    set_verbosity(verbose=verbose, debug=debug, quiet=quiet)

    # Configure color output: disabled by --no-color, NO_COLOR env, or config
    disable_color = no_color or os.environ.get("NO_COLOR") is not None

    if disable_color:
        set_color(False)

    try:
        loaded_config, warnings = load_config(config)
        app_ctx.config = loaded_config

        if not disable_color and not loaded_config.colored_output:
            set_color(False)

        if loaded_config.config_path is None and app_ctx.verbose:
            info(
                f"No config file found at {config or get_default_config_path()}. "
                "Using defaults. Create one with: privfile init-config"
            )

        if not quiet:
            for warn in warnings:
                warning(warn)

    except Exception as e:
        error(str(e))
        ctx.exit(1)


def register_commands() -> None:
    """Register all commands from the commands package."""
    from privfile.commands import discover_commands

    for command in discover_commands():
        cli.add_command(command)


# Register commands on import
register_commands()
