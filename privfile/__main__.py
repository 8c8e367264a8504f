"""Allow running as ``python -m privfile``."""

from privfile.cli import cli

if __name__ == "__main__":
    cli()
