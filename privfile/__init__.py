"""privfile: provision configuration files only their owner can access."""

__version__ = "0.1.0"
