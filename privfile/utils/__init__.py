"""Utility modules for privfile."""

from privfile.utils.fileops import secure_atomic_write
from privfile.utils.headers import Header, Headers
from privfile.utils.io import copy_stream, read_file_or_stdin, read_fully
from privfile.utils.output import (
    console,
    error,
    info,
    success,
    warning,
)

__all__ = [
    "Header",
    "Headers",
    "console",
    "copy_stream",
    "error",
    "info",
    "read_file_or_stdin",
    "read_fully",
    "secure_atomic_write",
    "success",
    "warning",
]
