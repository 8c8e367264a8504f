"""Reading files or stdin and copying raw streams."""

from __future__ import annotations

import codecs
import logging
import sys
from typing import BinaryIO

from privfile.exceptions import InputError, InputFileNotFoundError

logger = logging.getLogger(__name__)

BUFFER_SIZE = 8192
STDIN_MARKER = "-"


def read_fully(stream: BinaryIO, encoding: str = "utf-8") -> str:
    """Read *stream* to the end and decode it.

    Multi-byte characters split across buffer boundaries are decoded
    correctly. Malformed input is replaced with U+FFFD rather than rejected.
    """
    decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
    parts: list[str] = []
    try:
        while chunk := stream.read(BUFFER_SIZE):
            parts.append(decoder.decode(chunk))
        parts.append(decoder.decode(b"", final=True))
    except OSError as e:
        raise InputError(f"Failed to read stream: {e}") from e
    return "".join(parts)


def read_file_or_stdin(name: str) -> str:
    """Return the content of file *name*, or of stdin when *name* is ``-``."""
    if name == STDIN_MARKER:
        return read_fully(sys.stdin.buffer)
    try:
        with open(name, "rb") as f:
            return read_fully(f)
    except FileNotFoundError as e:
        raise InputFileNotFoundError(name) from e
    except OSError as e:
        raise InputError(f"Failed to read file: {name}: {e}") from e


def copy_stream(source: BinaryIO, sink: BinaryIO) -> int:
    """Copy *source* into *sink*, closing the source and flushing the sink.

    Returns:
        Number of bytes copied.
    """
    copied = 0
    try:
        with source:
            while chunk := source.read(BUFFER_SIZE):
                sink.write(chunk)
                copied += len(chunk)
    except OSError as e:
        raise InputError(f"Failed to read/write a stream: {e}") from e
    finally:
        try:
            sink.flush()
        except OSError as e:
            raise InputError(f"Failed to write a stream: {e}") from e
    logger.debug("Copied %d bytes", copied)
    return copied
