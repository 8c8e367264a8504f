"""Case-insensitive, insertion-ordered name/value headers."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class Header:
    """A single header; ``name`` keeps the caller's original casing."""

    name: str
    value: str


class Headers:
    """Ordered collection of headers keyed by lower-cased name.

    Re-adding a name replaces the value but keeps the original position.
    """

    def __init__(self) -> None:
        self._headers: dict[str, Header] = {}

    def add(self, name: str, value: str) -> None:
        self._headers[name.lower()] = Header(name, value)

    def add_if_missing(self, name: str, value: str) -> bool:
        """Add the header unless one with the same name exists. Return True if added."""
        key = name.lower()
        if key in self._headers:
            return False
        self._headers[key] = Header(name, value)
        return True

    def get(self, name: str) -> Header | None:
        return self._headers.get(name.lower())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._headers

    def __iter__(self) -> Iterator[Header]:
        return iter(list(self._headers.values()))

    def __len__(self) -> int:
        return len(self._headers)
