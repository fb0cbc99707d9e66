"""Field vocabulary exposed to status matchers."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from enum import Enum
from typing import Protocol, TypeVar, runtime_checkable


class FieldKind(str, Enum):
    """Kinds of values a matcher can query on an open entity."""

    EXTENSION = "extension"
    NAME = "name"
    BASENAME = "basename"
    PATH = "path"

    @classmethod
    def parse(cls, value: str) -> FieldKind:
        """Resolve a field kind from its case-insensitive name."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            known = ", ".join(kind.value for kind in cls)
            raise ValueError(f"Unknown field kind '{value}'. Expected one of: {known}.") from None


@runtime_checkable
class FieldProvider(Protocol):
    """Anything a matcher can ask for field values.

    This is the only read API offered to matchers; it intentionally carries
    no timestamps or builders.
    """

    def get_field(self, kind: FieldKind) -> frozenset[str]:
        """Return every candidate value of ``kind``."""
        ...


@runtime_checkable
class AccessedAt(Protocol):
    """Entity with a last-access timestamp."""

    @property
    def accessed_at(self) -> datetime:
        ...


T = TypeVar("T", bound=AccessedAt)


def most_recent(items: Iterable[T]) -> T | None:
    """Return the most recently accessed item, or None when there are none."""
    return max(items, key=lambda item: item.accessed_at, default=None)
