"""Open/access timestamp policy shared by files and projects."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import UTC, datetime

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return UTC datetime for default timestamps."""
    return datetime.now(UTC)


@dataclass(frozen=True)
class TimestampPair:
    """An (opened_at, accessed_at) pair that always satisfies opened_at <= accessed_at.

    Updates never fail. Out-of-order values are corrected instead:

    * moving ``opened_at`` past ``accessed_at`` pulls ``accessed_at`` forward,
    * an ``accessed_at`` earlier than ``opened_at`` is clamped up to it.
    """

    opened_at: datetime
    accessed_at: datetime

    def __post_init__(self) -> None:
        if self.accessed_at < self.opened_at:
            object.__setattr__(self, "accessed_at", self.opened_at)

    @classmethod
    def start(cls, opened_at: datetime, accessed_at: datetime | None = None) -> TimestampPair:
        return cls(opened_at, opened_at if accessed_at is None else accessed_at)

    def with_opened_at(self, opened_at: datetime) -> TimestampPair:
        if self.accessed_at < opened_at:
            return TimestampPair(opened_at, opened_at)
        return replace(self, opened_at=opened_at)

    def with_accessed_at(self, accessed_at: datetime) -> TimestampPair:
        return TimestampPair(self.opened_at, max(accessed_at, self.opened_at))
