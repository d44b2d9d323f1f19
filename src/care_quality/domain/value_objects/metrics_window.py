"""Time window value object for metrics computations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

DEFAULT_WINDOW_DAYS = 90


@dataclass(frozen=True)
class MetricsWindow:
    """Half-open interval ``[start, end)`` over record creation time."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        """Validate the window bounds."""
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValueError("MetricsWindow bounds must be timezone-aware")
        if self.start >= self.end:
            raise ValueError("MetricsWindow start must precede its end")

    @classmethod
    def ending_at(cls, end: datetime, days: int = DEFAULT_WINDOW_DAYS) -> MetricsWindow:
        """Create the window of ``days`` days ending at ``end``."""
        if end.tzinfo is None:
            end = end.replace(tzinfo=UTC)
        return cls(start=end - timedelta(days=days), end=end)

    @classmethod
    def trailing(cls, days: int = DEFAULT_WINDOW_DAYS) -> MetricsWindow:
        """Create the window of ``days`` days ending now."""
        return cls.ending_at(datetime.now(UTC), days)

    def contains(self, moment: datetime) -> bool:
        """Check whether ``moment`` falls inside the window."""
        return self.start <= moment < self.end

    @property
    def days(self) -> float:
        """Window length in days."""
        return (self.end - self.start).total_seconds() / 86400
