"""
Value types for timexpr.

Every evaluated expression reduces to exactly one of two kinds:

- Instant: an absolute point in time, whole seconds since the Unix epoch (UTC)
- Duration: a signed elapsed-time offset in whole seconds

There is deliberately no bare number value. Numbers only appear as the
magnitude of a duration literal or as a timestamp literal.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

SECOND = 1
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE
DAY = 24 * HOUR

# Duration unit suffix -> seconds
UNIT_SECONDS: dict[str, int] = {
    "d": DAY,
    "h": HOUR,
    "m": MINUTE,
    "s": SECOND,
}


class ValueKind(StrEnum):
    """The two kinds an expression can evaluate to."""

    INSTANT = "instant"
    DURATION = "duration"


class Span(BaseModel):
    """Half-open character range [start, end) into the source text."""

    start: int = Field(ge=0)
    end: int = Field(ge=0)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.start}..{self.end}"

    def cover(self, other: Span) -> Span:
        """Smallest span containing both spans."""
        return Span(start=min(self.start, other.start), end=max(self.end, other.end))


class Instant(BaseModel):
    """A point in time, UTC-normalized, in whole seconds since the epoch."""

    seconds: int = Field(description="Seconds since 1970-01-01T00:00:00Z")

    model_config = ConfigDict(frozen=True)

    @property
    def kind(self) -> ValueKind:
        return ValueKind.INSTANT

    @classmethod
    def from_datetime(cls, value: datetime) -> Instant:
        """Build an Instant from an aware datetime.

        Sub-second parts are dropped toward the earlier whole second, so
        1999-12-31T23:59:59.9Z becomes ...:59 and never ...:00 of the next day.
        Naive datetimes are taken to be UTC.
        """
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return cls(seconds=(value - EPOCH) // timedelta(seconds=1))

    def to_datetime(self) -> datetime:
        """Aware UTC datetime for this instant.

        Raises OverflowError when the instant is outside datetime's range.
        """
        return EPOCH + timedelta(seconds=self.seconds)

    def __str__(self) -> str:
        try:
            return self.to_datetime().isoformat()
        except OverflowError:
            return f"@{self.seconds}"


class Duration(BaseModel):
    """A signed offset in seconds. No calendar semantics."""

    seconds: int = Field(description="Signed elapsed seconds")

    model_config = ConfigDict(frozen=True)

    @property
    def kind(self) -> ValueKind:
        return ValueKind.DURATION

    @classmethod
    def of(cls, magnitude: int, unit: str) -> Duration:
        """Duration from a magnitude and a unit letter (d, h, m, s)."""
        return cls(seconds=magnitude * UNIT_SECONDS[unit])

    def __neg__(self) -> Duration:
        return Duration(seconds=-self.seconds)

    def __str__(self) -> str:
        return f"{self.seconds}s"


Value = Instant | Duration
