"""
Rendering of evaluated values as text.

Instants are rendered as ISO-8601 (``2015-07-12T22:28:27+00:00``) or with
a strftime pattern, in UTC or shifted to the configured fixed offset.
Durations are rendered as a ``1d2h3m4s`` breakdown or as total seconds.
"""

from __future__ import annotations

from timexpr.core.errors import FormatError
from timexpr.core.ir.values import DAY, HOUR, MINUTE, SECOND, Duration, Instant, Value
from timexpr.core.settings import DurationFormat, OutputSettings

_DURATION_PARTS = ((DAY, "d"), (HOUR, "h"), (MINUTE, "m"), (SECOND, "s"))


def format_instant(instant: Instant, settings: OutputSettings) -> str:
    try:
        dt = instant.to_datetime().astimezone(settings.tzinfo)
    except (OverflowError, ValueError) as e:
        raise FormatError(f"Instant {instant.seconds} is outside the printable range") from e
    if settings.format is None:
        return dt.isoformat()
    try:
        return dt.strftime(settings.format)
    except ValueError as e:
        raise FormatError(f"Invalid output format {settings.format!r}: {e}") from e


def format_duration_short(duration: Duration) -> str:
    """Render as ``[-]XdYhZmWs``, leaving out zero parts. Zero is ``0s``."""
    remaining = abs(duration.seconds)
    parts: list[str] = []
    for unit, symbol in _DURATION_PARTS:
        count, remaining = divmod(remaining, unit)
        if count:
            parts.append(f"{count}{symbol}")
    if not parts:
        return "0s"
    sign = "-" if duration.seconds < 0 else ""
    return sign + "".join(parts)


def format_duration(duration: Duration, settings: OutputSettings) -> str:
    if settings.duration_format == DurationFormat.SECONDS:
        return str(duration.seconds)
    return format_duration_short(duration)


def format_value(value: Value, settings: OutputSettings | None = None) -> str:
    """Render a value according to the output settings.

    Raises:
        FormatError: If the value cannot be rendered.
    """
    settings = settings or OutputSettings()
    if isinstance(value, Instant):
        return format_instant(value, settings)
    if isinstance(value, Duration):
        return format_duration(value, settings)
    raise TypeError(f"Unknown value type: {type(value).__name__}")
