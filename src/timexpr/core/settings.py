"""
Output configuration for timexpr.

Settings come from command-line options, each with an environment
variable fallback:

    TIMEXPR_FORMAT            strftime pattern for instants
    TIMEXPR_TZ                fixed UTC offset for instants (Z, UTC, +02:00, -0530, +05)
    TIMEXPR_DURATION_FORMAT   short (1d2h3m4s) or seconds (93784)
    TIMEXPR_LOG_LEVEL         logging level name (DEBUG, INFO, ...)

Usage:
    from timexpr.core.settings import load_settings

    settings = load_settings(timezone="+02:00")
    settings.tzinfo  # datetime.timezone(datetime.timedelta(seconds=7200))
"""

from __future__ import annotations

import logging
import re
from datetime import UTC, timedelta, timezone
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from timexpr.core.errors import SettingsError

# Environment variable names
FORMAT_ENV_VAR = "TIMEXPR_FORMAT"
TIMEZONE_ENV_VAR = "TIMEXPR_TZ"
DURATION_FORMAT_ENV_VAR = "TIMEXPR_DURATION_FORMAT"
LOG_LEVEL_ENV_VAR = "TIMEXPR_LOG_LEVEL"

_OFFSET_RE = re.compile(r"(?P<sign>[+-])(?P<hh>\d{2})(?::?(?P<mm>\d{2}))?", re.ASCII)
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class DurationFormat(StrEnum):
    """How a Duration result is rendered."""

    SHORT = "short"
    SECONDS = "seconds"


def parse_utc_offset(text: str) -> timezone:
    """Parse a fixed UTC offset.

    Accepts ``Z``, ``UTC`` (any case), ``±HH:MM``, ``±HHMM`` and ``±HH``.
    Named zones from a timezone database are not supported.

    Raises:
        ValueError: If the text is not a fixed offset below 24 hours.
    """
    value = text.strip()
    if value.upper() in ("Z", "UTC"):
        return UTC
    m = _OFFSET_RE.fullmatch(value)
    if m is None:
        raise ValueError(f"Invalid UTC offset {text!r} (expected Z, UTC, ±HH:MM, ±HHMM or ±HH)")
    hours = int(m.group("hh"))
    minutes = int(m.group("mm") or 0)
    if hours > 23 or minutes > 59:
        raise ValueError(f"UTC offset out of range: {text!r}")
    offset = timedelta(hours=hours, minutes=minutes)
    if m.group("sign") == "-":
        offset = -offset
    if not offset:
        return UTC
    return timezone(offset)


class OutputSettings(BaseModel):
    """Validated output configuration."""

    format: str | None = Field(default=None, description="strftime pattern for instants")
    timezone: str | None = Field(default=None, description="Fixed UTC offset for instants")
    duration_format: DurationFormat = Field(
        default=DurationFormat.SHORT, description="Rendering of duration results"
    )
    log_level: str = Field(default="WARNING", description="Logging level name")

    model_config = ConfigDict(frozen=True)

    @field_validator("format")
    @classmethod
    def _check_format(cls, value: str | None) -> str | None:
        if value is not None and not value:
            raise ValueError("Output format must not be empty")
        return value

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, value: str | None) -> str | None:
        if value is not None:
            parse_utc_offset(value)
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            expected = ", ".join(_LOG_LEVELS)
            raise ValueError(f"Unknown log level {value!r} (expected one of {expected})")
        return level

    @property
    def tzinfo(self) -> timezone:
        """Offset instants are rendered in. UTC unless configured."""
        if self.timezone is None:
            return UTC
        return parse_utc_offset(self.timezone)

    @property
    def logging_level(self) -> int:
        return logging.getLevelNamesMapping()[self.log_level]


def load_settings(**values: Any) -> OutputSettings:
    """Build OutputSettings, dropping options left unset.

    Raises:
        SettingsError: If a value is invalid.
    """
    try:
        return OutputSettings(**{k: v for k, v in values.items() if v is not None})
    except ValidationError as e:
        messages = "; ".join(err["msg"].removeprefix("Value error, ") for err in e.errors())
        raise SettingsError(f"Invalid settings: {messages}") from e
