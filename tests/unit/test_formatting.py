"""Tests for rendering instants and durations."""

from __future__ import annotations

import pytest

from timexpr.core.errors import FormatError
from timexpr.core.formatting import format_duration_short, format_value
from timexpr.core.ir.values import Duration, Instant
from timexpr.core.settings import DurationFormat, OutputSettings

# 2015-07-12T22:28:27Z
EXAMPLE = Instant(seconds=1436740107)


class TestInstantFormatting:
    def test_default_is_iso_utc(self) -> None:
        assert format_value(EXAMPLE) == "2015-07-12T22:28:27+00:00"

    def test_timezone_offset_applied(self) -> None:
        settings = OutputSettings(timezone="+02:00")
        assert format_value(EXAMPLE, settings) == "2015-07-13T00:28:27+02:00"

    def test_negative_offset(self) -> None:
        settings = OutputSettings(timezone="-0530")
        assert format_value(EXAMPLE, settings) == "2015-07-12T16:58:27-05:30"

    def test_pattern(self) -> None:
        settings = OutputSettings(format="%Y-%m-%d %H:%M:%S")
        assert format_value(EXAMPLE, settings) == "2015-07-12 22:28:27"

    def test_pattern_with_timezone(self) -> None:
        settings = OutputSettings(format="%d.%m.%Y %H:%M %z", timezone="+01:00")
        assert format_value(EXAMPLE, settings) == "12.07.2015 23:28 +0100"

    def test_epoch(self) -> None:
        assert format_value(Instant(seconds=0)) == "1970-01-01T00:00:00+00:00"

    def test_out_of_range(self) -> None:
        with pytest.raises(FormatError, match="outside the printable range"):
            format_value(Instant(seconds=10**12))


class TestDurationFormatting:
    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [
            (0, "0s"),
            (45, "45s"),
            (93784, "1d2h3m4s"),
            (86460, "1d1m"),
            (-10800, "-3h"),
            (-93784, "-1d2h3m4s"),
            (86400 * 400, "400d"),
        ],
    )
    def test_short(self, seconds: int, expected: str) -> None:
        assert format_duration_short(Duration(seconds=seconds)) == expected

    def test_short_is_default(self) -> None:
        assert format_value(Duration(seconds=3600)) == "1h"

    def test_seconds(self) -> None:
        settings = OutputSettings(duration_format=DurationFormat.SECONDS)
        assert format_value(Duration(seconds=-86279), settings) == "-86279"

    def test_timezone_does_not_affect_durations(self) -> None:
        settings = OutputSettings(timezone="+05:00")
        assert format_value(Duration(seconds=60), settings) == "1m"
