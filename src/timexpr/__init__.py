"""
timexpr - evaluate expressions over points in time and durations.

    >>> from timexpr import calculate, Instant
    >>> calculate("2000-01-01T01:00:00Z - 2000-01-01T00:00:00Z", now=Instant(seconds=0))
    Duration(seconds=3600)
"""

from __future__ import annotations

import re
from datetime import UTC, datetime
from importlib.metadata import version as _metadata_version
from pathlib import Path as _Path

from .core import ir
from .core.errors import (
    ExpressionSyntaxError,
    ExpressionTypeError,
    FormatError,
    LexError,
    SettingsError,
    TimexprError,
    UnknownFunctionError,
)
from .core.expression_lang import evaluate, parse_expr
from .core.formatting import format_value
from .core.ir.values import Duration, Instant, Value
from .core.settings import OutputSettings


def _get_version() -> str:
    """Get version from pyproject.toml (editable) or importlib.metadata (installed)."""
    # In editable mode, read directly from pyproject.toml for live updates
    pyproject = _Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        content = pyproject.read_text()
        if match := re.search(r'^version\s*=\s*["\']([^"\']+)["\']', content, re.MULTILINE):
            return match.group(1)

    # Fall back to installed metadata
    try:
        return _metadata_version("timexpr")
    except Exception:
        return "0.0.0"


__version__ = _get_version()


def calculate(source: str, now: Instant | datetime | None = None) -> Value:
    """Tokenize, parse and evaluate one expression.

    Args:
        source: Expression text, e.g. ``"full_day(now) - 1h"``.
        now: Value of ``now``. Defaults to the current time, read once.

    Raises:
        LexError, ExpressionSyntaxError, ExpressionTypeError
    """
    if now is None:
        now = datetime.now(UTC)
    return evaluate(parse_expr(source), now, source)


__all__ = [
    "__version__",
    "ir",
    "calculate",
    "evaluate",
    "parse_expr",
    "format_value",
    "Duration",
    "Instant",
    "Value",
    "OutputSettings",
    "TimexprError",
    "LexError",
    "ExpressionSyntaxError",
    "UnknownFunctionError",
    "ExpressionTypeError",
    "FormatError",
    "SettingsError",
]
