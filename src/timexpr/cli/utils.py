"""
timexpr CLI Utilities.

Shared helpers for the command-line surface.
"""

from __future__ import annotations

import logging
import platform
import sys

import typer

from timexpr.core.errors import ExpressionSyntaxError, make_context
from timexpr.core.expression_lang.parser import parse_expr
from timexpr.core.ir.expressions import Literal
from timexpr.core.ir.values import Instant


def get_version() -> str:
    """Get timexpr version from package metadata."""
    from timexpr import __version__

    return __version__


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"timexpr version {get_version()}")
        typer.echo(
            f"Python {platform.python_implementation()} {platform.python_version()} "
            f"on {platform.system()} {platform.machine()}"
        )
        raise typer.Exit()


def configure_logging(level: int) -> None:
    """Send timexpr logs to stderr at the given level."""
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="[%(asctime)s] %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("timexpr").setLevel(level)


def parse_instant(text: str) -> Instant:
    """Parse a single datetime or timestamp literal, e.g. for ``--now``.

    Raises:
        LexError: If the text is not a well-formed literal.
        ExpressionSyntaxError: If the text is anything other than one instant literal.
    """
    expr = parse_expr(text)
    if not isinstance(expr, Literal) or not isinstance(expr.value, Instant):
        raise ExpressionSyntaxError(
            f"Expected a datetime or timestamp literal, got {text!r}",
            expected="datetime or timestamp",
            found=str(expr),
            context=make_context(text, expr.span),
        )
    return expr.value
