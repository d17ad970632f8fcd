"""
timexpr command-line application.

    timexpr 'now + 1d - 2m - 1s'
    timexpr --format '%Y-%m-%d' -- full_day(now) - 1d
    echo 'now - 2000-01-01T00:00:00Z' | timexpr --duration-format seconds
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from typing import Annotated

import typer
from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from timexpr.cli.utils import configure_logging, parse_instant, version_callback
from timexpr.core.errors import TimexprError
from timexpr.core.expression_lang import evaluate, infer_kind, parse_expr
from timexpr.core.formatting import format_value
from timexpr.core.ir.expressions import BinaryExpr, Expr, FuncCall, Literal, Now, left_spine
from timexpr.core.ir.values import Instant
from timexpr.core.settings import (
    DURATION_FORMAT_ENV_VAR,
    FORMAT_ENV_VAR,
    LOG_LEVEL_ENV_VAR,
    TIMEZONE_ENV_VAR,
    DurationFormat,
    load_settings,
)

logger = logging.getLogger(__name__)

console = Console()

app = typer.Typer(
    help="""Evaluate an expression over points in time and durations.

Literals:
  • 2000-01-01T00:00:00Z, 2000-01-01T02:00:00+02:00   datetimes
  • 1724606867, 1724606867.000                       Unix timestamps
  • 1d 2h 30m 15s                                    durations
  • now                                              the current time

Operators and functions: + - ( ) full_day(x) full_hour(x)

Use -- before an expression that starts with '-'.
""",
    add_completion=False,
)


def _label(expr: Expr) -> str:
    if isinstance(expr, Literal):
        return f"{expr.value.kind} {expr}"
    if isinstance(expr, Now):
        return "now"
    if isinstance(expr, BinaryExpr):
        return expr.op.value
    if isinstance(expr, FuncCall):
        return f"{expr.name}()"
    return type(expr).__name__


def _add_node(parent: Tree | None, expr: Expr) -> Tree:
    label = Text(_label(expr))
    return Tree(label) if parent is None else parent.add(label)


def _ast_tree(expr: Expr, parent: Tree | None = None) -> Tree:
    """Render an AST as a rich Tree."""
    if isinstance(expr, BinaryExpr):
        chain = left_spine(expr)
        nodes: list[Tree] = []
        for binary in chain:
            nodes.append(_add_node(nodes[-1] if nodes else parent, binary))
        _ast_tree(chain[-1].left, nodes[-1])
        for binary, node in zip(chain, nodes, strict=True):
            _ast_tree(binary.right, node)
        return nodes[0]

    node = _add_node(parent, expr)
    if isinstance(expr, FuncCall):
        _ast_tree(expr.arg, node)
    return node


def _read_source(words: list[str] | None) -> str:
    if words:
        return " ".join(words)
    if sys.stdin.isatty():
        raise typer.BadParameter(
            "No expression given and stdin is a terminal", param_hint="EXPRESSION"
        )
    return sys.stdin.read().strip()


@app.command()
def run(
    expression: Annotated[
        list[str] | None,
        typer.Argument(help="Expression to evaluate. Read from stdin when omitted."),
    ] = None,
    output_format: Annotated[
        str | None,
        typer.Option(
            "--format",
            "-f",
            envvar=FORMAT_ENV_VAR,
            help="strftime pattern for instant results (default: ISO-8601)",
        ),
    ] = None,
    timezone: Annotated[
        str | None,
        typer.Option(
            "--timezone",
            "--tz",
            "-z",
            envvar=TIMEZONE_ENV_VAR,
            help="Fixed UTC offset for instant results: Z, UTC, +02:00, -0530",
        ),
    ] = None,
    duration_format: Annotated[
        DurationFormat | None,
        typer.Option(
            "--duration-format",
            envvar=DURATION_FORMAT_ENV_VAR,
            case_sensitive=False,
            help="Rendering of duration results",
        ),
    ] = None,
    now: Annotated[
        str | None,
        typer.Option(
            "--now",
            help="Pin the current time (datetime or timestamp literal)",
        ),
    ] = None,
    explain: Annotated[
        bool,
        typer.Option("--explain", help="Print the parsed tree and result kind"),
    ] = False,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", envvar=LOG_LEVEL_ENV_VAR, help="Logging level"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-V", help="Log tokens, tree and evaluation steps"),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show version information",
        ),
    ] = None,
) -> None:
    """Evaluate EXPRESSION and print the resulting instant or duration."""
    try:
        settings = load_settings(
            format=output_format,
            timezone=timezone,
            duration_format=duration_format,
            log_level="DEBUG" if verbose else log_level,
        )
        configure_logging(settings.logging_level)

        source = _read_source(expression)
        current = parse_instant(now) if now else Instant.from_datetime(datetime.now(UTC))
        logger.debug("now = %s", current)

        tree = parse_expr(source)
        if explain:
            console.print(_ast_tree(tree))
            console.print(Text(f"result: {infer_kind(tree, source)}"))

        value = evaluate(tree, current, source)
        typer.echo(format_value(value, settings))
    except TimexprError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=1) from e


def main(argv: list[str] | None = None) -> None:
    app(args=argv)


if __name__ == "__main__":
    main(sys.argv[1:])
