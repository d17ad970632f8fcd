"""
Expression evaluator for the timexpr expression language.

Evaluates expression AST nodes to a single Instant or Duration.
Pure evaluation: no I/O, no clock access. The current time is captured
once by the caller and passed in, so every `now` in one expression is the
same instant and the result is deterministic.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from timexpr.core.errors import ExpressionSyntaxError, ExpressionTypeError, make_context
from timexpr.core.ir.expressions import (
    BinaryExpr,
    BinaryOp,
    Expr,
    FuncCall,
    Literal,
    Now,
    left_spine,
)
from timexpr.core.ir.values import DAY, HOUR, Duration, Instant, Value, ValueKind

logger = logging.getLogger(__name__)

_I = ValueKind.INSTANT
_D = ValueKind.DURATION

# (left kind, op, right kind) -> result. Combinations missing here are type errors.
_BINARY_RULES: dict[tuple[ValueKind, BinaryOp, ValueKind], Callable[[int, int], Value]] = {
    (_D, BinaryOp.ADD, _D): lambda a, b: Duration(seconds=a + b),
    (_D, BinaryOp.SUB, _D): lambda a, b: Duration(seconds=a - b),
    (_I, BinaryOp.ADD, _D): lambda a, b: Instant(seconds=a + b),
    (_I, BinaryOp.SUB, _D): lambda a, b: Instant(seconds=a - b),
    (_D, BinaryOp.ADD, _I): lambda a, b: Instant(seconds=a + b),
    (_I, BinaryOp.SUB, _I): lambda a, b: Duration(seconds=a - b),
}


class _Evaluation:
    """One evaluation pass over one tree."""

    def __init__(self, now: Instant, source: str | None) -> None:
        self.now = now
        self.source = source

    def interpret(self, expr: Expr) -> Value:
        """Dispatch evaluation to the appropriate handler."""
        if isinstance(expr, Literal):
            result = expr.value
        elif isinstance(expr, Now):
            result = self.now
        elif isinstance(expr, BinaryExpr):
            result = self.interpret_binary(expr)
        elif isinstance(expr, FuncCall):
            result = self.interpret_func_call(expr)
        else:
            raise TypeError(f"Unknown expression type: {type(expr).__name__}")
        logger.debug("eval %s -> %r", expr, result)
        return result

    def interpret_binary(self, expr: BinaryExpr) -> Value:
        # a + b + c nests down the left operand; fold the chain in a loop
        chain = left_spine(expr)
        value = self.interpret(chain[-1].left)
        for node in reversed(chain):
            right = self.interpret(node.right)
            rule = _BINARY_RULES.get((value.kind, node.op, right.kind))
            if rule is None:
                raise binary_type_error(node, value.kind, right.kind, self.source)
            value = rule(value.seconds, right.seconds)
            if node is not expr:
                logger.debug("eval %s -> %r", node, value)
        return value

    def interpret_func_call(self, expr: FuncCall) -> Value:
        func = _FUNCTIONS.get(expr.name)
        if func is None:
            # The parser only builds calls to known functions
            raise ValueError(f"Unknown function: {expr.name}()")
        arg = self.interpret(expr.arg)
        if not isinstance(arg, Instant):
            raise function_type_error(expr, arg.kind, self.source)
        return func(arg)


def truncate(instant: Instant, step: int) -> Instant:
    """Round an instant down to a multiple of `step` seconds since the epoch.

    Floor division keeps instants before 1970 rounding toward the past.
    """
    return Instant(seconds=instant.seconds - instant.seconds % step)


def full_day(instant: Instant) -> Instant:
    """Start of the instant's UTC calendar day."""
    return truncate(instant, DAY)


def full_hour(instant: Instant) -> Instant:
    """Start of the instant's UTC hour."""
    return truncate(instant, HOUR)


# Built-in functions, closed set
_FUNCTIONS: dict[str, Callable[[Instant], Instant]] = {
    "full_day": full_day,
    "full_hour": full_hour,
}


def nesting_error(expr: Expr, source: str | None = None) -> ExpressionSyntaxError:
    return ExpressionSyntaxError(
        "Expression is nested too deeply",
        expected="shallower nesting",
        found="too many '(' or nested calls",
        context=make_context(source, expr.span),
    )


def binary_type_error(
    expr: BinaryExpr,
    left_kind: ValueKind,
    right_kind: ValueKind,
    source: str | None = None,
) -> ExpressionTypeError:
    verb = "add" if expr.op == BinaryOp.ADD else "subtract"
    return ExpressionTypeError(
        f"Cannot {verb} {left_kind} {expr.op.value} {right_kind}",
        op=expr.op.value,
        left_kind=left_kind,
        right_kind=right_kind,
        context=make_context(source, expr.span),
    )


def function_type_error(
    expr: FuncCall,
    arg_kind: ValueKind,
    source: str | None = None,
) -> ExpressionTypeError:
    return ExpressionTypeError(
        f"{expr.name}() requires an instant, got {arg_kind}",
        function=expr.name,
        arg_kind=arg_kind,
        context=make_context(source, expr.span),
    )


def evaluate(expr: Expr, now: Instant | datetime, source: str | None = None) -> Value:
    """Evaluate an expression to an Instant or a Duration.

    Args:
        expr: Parsed expression AST.
        now: The value of every `now` in the expression. A datetime is
            truncated to whole seconds first.
        source: Original text, used to attach context to errors.

    Returns:
        The computed value.

    Raises:
        ExpressionTypeError: If operand kinds are incompatible.
        ExpressionSyntaxError: If calls or groups nest deeper than the stack allows.
    """
    if isinstance(now, datetime):
        now = Instant.from_datetime(now)
    try:
        return _Evaluation(now, source).interpret(expr)
    except RecursionError:
        raise nesting_error(expr, source) from None
