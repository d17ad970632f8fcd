"""
Kind inference and checking for the timexpr expression language.

Every leaf of a timexpr tree has a kind known at parse time, so the result
kind of a whole expression, and every kind error, can be found without
evaluating it.
"""

from __future__ import annotations

from timexpr.core.expression_lang.evaluator import (
    binary_type_error,
    function_type_error,
    nesting_error,
)
from timexpr.core.ir.expressions import (
    BinaryExpr,
    BinaryOp,
    Expr,
    FuncCall,
    Literal,
    Now,
    left_spine,
)
from timexpr.core.ir.values import ValueKind

_I = ValueKind.INSTANT
_D = ValueKind.DURATION

# (left kind, op, right kind) -> result kind
BINARY_RESULT_KINDS: dict[tuple[ValueKind, BinaryOp, ValueKind], ValueKind] = {
    (_D, BinaryOp.ADD, _D): _D,
    (_D, BinaryOp.SUB, _D): _D,
    (_I, BinaryOp.ADD, _D): _I,
    (_I, BinaryOp.SUB, _D): _I,
    (_D, BinaryOp.ADD, _I): _I,
    (_I, BinaryOp.SUB, _I): _D,
}

# Built-in function -> (argument kind, return kind)
FUNCTION_SIGNATURES: dict[str, tuple[ValueKind, ValueKind]] = {
    "full_day": (_I, _I),
    "full_hour": (_I, _I),
}


def infer_kind(expr: Expr, source: str | None = None) -> ValueKind:
    """Infer the result kind of an expression.

    Args:
        expr: Expression AST node.
        source: Original text, used to attach context to errors.

    Returns:
        INSTANT or DURATION.

    Raises:
        ExpressionTypeError: If kinds are incompatible anywhere in the tree.
        ExpressionSyntaxError: If calls or groups nest deeper than the stack allows.
    """
    try:
        return _infer(expr, source)
    except RecursionError:
        raise nesting_error(expr, source) from None


def _infer(expr: Expr, source: str | None) -> ValueKind:
    """Dispatch kind inference."""
    if isinstance(expr, Literal):
        return expr.value.kind

    if isinstance(expr, Now):
        return ValueKind.INSTANT

    if isinstance(expr, BinaryExpr):
        chain = left_spine(expr)
        kind = _infer(chain[-1].left, source)
        for node in reversed(chain):
            right = _infer(node.right, source)
            result = BINARY_RESULT_KINDS.get((kind, node.op, right))
            if result is None:
                raise binary_type_error(node, kind, right, source)
            kind = result
        return kind

    if isinstance(expr, FuncCall):
        arg_kind, return_kind = FUNCTION_SIGNATURES[expr.name]
        actual = _infer(expr.arg, source)
        if actual != arg_kind:
            raise function_type_error(expr, actual, source)
        return return_kind

    raise TypeError(f"Unknown expression type: {type(expr).__name__}")
