"""
Intermediate representation for timexpr: values and the expression AST.
"""

from timexpr.core.ir.expressions import (
    FUNCTION_NAMES,
    BinaryExpr,
    BinaryOp,
    Expr,
    FuncCall,
    Literal,
    Now,
    left_spine,
)
from timexpr.core.ir.values import (
    DAY,
    HOUR,
    MINUTE,
    SECOND,
    Duration,
    Instant,
    Span,
    Value,
    ValueKind,
)

__all__ = [
    # Values
    "Duration",
    "Instant",
    "Span",
    "Value",
    "ValueKind",
    "DAY",
    "HOUR",
    "MINUTE",
    "SECOND",
    # Expressions
    "BinaryExpr",
    "BinaryOp",
    "Expr",
    "FuncCall",
    "FUNCTION_NAMES",
    "Literal",
    "Now",
    "left_spine",
]
