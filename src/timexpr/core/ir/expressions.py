"""
Expression AST for timexpr.

The tree is strictly owned: every composite node holds its children by
value, there is no sharing and no cycles. Nodes are frozen pydantic models
and are discarded after a single evaluation.

Node kinds:
- Literal: an instant or duration fully known at parse time
- Now: the current time, resolved at evaluation
- BinaryExpr: left + right, left - right
- FuncCall: full_day(x), full_hour(x)
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from timexpr.core.ir.values import Duration, Instant, Span

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class BinaryOp(StrEnum):
    """Binary operators. Arithmetic on time values is additive only."""

    ADD = "+"
    SUB = "-"


# Built-in function names, closed set
FUNCTION_NAMES: frozenset[str] = frozenset({"full_day", "full_hour"})

# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class Literal(BaseModel):
    """A fully resolved instant or duration."""

    value: Instant | Duration = Field(description="The literal value")
    span: Span | None = None

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        if isinstance(self.value, Duration):
            return f"{self.value.seconds}s"
        return str(self.value)


class Now(BaseModel):
    """The `now` keyword."""

    span: Span | None = None

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "now"


class BinaryExpr(BaseModel):
    """Binary operation: left op right."""

    op: BinaryOp
    left: Expr
    right: Expr
    span: Span | None = None

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        chain = left_spine(self)
        text = str(chain[-1].left)
        for node in reversed(chain):
            text = f"({text} {node.op.value} {node.right})"
        return text


class FuncCall(BaseModel):
    """Built-in function call with a single argument."""

    name: str = Field(description="Function name")
    arg: Expr = Field(description="Single argument")
    span: Span | None = None

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.name}({self.arg})"


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = Literal | Now | BinaryExpr | FuncCall

# Rebuild models for recursive forward references
BinaryExpr.model_rebuild()
FuncCall.model_rebuild()


def left_spine(expr: BinaryExpr) -> list[BinaryExpr]:
    """Binary nodes down the left operands, outermost first.

    A flat chain `a + b + c` nests one level per operator, so walkers fold
    this list in a loop instead of recursing into `left`.
    """
    chain = [expr]
    while isinstance(chain[-1].left, BinaryExpr):
        chain.append(chain[-1].left)
    return chain
