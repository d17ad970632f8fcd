"""
Error types for timexpr tokenizing, parsing, evaluation and formatting.

Each phase raises its own error type and never recovers: a malformed
expression has no meaningful fallback value.
"""

from __future__ import annotations

from dataclasses import dataclass

from timexpr.core.ir.values import Span, ValueKind


class TimexprError(Exception):
    """Base exception for all timexpr errors."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.message}\n{self.context.format()}"
        return self.message

    @property
    def span(self) -> Span | None:
        return self.context.span if self.context else None

    @property
    def position(self) -> int | None:
        return self.context.span.start if self.context else None


class LexError(TimexprError):
    """
    Raised when a character sequence matches no token.

    Examples:
    - Unrecognized symbol (`*`, `#`)
    - Unknown duration unit (`5w`, `1ms`)
    - Malformed or out-of-range datetime literal (`2024-01-01`, `2000-13-01T00:00:00Z`)
    """

    pass


class ExpressionSyntaxError(TimexprError):
    """
    Raised when the token sequence violates the grammar.

    Examples:
    - Unexpected token
    - Unbalanced parentheses
    - Trailing tokens after a complete expression
    - Empty input
    """

    def __init__(
        self,
        message: str,
        expected: str,
        found: str,
        context: ErrorContext | None = None,
    ):
        self.expected = expected
        self.found = found
        super().__init__(message, context)


class UnknownFunctionError(ExpressionSyntaxError):
    """Raised when an identifier other than a built-in is used as a call target."""

    def __init__(self, name: str, context: ErrorContext | None = None):
        self.name = name
        super().__init__(
            f"Unknown function: {name}()",
            expected="full_day or full_hour",
            found=name,
            context=context,
        )


class ExpressionTypeError(TimexprError):
    """
    Raised when operand kinds are incompatible.

    Either ``op`` with ``left_kind``/``right_kind`` is set (binary operator),
    or ``function`` with ``arg_kind`` (built-in call).
    """

    def __init__(
        self,
        message: str,
        *,
        op: str | None = None,
        left_kind: ValueKind | None = None,
        right_kind: ValueKind | None = None,
        function: str | None = None,
        arg_kind: ValueKind | None = None,
        context: ErrorContext | None = None,
    ):
        self.op = op
        self.left_kind = left_kind
        self.right_kind = right_kind
        self.function = function
        self.arg_kind = arg_kind
        super().__init__(message, context)


class FormatError(TimexprError):
    """
    Raised when a value cannot be rendered.

    Examples:
    - Instant outside the representable datetime range
    - Output pattern rejected by strftime
    """

    pass


class SettingsError(TimexprError):
    """Raised when output configuration is invalid (bad timezone offset, unknown option)."""

    pass


@dataclass
class ErrorContext:
    """
    Location of an error in the expression source.

    Attributes:
        source: The full expression text
        span: Character range the error refers to
    """

    source: str
    span: Span

    def format(self) -> str:
        """
        Format the source with a marker under the span.

        Returns:
            Two lines like:
                  now + now
                        ^^^
        """
        start = min(self.span.start, len(self.source))
        width = max(1, self.span.end - start)
        return f"  {self.source}\n  {' ' * start}{'^' * width}"


def make_context(source: str | None, span: Span | None) -> ErrorContext | None:
    """Build an ErrorContext when both the source and the span are known."""
    if source is None or span is None:
        return None
    return ErrorContext(source=source, span=span)
