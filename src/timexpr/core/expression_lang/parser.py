"""
Recursive descent parser for the timexpr expression language.

Grammar (precedence low to high):
    expr        → term (("+" | "-") term)*
    term        → literal | signed_dur | "now" | "(" expr ")" | func_call
    literal     → DATETIME | TIMESTAMP | DURATION
    signed_dur  → "-" DURATION          (no space between sign and magnitude)
    func_call   → IDENT "(" expr ")"    (IDENT is full_day or full_hour)

Binary + and - share one precedence level and are left-associative.
One token of lookahead decides every branch.
"""

from __future__ import annotations

import logging

from timexpr.core.errors import (
    ExpressionSyntaxError,
    UnknownFunctionError,
    make_context,
)
from timexpr.core.expression_lang.tokenizer import Token, TokenKind, tokenize
from timexpr.core.ir.expressions import (
    FUNCTION_NAMES,
    BinaryExpr,
    BinaryOp,
    Expr,
    FuncCall,
    Literal,
    Now,
)
from timexpr.core.ir.values import Duration, Span

logger = logging.getLogger(__name__)

_LITERAL_KINDS = (TokenKind.DATETIME, TokenKind.TIMESTAMP, TokenKind.DURATION)


class _Parser:
    """Recursive descent parser for expressions."""

    def __init__(self, tokens: list[Token], source: str | None = None) -> None:
        self.tokens = tokens
        self.source = source
        self.pos = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    def peek(self, offset: int = 0) -> Token:
        idx = self.pos + offset
        if idx < len(self.tokens):
            return self.tokens[idx]
        return self.tokens[-1]  # EOF

    def previous(self) -> Token | None:
        return self.tokens[self.pos - 1] if self.pos > 0 else None

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return tok

    def error(self, message: str, expected: str, tok: Token) -> ExpressionSyntaxError:
        return ExpressionSyntaxError(
            message,
            expected=expected,
            found=tok.describe(),
            context=make_context(self.source, tok.span),
        )

    def expect(self, kind: TokenKind, message: str | None = None) -> Token:
        tok = self.current
        if tok.kind != kind:
            raise self.error(
                message or f"Expected {kind}, got {tok.describe()}",
                str(kind),
                tok,
            )
        return self.advance()

    # -- Grammar rules --

    def parse_expr(self) -> Expr:
        """term (('+' | '-') term)*"""
        left = self.parse_term()
        while self.current.kind in (TokenKind.PLUS, TokenKind.MINUS):
            op = BinaryOp.ADD if self.current.kind == TokenKind.PLUS else BinaryOp.SUB
            self.advance()
            right = self.parse_term()
            left = BinaryExpr(op=op, left=left, right=right, span=_cover(left, right))
        return left

    def parse_term(self) -> Expr:
        """literal | signed_dur | 'now' | '(' expr ')' | func_call"""
        tok = self.current

        if tok.kind in _LITERAL_KINDS:
            self.advance()
            return Literal(value=tok.literal, span=tok.span)

        # Sign glued to a duration magnitude: -1d
        if tok.kind == TokenKind.MINUS:
            nxt = self.peek(1)
            if nxt.kind == TokenKind.DURATION and nxt.pos == tok.end:
                self.advance()
                self.advance()
                assert isinstance(nxt.literal, Duration)
                return Literal(value=-nxt.literal, span=Span(start=tok.pos, end=nxt.end))

        if tok.kind == TokenKind.NOW:
            self.advance()
            return Now(span=tok.span)

        # Parenthesized expression
        if tok.kind == TokenKind.LPAREN:
            self.advance()
            expr = self.parse_expr()
            self.check_joined()
            self.expect(
                TokenKind.RPAREN,
                f"Unbalanced parentheses: expected ')', got {self.current.describe()}",
            )
            return expr

        if tok.kind == TokenKind.IDENT:
            return self._parse_func_call()

        if tok.kind == TokenKind.EOF:
            message = "Empty expression" if self.pos == 0 else "Unexpected end of input"
            raise self.error(message, "expression", tok)

        raise self.error(
            f"Unexpected token: {tok.describe()}",
            "datetime, timestamp, duration, now, '(' or function call",
            tok,
        )

    def _parse_func_call(self) -> FuncCall:
        """IDENT '(' expr ')'"""
        name_tok = self.advance()
        if self.current.kind != TokenKind.LPAREN:
            if name_tok.value in FUNCTION_NAMES:
                raise self.error(
                    f"Expected '(' after {name_tok.value}",
                    "'('",
                    self.current,
                )
            raise self.error(
                f"Unexpected identifier: {name_tok.value!r}",
                "datetime, timestamp, duration, now, '(' or function call",
                name_tok,
            )
        if name_tok.value not in FUNCTION_NAMES:
            raise UnknownFunctionError(
                name_tok.value, context=make_context(self.source, name_tok.span)
            )

        self.advance()  # (
        arg = self.parse_expr()
        self.check_joined()
        close = self.expect(
            TokenKind.RPAREN,
            f"{name_tok.value}() takes exactly 1 argument: expected ')', "
            f"got {self.current.describe()}",
        )
        return FuncCall(
            name=name_tok.value,
            arg=arg,
            span=Span(start=name_tok.pos, end=close.end),
        )

    def check_joined(self) -> None:
        """Reject a duration written right after another one with no operator."""
        tok = self.current
        prev = self.previous()
        if tok.kind == TokenKind.DURATION and prev is not None and prev.kind == TokenKind.DURATION:
            raise self.error(
                f"Durations must be joined with '+' or '-': {prev.value!r} {tok.value!r}",
                "'+' or '-'",
                tok,
            )

    def check_end(self) -> None:
        """Ensure all tokens were consumed."""
        tok = self.current
        if tok.kind == TokenKind.EOF:
            return
        self.check_joined()
        if tok.kind == TokenKind.RPAREN:
            raise self.error("Unbalanced parentheses: unexpected ')'", "end of input", tok)
        raise self.error(
            f"Unexpected token after expression: {tok.value!r}",
            "'+', '-' or end of input",
            tok,
        )


def _cover(left: Expr, right: Expr) -> Span | None:
    if left.span is None or right.span is None:
        return None
    return left.span.cover(right.span)


def parse_tokens(tokens: list[Token], source: str | None = None) -> Expr:
    """Parse a token sequence into an AST.

    Args:
        tokens: Output of :func:`tokenize`, ending with EOF.
        source: Original text, used to attach context to errors.

    Raises:
        ExpressionSyntaxError: If the tokens do not form an expression.
    """
    parser = _Parser(tokens, source)
    try:
        expr = parser.parse_expr()
    except RecursionError:
        raise ExpressionSyntaxError(
            "Expression is nested too deeply",
            expected="shallower nesting",
            found="too many '(' or nested calls",
            context=make_context(source, parser.current.span),
        ) from None
    parser.check_end()
    logger.debug("parsed: %s", expr)
    return expr


def parse_expr(source: str) -> Expr:
    """Parse an expression string into an AST.

    Args:
        source: Expression string (e.g., "now - (1d + 2m)")

    Returns:
        Parsed expression AST.

    Raises:
        LexError: If tokenization fails.
        ExpressionSyntaxError: If the expression is invalid.
    """
    return parse_tokens(tokenize(source), source)
