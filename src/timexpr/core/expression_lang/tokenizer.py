"""
Tokenizer for the timexpr expression language.

Converts an expression string into a sequence of typed tokens. Literal
values are decoded here, so every DATETIME, TIMESTAMP and DURATION token
that leaves the tokenizer is known to be well-formed.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta
from enum import StrEnum, auto

from timexpr.core.errors import LexError, make_context
from timexpr.core.ir.values import UNIT_SECONDS, Duration, Instant, Span

logger = logging.getLogger(__name__)


class TokenKind(StrEnum):
    """Token types for the expression language."""

    # Literals
    DATETIME = auto()
    TIMESTAMP = auto()
    DURATION = auto()

    # Identifiers and keywords
    IDENT = auto()
    NOW = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()

    # End of input
    EOF = auto()


class Token:
    """A single token from the expression tokenizer."""

    __slots__ = ("kind", "value", "pos", "end", "literal")

    def __init__(
        self,
        kind: TokenKind,
        value: str,
        pos: int,
        literal: Instant | Duration | None = None,
    ) -> None:
        self.kind = kind
        self.value = value
        self.pos = pos
        self.end = pos + len(value)
        self.literal = literal

    @property
    def span(self) -> Span:
        return Span(start=self.pos, end=self.end)

    def describe(self) -> str:
        """Human-readable description for error messages."""
        if self.kind == TokenKind.EOF:
            return "end of input"
        return f"{self.kind} {self.value!r}"

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, pos={self.pos})"


_KEYWORDS: dict[str, TokenKind] = {
    "now": TokenKind.NOW,
}

_SINGLE_CHAR: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
}

# YYYY-MM-DD: once seen, the text must continue as a full datetime literal
_DATE_PREFIX_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
_DATETIME_RE = re.compile(
    r"(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.\d+)?"
    r"(?P<tz>Z|(?P<sign>[+-])(?P<tzh>\d{2}):(?P<tzm>\d{2}))",
    re.ASCII,
)
# Number pattern: int or decimal
_NUMBER_RE = re.compile(r"\d+(\.\d+)?", re.ASCII)
_MAX_DIGITS = 18
# Letters directly after a number; only a single unit letter is accepted
_SUFFIX_RE = re.compile(r"[A-Za-z_]+")
# Identifier: letter or underscore followed by alphanumerics/underscores
_IDENT_RE = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*")


def tokenize(source: str) -> list[Token]:
    """Tokenize an expression string into a list of tokens.

    The returned list always ends with an EOF token.

    Raises:
        LexError: If a character sequence matches no token, or a literal
            is malformed.
    """
    tokens: list[Token] = []
    i = 0
    n = len(source)

    while i < n:
        c = source[i]

        # Skip whitespace
        if c.isspace():
            i += 1
            continue

        # Datetime literals, timestamps and duration magnitudes
        if "0" <= c <= "9":
            if _DATE_PREFIX_RE.match(source, i):
                tok = _read_datetime(source, i)
            else:
                tok = _read_number(source, i)
            tokens.append(tok)
            i = tok.end
            continue

        # Identifiers and keywords
        if c.isascii() and (c.isalpha() or c == "_"):
            m = _IDENT_RE.match(source, i)
            assert m is not None
            word = m.group(0)
            kind = _KEYWORDS.get(word, TokenKind.IDENT)
            tokens.append(Token(kind, word, i))
            i = m.end()
            continue

        if c in _SINGLE_CHAR:
            tokens.append(Token(_SINGLE_CHAR[c], c, i))
            i += 1
            continue

        raise LexError(
            f"Unexpected character: {c!r}",
            make_context(source, Span(start=i, end=i + 1)),
        )

    tokens.append(Token(TokenKind.EOF, "", n))
    logger.debug("tokens: %s", tokens)
    return tokens


def _read_datetime(source: str, start: int) -> Token:
    """Read an ISO-8601 datetime literal with an explicit offset or Z."""
    m = _DATETIME_RE.match(source, start)
    if m is None:
        date_end = start + 10
        raise LexError(
            "Incomplete datetime literal: expected YYYY-MM-DDTHH:MM:SS followed by Z or ±HH:MM",
            make_context(source, Span(start=start, end=date_end)),
        )

    text = m.group(0)
    context = make_context(source, Span(start=start, end=m.end()))
    try:
        base = datetime.strptime(m.group("base"), "%Y-%m-%dT%H:%M:%S")
    except ValueError as e:
        raise LexError(f"Invalid datetime literal {text!r}: {e}", context) from e

    offset = timedelta(0)
    if m.group("tz") != "Z":
        hours = int(m.group("tzh"))
        minutes = int(m.group("tzm"))
        if hours > 23 or minutes > 59:
            raise LexError(f"Invalid UTC offset in datetime literal {text!r}", context)
        offset = timedelta(hours=hours, minutes=minutes)
        if m.group("sign") == "-":
            offset = -offset

    # Fractional seconds are dropped: the base is already a whole second
    instant = Instant(seconds=(base - datetime(1970, 1, 1) - offset) // timedelta(seconds=1))
    return Token(TokenKind.DATETIME, text, start, literal=instant)


def _read_number(source: str, start: int) -> Token:
    """Read a timestamp literal or a duration magnitude with its unit letter."""
    m = _NUMBER_RE.match(source, start)
    assert m is not None
    num_str = m.group(0)
    end = m.end()
    if len(num_str.split(".", 1)[0]) > _MAX_DIGITS:
        raise LexError(
            f"Numeric literal too long (more than {_MAX_DIGITS} digits)",
            make_context(source, Span(start=start, end=end)),
        )

    suffix_m = _SUFFIX_RE.match(source, end)
    if suffix_m is None:
        # Bare number: a Unix timestamp, sub-second part dropped
        seconds = int(num_str.split(".", 1)[0])
        return Token(TokenKind.TIMESTAMP, num_str, start, literal=Instant(seconds=seconds))

    suffix = suffix_m.group(0)
    context = make_context(source, Span(start=start, end=suffix_m.end()))
    if suffix not in UNIT_SECONDS:
        raise LexError(
            f"Unknown duration unit {suffix!r} (expected one of d, h, m, s)",
            context,
        )
    if m.group(1):
        raise LexError(
            f"Duration magnitude must be a whole number, got {num_str!r}",
            context,
        )
    duration = Duration.of(int(num_str), suffix)
    return Token(TokenKind.DURATION, num_str + suffix, start, literal=duration)
