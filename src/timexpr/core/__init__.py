"""Core timexpr functionality: IR, tokenizer, parser, evaluator, formatting, settings."""

from . import ir
from .errors import (
    ErrorContext,
    ExpressionSyntaxError,
    ExpressionTypeError,
    FormatError,
    LexError,
    SettingsError,
    TimexprError,
    UnknownFunctionError,
)
from .expression_lang import evaluate, infer_kind, parse_expr, tokenize
from .formatting import format_value
from .settings import DurationFormat, OutputSettings, load_settings

__all__ = [
    "ir",
    "ErrorContext",
    "TimexprError",
    "LexError",
    "ExpressionSyntaxError",
    "UnknownFunctionError",
    "ExpressionTypeError",
    "FormatError",
    "SettingsError",
    "evaluate",
    "infer_kind",
    "parse_expr",
    "tokenize",
    "format_value",
    "DurationFormat",
    "OutputSettings",
    "load_settings",
]
