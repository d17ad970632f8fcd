"""
timexpr expression language.

Tokenizer, parser, evaluator, and kind checker for expressions over
instants and durations.

Usage:
    from timexpr.core.expression_lang import evaluate, parse_expr

    expr = parse_expr("now - (1d + 2m)")
    result = evaluate(expr, now)
    # result == Instant(seconds=now.seconds - 86520)
"""

from timexpr.core.expression_lang.evaluator import evaluate
from timexpr.core.expression_lang.parser import parse_expr, parse_tokens
from timexpr.core.expression_lang.tokenizer import tokenize
from timexpr.core.expression_lang.type_checker import infer_kind

__all__ = ["evaluate", "infer_kind", "parse_expr", "parse_tokens", "tokenize"]
