# symbolic/expressions.py
import logging
import threading
from dataclasses import dataclass
from typing import Dict

from core.exceptions import ExpressionSyntaxError
from symbolic.ast_nodes import AstNode
from symbolic.evaluator import evaluate
from symbolic.parser import parse
from symbolic.tokenizer import tokenize

logger = logging.getLogger(__name__)

# Parsed trees keyed by expression text, shared by sampling threads.
_EXPR_CACHE: Dict[str, "CompiledExpression"] = {}
_EXPR_CACHE_LOCK = threading.Lock()


@dataclass(frozen=True)
class CompiledExpression:
    """An expression text together with its parsed tree."""
    text: str
    ast: AstNode

    def evaluate(self, x: float) -> float:
        return evaluate(self.ast, x)

    def __str__(self) -> str:
        return str(self.ast)


def compile_expr(text: str) -> CompiledExpression:
    """
    Tokenize and parse ``text``, reusing the tree from an earlier call with the same text.

    :raises LexError: On an unsupported character or malformed number.
    :raises ParseError: On a syntax error.
    """
    with _EXPR_CACHE_LOCK:
        cached = _EXPR_CACHE.get(text)
    if cached is not None:
        return cached

    try:
        compiled = CompiledExpression(text, parse(tokenize(text)))
    except ExpressionSyntaxError as e:
        logger.debug("Could not compile expression '%s': %s", text, e)
        raise

    with _EXPR_CACHE_LOCK:
        _EXPR_CACHE[text] = compiled
    return compiled


def clear_expression_cache() -> None:
    """Clears the compiled expression cache."""
    with _EXPR_CACHE_LOCK:
        _EXPR_CACHE.clear()


def _cache_size() -> int:
    with _EXPR_CACHE_LOCK:
        return len(_EXPR_CACHE)


def evaluate_at(text: str, x: float) -> float:
    """
    One-shot evaluation at an exact point.

    Unlike sampling, a division by zero or domain failure here is raised to the caller.
    """
    return compile_expr(text).evaluate(x)
