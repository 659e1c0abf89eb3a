# core/exceptions.py
from typing import Optional


class GraphError(Exception):
    """Base exception for the expression graphing engine."""
    pass


class ConfigError(GraphError):
    """Raised when a plot configuration file cannot be read or validated."""
    pass


class SamplingCancelled(GraphError):
    """Raised when a caller sets the cancellation flag during sampling."""
    pass


class RangeTooLargeError(GraphError):
    """Raised when a sampling range would produce more abscissas than allowed."""
    pass


# ----------------------------------------------------------------------
# Syntax errors (tokenizer / parser)
# ----------------------------------------------------------------------
class ExpressionSyntaxError(GraphError):
    """Base for errors that require corrected input from the user."""

    def __init__(self, message: str, position: int):
        super().__init__(message)
        self.message = message
        self.position = position


class LexError(ExpressionSyntaxError):
    """Raised on an unsupported character or a malformed number literal."""

    def __init__(self, message: str, position: int, character: Optional[str] = None):
        super().__init__(message, position)
        self.character = character


class ParseError(ExpressionSyntaxError):
    """Raised when a token sequence does not form a valid expression."""
    pass


class UnbalancedParenthesisError(ParseError):
    pass


class UnknownIdentifierError(ParseError):
    pass


class MissingOperandError(ParseError):
    pass


class TrailingTokensError(ParseError):
    pass


class ArityError(ParseError):
    """Raised when a function call has the wrong number of arguments."""
    pass


class NestingTooDeepError(ParseError):
    pass


# ----------------------------------------------------------------------
# Evaluation errors
# ----------------------------------------------------------------------
class EvalError(GraphError):
    """
    Base for evaluation failures.

    ``structural`` tells the sampler whether the failure is tied to a single
    value of x (skip the point) or to the tree itself (abort the run).
    """
    structural = False


class DivisionByZeroError(EvalError):
    pass


class DomainError(EvalError):
    pass


class NumericOverflowError(EvalError):
    pass


class UnknownFunctionError(EvalError):
    structural = True


class ArityMismatchError(EvalError):
    structural = True


class MalformedAstError(EvalError):
    structural = True
