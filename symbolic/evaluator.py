# symbolic/evaluator.py
"""
Tree-walking evaluator.

Only the node types in ``symbolic.ast_nodes`` and the functions in the fixed
table are ever executed. Every failure is raised as an ``EvalError`` subclass;
no float exception from ``math`` escapes.
"""
import math
from typing import Optional

from core.exceptions import (
    ArityMismatchError,
    DivisionByZeroError,
    DomainError,
    MalformedAstError,
    NumericOverflowError,
    UnknownFunctionError,
)
from core.numeric.context import EvalContext
from symbolic.ast_nodes import AstNode, BinaryOp, Call, Constant, UnaryOp, Variable


def evaluate(ast: AstNode, x: float, context: Optional[EvalContext] = None) -> float:
    """
    Evaluate ``ast`` with the free variable bound to ``x``.

    :param ast: Tree produced by ``symbolic.parser.parse``.
    :param x: Value of the variable.
    :param context: Optional context carrying alternative tables; ``x`` wins over ``context.x``.
    :return: The numeric result.
    :raises EvalError: DivisionByZeroError, DomainError or NumericOverflowError for
        failures at this particular ``x``; UnknownFunctionError, ArityMismatchError or
        MalformedAstError when the tree cannot be evaluated at any ``x``, including a
        hand-built tree deeper than the interpreter stack.
    """
    ctx = EvalContext(float(x)) if context is None else context.with_x(x)
    try:
        return _eval(ast, ctx)
    except RecursionError as e:
        raise MalformedAstError("Expression tree is too deep to evaluate") from e


def _eval(node: AstNode, ctx: EvalContext) -> float:
    if isinstance(node, Constant):
        return float(node.value)
    if isinstance(node, Variable):
        return ctx.x
    if isinstance(node, UnaryOp):
        if node.op != "-":
            raise MalformedAstError(f"Unsupported unary operator '{node.op}'")
        return -_eval(node.operand, ctx)
    if isinstance(node, BinaryOp):
        return _binary(node.op, _eval(node.left, ctx), _eval(node.right, ctx))
    if isinstance(node, Call):
        return _call(node, ctx)
    raise MalformedAstError(f"Unsupported node type {type(node).__name__}")


def _binary(op: str, left: float, right: float) -> float:
    try:
        if op == "+":
            return left + right
        if op == "-":
            return left - right
        if op == "*":
            return left * right
        if op == "/":
            if right == 0:
                raise DivisionByZeroError(f"Division by zero ({left:g} / 0)")
            return left / right
        if op == "^":
            return _power(left, right)
    except OverflowError as e:
        raise NumericOverflowError(f"Overflow evaluating {left:g} {op} {right:g}") from e
    raise MalformedAstError(f"Unsupported binary operator '{op}'")


def _power(base: float, exponent: float) -> float:
    if base < 0 and math.isfinite(exponent) and not exponent.is_integer():
        raise DomainError(f"{base:g}^{exponent:g} is not a real number")
    if base == 0 and exponent < 0:
        raise DivisionByZeroError(f"0^{exponent:g} divides by zero")
    try:
        return math.pow(base, exponent)
    except ValueError as e:
        raise DomainError(f"{base:g}^{exponent:g}: {e}") from e


def _call(node: Call, ctx: EvalContext) -> float:
    fn = ctx.functions.get(node.name)
    if fn is None:
        raise UnknownFunctionError(f"Unknown function '{node.name}'")
    if len(node.args) != fn.arity:
        raise ArityMismatchError(
            f"{node.name}() takes {fn.arity} argument(s), got {len(node.args)}"
        )
    args = [_eval(arg, ctx) for arg in node.args]
    try:
        return float(fn(*args))
    except OverflowError as e:
        raise NumericOverflowError(f"Overflow evaluating {node.name}({', '.join(f'{a:g}' for a in args)})") from e
