import math
from types import MappingProxyType

import numpy as np
import pytest
from core.exceptions import (
    ArityMismatchError,
    DivisionByZeroError,
    DomainError,
    EvalError,
    MalformedAstError,
    NestingTooDeepError,
    NumericOverflowError,
    UnknownFunctionError,
)
from core.numeric.context import EvalContext
from symbolic.ast_nodes import BinaryOp, Call, Constant, UnaryOp, Variable
from symbolic.evaluator import evaluate
from symbolic.functions import CONSTANTS, FUNCTIONS, FunctionSpec
from symbolic.parser import parse_expression


def ev(text, x=0.0):
    return evaluate(parse_expression(text), x)


@pytest.mark.parametrize("text, expected", [
    ("2+3*4", 14.0),
    ("2^3^2", 512.0),
    ("-2^2", -4.0),
    ("(-2)^2", 4.0),
    ("2^-1", 0.5),
    ("(-8)^3", -512.0),
    ("8-3-1", 4.0),
    ("8/4/2", 1.0),
    ("2(3+4)", 14.0),
    ("abs(-3)", 3.0),
    ("0^0", 1.0),
])
def test_arithmetic(text, expected):
    assert ev(text) == expected


@pytest.mark.parametrize("c", [0.0, -1.5, 3.25, 1e9])
@pytest.mark.parametrize("x", [-10.0, 0.0, 7.5])
def test_constant_ignores_x(c, x):
    assert evaluate(Constant(c), x) == c


def test_variable_is_bound_to_x():
    assert evaluate(Variable(), 4.5) == 4.5
    assert evaluate(UnaryOp("-", Variable()), 4.5) == -4.5


@pytest.mark.parametrize("x", np.linspace(-5, 5, 11))
def test_implicit_and_explicit_multiplication_agree(x):
    assert ev("4x", x) == ev("4*x", x)
    assert ev("2(x+1)", x) == ev("2*(x+1)", x)


def test_functions_match_math_module():
    x = 0.7
    np.testing.assert_allclose(ev("sin(x)", x), math.sin(x))
    np.testing.assert_allclose(ev("cos(x)", x), math.cos(x))
    np.testing.assert_allclose(ev("tan(x)", x), math.tan(x))
    np.testing.assert_allclose(ev("sqrt(x)", x), math.sqrt(x))
    np.testing.assert_allclose(ev("exp(x)", x), math.exp(x))
    np.testing.assert_allclose(ev("ln(x)", x), math.log(x))


def test_log_is_natural_logarithm():
    assert ev("log(x)", 2.0) == ev("ln(x)", 2.0) == math.log(2.0)
    np.testing.assert_allclose(ev("log(e)"), 1.0)


def test_case_insensitive_expression_evaluates_the_same():
    assert ev("Sin(X) + PI", 1.0) == ev("sin(x) + pi", 1.0)


def test_sqrt_of_negative_is_domain_error():
    with pytest.raises(DomainError, match="sqrt"):
        ev("sqrt(x)", -1.0)


@pytest.mark.parametrize("text, x", [("log(x)", 0.0), ("ln(x)", -1.0), ("log(x)", -3.0)])
def test_log_of_non_positive_is_domain_error(text, x):
    with pytest.raises(DomainError):
        ev(text, x)


def test_division_by_zero_is_not_infinity():
    with pytest.raises(DivisionByZeroError):
        ev("1/x", 0.0)
    assert ev("1/x", 4.0) == 0.25


def test_zero_to_negative_power_divides_by_zero():
    with pytest.raises(DivisionByZeroError):
        ev("0^-1")


def test_negative_base_fractional_exponent_is_domain_error():
    with pytest.raises(DomainError, match="not a real number"):
        ev("(-8)^(1/3)")
    with pytest.raises(DomainError):
        ev("x^0.5", -4.0)


@pytest.mark.parametrize("text", ["exp(1000)", "10^400", "exp(x)^2"])
def test_overflow_is_reported(text):
    with pytest.raises(NumericOverflowError):
        ev(text, 800.0)


def test_non_finite_argument_is_domain_error():
    with pytest.raises(DomainError):
        ev("sin(x)", math.inf)


def test_unknown_function_in_hand_built_tree():
    with pytest.raises(UnknownFunctionError, match="foo"):
        evaluate(Call("foo", (Variable(),)), 1.0)


def test_arity_mismatch_in_hand_built_tree():
    with pytest.raises(ArityMismatchError):
        evaluate(Call("sin", (Variable(), Variable())), 1.0)
    with pytest.raises(ArityMismatchError):
        evaluate(Call("sqrt", ()), 1.0)


def test_malformed_trees():
    with pytest.raises(MalformedAstError):
        evaluate(BinaryOp("%", Constant(1.0), Constant(2.0)), 0.0)
    with pytest.raises(MalformedAstError):
        evaluate(UnaryOp("+", Constant(1.0)), 0.0)
    with pytest.raises(MalformedAstError):
        evaluate("x + 1", 0.0)


def test_hand_built_tree_deeper_than_the_stack_is_malformed():
    node = Variable()
    for _ in range(10000):
        node = BinaryOp("+", node, Constant(1.0))
    with pytest.raises(MalformedAstError, match="too deep"):
        evaluate(node, 0.0)


def test_long_chains_never_reach_the_evaluator_unbounded():
    # The parser refuses chains long enough to exhaust the stack during evaluation.
    with pytest.raises(NestingTooDeepError):
        ev("+".join(["x"] * 2000), 1.0)
    assert ev("+".join(["x"] * 100), 1.0) == 100.0


def test_structural_flag_classifies_errors():
    assert not DivisionByZeroError.structural
    assert not DomainError.structural
    assert not NumericOverflowError.structural
    assert UnknownFunctionError.structural
    assert ArityMismatchError.structural
    assert MalformedAstError.structural
    for cls in (DivisionByZeroError, DomainError, UnknownFunctionError, ArityMismatchError):
        assert issubclass(cls, EvalError)


def test_custom_context_table():
    table = dict(FUNCTIONS)
    table["double"] = FunctionSpec("double", lambda v: 2 * v, "twice the argument")
    ctx = EvalContext(0.0, functions=MappingProxyType(table))
    assert evaluate(Call("double", (Variable(),)), 3.0, ctx) == 6.0
    # The default table is unaffected.
    with pytest.raises(UnknownFunctionError):
        evaluate(Call("double", (Variable(),)), 3.0)


def test_default_context_shares_the_process_tables():
    ctx = EvalContext(2.0)
    assert ctx.functions is FUNCTIONS
    assert ctx.constants is CONSTANTS
    assert ctx.with_x(3).x == 3.0


def test_function_table_is_read_only():
    with pytest.raises(TypeError):
        FUNCTIONS["evil"] = FUNCTIONS["sin"]


def test_showcase_expression(showcase_ast):
    for x in range(11):
        expected = 2 * x ** 2 + 3 * math.sin(x) - math.sqrt(x)
        assert abs(evaluate(showcase_ast, x) - expected) < 1e-9
