import pytest
from core.evaluation_types import Range
from symbolic.expressions import clear_expression_cache
from symbolic.parser import parse_expression


# Ensure that the expression cache is cleared before each test to avoid cross-test interference.
@pytest.fixture(autouse=True)
def reset_expression_cache():
    clear_expression_cache()
    yield
    clear_expression_cache()


@pytest.fixture
def sqrt_ast():
    return parse_expression("sqrt(x)")


@pytest.fixture
def showcase_ast():
    # The example expression from the graphing tool's help text.
    return parse_expression("2x^2 + 3sin(x) - sqrt(x)")


@pytest.fixture
def unit_range():
    return Range(start=-5, end=5, step=1)


@pytest.fixture
def dummy_logger(caplog):
    caplog.set_level("DEBUG")
    return caplog
