# symbolic/functions.py
"""
The closed set of functions and constants an expression may reference.

Both tables are built once at import time and exposed as read-only mappings;
nothing in the engine mutates them, so they can be shared across threads.
"""
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional

from core.exceptions import DomainError


@dataclass(frozen=True)
class FunctionSpec:
    name: str
    func: Callable[[float], float]
    description: str
    arity: int = 1
    domain_check: Optional[Callable[[float], bool]] = None
    domain_message: str = ""

    def __call__(self, *args: float) -> float:
        if self.domain_check is not None and not self.domain_check(*args):
            raise DomainError(f"{self.name}({', '.join(_fmt(a) for a in args)}) {self.domain_message}")
        try:
            return self.func(*args)
        except ValueError as e:
            # math raises ValueError for inputs such as sin(inf).
            raise DomainError(f"{self.name}({', '.join(_fmt(a) for a in args)}): {e}") from e


def _fmt(value: float) -> str:
    return f"{value:g}"


def _positive(v: float) -> bool:
    return v > 0


def _non_negative(v: float) -> bool:
    return v >= 0


_LOG_DOC = "natural logarithm (same as ln; there is no base-10 log)"

_FUNCTIONS: Dict[str, FunctionSpec] = {
    "sin": FunctionSpec("sin", math.sin, "sine (radians)"),
    "cos": FunctionSpec("cos", math.cos, "cosine (radians)"),
    "tan": FunctionSpec("tan", math.tan, "tangent (radians)"),
    "sqrt": FunctionSpec("sqrt", math.sqrt, "square root",
                         domain_check=_non_negative,
                         domain_message="is undefined for negative arguments"),
    "abs": FunctionSpec("abs", abs, "absolute value"),
    "exp": FunctionSpec("exp", math.exp, "e raised to the argument"),
    "log": FunctionSpec("log", math.log, _LOG_DOC,
                        domain_check=_positive,
                        domain_message="is undefined for non-positive arguments"),
    "ln": FunctionSpec("ln", math.log, "natural logarithm",
                       domain_check=_positive,
                       domain_message="is undefined for non-positive arguments"),
}

_CONSTANTS: Dict[str, float] = {
    "pi": math.pi,
    "e": math.e,
}

FUNCTIONS: Mapping[str, FunctionSpec] = MappingProxyType(_FUNCTIONS)
CONSTANTS: Mapping[str, float] = MappingProxyType(_CONSTANTS)

# The name bound to the free variable.
VARIABLE_NAME = "x"


def describe_functions() -> str:
    """Human-readable listing of the supported functions and constants."""
    lines = ["Functions:"]
    for name, fn in FUNCTIONS.items():
        lines.append(f"  {name}(x)  {fn.description}")
    lines.append("Constants:")
    for name, value in CONSTANTS.items():
        lines.append(f"  {name} = {value!r}")
    lines.append(f"Variable: {VARIABLE_NAME}")
    return "\n".join(lines)
