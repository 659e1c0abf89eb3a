# core/numeric/context.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Mapping

from symbolic.functions import CONSTANTS, FUNCTIONS, FunctionSpec


@dataclass(frozen=True, slots=True)
class EvalContext:
    """
    Immutable <x, function table> bundle handed to the evaluator.

    * One per sample point; creating it copies nothing.
    * The tables are the process-wide read-only mappings, so contexts
      built on different threads never share mutable state.
    """
    x: float
    functions: Mapping[str, FunctionSpec] = field(default_factory=lambda: FUNCTIONS, repr=False)
    constants: Mapping[str, float] = field(default_factory=lambda: CONSTANTS, repr=False)

    def with_x(self, x: float) -> EvalContext:
        return EvalContext(float(x), self.functions, self.constants)
