# core/evaluation_types.py
import math
from dataclasses import dataclass
from typing import Optional

from core.exceptions import RangeTooLargeError

# Points whose magnitude reaches this bound are not handed to the chart.
MAX_MAGNITUDE = 1e10

# Upper bound on the abscissas of a single range.
MAX_POINTS = 1_000_000


@dataclass(frozen=True)
class Range:
    """
    Inclusive sampling interval.

    Attributes:
        start: First abscissa.
        end: Last abscissa (inclusive).
        step: Distance between consecutive abscissas; must be positive.
    """
    start: float
    end: float
    step: float

    def is_degenerate(self) -> bool:
        values = (self.start, self.end, self.step)
        if not all(math.isfinite(v) for v in values):
            return True
        return self.step <= 0 or self.start > self.end

    def count(self) -> int:
        """
        Number of abscissas in the interval (0 for a degenerate range).

        :raises RangeTooLargeError: If the range spans more than ``MAX_POINTS`` steps,
            including spans too wide to represent as a float.
        """
        if self.is_degenerate():
            return 0
        steps = (self.end - self.start) / self.step
        if not math.isfinite(steps) or steps >= MAX_POINTS:
            raise RangeTooLargeError(
                f"Range [{self.start:g}, {self.end:g}] step {self.step:g} "
                f"exceeds {MAX_POINTS} points"
            )
        # Tolerate rounding so that e.g. 0..1 step 0.1 still reaches 1.
        return int(math.floor(steps + 1e-9)) + 1


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    @staticmethod
    def is_plottable(y: float) -> bool:
        return math.isfinite(y) and abs(y) < MAX_MAGNITUDE


@dataclass(frozen=True)
class GraphSpec:
    """
    One named expression to plot.

    Attributes:
        name: Label for the graph; defaults to the expression text.
        expression: User-entered expression text.
        range: Optional per-graph range overriding the sweep default.
        color: Passed through untouched for the charting caller.
    """
    name: str
    expression: str
    range: Optional[Range] = None
    color: Optional[str] = None


# Initial range of the graphing tool.
DEFAULT_RANGE = Range(start=-10.0, end=10.0, step=0.5)
