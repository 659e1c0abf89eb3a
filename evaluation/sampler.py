# evaluation/sampler.py
"""
Drive the evaluator across a range to produce plottable points.

A failure tied to one abscissa (division by zero, domain error, overflow) only
drops that point. A structural failure (unknown function, wrong arity,
malformed tree) would fail at every abscissa, so it is raised immediately.
"""
import logging
from typing import Iterator, List, Optional, Protocol, Tuple

import numpy as np

from core.evaluation_types import Point, Range
from core.exceptions import EvalError, SamplingCancelled
from symbolic.ast_nodes import AstNode
from symbolic.evaluator import evaluate

logger = logging.getLogger(__name__)


class CancelFlag(Protocol):
    def is_set(self) -> bool: ...


def abscissas(rng: Range) -> Iterator[float]:
    """
    Yield the abscissas of ``rng`` one at a time.

    The i-th value is ``start + i * step``, clamped to ``end``.

    :raises RangeTooLargeError: If the range holds more than ``MAX_POINTS`` abscissas.
    """
    n = rng.count()
    for i in range(n):
        yield min(rng.start + i * rng.step, rng.end)


def sample(ast: AstNode, rng: Range, cancel: Optional[CancelFlag] = None) -> List[Point]:
    """
    Evaluate ``ast`` at every abscissa of ``rng`` and keep the plottable results.

    :param ast: Parsed expression.
    :param rng: Inclusive range; a degenerate range yields an empty list.
    :param cancel: Optional flag (e.g. ``threading.Event``) checked once per point.
    :return: Points with finite ``y`` and ``|y| < 1e10``, in increasing ``x``.
    :raises EvalError: If the tree is structurally invalid.
    :raises SamplingCancelled: If ``cancel`` is set before the scan completes.
    :raises RangeTooLargeError: If the range holds more than ``MAX_POINTS`` abscissas.
    """
    n = rng.count()
    points: List[Point] = []
    skipped = 0
    for i, x in enumerate(abscissas(rng)):
        if cancel is not None and cancel.is_set():
            raise SamplingCancelled(f"Sampling cancelled after {i} of {n} points")
        try:
            y = evaluate(ast, x)
        except EvalError as e:
            if e.structural:
                raise
            logger.debug("Skipping x = %g: %s", x, e)
            skipped += 1
            continue
        if Point.is_plottable(y):
            points.append(Point(x, y))
        else:
            skipped += 1
    logger.debug("Sampled %d points (%d skipped) over [%g, %g] step %g",
                 len(points), skipped, rng.start, rng.end, rng.step)
    return points


def sample_arrays(ast: AstNode, rng: Range,
                  cancel: Optional[CancelFlag] = None) -> Tuple[np.ndarray, np.ndarray]:
    """Same as ``sample`` but returns ``(xs, ys)`` float arrays."""
    points = sample(ast, rng, cancel)
    xs = np.fromiter((p.x for p in points), dtype=float, count=len(points))
    ys = np.fromiter((p.y for p in points), dtype=float, count=len(points))
    return xs, ys
