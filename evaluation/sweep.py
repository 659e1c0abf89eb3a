# evaluation/sweep.py
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence

from core.evaluation_types import DEFAULT_RANGE, GraphSpec, Point, Range
from core.exceptions import ExpressionSyntaxError, EvalError, RangeTooLargeError
from evaluation.sampler import CancelFlag, sample
from symbolic.expressions import compile_expr


class GraphOutcome:
    """Result of sampling one graph: points on success, an error message otherwise."""

    def __init__(self, graph: GraphSpec, points: Optional[List[Point]] = None, error: Optional[str] = None):
        self.graph = graph
        self.points = points
        self.error = error


def _sample_graph(graph: GraphSpec, default_range: Range, cancel: Optional[CancelFlag]) -> GraphOutcome:
    rng = graph.range or default_range
    try:
        compiled = compile_expr(graph.expression)
        return GraphOutcome(graph, points=sample(compiled.ast, rng, cancel))
    except (ExpressionSyntaxError, EvalError, RangeTooLargeError) as e:
        logging.error(f"Graph '{graph.name}' ({graph.expression!r}) failed: {e}")
        return GraphOutcome(graph, error=str(e))


class SweepResult:
    def __init__(self, results, errors, stats=None, colors=None):
        self.results: Dict[str, Optional[List[Point]]] = results
        self.errors: List[str] = errors
        self.stats = stats or {}
        self.colors: Dict[str, Optional[str]] = colors or {}

    def to_dataframe(self):
        import pandas as pd
        rows = []
        for name, points in self.results.items():
            if points is None:
                continue
            rows.extend({"graph": name, "x": p.x, "y": p.y} for p in points)
        return pd.DataFrame(rows, columns=["graph", "x", "y"])


def sweep(graphs: Sequence[GraphSpec], default_range: Range = DEFAULT_RANGE,
          max_workers: Optional[int] = None, cancel: Optional[CancelFlag] = None) -> SweepResult:
    """
    Sample several graphs concurrently.

    A graph that fails to parse, fails structurally or has an oversized range is
    reported in ``errors`` and mapped to ``None`` in ``results``; the other graphs
    are unaffected.
    Cancellation is not isolated: ``SamplingCancelled`` propagates to the caller.
    """
    start_time = time.time()
    names = [g.name for g in graphs]
    if len(set(names)) != len(names):
        raise ValueError(f"Graph names must be unique, got {names}")

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(_sample_graph, g, default_range, cancel) for g in graphs]
        outcomes = [future.result() for future in futures]

    results: Dict[str, Optional[List[Point]]] = {}
    errors: List[str] = []
    for outcome in outcomes:
        results[outcome.graph.name] = outcome.points
        if outcome.error is not None:
            errors.append(f"{outcome.graph.name}: {outcome.error}")

    elapsed = time.time() - start_time
    stats = {
        "graphs": len(graphs),
        "points": sum(len(p) for p in results.values() if p is not None),
        "elapsed": elapsed,
    }
    colors = {g.name: g.color for g in graphs}
    return SweepResult(results, errors, stats, colors)
