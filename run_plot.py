#!/usr/bin/env python
import argparse
import dataclasses
import logging
import sys
from typing import List, Optional, Sequence

import numpy as np

from core.evaluation_types import DEFAULT_RANGE, GraphSpec, Range
from core.exceptions import ConfigError, EvalError, ExpressionSyntaxError
from core.inout.plot_config import load_plot_config
from evaluation.sweep import sweep
from symbolic.expressions import compile_expr, evaluate_at
from symbolic.functions import describe_functions
from utils.logging_config import get_logger, setup_logging

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_EVAL_ERROR = 1
EXIT_SYNTAX_ERROR = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sample user-entered expressions over a range of x.")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--expr", action="append", default=[], help="Expression to plot (repeatable).")
    source.add_argument("--config", help="Path to a YAML plot configuration file.")
    parser.add_argument("--start", type=float, help=f"First x (default {DEFAULT_RANGE.start:g}).")
    parser.add_argument("--end", type=float, help=f"Last x, inclusive (default {DEFAULT_RANGE.end:g}).")
    parser.add_argument("--step", type=float, help=f"Distance between samples (default {DEFAULT_RANGE.step:g}).")
    parser.add_argument("--at", type=float, help="Evaluate each expression at this single x instead of sampling.")
    parser.add_argument("--workers", type=int, default=None, help="Number of sampling threads.")
    parser.add_argument("--dump", help="Path to dump sampled arrays (e.g., points.npz)", default=None)
    parser.add_argument("--csv", help="Path to write sampled points as CSV.", default=None)
    parser.add_argument("--summary", action="store_true", help="Print a summary line.")
    parser.add_argument("--list-functions", action="store_true", help="List supported functions and constants.")
    parser.add_argument("--log-file", help="Also write log records to this file.", default=None)
    parser.add_argument("--verbose", action="store_true", help="Enable DEBUG logging.")
    return parser


def _report_syntax_error(expression: str, err: ExpressionSyntaxError) -> None:
    print(f"Error in '{expression}': {err}")
    print(f"  {expression}")
    print(f"  {' ' * err.position}^")


def _resolve_range(base: Range, args: argparse.Namespace) -> Range:
    overrides = {k: getattr(args, k) for k in ("start", "end", "step") if getattr(args, k) is not None}
    return dataclasses.replace(base, **overrides)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Sample one or more expressions and print, dump, or export the points.

    Returns:
        0 on success, 1 if an expression cannot be evaluated, 2 on a syntax error.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO, log_file=args.log_file)
    logger.debug("Verbose logging enabled.")

    if args.list_functions:
        print(describe_functions())
        return EXIT_OK

    base_range = DEFAULT_RANGE
    graphs: List[GraphSpec]
    if args.config:
        try:
            config = load_plot_config(args.config)
        except ConfigError as e:
            logger.error("Plot configuration failed: %s", e)
            return EXIT_SYNTAX_ERROR
        base_range = config.range
        graphs = config.graphs
    elif args.expr:
        graphs = [GraphSpec(name=e, expression=e) for e in args.expr]
    else:
        parser.error("one of --expr, --config or --list-functions is required")

    for graph in graphs:
        try:
            compile_expr(graph.expression)
        except ExpressionSyntaxError as e:
            _report_syntax_error(graph.expression, e)
            return EXIT_SYNTAX_ERROR

    if args.at is not None:
        status = EXIT_OK
        for graph in graphs:
            try:
                print(f"{graph.name}: f({args.at:g}) = {evaluate_at(graph.expression, args.at)!r}")
            except EvalError as e:
                print(f"{graph.name}: f({args.at:g}) is undefined: {e}")
                status = EXIT_EVAL_ERROR
        return status

    rng = _resolve_range(base_range, args)
    result = sweep(graphs, rng, max_workers=args.workers)
    logger.info("Sampling completed.")

    if result.errors:
        logger.warning("Some graphs could not be sampled:")
        for err in result.errors:
            logger.warning(err)

    if args.summary:
        print(f"Sampling completed: {result.stats['points']} points for "
              f"{result.stats['graphs']} graph(s) in {result.stats['elapsed']:.3f} s")

    if args.dump:
        arrays = {"names": np.array(list(result.results.keys()))}
        for i, points in enumerate(result.results.values()):
            points = points or []
            arrays[f"x_{i}"] = np.array([p.x for p in points], dtype=float)
            arrays[f"y_{i}"] = np.array([p.y for p in points], dtype=float)
        np.savez(args.dump, **arrays)
        print(f"Sampled points dumped to {args.dump}")

    if args.csv:
        result.to_dataframe().to_csv(args.csv, index=False)
        print(f"Sampled points written to {args.csv}")

    if not (args.dump or args.csv):
        for name, points in result.results.items():
            if points is None:
                continue
            print(f"# {name} ({len(points)} points)")
            for p in points:
                print(f"{p.x:.10g}\t{p.y:.10g}")

    return EXIT_EVAL_ERROR if result.errors else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
