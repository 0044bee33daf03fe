"""Benchmark mode: traversal throughput of the available strategies.

Times three ways of visiting every position of one range:
- ``sequential``: plain ``NdRangeIter`` iteration.
- ``bridge``: ``NdRangeParIter.map`` through the order-preserving bridge, once
  per requested worker count.
- ``tensor``: ``coordinate_tensor`` materialization.

Results are logged and printed as a single ``BENCHMARK_JSON=`` line that
``scripts/plot_benchmark_comparison.py`` can read.
"""

from __future__ import annotations

import argparse
import json
import logging
import time
from typing import Callable

from ..core.ranges import NdRange
from ..scheduler.config import resolve_min_len
from ..tensors.coords import coordinate_tensor
from .simulator import parse_coordinate

LOGGER = logging.getLogger(__name__)


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="NdRange traversal throughput benchmark")
    parser.add_argument("--start", type=str, default="0,0,0")
    parser.add_argument("--end", type=str, default="32,64,64")
    parser.add_argument(
        "--workers",
        type=str,
        default="1,2,4",
        help="Comma separated worker counts for the bridge runs",
    )
    parser.add_argument("--min-len", type=int, default=None)
    parser.add_argument("--repeats", type=int, default=3)
    parser.add_argument("--warmup", type=int, default=1)
    parser.add_argument("--log-level", type=str, default="INFO")
    return parser.parse_args(argv)


def _checksum(position) -> int:
    if isinstance(position, int):
        return position
    return sum(position)


def _time_runs(fn: Callable[[], object], repeats: int, warmup: int) -> list[float]:
    for _ in range(warmup):
        fn()
    times = []
    for _ in range(repeats):
        start_t = time.perf_counter()
        fn()
        times.append(time.perf_counter() - start_t)
    return times


def _summarize(mode: str, workers: int, length: int, times: list[float]) -> dict:
    avg_time = sum(times) / len(times) if times else 0.0
    throughput = length / avg_time if avg_time > 0 else 0.0
    return {
        "mode": mode,
        "workers": workers,
        "positions": length,
        "avg_time_s": round(avg_time, 6),
        "throughput_pps": round(throughput, 2),
        "per_run_ms": [round(t * 1000, 3) for t in times],
    }


def run_benchmark(
    nd_range: NdRange,
    worker_counts: list[int],
    *,
    min_len: int | None = None,
    repeats: int = 3,
    warmup: int = 1,
) -> dict:
    if repeats <= 0:
        raise ValueError("repeats must be positive.")
    if warmup < 0:
        raise ValueError("warmup must be non-negative.")

    length = len(nd_range)
    resolved_min_len = resolve_min_len(min_len)
    rows = []

    times = _time_runs(lambda: [_checksum(p) for p in nd_range], repeats, warmup)
    rows.append(_summarize("sequential", 1, length, times))

    for workers in worker_counts:

        def _bridge_run(workers=workers):
            par = nd_range.par_iter().with_max_workers(workers).with_min_len(resolved_min_len)
            return par.map(_checksum)

        times = _time_runs(_bridge_run, repeats, warmup)
        rows.append(_summarize("bridge", workers, length, times))

    times = _time_runs(lambda: coordinate_tensor(nd_range), repeats, warmup)
    rows.append(_summarize("tensor", 1, length, times))

    return {
        "start": list(nd_range.start),
        "end": list(nd_range.end),
        "positions": length,
        "min_len": resolved_min_len,
        "repeats": repeats,
        "warmup": warmup,
        "results": rows,
    }


def main(argv=None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    nd_range = NdRange(parse_coordinate(args.start), parse_coordinate(args.end))
    worker_counts = list(parse_coordinate(args.workers))

    results = run_benchmark(
        nd_range,
        worker_counts,
        min_len=args.min_len,
        repeats=args.repeats,
        warmup=args.warmup,
    )

    LOGGER.info("=" * 70)
    LOGGER.info("BENCHMARK RESULTS")
    LOGGER.info("=" * 70)
    LOGGER.info(
        "Range: %s..%s | Positions: %d | min_len: %d | Repeats: %d (+ %d warmup)",
        results["start"],
        results["end"],
        results["positions"],
        results["min_len"],
        results["repeats"],
        results["warmup"],
    )
    LOGGER.info("-" * 70)
    for row in results["results"]:
        LOGGER.info(
            "%-10s workers=%-3d avg=%.4f s throughput=%.1f positions/s",
            row["mode"],
            row["workers"],
            row["avg_time_s"],
            row["throughput_pps"],
        )
    LOGGER.info("=" * 70)

    print(f"BENCHMARK_JSON={json.dumps(results)}")


if __name__ == "__main__":
    main()
