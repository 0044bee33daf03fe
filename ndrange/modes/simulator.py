"""Simulator mode entrypoint: traverse one range across torchrun ranks.

Each rank materializes the contiguous piece ``assign_range`` gives it, the
pieces are gathered in rank order, and the result is checked against a plain
sequential traversal of the whole range.

    torchrun --nproc-per-node 4 -m ndrange.modes.simulator --start 0,0,0 --end 4,5,6
"""

from __future__ import annotations

import argparse
import logging
import time

import torch

from ..core.assignment import assign_range
from ..core.ranges import NdRange
from ..distributed.backend import discover_process_env, resolve_backend
from ..distributed.setup import finalize_distributed, gather_in_rank_order, init_distributed
from ..tensors.coords import coordinate_tensor

LOGGER = logging.getLogger(__name__)


def parse_coordinate(text: str) -> tuple[int, ...]:
    """Parse ``"1,2,3"`` into ``(1, 2, 3)``."""

    parts = [part.strip() for part in text.split(",") if part.strip()]
    if not parts:
        raise ValueError(f"Empty coordinate '{text}'.")
    try:
        return tuple(int(part) for part in parts)
    except ValueError as exc:
        raise ValueError(f"Malformed coordinate '{text}'.") from exc


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="NdRange distributed traversal simulator")
    parser.add_argument("--start", type=str, default="0,0,0")
    parser.add_argument("--end", type=str, default="4,8,16")
    parser.add_argument("--rank", type=int, default=0, help="Rank fallback when env vars missing")
    parser.add_argument("--world-size", type=int, default=1)
    parser.add_argument(
        "--backend",
        type=str,
        default="auto",
        choices=["auto", "gloo", "nccl"],
        help="Override backend selection",
    )
    parser.add_argument("--init-method", type=str, default=None)
    parser.add_argument("--no-verify", action="store_true", help="Skip the sequential cross-check")
    parser.add_argument("--log-level", type=str, default="INFO")
    return parser.parse_args(argv)


def run_piece(nd_range: NdRange, world_size: int, rank: int) -> torch.Tensor:
    """Return the ``(count, ndim)`` coordinates owned by ``rank``."""

    producer = assign_range(nd_range, world_size, rank)
    return coordinate_tensor(producer)


def _rows(nd_range: NdRange):
    for position in nd_range:
        yield position if isinstance(position, tuple) else (position,)


def verify(nd_range: NdRange, merged: torch.Tensor) -> bool:
    """Check ``merged`` against a sequential traversal of ``nd_range``."""

    expected = torch.tensor(list(_rows(nd_range)), dtype=torch.int64)
    expected = expected.reshape(len(nd_range), nd_range.ndim)
    return merged.shape == expected.shape and bool(torch.equal(merged, expected))


def main(argv=None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    env = discover_process_env(default_rank=args.rank, default_world_size=args.world_size)
    nd_range = NdRange(parse_coordinate(args.start), parse_coordinate(args.end))

    backend = resolve_backend(None if args.backend == "auto" else args.backend)
    init_distributed(env, backend=backend, init_method=args.init_method)

    LOGGER.info(
        "Simulator start rank=%s world_size=%s range=%s..%s len=%s",
        env.rank,
        env.world_size,
        nd_range.start,
        nd_range.end,
        len(nd_range),
    )

    try:
        start_time = time.perf_counter()
        local = run_piece(nd_range, env.world_size, env.rank)
        elapsed_ms = (time.perf_counter() - start_time) * 1000.0
        LOGGER.info("[rank=%s] piece of %s positions built in %.2f ms", env.rank, len(local), elapsed_ms)

        merged = gather_in_rank_order(local)
        if env.rank == 0:
            LOGGER.info("Merged %s positions from %s rank(s)", len(merged), env.world_size)
            if not args.no_verify:
                if not verify(nd_range, merged):
                    raise RuntimeError("Merged pieces do not match the sequential traversal.")
                LOGGER.info("Merged traversal matches sequential order.")
    finally:
        finalize_distributed()


if __name__ == "__main__":
    main()
