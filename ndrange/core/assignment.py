"""Contiguous partitioning of a range across distributed ranks.

This module intentionally avoids importing ``torch.distributed`` so that the
partitioning logic can be unit-tested without any process group.
"""

from __future__ import annotations

from dataclasses import dataclass

from .parallel import NdRangeProducer
from .ranges import NdRange
from .state import IterState


@dataclass(frozen=True)
class IndexSpan:
    """Closed-open interval of linear positions assigned to a rank."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < 0:
            raise ValueError("Span indices must be non-negative.")
        if self.end < self.start:
            raise ValueError("Span end must be >= start.")

    @property
    def count(self) -> int:
        """Number of positions represented by the span."""

        return self.end - self.start

    def __iter__(self):
        yield from range(self.start, self.end)


def assign_span(total: int, world_size: int, rank: int) -> IndexSpan:
    """Compute the linear index span handled by ``rank``.

    Args:
        total: Number of positions being distributed.
        world_size: Number of distributed ranks.
        rank: Rank for which we want the allocation (0-indexed).

    Returns:
        ``IndexSpan`` describing ``[start, end)`` for ``rank``. Spans are
        contiguous and cover ``[0, total)``; the first ``total % world_size``
        ranks take one extra position.

    Raises:
        ValueError: If the arguments are inconsistent.
    """

    if total < 0:
        raise ValueError("total must be non-negative.")
    if world_size <= 0:
        raise ValueError("world_size must be positive.")
    if not (0 <= rank < world_size):
        raise ValueError("rank must satisfy 0 <= rank < world_size.")

    per_rank, extra = divmod(total, world_size)
    start = rank * per_rank + min(rank, extra)
    count = per_rank + (1 if rank < extra else 0)
    return IndexSpan(start=start, end=start + count)


def assign_range(nd_range: NdRange, world_size: int, rank: int) -> NdRangeProducer:
    """Return the producer for the piece of ``nd_range`` owned by ``rank``."""

    span = assign_span(len(nd_range), world_size, rank)
    state = IterState.from_range(nd_range)
    _, rest = state.split_at(span.start)
    piece, _ = rest.split_at(span.count)
    return NdRangeProducer(piece)
