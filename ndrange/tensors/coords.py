"""Tensor views of range positions.

``positions_at`` is the batched counterpart of ``IterState.at``: it decomposes a
whole tensor of linear offsets at once, which lets leaf-level work materialize
its coordinates without stepping through them one by one.
"""

from __future__ import annotations

from typing import Union

import torch

from ..core.parallel import NdRangeProducer
from ..core.ranges import NdRange
from ..core.sequential import NdRangeIter
from ..core.state import IterState

Source = Union[NdRange, IterState, NdRangeIter, NdRangeProducer]


def _as_state(source: Source) -> IterState:
    if isinstance(source, IterState):
        return source
    if isinstance(source, NdRange):
        return IterState.from_range(source)
    if isinstance(source, (NdRangeIter, NdRangeProducer)):
        return source.state
    raise TypeError(f"Cannot build coordinates from {type(source).__name__}.")


def positions_at(state: IterState, indices: torch.Tensor) -> torch.Tensor:
    """Return the ``(len(indices), ndim)`` positions ``indices`` steps past ``head``.

    Every index must lie in ``[0, state.remaining]``; the state is not mutated.
    """

    state.check_live()
    indices = torch.as_tensor(indices, dtype=torch.int64)
    if indices.dim() != 1:
        raise ValueError("indices must be a 1-D tensor.")

    start, end = state.nd_range.start, state.nd_range.end
    ndim = len(start)
    if indices.numel() == 0:
        return torch.empty((0, ndim), dtype=torch.int64)
    if int(indices.min()) < 0 or int(indices.max()) > state.remaining:
        raise IndexError(f"indices must lie in [0, {state.remaining}].")
    if state.remaining == 0:
        return torch.tensor([list(state.head)], dtype=torch.int64).expand(indices.numel(), ndim).clone()

    columns = [None] * ndim
    carry = indices
    for axis in range(ndim - 1, -1, -1):
        extent = end[axis] - start[axis]
        offset = carry + (state.head[axis] - start[axis])
        columns[axis] = torch.remainder(offset, extent) + start[axis]
        carry = torch.div(offset, extent, rounding_mode="floor")
    return torch.stack(columns, dim=1)


def coordinate_tensor(source: Source) -> torch.Tensor:
    """Materialize the remaining positions of ``source`` as an int64 tensor.

    Rows follow forward traversal order. The source is left untouched; an
    ``NdRange`` is converted to a fresh state first.
    """

    state = _as_state(source)
    return positions_at(state, torch.arange(state.remaining, dtype=torch.int64))
