"""Half-open N-dimensional integer ranges."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional

from .coordinate import Coordinate, extents, into_coordinate, size


class InvalidRangeError(ValueError):
    """Raised when ``start``/``end`` do not describe a valid box."""


@dataclass(frozen=True)
class NdRange:
    """Box ``[start, end)`` over ``ndim`` independent axes.

    Positions are visited in row-major order with the last axis varying
    fastest. Bounds are validated eagerly, so ``start[i] <= end[i]`` holds on
    every axis of a constructed range.
    """

    start: Coordinate
    end: Coordinate

    NDIM: ClassVar[Optional[int]] = None

    def __post_init__(self) -> None:
        start = into_coordinate(self.start)
        end = into_coordinate(self.end)
        if len(start) != len(end):
            raise InvalidRangeError(
                f"start and end must have the same rank, got {len(start)} and {len(end)}."
            )
        if not start:
            raise InvalidRangeError("Ranges must have at least one axis.")
        if self.NDIM is not None and len(start) != self.NDIM:
            raise InvalidRangeError(
                f"{type(self).__name__} requires rank {self.NDIM}, got {len(start)}."
            )
        if any(s < 0 for s in start) or any(e < 0 for e in end):
            raise InvalidRangeError("Range bounds must be non-negative.")
        for axis, (s, e) in enumerate(zip(start, end)):
            if e < s:
                raise InvalidRangeError(f"Axis {axis}: end ({e}) must be >= start ({s}).")
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    @classmethod
    def new(cls, start, end) -> "NdRange":
        return cls(start, end)

    @property
    def ndim(self) -> int:
        return len(self.start)

    @property
    def shape(self) -> Coordinate:
        """Per-axis extents ``end[i] - start[i]``."""

        return extents(self.start, self.end)

    def __len__(self) -> int:
        return size(self.shape)

    def is_empty(self) -> bool:
        return len(self) == 0

    def __contains__(self, coord) -> bool:
        try:
            point = into_coordinate(coord)
        except TypeError:
            return False
        if len(point) != self.ndim:
            return False
        return all(s <= p < e for p, s, e in zip(point, self.start, self.end))

    def __iter__(self):
        from .sequential import NdRangeIter
        from .state import IterState

        return NdRangeIter(IterState.from_range(self))

    def __reversed__(self):
        return iter(self).rev()

    def par_iter(self):
        """Return a splittable view suitable for the parallel bridge."""

        from .parallel import NdRangeParIter
        from .state import IterState

        return NdRangeParIter(IterState.from_range(self))


class Range1(NdRange):
    NDIM = 1


class Range2(NdRange):
    NDIM = 2


class Range3(NdRange):
    NDIM = 3


class Range4(NdRange):
    NDIM = 4


class Range5(NdRange):
    NDIM = 5
