"""Coordinate helpers shared by the range types and the iteration engine.

A coordinate is a plain tuple of non-negative ints. The engine keeps its own
mutable copies as lists; everything handed back to callers goes through
``as_pattern`` so that rank-1 ranges yield bare ints.
"""

from __future__ import annotations

import math
import operator
from collections.abc import Sequence
from typing import Union

Coordinate = tuple[int, ...]
Pattern = Union[int, Coordinate]


def into_coordinate(value) -> Coordinate:
    """Normalize an int or a sequence of integer-likes into a coordinate tuple."""

    try:
        return (operator.index(value),)
    except TypeError:
        pass

    try:
        return tuple(operator.index(component) for component in value)
    except TypeError as exc:
        raise TypeError(f"Coordinate components must be integers, got {value!r}.") from exc


def extents(start: Sequence[int], end: Sequence[int]) -> Coordinate:
    return tuple(e - s for s, e in zip(start, end))


def size(shape: Sequence[int]) -> int:
    """Total number of positions in a box with the given per-axis extents."""

    return math.prod(shape)


def as_pattern(coord: Sequence[int]) -> Pattern:
    if len(coord) == 1:
        return coord[0]
    return tuple(coord)
