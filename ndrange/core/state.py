"""Stepping and splitting engine behind every NdRange iterator.

``IterState`` tracks the next position to yield from the front (``head``), the
one-past marker for the back (``tail``) and the exact number of positions left
between them. Both cursors in this package are thin wrappers around it.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .coordinate import Coordinate
from .ranges import NdRange


@dataclass
class IterState:
    nd_range: NdRange
    head: list[int]
    tail: list[int]
    remaining: int
    _consumed: bool = field(default=False, repr=False, compare=False)

    @classmethod
    def from_range(cls, nd_range: NdRange) -> "IterState":
        tail = list(nd_range.start)
        tail[0] = nd_range.end[0]
        return cls(
            nd_range=nd_range,
            head=list(nd_range.start),
            tail=tail,
            remaining=len(nd_range),
        )

    def __len__(self) -> int:
        return self.remaining

    def copy(self) -> "IterState":
        self.check_live()
        return IterState(
            nd_range=self.nd_range,
            head=list(self.head),
            tail=list(self.tail),
            remaining=self.remaining,
        )

    def check_live(self) -> None:
        """Raise ``RuntimeError`` if ``split_at`` already consumed this state."""

        if self._consumed:
            raise RuntimeError("Iteration state was consumed by split_at.")

    def _check_steppable(self) -> None:
        self.check_live()
        if self.remaining == 0:
            raise RuntimeError("Cannot step an exhausted iteration state.")

    def increment(self) -> None:
        """Advance ``head`` by one position, carrying into earlier axes."""

        self._check_steppable()
        head = self.head
        start, end = self.nd_range.start, self.nd_range.end
        for axis in range(len(head) - 1, -1, -1):
            head[axis] += 1
            if head[axis] < end[axis]:
                break
            head[axis] = start[axis]
        self.remaining -= 1

    def increment_back(self) -> None:
        """Retreat ``tail`` by one position, borrowing from earlier axes."""

        self._check_steppable()
        tail = self.tail
        start, end = self.nd_range.start, self.nd_range.end
        for axis in range(len(tail) - 1, -1, -1):
            tail[axis] -= 1
            if tail[axis] >= start[axis]:
                break
            tail[axis] = end[axis] - 1
        self.remaining -= 1

    def at(self, index: int) -> Coordinate:
        """Position reached after ``index`` forward steps from ``head``.

        The offset is decomposed in mixed radix over the per-axis extents, with
        each axis' distance already travelled from ``start`` folded in, so the
        lookup costs O(rank) regardless of ``index``.
        """

        self.check_live()
        if not 0 <= index <= self.remaining:
            raise IndexError(f"index {index} outside [0, {self.remaining}].")
        if index == 0:
            return tuple(self.head)

        start, end = self.nd_range.start, self.nd_range.end
        position = list(self.head)
        carry = index
        for axis in range(len(position) - 1, -1, -1):
            extent = end[axis] - start[axis]
            offset = self.head[axis] - start[axis] + carry
            position[axis] = offset % extent + start[axis]
            carry = offset // extent
        return tuple(position)

    def split_at(self, index: int) -> tuple["IterState", "IterState"]:
        """Consume the state and return ``(left, right)`` covering it in order.

        ``left`` holds the first ``index`` remaining positions and ``right`` the
        rest; neither shares mutable data with the other.
        """

        mid = self.at(index)
        left = IterState(
            nd_range=self.nd_range,
            head=list(self.head),
            tail=list(mid),
            remaining=index,
        )
        right = IterState(
            nd_range=self.nd_range,
            head=list(mid),
            tail=list(self.tail),
            remaining=self.remaining - index,
        )
        self._consumed = True
        return left, right
