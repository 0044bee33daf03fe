"""Double-ended, exact-length iteration over an NdRange."""

from __future__ import annotations

from .coordinate import Pattern, as_pattern
from .state import IterState

_MISSING = object()


class NdRangeIter:
    """Iterator yielding every position of a range, front to back.

    ``next_back`` pulls from the other end of the same remaining sequence; the
    two directions may be mixed freely and never yield a position twice.
    """

    __slots__ = ("_state",)

    def __init__(self, state: IterState) -> None:
        self._state = state

    @property
    def state(self) -> IterState:
        return self._state

    def __iter__(self) -> "NdRangeIter":
        return self

    def __next__(self) -> Pattern:
        state = self._state
        if state.remaining == 0:
            raise StopIteration
        value = as_pattern(state.head)
        state.increment()
        return value

    def next_back(self, default=_MISSING) -> Pattern:
        """Return the last remaining position, like ``next`` from the back.

        Raises ``StopIteration`` when exhausted unless ``default`` is given.
        """

        state = self._state
        if state.remaining == 0:
            if default is _MISSING:
                raise StopIteration
            return default
        state.increment_back()
        return as_pattern(state.tail)

    def __len__(self) -> int:
        return self._state.remaining

    def rev(self) -> "ReversedNdRangeIter":
        return ReversedNdRangeIter(self)

    def __reversed__(self) -> "ReversedNdRangeIter":
        return self.rev()

    def __repr__(self) -> str:
        return f"NdRangeIter(head={tuple(self._state.head)}, remaining={self._state.remaining})"


class ReversedNdRangeIter:
    """Back-to-front view sharing the state of an ``NdRangeIter``."""

    __slots__ = ("_inner",)

    def __init__(self, inner: NdRangeIter) -> None:
        self._inner = inner

    def __iter__(self) -> "ReversedNdRangeIter":
        return self

    def __next__(self) -> Pattern:
        return self._inner.next_back()

    def next_back(self, default=_MISSING) -> Pattern:
        if default is _MISSING:
            return next(self._inner)
        return next(self._inner, default)

    def __len__(self) -> int:
        return len(self._inner)

    def rev(self) -> NdRangeIter:
        return self._inner

    def __reversed__(self) -> NdRangeIter:
        return self._inner
