"""Splittable views of an NdRange for the parallel bridge."""

from __future__ import annotations

from concurrent.futures import Executor
from typing import Any, Callable, Optional

from ..scheduler.bridge import bridge
from ..scheduler.consumers import CollectConsumer, FoldConsumer, ForEachConsumer, MapConsumer
from .sequential import NdRangeIter
from .state import IterState


class NdRangeProducer:
    """Exact-length, splittable source of range positions."""

    __slots__ = ("state",)

    def __init__(self, state: IterState) -> None:
        self.state = state

    def __len__(self) -> int:
        return self.state.remaining

    def split_at(self, index: int) -> tuple["NdRangeProducer", "NdRangeProducer"]:
        left, right = self.state.split_at(index)
        return NdRangeProducer(left), NdRangeProducer(right)

    def into_iter(self) -> NdRangeIter:
        return NdRangeIter(self.state)

    def __repr__(self) -> str:
        return f"NdRangeProducer(head={tuple(self.state.head)}, remaining={self.state.remaining})"


class NdRangeParIter:
    """Indexed parallel iterator over the positions of a range.

    Results of ``collect``/``map``/``fold`` come back in the same order a
    sequential traversal would produce them.
    """

    def __init__(
        self,
        state: IterState,
        *,
        min_len: Optional[int] = None,
        max_workers: Optional[int] = None,
        executor: Optional[Executor] = None,
    ) -> None:
        self._state = state
        self._min_len = min_len
        self._max_workers = max_workers
        self._executor = executor

    def _replace(self, **overrides) -> "NdRangeParIter":
        options = {
            "min_len": self._min_len,
            "max_workers": self._max_workers,
            "executor": self._executor,
        }
        options.update(overrides)
        return NdRangeParIter(self._state, **options)

    def len(self) -> int:
        return self._state.remaining

    def __len__(self) -> int:
        return self._state.remaining

    def opt_len(self) -> Optional[int]:
        return self._state.remaining

    def upper_bound(self) -> int:
        return self._state.remaining

    def with_min_len(self, min_len: int) -> "NdRangeParIter":
        return self._replace(min_len=min_len)

    def with_max_workers(self, max_workers: int) -> "NdRangeParIter":
        return self._replace(max_workers=max_workers)

    def with_executor(self, executor: Executor) -> "NdRangeParIter":
        return self._replace(executor=executor)

    def with_producer(self, callback: Callable[[NdRangeProducer], Any]):
        """Hand ``callback`` a producer over a private copy of the state.

        The bridge splits and drains the producer it receives, so every call
        gets a fresh copy and this iterator can be driven any number of times.
        """

        return callback(NdRangeProducer(self._state.copy()))

    def drive(self, consumer):
        return bridge(
            self,
            consumer,
            min_len=self._min_len,
            max_workers=self._max_workers,
            executor=self._executor,
        )

    def collect(self) -> list:
        return self.drive(CollectConsumer())

    def map(self, fn: Callable[[Any], Any]) -> list:
        """Apply ``fn`` to every position and return the results in order."""

        return self.drive(MapConsumer(fn, CollectConsumer()))

    def for_each(self, fn: Callable[[Any], None]) -> None:
        self.drive(ForEachConsumer(fn))

    def fold(
        self,
        identity: Callable[[], Any],
        fold_op: Callable[[Any, Any], Any],
        reduce_op: Callable[[Any, Any], Any],
    ):
        return self.drive(FoldConsumer(identity, fold_op, reduce_op))

    def count(self) -> int:
        return self.fold(int, lambda acc, _: acc + 1, lambda left, right: left + right)
