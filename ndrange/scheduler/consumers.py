"""Stock consumers for the bridge."""

from __future__ import annotations

import functools
from collections.abc import Iterator
from typing import Any, Callable


class CollectConsumer:
    """Gather items into a list, preserving order across pieces."""

    def split_at(self, index: int):
        return self, self

    def consume_iter(self, iterator: Iterator) -> list:
        return list(iterator)

    def reduce(self, left: list, right: list) -> list:
        left.extend(right)
        return left


class MapConsumer:
    """Apply ``fn`` to every item before handing it to ``base``."""

    def __init__(self, fn: Callable[[Any], Any], base) -> None:
        self.fn = fn
        self.base = base

    def split_at(self, index: int):
        left, right = self.base.split_at(index)
        return MapConsumer(self.fn, left), MapConsumer(self.fn, right)

    def consume_iter(self, iterator: Iterator):
        return self.base.consume_iter(map(self.fn, iterator))

    def reduce(self, left, right):
        return self.base.reduce(left, right)


class ForEachConsumer:
    def __init__(self, fn: Callable[[Any], None]) -> None:
        self.fn = fn

    def split_at(self, index: int):
        return self, self

    def consume_iter(self, iterator: Iterator) -> None:
        for item in iterator:
            self.fn(item)

    def reduce(self, left: None, right: None) -> None:
        return None


class FoldConsumer:
    """Fold each piece from ``identity()`` with ``fold_op``, then combine with ``reduce_op``.

    ``identity`` is a factory so that mutable accumulators are never shared
    between pieces.
    """

    def __init__(
        self,
        identity: Callable[[], Any],
        fold_op: Callable[[Any, Any], Any],
        reduce_op: Callable[[Any, Any], Any],
    ) -> None:
        self.identity = identity
        self.fold_op = fold_op
        self.reduce_op = reduce_op

    def split_at(self, index: int):
        return self, self

    def consume_iter(self, iterator: Iterator):
        return functools.reduce(self.fold_op, iterator, self.identity())

    def reduce(self, left, right):
        return self.reduce_op(left, right)
