"""Order-preserving divide-and-conquer bridge between producers and consumers.

The producer is split depth-first into contiguous leaves, each leaf is
consumed on an executor, and leaf results are reduced strictly left to right.
Consumers therefore only need an associative ``reduce``: items within a leaf
arrive in traversal order and leaf results are combined in original order.
"""

from __future__ import annotations

import functools
import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

from .config import resolve_max_workers, resolve_min_len
from .protocols import Consumer, Producer

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class LengthSplitter:
    """Decides whether a piece of ``length`` items is worth splitting again.

    ``splits`` is the remaining split budget, halved at every level, so a
    budget of ``workers - 1`` yields at most ``workers`` leaves when ``workers``
    is a power of two, and a single leaf for one worker. Pieces whose halves
    would fall below ``min_len`` are never split.
    """

    min_len: int = 1
    splits: int = 1

    def __post_init__(self) -> None:
        if self.min_len <= 0:
            raise ValueError("min_len must be positive.")
        if self.splits < 0:
            raise ValueError("splits must be non-negative.")

    def try_split(self, length: int) -> Optional["LengthSplitter"]:
        """Return the splitter for both halves, or ``None`` to stop here."""

        if self.splits == 0 or length // 2 < self.min_len:
            return None
        return LengthSplitter(min_len=self.min_len, splits=self.splits // 2)


def _partition(
    length: int,
    producer: Producer,
    consumer: Consumer,
    splitter: LengthSplitter,
    leaves: list,
) -> None:
    child = splitter.try_split(length)
    if child is None:
        leaves.append((producer, consumer))
        return

    mid = length // 2
    left_producer, right_producer = producer.split_at(mid)
    left_consumer, right_consumer = consumer.split_at(mid)
    _partition(mid, left_producer, left_consumer, child, leaves)
    _partition(length - mid, right_producer, right_consumer, child, leaves)


def _consume(producer: Producer, consumer: Consumer):
    return consumer.consume_iter(producer.into_iter())


def bridge_producer_consumer(
    length: int,
    producer: Producer,
    consumer: Consumer,
    *,
    min_len: Optional[int] = None,
    max_workers: Optional[int] = None,
    executor: Optional[Executor] = None,
):
    """Split ``producer``/``consumer`` into leaves, run them and reduce in order.

    Args:
        length: Exact length of ``producer``.
        producer: Splittable item source.
        consumer: Consumer matching ``producer``; split alongside it.
        min_len: Smallest leaf length worth splitting off (see ``resolve_min_len``).
        max_workers: Worker count; the initial split budget is one less.
        executor: Optional caller-owned executor. A ``ThreadPoolExecutor`` with
            ``max_workers`` threads is created and shut down otherwise.

    Returns:
        The reduced result of all leaves.
    """

    workers = resolve_max_workers(max_workers)
    splitter = LengthSplitter(min_len=resolve_min_len(min_len), splits=workers - 1)

    leaves: list = []
    _partition(length, producer, consumer, splitter, leaves)
    LOGGER.debug(
        "bridge: length=%s workers=%s min_len=%s leaves=%s",
        length,
        workers,
        splitter.min_len,
        [len(p) for p, _ in leaves],
    )

    if len(leaves) == 1:
        leaf_producer, leaf_consumer = leaves[0]
        return _consume(leaf_producer, leaf_consumer)

    if executor is not None:
        futures = [executor.submit(_consume, p, c) for p, c in leaves]
        results = [future.result() for future in futures]
    else:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [pool.submit(_consume, p, c) for p, c in leaves]
            results = [future.result() for future in futures]

    reducer = leaves[0][1]
    return functools.reduce(reducer.reduce, results)


def bridge(par_iter, consumer: Consumer, **kwargs):
    """Drive an indexed parallel iterator into ``consumer``.

    ``par_iter`` must provide ``len()`` and ``with_producer(callback)``.
    """

    length = par_iter.len()

    def _callback(producer: Producer):
        return bridge_producer_consumer(length, producer, consumer, **kwargs)

    return par_iter.with_producer(_callback)
