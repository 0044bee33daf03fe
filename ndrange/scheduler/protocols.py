"""Producer / consumer protocols used by the order-preserving bridge.

A producer is a splittable, exact-length source of items; a consumer turns an
iterator of items into a result and knows how to combine the results of two
adjacent pieces. Splitting both at the same index and reducing left before
right keeps the combined result in the original item order.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Iterator
from typing import Protocol, TypeVar

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)
T_contra = TypeVar("T_contra", contravariant=True)
R = TypeVar("R")


class Producer(Protocol[T_co]):
    @abstractmethod
    def __len__(self) -> int:
        """Exact number of items this producer will yield."""
        ...

    @abstractmethod
    def split_at(self, index: int) -> tuple["Producer[T_co]", "Producer[T_co]"]:
        """Split into producers of items ``[0, index)`` and ``[index, len)``."""
        ...

    @abstractmethod
    def into_iter(self) -> Iterator[T_co]:
        ...


class Consumer(Protocol[T_contra, R]):
    @abstractmethod
    def split_at(self, index: int) -> tuple["Consumer[T_contra, R]", "Consumer[T_contra, R]"]:
        """Split into consumers for the left and right halves of the input."""
        ...

    @abstractmethod
    def consume_iter(self, iterator: Iterator[T_contra]) -> R:
        ...

    @abstractmethod
    def reduce(self, left: R, right: R) -> R:
        """Combine the results of two adjacent pieces, left first."""
        ...
