"""Tests for tensor views of range positions."""

import pytest
import torch

from ndrange.core.assignment import assign_range
from ndrange.core.parallel import NdRangeProducer
from ndrange.core.ranges import NdRange, Range1, Range2, Range3
from ndrange.core.state import IterState
from ndrange.tensors.coords import coordinate_tensor, positions_at


class TestCoordinateTensor:
    """Rows follow forward traversal order."""

    def test_matches_iteration(self):
        r = Range3((1, 2, 3), (5, 4, 6))
        out = coordinate_tensor(r)
        assert out.dtype == torch.int64
        assert out.shape == (24, 3)
        assert [tuple(row) for row in out.tolist()] == list(r)

    def test_rank_one_has_single_column(self):
        out = coordinate_tensor(Range1(3, 7))
        assert out.shape == (4, 1)
        assert out[:, 0].tolist() == [3, 4, 5, 6]

    def test_empty_range(self):
        out = coordinate_tensor(Range2((0, 0), (0, 4)))
        assert out.shape == (0, 2)

    def test_partially_consumed_iterator(self):
        r = Range2((7, 1), (9, 4))
        it = iter(r)
        next(it)
        it.next_back()
        out = coordinate_tensor(it)
        assert [tuple(row) for row in out.tolist()] == [(7, 2), (7, 3), (8, 1), (8, 2)]
        assert len(it) == 4

    def test_producer_piece(self):
        r = NdRange((0, 1, 2), (3, 4, 5))
        producer = assign_range(r, world_size=4, rank=2)
        expected = list(assign_range(r, world_size=4, rank=2).into_iter())
        assert [tuple(row) for row in coordinate_tensor(producer).tolist()] == expected

    def test_unsupported_source(self):
        with pytest.raises(TypeError):
            coordinate_tensor([(0, 0)])


class TestPositionsAt:
    """Batched lookup agrees with IterState.at."""

    def test_agrees_with_at(self):
        state = IterState.from_range(Range3((0, 3, 8), (4, 5, 12)))
        state.increment()
        indices = torch.tensor([0, 3, 15, 30, 31])
        out = positions_at(state, indices)
        assert [tuple(row) for row in out.tolist()] == [state.at(int(i)) for i in indices]

    def test_out_of_range(self):
        state = IterState.from_range(Range2((0, 0), (2, 2)))
        with pytest.raises(IndexError):
            positions_at(state, torch.tensor([5]))
        with pytest.raises(IndexError):
            positions_at(state, torch.tensor([-1]))

    def test_requires_one_dimension(self):
        state = IterState.from_range(Range2((0, 0), (2, 2)))
        with pytest.raises(ValueError):
            positions_at(state, torch.zeros((2, 2), dtype=torch.int64))


class TestConsumedState:
    """States handed off by split_at cannot be materialized."""

    def test_split_producer_rejected(self):
        producer = NdRangeProducer(IterState.from_range(Range2((0, 0), (3, 3))))
        left, right = producer.split_at(2)
        with pytest.raises(RuntimeError):
            coordinate_tensor(producer)
        assert [tuple(row) for row in coordinate_tensor(right).tolist()] == list(right.into_iter())

    def test_split_state_rejected_by_positions_at(self):
        state = IterState.from_range(Range2((0, 0), (3, 3)))
        state.split_at(4)
        with pytest.raises(RuntimeError):
            positions_at(state, torch.tensor([0]))
