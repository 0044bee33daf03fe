"""Tests for partitioning ranges across ranks."""

import pytest

from ndrange.core.assignment import IndexSpan, assign_range, assign_span
from ndrange.core.ranges import Range1, Range3


class TestAssignSpan:
    """Test cases for span assignment across ranks."""

    def test_single_rank(self):
        """Single rank should handle every position."""
        result = assign_span(total=28, world_size=1, rank=0)
        assert result.start == 0
        assert result.end == 28

    def test_two_ranks_even_split(self):
        """Two ranks should split positions evenly."""
        result0 = assign_span(total=28, world_size=2, rank=0)
        result1 = assign_span(total=28, world_size=2, rank=1)

        assert result0.start == 0
        assert result0.end == 14
        assert result1.start == 14
        assert result1.end == 28

    def test_uneven_split_front_loads_remainder(self):
        """The first total % world_size ranks get one extra position."""
        counts = [assign_span(total=30, world_size=4, rank=r).count for r in range(4)]
        assert counts == [8, 8, 7, 7]

    def test_more_ranks_than_positions(self):
        """Surplus ranks receive empty spans."""
        spans = [assign_span(total=2, world_size=4, rank=r) for r in range(4)]
        assert [s.count for s in spans] == [1, 1, 0, 0]
        assert spans[3].start == 2

    def test_no_gaps(self):
        """All positions should be covered with no gaps."""
        world_size = 7
        total = 30
        covered = set()

        for rank in range(world_size):
            result = assign_span(total, world_size, rank)
            for index in result:
                assert index not in covered, f"Index {index} covered by multiple ranks"
                covered.add(index)

        assert covered == set(range(total)), "Not all positions covered"

    def test_invalid_total(self):
        """Should raise ValueError for a negative total."""
        with pytest.raises(ValueError):
            assign_span(total=-1, world_size=1, rank=0)

    def test_invalid_world_size(self):
        """Should raise ValueError for invalid world_size."""
        with pytest.raises(ValueError):
            assign_span(total=28, world_size=0, rank=0)

    def test_invalid_rank(self):
        """Should raise ValueError for invalid rank."""
        with pytest.raises(ValueError):
            assign_span(total=28, world_size=4, rank=4)
        with pytest.raises(ValueError):
            assign_span(total=28, world_size=4, rank=-1)


class TestIndexSpan:
    """Test cases for IndexSpan dataclass."""

    def test_count_property(self):
        """Count should return the number of positions."""
        assert IndexSpan(start=0, end=7).count == 7

    def test_iteration(self):
        """Should be iterable."""
        assert list(IndexSpan(start=5, end=10)) == [5, 6, 7, 8, 9]

    def test_invalid_span(self):
        """Should raise ValueError for invalid spans."""
        with pytest.raises(ValueError):
            IndexSpan(start=-1, end=5)
        with pytest.raises(ValueError):
            IndexSpan(start=10, end=5)


class TestAssignRange:
    """Rank pieces concatenate back to the full traversal."""

    @pytest.mark.parametrize("world_size", [1, 2, 3, 5, 32, 40])
    def test_pieces_concatenate(self, world_size):
        r = Range3((0, 3, 8), (4, 5, 12))
        merged = []
        for rank in range(world_size):
            producer = assign_range(r, world_size, rank)
            assert len(producer) == assign_span(len(r), world_size, rank).count
            merged.extend(producer.into_iter())
        assert merged == list(r)

    def test_piece_head(self):
        producer = assign_range(Range1(10, 20), world_size=2, rank=1)
        assert list(producer.into_iter()) == list(range(15, 20))
