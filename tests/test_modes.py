"""Tests for the simulator and benchmark entrypoints in single-process mode."""

import json
import logging

import pytest
import torch

from ndrange.core.ranges import NdRange, Range2
from ndrange.modes import benchmark, simulator


@pytest.fixture
def single_process(monkeypatch):
    for name in ("RANK", "WORLD_SIZE", "LOCAL_RANK"):
        monkeypatch.delenv(name, raising=False)


class TestParseCoordinate:
    """CLI coordinate parsing."""

    def test_valid(self):
        assert simulator.parse_coordinate("1, 2,3") == (1, 2, 3)
        assert simulator.parse_coordinate("5") == (5,)

    def test_invalid(self):
        with pytest.raises(ValueError):
            simulator.parse_coordinate("")
        with pytest.raises(ValueError):
            simulator.parse_coordinate("1,x")


class TestSimulator:
    """Pieces merge back into sequential order."""

    def test_pieces_verify(self):
        r = NdRange((0, 1, 2), (3, 4, 6))
        merged = torch.cat([simulator.run_piece(r, 3, rank) for rank in range(3)], dim=0)
        assert simulator.verify(r, merged)

    def test_verify_detects_reordering(self):
        r = Range2((0, 0), (2, 2))
        merged = torch.cat([simulator.run_piece(r, 2, 1), simulator.run_piece(r, 2, 0)], dim=0)
        assert not simulator.verify(r, merged)

    def test_main_single_process(self, single_process, caplog):
        with caplog.at_level(logging.INFO):
            simulator.main(["--start", "0,0", "--end", "3,4"])
        assert "matches sequential order" in caplog.text


class TestBenchmark:
    """Benchmark results cover every strategy."""

    def test_run_benchmark(self):
        results = benchmark.run_benchmark(Range2((0, 0), (6, 7)), [1, 2], repeats=1, warmup=0)
        modes = [(row["mode"], row["workers"]) for row in results["results"]]
        assert modes == [("sequential", 1), ("bridge", 1), ("bridge", 2), ("tensor", 1)]
        assert all(row["positions"] == 42 for row in results["results"])

    def test_invalid_repeats(self):
        with pytest.raises(ValueError):
            benchmark.run_benchmark(Range2((0, 0), (2, 2)), [1], repeats=0)

    def test_main_prints_json(self, capsys):
        benchmark.main(["--start", "0,0", "--end", "4,4", "--workers", "1,2", "--repeats", "1"])
        line = [l for l in capsys.readouterr().out.splitlines() if l.startswith("BENCHMARK_JSON=")][0]
        payload = json.loads(line[len("BENCHMARK_JSON=") :])
        assert payload["positions"] == 16

    def test_default_repeats_rebuild_each_run(self):
        results = benchmark.run_benchmark(Range2((0, 0), (6, 7)), [2])
        assert results["repeats"] == 3
        assert results["warmup"] == 1
        assert [len(row["per_run_ms"]) for row in results["results"]] == [3, 3, 3]
