"""Tests for backend/env discovery and single-process gathering."""

import pytest
import torch

from ndrange.distributed.backend import ProcessEnv, discover_process_env, resolve_backend
from ndrange.distributed.setup import finalize_distributed, gather_in_rank_order, init_distributed


class TestResolveBackend:
    """Argument > NDRANGE_BACKEND > gloo."""

    def test_default_is_gloo(self, monkeypatch):
        monkeypatch.delenv("NDRANGE_BACKEND", raising=False)
        assert resolve_backend() == "gloo"

    def test_preferred_wins(self, monkeypatch):
        monkeypatch.setenv("NDRANGE_BACKEND", "gloo")
        assert resolve_backend("NCCL") == "nccl"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("NDRANGE_BACKEND", "nccl")
        assert resolve_backend() == "nccl"

    def test_unsupported(self, monkeypatch):
        with pytest.raises(ValueError):
            resolve_backend("mpi")
        monkeypatch.setenv("NDRANGE_BACKEND", "ucc")
        with pytest.raises(ValueError):
            resolve_backend()


class TestProcessEnv:
    """torchrun variables with CLI fallbacks."""

    def test_defaults(self, monkeypatch):
        for name in ("RANK", "WORLD_SIZE", "LOCAL_RANK"):
            monkeypatch.delenv(name, raising=False)
        env = discover_process_env()
        assert env == ProcessEnv(rank=0, world_size=1, local_rank=0)
        assert not env.is_distributed

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("RANK", "3")
        monkeypatch.setenv("WORLD_SIZE", "4")
        monkeypatch.setenv("LOCAL_RANK", "1")
        env = discover_process_env()
        assert (env.rank, env.world_size, env.local_rank) == (3, 4, 1)
        assert env.is_distributed

    def test_invalid_layout(self):
        with pytest.raises(ValueError):
            ProcessEnv(rank=2, world_size=2, local_rank=0)
        with pytest.raises(ValueError):
            ProcessEnv(rank=0, world_size=0, local_rank=0)


class TestGather:
    """Without a process group gathering is the identity."""

    def test_local_passthrough(self):
        local = torch.arange(6).reshape(3, 2)
        assert gather_in_rank_order(local) is local

    def test_finalize_without_group(self):
        finalize_distributed()

    def test_single_process_skips_group(self):
        env = ProcessEnv(rank=0, world_size=1, local_rank=0)
        assert init_distributed(env, backend="gloo") is False
        assert not torch.distributed.is_initialized()
