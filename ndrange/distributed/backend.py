"""Backend and process-environment discovery for distributed modes."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

_SUPPORTED = {"nccl", "gloo"}
_DEFAULT_ENV_VAR = "NDRANGE_BACKEND"


@dataclass(frozen=True)
class ProcessEnv:
    """Rank layout of the current process as reported by torchrun."""

    rank: int
    world_size: int
    local_rank: int

    def __post_init__(self) -> None:
        if self.world_size <= 0:
            raise ValueError("world_size must be positive.")
        if not (0 <= self.rank < self.world_size):
            raise ValueError("rank must satisfy 0 <= rank < world_size.")

    @property
    def is_distributed(self) -> bool:
        return self.world_size > 1


def discover_process_env(default_rank: int = 0, default_world_size: int = 1) -> ProcessEnv:
    """Read ``RANK``/``WORLD_SIZE``/``LOCAL_RANK``, falling back to the defaults."""

    rank = int(os.environ.get("RANK", default_rank))
    world_size = int(os.environ.get("WORLD_SIZE", default_world_size))
    local_rank = int(os.environ.get("LOCAL_RANK", rank))
    return ProcessEnv(rank=rank, world_size=world_size, local_rank=local_rank)


def resolve_backend(preferred: Optional[str] = None) -> str:
    """Return the backend string to pass to ``init_process_group``.

    Order of precedence:
    1. ``preferred`` argument if provided.
    2. ``NDRANGE_BACKEND`` env var (override for debugging).
    3. "gloo"; range pieces are CPU objects, so nccl is opt-in only.
    """

    if preferred:
        backend = preferred.lower()
    else:
        backend = os.environ.get(_DEFAULT_ENV_VAR, "").lower()

    if backend:
        if backend not in _SUPPORTED:
            raise ValueError(f"Unsupported backend '{backend}'.")
        return backend

    return "gloo"
