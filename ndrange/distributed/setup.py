"""Process-group lifecycle for range traversal and rank-ordered merging."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional

import torch
import torch.distributed as dist

from .backend import ProcessEnv

LOGGER = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = timedelta(minutes=2)


def init_distributed(
    env: ProcessEnv,
    *,
    backend: str,
    init_method: Optional[str] = None,
    timeout: Optional[timedelta] = None,
) -> bool:
    """Join the default process group for ``env``.

    Returns ``False`` without touching torch.distributed for a single-process
    layout or when a group already exists, ``True`` once a new group is up.
    """

    if not env.is_distributed:
        LOGGER.debug("[rank=%s] single process, no process group needed.", env.rank)
        return False
    if dist.is_initialized():
        LOGGER.debug("[rank=%s] process group already initialized.", env.rank)
        return False

    kwargs = {
        "backend": backend,
        "rank": env.rank,
        "world_size": env.world_size,
        "timeout": timeout or _DEFAULT_TIMEOUT,
    }
    if init_method:
        kwargs["init_method"] = init_method

    LOGGER.info(
        "[rank=%s] joining process group backend=%s world_size=%s local_rank=%s",
        env.rank,
        backend,
        env.world_size,
        env.local_rank,
    )
    dist.init_process_group(**kwargs)
    return True


def finalize_distributed() -> None:
    if not dist.is_initialized():
        return
    LOGGER.debug("[rank=%s] leaving process group.", dist.get_rank())
    dist.destroy_process_group()


def gather_in_rank_order(local: torch.Tensor) -> torch.Tensor:
    """Concatenate every rank's ``local`` rows in rank order.

    Pieces may have different lengths, so they travel as objects rather than
    through a fixed-size ``all_gather``. Without a process group the local
    tensor is returned as is.
    """

    if not dist.is_initialized() or dist.get_world_size() == 1:
        return local

    gathered: list[Optional[torch.Tensor]] = [None] * dist.get_world_size()
    dist.all_gather_object(gathered, local.cpu())
    LOGGER.debug("Gathered piece lengths: %s", [len(t) for t in gathered])
    return torch.cat(gathered, dim=0)
