"""Worker-count and chunk-size resolution for the bridge."""

from __future__ import annotations

import os
from typing import Optional

_MAX_WORKERS_ENV_VAR = "NDRANGE_MAX_WORKERS"
_MIN_LEN_ENV_VAR = "NDRANGE_MIN_LEN"


def _positive_int(value, name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}.") from exc
    if number <= 0:
        raise ValueError(f"{name} must be positive.")
    return number


def resolve_max_workers(preferred: Optional[int] = None) -> int:
    """Return the number of workers the bridge may use.

    Order of precedence:
    1. ``preferred`` argument if provided.
    2. ``NDRANGE_MAX_WORKERS`` env var.
    3. ``os.cpu_count()`` (1 if unknown).
    """

    if preferred is not None:
        return _positive_int(preferred, "max_workers")

    env_value = os.environ.get(_MAX_WORKERS_ENV_VAR, "").strip()
    if env_value:
        return _positive_int(env_value, _MAX_WORKERS_ENV_VAR)

    return os.cpu_count() or 1


def resolve_min_len(preferred: Optional[int] = None) -> int:
    """Return the smallest piece length the bridge will still split.

    Same precedence as ``resolve_max_workers`` with ``NDRANGE_MIN_LEN`` and a
    default of 1.
    """

    if preferred is not None:
        return _positive_int(preferred, "min_len")

    env_value = os.environ.get(_MIN_LEN_ENV_VAR, "").strip()
    if env_value:
        return _positive_int(env_value, _MIN_LEN_ENV_VAR)

    return 1
