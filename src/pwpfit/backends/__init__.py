"""Solver backend implementations + registry."""

from __future__ import annotations

from typing import Dict

from .active_set import ActiveSetBackend
from .common import Backend, BackendResult
from .scipy_slsqp import ScipySLSQPBackend

_BACKENDS: Dict[str, Backend] = {
    "active-set": ActiveSetBackend(),
    "slsqp": ScipySLSQPBackend(),
}


def get_backend(name: str) -> Backend:
    """Return a backend implementation by name."""
    try:
        return _BACKENDS[name]
    except KeyError as e:
        raise ValueError(
            f"Unknown solver algorithm {name!r}. Available: {tuple(_BACKENDS.keys())}"
        ) from e


AVAILABLE_BACKENDS = tuple(_BACKENDS.keys())

__all__ = ["AVAILABLE_BACKENDS", "Backend", "BackendResult", "get_backend"]
