from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol

import numpy as np


@dataclass(frozen=True)
class BackendResult:
    """Normalized result returned by any solver backend."""

    q: np.ndarray  # coefficients, shape (n,)
    success: bool = True
    message: str = ""
    stats: Dict[str, Any] = field(default_factory=dict)


class Backend(Protocol):
    """Backend protocol: solve one constrained least-squares problem.

    min ||C q - d||^2  s.t.  A q == b,  g q <= h
    """

    name: str

    def solve(
        self,
        *,
        C: np.ndarray,
        d: np.ndarray,
        A: np.ndarray,
        b: np.ndarray,
        g: Optional[np.ndarray],
        h: Optional[float],
        tol: float,
        maxiter: int,
    ) -> BackendResult: ...
