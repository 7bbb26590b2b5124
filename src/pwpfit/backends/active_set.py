from __future__ import annotations

from typing import Optional

import numpy as np
from scipy.linalg import lstsq, null_space

from .common import BackendResult


def equality_lstsq(
    C: np.ndarray, d: np.ndarray, A: np.ndarray, b: np.ndarray
) -> np.ndarray:
    """Minimum-norm solution of min ||C q - d|| subject to A q == b.

    Null-space method: q = q_p + N z with A q_p = b (least squares if the
    rows are inconsistent) and N spanning ker(A).
    """
    n = C.shape[1]
    if A.shape[0] == 0:
        q_p = np.zeros(n)
        N = np.eye(n)
    else:
        q_p = lstsq(A, b)[0]
        N = null_space(A)

    if N.shape[1] == 0 or C.shape[0] == 0:
        return q_p
    z = lstsq(C @ N, d - C @ q_p)[0]
    return q_p + N @ z


class ActiveSetBackend:
    name = "active-set"

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
    ) -> BackendResult:
        """Active set over the single inequality g q <= h.

        The objective is convex, so if the equality-only minimiser violates
        the inequality then some minimiser lies on g q == h; solving again
        with that row added as an equality gives it.
        """
        q = equality_lstsq(C, d, A, b)
        active = False

        if g is not None and h is not None and np.isfinite(h):
            slack = float(g @ q) - float(h)
            if slack > tol * max(1.0, abs(float(h))):
                A2 = np.vstack([A, g[None, :]])
                b2 = np.concatenate([b, [float(h)]])
                q = equality_lstsq(C, d, A2, b2)
                active = True

        return BackendResult(
            q=np.asarray(q, dtype=float),
            success=bool(np.all(np.isfinite(q))),
            message="ok",
            stats={"backend": self.name, "bound_active": active},
        )
