from __future__ import annotations

from typing import Any, Dict, List, Optional

import numpy as np
from scipy.optimize import minimize

from .active_set import equality_lstsq
from .common import BackendResult


class ScipySLSQPBackend:
    name = "slsqp"

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
        """Solve with scipy.optimize.minimize(method="SLSQP").

        Seeded from the equality-constrained least-squares point, which is
        already optimal whenever the coefficient bound is inactive.
        """
        q0 = equality_lstsq(C, d, A, b)

        def objective(q: np.ndarray) -> float:
            r = C @ q - d
            return 0.5 * float(r @ r)

        def gradient(q: np.ndarray) -> np.ndarray:
            return C.T @ (C @ q - d)

        constraints: List[Dict[str, Any]] = []
        if A.shape[0]:
            constraints.append(
                {"type": "eq", "fun": lambda q: A @ q - b, "jac": lambda q: A}
            )
        if g is not None and h is not None and np.isfinite(h):
            constraints.append(
                {
                    "type": "ineq",
                    "fun": lambda q: np.array([float(h) - float(g @ q)]),
                    "jac": lambda q: -g[None, :],
                }
            )

        res = minimize(
            objective,
            q0,
            jac=gradient,
            method="SLSQP",
            constraints=constraints,
            options={"maxiter": int(maxiter), "ftol": float(tol)},
        )

        q = np.asarray(res.x, dtype=float)
        active = False
        if g is not None and h is not None and np.isfinite(h):
            active = abs(float(g @ q) - float(h)) <= tol * max(1.0, abs(float(h)))

        return BackendResult(
            q=q,
            success=bool(res.success),
            message=str(res.message),
            stats={"backend": self.name, "nit": int(getattr(res, "nit", 0)), "bound_active": active},
        )
