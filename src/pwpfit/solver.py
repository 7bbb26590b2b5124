"""Constrained linear least squares.

Solves

    min ||C q - d||^2   subject to   A q == b,   sum(q) <= bound

The coefficient-sum bound is a numerical guard against divergent fits, not a
physical limit. Failing equality rows are reported by label.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from warnings import warn

import numpy as np

from .backends import get_backend
from .constraints import EqualityConstraint
from .errors import DimensionMismatch, IllConditioned


@dataclass(frozen=True)
class SolverOptions:
    """Solver configuration.

    Defaults: active-set algorithm, sum(q) <= 1e4, tolerance 1e-8.
    Set bound=None to drop the coefficient-sum inequality.
    """

    algorithm: str = "active-set"
    bound: Optional[float] = 1e4
    tol: float = 1e-8
    maxiter: int = 200


@dataclass(frozen=True)
class SolverResult:
    q: np.ndarray
    resnorm: float  # squared 2-norm of the residual
    success: bool = True
    message: str = ""
    stats: Dict[str, Any] = field(default_factory=dict)


def solve_lsq(
    C: Any,
    d: Any,
    constraint: Optional[EqualityConstraint] = None,
    options: Optional[SolverOptions] = None,
) -> SolverResult:
    """Solve the constrained least-squares problem and verify the answer."""
    options = SolverOptions() if options is None else options
    C = np.asarray(C, dtype=float)
    d = np.asarray(d, dtype=float).reshape(-1)
    if C.ndim != 2 or C.shape[0] != d.shape[0]:
        raise DimensionMismatch(
            f"Design matrix shape {C.shape} does not match target length {d.shape[0]}."
        )
    n = C.shape[1]
    if constraint is None:
        constraint = EqualityConstraint.empty(n)
    if constraint.ncols != n:
        raise DimensionMismatch(
            f"Constraint has {constraint.ncols} columns but the design matrix has {n}."
        )

    backend = get_backend(options.algorithm)
    tol = float(options.tol)
    h = None if options.bound is None else float(options.bound)
    g = None if h is None else np.ones(n)

    r = backend.solve(
        C=C,
        d=d,
        A=np.asarray(constraint.A, dtype=float),
        b=np.asarray(constraint.b, dtype=float),
        g=g,
        h=h,
        tol=tol,
        maxiter=int(options.maxiter),
    )
    q = np.asarray(r.q, dtype=float)

    if q.shape != (n,) or not np.all(np.isfinite(q)):
        raise IllConditioned(
            f"Solver {backend.name!r} returned non-finite coefficients ({r.message}).",
            constraint=None,
        )

    if not constraint.is_empty:
        viol = np.abs(constraint.residual(q))
        scale = max(
            1.0,
            float(np.max(np.abs(constraint.b))),
            float(np.max(np.sum(np.abs(constraint.A), axis=1))) * float(np.max(np.abs(q))),
        )
        worst = int(np.argmax(viol))
        if viol[worst] > tol * scale:
            label = constraint.labels[worst] if worst < len(constraint.labels) else f"row {worst}"
            raise IllConditioned(
                f"Equality constraint {label} violated by {viol[worst]:.3g} "
                f"(tolerance {tol * scale:.3g}); constraints may be inconsistent.",
                constraint=label,
                violation=float(viol[worst]),
            )

    if h is not None and g is not None:
        total = float(g @ q)
        if total > h + tol * max(1.0, abs(h)):
            raise IllConditioned(
                f"Coefficient bound sum(q) <= {h:g} cannot be met together with "
                f"the equality constraints (sum(q) = {total:.6g}).",
                constraint="bound",
                violation=total - h,
            )
        if r.stats.get("bound_active", False):
            warn(
                f"Coefficient bound sum(q) <= {h:g} is active; the fit may be distorted.",
                UserWarning,
                stacklevel=2,
            )

    if not r.success:
        warn(
            f"Solver {backend.name!r} did not report success: {r.message}. "
            "The fit is flagged as unreliable.",
            UserWarning,
            stacklevel=2,
        )

    res = C @ q - d
    stats = dict(r.stats)
    stats["n_constraints"] = constraint.nrows
    return SolverResult(
        q=q,
        resnorm=float(res @ res),
        success=bool(r.success),
        message=str(r.message),
        stats=stats,
    )
