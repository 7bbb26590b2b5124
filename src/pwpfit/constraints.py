"""Linear equality constraints on (stacked) coefficient vectors.

Zero constraint
---------------
Let J be the axes with y0_j = 0. We want f = 0 wherever x_j = 0 for every j
in J at once, for all values of the other variables. A term vanishes there
exactly when it contains at least one x_j with j in J, so every term that
does NOT vanish at y0 must have a zero coefficient. With a single marked
axis this is the whole hyperplane x_j = 0. Axes that are not constrained are
marked FREE (= 1), which never makes a term vanish.

Continuity constraint
---------------------
For pieces q_a, q_b on the same basis and a split x1 = x0 we want

    f_a(x0, x2, ..., xm) = f_b(x0, x2, ..., xm)   for all x2, ..., xm.

Collecting terms by their exponents (e2, ..., em) on the non-split variables,
both sides are polynomials in x2..xm whose coefficients must agree, giving
one row per group:

    sum_{i in g} x0**e1_i * (qa_i - qb_i) = 0.

For m = 1 there is a single group and the row is [p(x0), -p(x0)].
Matching derivatives in x1 up to order s replaces x0**e1 by
e1!/(e1-j)! * x0**(e1-j) for j = 1..s.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple
from warnings import warn

import numpy as np

from .basis import MonomialBasis, default_labels
from .errors import DimensionMismatch, UnderconstrainedSplit
from .util import frozen_array

FREE = 1.0


@dataclass(frozen=True)
class EqualityConstraint:
    """A @ q == b, one label per row."""

    A: np.ndarray  # (c, n)
    b: np.ndarray  # (c,)
    labels: Tuple[str, ...] = ()

    @staticmethod
    def empty(ncols: int) -> "EqualityConstraint":
        return EqualityConstraint(
            A=frozen_array(np.zeros((0, int(ncols)))),
            b=frozen_array(np.zeros(0)),
            labels=(),
        )

    @property
    def nrows(self) -> int:
        return int(self.A.shape[0])

    @property
    def ncols(self) -> int:
        return int(self.A.shape[1])

    @property
    def is_empty(self) -> bool:
        return self.nrows == 0

    def residual(self, q: np.ndarray) -> np.ndarray:
        return self.A @ np.asarray(q, dtype=float) - self.b


def stack(*constraints: EqualityConstraint) -> EqualityConstraint:
    """Concatenate constraints over the same coefficient vector."""
    if not constraints:
        raise ValueError("stack requires at least one constraint.")
    ncols = {c.ncols for c in constraints}
    if len(ncols) != 1:
        raise DimensionMismatch(
            f"Cannot stack constraints over different column counts {sorted(ncols)}."
        )
    labels: Tuple[str, ...] = ()
    for c in constraints:
        labels += tuple(c.labels)
    return EqualityConstraint(
        A=frozen_array(np.vstack([c.A for c in constraints])),
        b=frozen_array(np.concatenate([c.b for c in constraints])),
        labels=labels,
    )


def normalize_zero_point(y0: Any, m: int) -> Optional[np.ndarray]:
    """Left-pad y0 with FREE up to m entries; None if no constraint applies."""
    if y0 is None:
        return None
    y = np.atleast_1d(np.asarray(y0, dtype=float)).reshape(-1)
    if y.size == 0 or np.all(np.isnan(y)):
        return None
    if y.size > m:
        raise DimensionMismatch(
            f"Zero point has {y.size} entries but the basis has {m} variable(s)."
        )
    if y.size < m:
        y = np.concatenate([np.full(m - y.size, FREE), y])
    return np.where(np.isnan(y), FREE, y)


def zero_constraint(
    basis: MonomialBasis,
    y0: Any,
    *,
    pieces: int = 1,
    labels: Optional[Sequence[str]] = None,
) -> EqualityConstraint:
    """Force f = 0 where all axes j with y0_j == 0 are zero together.

    With one marked axis that is the hyperplane x_j = 0; with several, only
    their common intersection. For piece-wise fits the same rows are applied
    to each piece.
    """
    r = basis.size
    y = normalize_zero_point(y0, basis.nvars)
    if y is None:
        return EqualityConstraint.empty(pieces * r)

    if not np.any(y == 0):
        warn(
            f"Zero point {y.tolist()} has no zero component; no zero constraint applied.",
            UserWarning,
            stacklevel=2,
        )
        return EqualityConstraint.empty(pieces * r)

    labels = default_labels(basis.nvars) if labels is None else tuple(labels)
    zero_axes = ",".join(lab for lab, v in zip(labels, y) if v == 0)
    names = basis.term_names(labels)

    pY = basis(y.reshape(1, -1))[0]
    idx = np.flatnonzero(pY != 0)
    eye = np.eye(r)

    blocks = []
    row_labels = []
    for k in range(pieces):
        A = np.zeros((idx.size, pieces * r))
        A[:, k * r : (k + 1) * r] = eye[idx]
        blocks.append(A)
        tag = f"piece {k}, " if pieces > 1 else ""
        row_labels.extend(f"zero[{zero_axes}] ({tag}{names[i]})" for i in idx)

    A = np.vstack(blocks)
    return EqualityConstraint(
        A=frozen_array(A),
        b=frozen_array(np.zeros(A.shape[0])),
        labels=tuple(row_labels),
    )


def continuity_constraint(
    basis: MonomialBasis,
    x0: float,
    *,
    smoothness: int = 0,
    labels: Optional[Sequence[str]] = None,
) -> EqualityConstraint:
    """Rows equating two pieces (and their x1-derivatives) along x1 = x0."""
    if basis.degree == 0:
        raise UnderconstrainedSplit(
            "Continuity at a split needs degree >= 1; a constant basis is "
            "continuous only if both pieces are equal."
        )
    smoothness = int(smoothness)
    if smoothness < 0:
        raise UnderconstrainedSplit(f"smoothness must be >= 0; got {smoothness}.")
    x0 = float(x0)
    if not np.isfinite(x0):
        raise UnderconstrainedSplit(f"Split value must be finite; got {x0}.")

    r = basis.size
    labels = default_labels(basis.nvars) if labels is None else tuple(labels)
    others = labels[1:]

    rows = []
    row_labels = []
    for order in range(smoothness + 1):
        comp = basis.split_component(x0, order=order, axis=0)
        for key, idx in basis.groups(axis=0):
            row = np.zeros(2 * r)
            row[idx] = comp[idx]
            row[r + idx] = -comp[idx]
            if not np.any(row):
                continue
            factor = "*".join(
                lab if e == 1 else f"{lab}^{e}" for lab, e in zip(others, key) if e
            )
            row_labels.append(f"continuity[d{order}; {factor or '1'}] at {labels[0]}={x0:g}")
            rows.append(row)

    A = np.vstack(rows) if rows else np.zeros((0, 2 * r))
    return EqualityConstraint(
        A=frozen_array(A),
        b=frozen_array(np.zeros(A.shape[0])),
        labels=tuple(row_labels),
    )
