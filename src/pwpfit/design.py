"""Least-squares design matrices.

For a basis p(x) = [p_1(x), ..., p_r(x)] and k samples the objective is

    || W C q - W z ||^2,    C[j, :] = p(x_j),

with W the diagonal weight matrix. Rows whose target is NaN are removed
before solving; inf targets and non-finite inputs raise NonFiniteSample.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np

from .basis import MonomialBasis
from .data import prepare_samples
from .errors import DimensionMismatch, NonFiniteSample


@dataclass(frozen=True)
class DesignSystem:
    C: np.ndarray  # (k', r)
    d: np.ndarray  # (k',)
    kept: np.ndarray  # (k,) bool mask of rows that survived NaN-dropping

    @property
    def nrows(self) -> int:
        return int(self.C.shape[0])

    @property
    def ncols(self) -> int:
        return int(self.C.shape[1])

    @property
    def n_dropped(self) -> int:
        return int(self.kept.size - np.count_nonzero(self.kept))


def design_matrix(
    basis: MonomialBasis, x: Any, z: Any, weights: Any = None
) -> DesignSystem:
    """Evaluate `basis` at every row of x and scale rows by the weights."""
    s = prepare_samples(x, z, weights)
    if s.nvars != basis.nvars:
        raise DimensionMismatch(
            f"Inputs have {s.nvars} column(s) but the basis has {basis.nvars} variable(s)."
        )

    kept = ~np.isnan(s.z)
    if not np.any(kept):
        raise DimensionMismatch("No samples left after dropping NaN targets.")

    bad_x = kept & ~np.all(np.isfinite(s.x), axis=1)
    bad_z = np.isinf(s.z)
    if np.any(bad_x) or np.any(bad_z):
        rows = tuple(int(i) for i in np.flatnonzero(bad_x | bad_z))
        what = " and ".join(
            part
            for part, hit in (("inputs", np.any(bad_x)), ("targets", np.any(bad_z)))
            if hit
        )
        raise NonFiniteSample(
            f"Non-finite {what} in sample row(s) {list(rows)}; only NaN targets are dropped.",
            rows=rows,
        )

    C = basis(s.x[kept])
    d = s.z[kept]
    w = s.w[kept]
    return DesignSystem(C=w[:, None] * C, d=w * d, kept=kept)


def block_diagonal(systems: Sequence[DesignSystem]) -> DesignSystem:
    """Stack independent systems over the concatenated coefficient vector."""
    if not systems:
        raise ValueError("block_diagonal requires at least one system.")
    rows = sum(s.nrows for s in systems)
    cols = sum(s.ncols for s in systems)
    C = np.zeros((rows, cols), dtype=float)
    i = j = 0
    for s in systems:
        C[i : i + s.nrows, j : j + s.ncols] = s.C
        i += s.nrows
        j += s.ncols
    d = np.concatenate([s.d for s in systems])
    kept = np.concatenate([s.kept for s in systems])
    return DesignSystem(C=C, d=d, kept=kept)
