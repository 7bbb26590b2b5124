from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence, Tuple

import numpy as np

from .errors import DimensionMismatch


@dataclass(frozen=True)
class Samples:
    x: np.ndarray  # (k, m)
    z: np.ndarray  # (k,)
    w: np.ndarray  # (k,)

    @property
    def nrows(self) -> int:
        return int(self.z.shape[0])

    @property
    def nvars(self) -> int:
        return int(self.x.shape[1])


def as_inputs(x: Any) -> np.ndarray:
    """Normalize inputs into a (k, m) float array.

    Accepted forms:
    - 1D array of length k -> one variable
    - 2D array (k, m)
    - tuple of m equal-length 1D columns (a list is read as rows)
    """
    if isinstance(x, tuple) and x and all(np.ndim(xi) == 1 for xi in x):
        cols = [np.asarray(xi, dtype=float) for xi in x]
        lengths = {c.shape[0] for c in cols}
        if len(lengths) != 1:
            raise DimensionMismatch(
                f"Input columns must have equal length; got {sorted(lengths)}."
            )
        return np.column_stack(cols)

    a = np.asarray(x, dtype=float)
    if a.ndim == 1:
        return a.reshape(-1, 1)
    if a.ndim == 2:
        return a
    raise DimensionMismatch(f"Inputs must be 1D or 2D; got shape {a.shape}.")


def as_weights(w: Any, k: int) -> np.ndarray:
    """Broadcast scalar weights or check a weight vector against k rows."""
    if w is None:
        return np.ones(k, dtype=float)
    arr = np.asarray(w, dtype=float)
    if arr.shape == ():
        arr = np.full(k, float(arr))
    elif arr.ndim != 1 or arr.shape[0] != k:
        raise DimensionMismatch(
            f"weights must be scalar or have one entry per row ({k}); got shape {arr.shape}."
        )
    if not np.all(np.isfinite(arr)):
        raise ValueError("weights must be finite.")
    if np.any(arr < 0):
        raise ValueError("weights must be non-negative.")
    return arr


def prepare_samples(x: Any, z: Any, weights: Any = None) -> Samples:
    """Check row counts and return normalized (x, z, w) arrays."""
    X = as_inputs(x)
    Z = np.asarray(z, dtype=float)
    if Z.ndim == 2 and Z.shape[1] == 1:
        Z = Z[:, 0]
    if Z.ndim != 1:
        raise DimensionMismatch(f"Targets must be a 1D vector; got shape {Z.shape}.")
    if X.shape[0] != Z.shape[0]:
        raise DimensionMismatch(
            f"x and z must have the same number of rows; got {X.shape[0]} and {Z.shape[0]}."
        )
    W = as_weights(weights, Z.shape[0])
    return Samples(x=X, z=Z, w=W)


def grid_to_samples(axes: Sequence[Any], values: Any) -> Tuple[np.ndarray, np.ndarray]:
    """Flatten grid-structured data into (x, z) rows.

    `axes` holds one 1D coordinate array per variable and `values` has shape
    (len(axes[0]), ..., len(axes[-1])). The first variable varies slowest.
    """
    axes = [np.asarray(a, dtype=float).reshape(-1) for a in axes]
    if not axes:
        raise DimensionMismatch("grid_to_samples requires at least one axis.")
    V = np.asarray(values, dtype=float)
    shape = tuple(a.shape[0] for a in axes)
    if V.shape != shape:
        raise DimensionMismatch(
            f"Grid values have shape {V.shape} but axes imply {shape}."
        )
    mesh = np.meshgrid(*axes, indexing="ij")
    X = np.column_stack([g.reshape(-1) for g in mesh])
    return X, V.reshape(-1)
