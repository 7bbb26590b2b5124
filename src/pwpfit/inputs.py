from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

import numpy as np

from .data import grid_to_samples, prepare_samples
from .errors import DimensionMismatch


@dataclass(frozen=True)
class SampleSet:
    """Container for fit inputs plus labels.

    This is an optional convenience layer: the fitting functions still accept
    raw arrays. Inputs are stored normalized as x (k, m), z (k,), weights (k,).
    """

    x: np.ndarray
    z: np.ndarray
    weights: Optional[np.ndarray] = None

    variable_labels: Optional[Tuple[str, ...]] = None
    name: Optional[str] = None

    # Extra user metadata (copied onto FitResult.stats["meta"])
    meta: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_arrays(
        *,
        x: Any,
        z: Any,
        weights: Optional[Any] = None,
        variable_labels: Optional[Sequence[str]] = None,
        name: Optional[str] = None,
        meta: Optional[Mapping[str, Any]] = None,
    ) -> "SampleSet":
        """Create a SampleSet from row-aligned inputs and targets."""
        s = prepare_samples(x, z, weights)
        labels = None if variable_labels is None else tuple(variable_labels)
        if labels is not None and len(labels) != s.nvars:
            raise DimensionMismatch(
                f"Got {len(labels)} variable labels for {s.nvars} input columns."
            )
        return SampleSet(
            x=s.x,
            z=s.z,
            weights=None if weights is None else s.w,
            variable_labels=labels,
            name=name,
            meta=dict(meta or {}),
        )

    @staticmethod
    def from_grid(
        *,
        axes: Sequence[Any],
        values: Any,
        variable_labels: Optional[Sequence[str]] = None,
        name: Optional[str] = None,
        meta: Optional[Mapping[str, Any]] = None,
    ) -> "SampleSet":
        """Create a SampleSet from grid data (one axis per variable)."""
        x, z = grid_to_samples(axes, values)
        return SampleSet.from_arrays(
            x=x, z=z, variable_labels=variable_labels, name=name, meta=meta
        )

    @property
    def nrows(self) -> int:
        return int(self.z.shape[0])

    @property
    def nvars(self) -> int:
        return int(self.x.shape[1])

    def select(self, mask: Any) -> "SampleSet":
        """Return the subset of rows where `mask` is true."""
        mask = np.asarray(mask, dtype=bool)
        if mask.shape != (self.nrows,):
            raise DimensionMismatch(
                f"Row mask must have shape ({self.nrows},); got {mask.shape}."
            )
        return replace(
            self,
            x=self.x[mask],
            z=self.z[mask],
            weights=None if self.weights is None else self.weights[mask],
        )

    def split(self, threshold: float) -> Tuple["SampleSet", "SampleSet"]:
        """Split rows on the first variable: x1 <= threshold goes below."""
        below = self.x[:, 0] <= float(threshold)
        return self.select(below), self.select(~below)

    def with_labels(
        self,
        variable_labels: Optional[Sequence[str]] = None,
        *,
        name: Optional[str] = None,
    ) -> "SampleSet":
        """Return a copy with updated label fields."""
        labels = self.variable_labels
        if variable_labels is not None:
            labels = tuple(variable_labels)
            if len(labels) != self.nvars:
                raise DimensionMismatch(
                    f"Got {len(labels)} variable labels for {self.nvars} input columns."
                )
        return replace(
            self,
            variable_labels=labels,
            name=self.name if name is None else name,
        )

    def with_meta(self, **meta: Any) -> "SampleSet":
        """Return a copy with additional meta merged in."""
        merged = dict(self.meta)
        merged.update(meta)
        return replace(self, meta=merged)
