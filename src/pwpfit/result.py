from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from .basis import MonomialBasis
from .errors import DimensionMismatch


@dataclass(frozen=True)
class GoodnessOfFit:
    rmse: float  # sqrt of the residual norm
    resnorm: float  # squared 2-norm of the (weighted) residual
    n_samples: int
    n_dropped: int = 0


@dataclass(frozen=True, eq=False)
class FitResult:
    """Immutable record of a (piece-wise) polynomial fit.

    `coefficients` has one row per piece, ordered like `basis.terms`. For a
    piece-wise fit, piece 0 applies where x1 <= split and piece 1 elsewhere.
    """

    name: str
    basis: MonomialBasis
    coefficients: np.ndarray  # (pieces, r), read-only
    labels: Tuple[str, ...]
    gof: GoodnessOfFit
    split: Optional[float] = None
    timing: Dict[str, float] = field(default_factory=dict)
    success: bool = True
    message: str = ""
    stats: Dict[str, Any] = field(default_factory=dict)

    # ---- structure ----
    @property
    def degree(self) -> int:
        return self.basis.degree

    @property
    def nvars(self) -> int:
        return self.basis.nvars

    @property
    def pieces(self) -> int:
        return int(self.coefficients.shape[0])

    @property
    def is_piecewise(self) -> bool:
        return self.split is not None

    @property
    def rmse(self) -> float:
        return self.gof.rmse

    def coeffs(self, piece: int = 0) -> np.ndarray:
        """Coefficient vector of one piece (read-only view)."""
        return self.coefficients[piece]

    def terms(self, piece: int = 0) -> Tuple[Tuple[float, Tuple[int, ...]], ...]:
        """Ordered (coefficient, exponents) pairs for export collaborators."""
        return tuple(
            (float(c), e) for c, e in zip(self.coefficients[piece], self.basis.terms)
        )

    def term_names(self) -> Tuple[str, ...]:
        return self.basis.term_names(self.labels)

    # ---- evaluation ----
    def __call__(self, x: Any) -> Any:
        return self.eval(x)

    def eval(self, x: Any) -> Any:
        """Evaluate the fit at one point (returns float) or k points (returns (k,))."""
        pts, single = self.basis.as_points(x)
        P = self.basis(pts)
        y = P @ self.coefficients[0]
        if self.is_piecewise:
            upper = pts[:, 0] > float(self.split)
            if np.any(upper):
                y = np.where(upper, P @ self.coefficients[1], y)
        return float(y[0]) if single else y

    def piece(self, i: int) -> Callable[[Any], Any]:
        """Return a callable evaluating piece `i` everywhere (no dispatch)."""
        if not 0 <= i < self.pieces:
            raise IndexError(f"Fit {self.name!r} has {self.pieces} piece(s); got {i}.")
        c = self.coefficients[i]

        def f(x: Any) -> Any:
            pts, single = self.basis.as_points(x)
            y = self.basis(pts) @ c
            return float(y[0]) if single else y

        return f

    # ---- builders ----
    def with_labels(self, labels: Sequence[str]) -> "FitResult":
        labels = tuple(labels)
        if len(labels) != self.nvars:
            raise DimensionMismatch(
                f"Need {self.nvars} variable labels; got {len(labels)}."
            )
        return replace(self, labels=labels)

    def with_name(self, name: str) -> "FitResult":
        return replace(self, name=str(name))

    # ---- reporting ----
    def summary(self, digits: int = 4) -> str:
        """Return a human-readable summary string for the fit."""
        head = (
            f"FitResult(name={self.name!r}, degree={self.degree}, "
            f"nvars={self.nvars}, terms={self.basis.size}"
        )
        if self.is_piecewise:
            head += f", split={self.split:.{digits}g}"
        lines = [head + ")"]
        lines.append(
            f"  {'rmse':>12s}: {self.gof.rmse:.{digits}g}  "
            f"(n={self.gof.n_samples}, dropped={self.gof.n_dropped})"
        )
        if not self.success:
            lines.append(f"  {'status':>12s}: unreliable ({self.message})")

        names = self.term_names()
        if self.pieces == 1:
            for name, c in zip(names, self.coefficients[0]):
                lines.append(f"  {name:>12s}: {c:.{digits}g}")
            return "\n".join(lines)

        header = f"  {'term':>12s} " + " ".join(f"{f'piece {i}':>14s}" for i in range(self.pieces))
        lines.append(header)
        lines.append("  " + "-" * (len(header) - 2))
        for j, name in enumerate(names):
            row = " ".join(f"{float(self.coefficients[i, j]):>14.{digits}g}" for i in range(self.pieces))
            lines.append(f"  {name:>12s} {row}")
        return "\n".join(lines)


class FitCollection:
    """Append-only, order-preserving group of fits sharing variable labels.

    Indexed by position or by fit name, e.g. one fit per aerodynamic
    coefficient.
    """

    def __init__(
        self,
        fits: Iterable[FitResult] = (),
        *,
        labels: Optional[Sequence[str]] = None,
    ) -> None:
        self._fits: List[FitResult] = []
        self._labels: Optional[Tuple[str, ...]] = None if labels is None else tuple(labels)
        for f in fits:
            self.append(f)

    @property
    def labels(self) -> Optional[Tuple[str, ...]]:
        return self._labels

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self._fits)

    def append(self, fit: FitResult) -> None:
        if not isinstance(fit, FitResult):
            raise TypeError(f"FitCollection holds FitResult objects; got {type(fit).__name__}.")
        if self._labels is None:
            self._labels = tuple(fit.labels)
        elif tuple(fit.labels) != self._labels:
            raise DimensionMismatch(
                f"Fit {fit.name!r} has labels {fit.labels} but the collection uses {self._labels}."
            )
        self._fits.append(fit)

    def extend(self, fits: Iterable[FitResult]) -> None:
        for f in fits:
            self.append(f)

    def __len__(self) -> int:
        return len(self._fits)

    def __iter__(self) -> Iterator[FitResult]:
        return iter(tuple(self._fits))

    def __getitem__(self, key: Union[int, str]) -> FitResult:
        if isinstance(key, str):
            for f in self._fits:
                if f.name == key:
                    return f
            raise KeyError(key)
        return self._fits[key]

    def __contains__(self, name: object) -> bool:
        return any(f.name == name for f in self._fits)

    def __repr__(self) -> str:
        return f"FitCollection(names={self.names}, labels={self._labels})"

    def summary(self, digits: int = 4) -> str:
        return "\n\n".join(f.summary(digits=digits) for f in self._fits)
