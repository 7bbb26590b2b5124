"""Monomial basis for multivariate polynomials.

A basis is an ordered list of multi-indices (e1, ..., em). The fitted
function is

    f(x) = sum_i q_i * x1**e1_i * ... * xm**em_i

and every coefficient vector, design-matrix column and constraint row in the
package is indexed positionally by this order, so it must never change for a
given (degree, nvars, cross_terms).
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Literal, Optional, Sequence, Tuple

import numpy as np

from .errors import DimensionMismatch, InvalidDegree
from .util import falling_factorial, frozen_array

CrossTerms = Literal["total", "tensor", "none"]
CROSS_TERMS: Tuple[str, ...] = ("total", "tensor", "none")


def _keep(e: Tuple[int, ...], n: int, cross_terms: str) -> bool:
    if cross_terms == "total":
        return sum(e) <= n
    if cross_terms == "tensor":
        return True
    # "none": constant or a single non-zero exponent
    return sum(1 for ei in e if ei) <= 1


def _term_key(e: Tuple[int, ...]) -> Tuple[int, ...]:
    # graded; within a degree, higher powers of earlier variables first
    return (sum(e),) + tuple(-ei for ei in e)


@dataclass(frozen=True, eq=False)
class MonomialBasis:
    degree: int
    nvars: int
    cross_terms: str
    exponents: np.ndarray  # (r, m) int, read-only

    @property
    def size(self) -> int:
        return int(self.exponents.shape[0])

    def __len__(self) -> int:
        return self.size

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MonomialBasis):
            return NotImplemented
        return (self.degree, self.nvars, self.cross_terms) == (
            other.degree,
            other.nvars,
            other.cross_terms,
        )

    def __hash__(self) -> int:
        return hash((self.degree, self.nvars, self.cross_terms))

    def __repr__(self) -> str:
        return (
            f"MonomialBasis(degree={self.degree}, nvars={self.nvars}, "
            f"cross_terms={self.cross_terms!r}, size={self.size})"
        )

    @property
    def terms(self) -> Tuple[Tuple[int, ...], ...]:
        return tuple(tuple(int(v) for v in row) for row in self.exponents)

    def as_points(self, x) -> Tuple[np.ndarray, bool]:
        """Coerce `x` to a (k, m) array; the flag tells if a single point was given."""
        a = np.asarray(x, dtype=float)
        m = self.nvars
        if m == 1:
            if a.ndim == 0:
                return a.reshape(1, 1), True
            if a.ndim == 1:
                return a.reshape(-1, 1), False
            if a.ndim == 2 and a.shape[1] == 1:
                return a, False
        else:
            if a.ndim == 1 and a.shape[0] == m:
                return a.reshape(1, m), True
            if a.ndim == 2 and a.shape[1] == m:
                return a, False
        raise DimensionMismatch(
            f"Expected points with {m} coordinate(s); got array of shape {a.shape}."
        )

    def __call__(self, x) -> np.ndarray:
        """Evaluate every term at x.

        A single point gives shape (r,); k points give (k, r).
        """
        pts, single = self.as_points(x)
        vals = np.prod(pts[:, None, :] ** self.exponents[None, :, :], axis=2)
        return vals[0] if single else vals

    def split_component(self, x0: float, *, order: int = 0, axis: int = 0) -> np.ndarray:
        """d^order/dx_axis^order of the x_axis factor of each term, at x_axis = x0.

        The factors of all other variables are left out, so the row is the one
        multiplying those factors when the term is restricted to x_axis = x0.
        """
        if not 0 <= axis < self.nvars:
            raise DimensionMismatch(f"axis {axis} out of range for {self.nvars} variables.")
        e = self.exponents[:, axis]
        power = np.clip(e - order, 0, None)
        return falling_factorial(e, order) * float(x0) ** power

    def groups(self, axis: int = 0) -> Tuple[Tuple[Tuple[int, ...], np.ndarray], ...]:
        """Group term indices by their exponents on every variable except `axis`.

        Groups are returned in order of first appearance in the basis.
        """
        rest = np.delete(self.exponents, axis, axis=1)
        seen: dict = {}
        for i, row in enumerate(rest):
            seen.setdefault(tuple(int(v) for v in row), []).append(i)
        return tuple((k, np.asarray(v, dtype=int)) for k, v in seen.items())

    def term_names(self, labels: Optional[Sequence[str]] = None) -> Tuple[str, ...]:
        """Readable names such as ``1``, ``x1``, ``x1^2*x2``."""
        labels = default_labels(self.nvars) if labels is None else tuple(labels)
        if len(labels) != self.nvars:
            raise DimensionMismatch(
                f"Need {self.nvars} variable labels; got {len(labels)}."
            )
        names = []
        for row in self.terms:
            parts = []
            for lab, e in zip(labels, row):
                if e == 1:
                    parts.append(lab)
                elif e > 1:
                    parts.append(f"{lab}^{e}")
            names.append("*".join(parts) if parts else "1")
        return tuple(names)


def default_labels(m: int) -> Tuple[str, ...]:
    if m == 1:
        return ("x",)
    return tuple(f"x{i + 1}" for i in range(m))


def basis_size(n: int, m: int, cross_terms: str = "total") -> int:
    """Closed-form number of terms for each cross-term policy."""
    from math import comb

    if cross_terms == "total":
        return comb(n + m, m)
    if cross_terms == "tensor":
        return (n + 1) ** m
    return 1 + n * m


def monomials(n: int, m: int = 1, cross_terms: CrossTerms = "total") -> MonomialBasis:
    """Build the monomial basis of degree `n` in `m` variables.

    cross_terms:
    - "total": every product with total degree <= n
    - "tensor": every product with each exponent <= n
    - "none": the constant plus pure powers x_i**d, d <= n
    """
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)):
        raise InvalidDegree(f"degree must be an integer; got {n!r}.")
    if isinstance(m, bool) or not isinstance(m, (int, np.integer)):
        raise InvalidDegree(f"number of variables must be an integer; got {m!r}.")
    n = int(n)
    m = int(m)
    if n < 0:
        raise InvalidDegree(f"degree must be >= 0; got {n}.")
    if m < 1:
        raise InvalidDegree(f"number of variables must be >= 1; got {m}.")
    if cross_terms not in CROSS_TERMS:
        raise InvalidDegree(
            f"Unknown cross_terms policy {cross_terms!r}. Available: {CROSS_TERMS}"
        )

    terms = [
        e
        for e in itertools.product(range(n + 1), repeat=m)
        if _keep(e, n, cross_terms)
    ]
    terms.sort(key=_term_key)
    exps = frozen_array(np.asarray(terms, dtype=int).reshape(len(terms), m), dtype=int)
    return MonomialBasis(degree=n, nvars=m, cross_terms=str(cross_terms), exponents=exps)
