"""Fitting entry points.

`fit_polynomial` fits one polynomial f(x1, ..., xm) of degree n minimizing

    sum_j w_j^2 * |f(x_j) - z_j|^2,

optionally constrained to vanish where all axes marked by a zero point are
zero (the hyperplane x_j = 0 when only one axis is marked).

`fit_piecewise_polynomial` fits

    f(x) = fa(x) if x1 <= x0 else fb(x)

on two sample sets, with fa and fb sharing the basis and agreeing along the
whole hyperplane x1 = x0. Without a split value the pieces are fitted
independently and x0 is located where they intersect.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Sequence, Tuple, Union
from warnings import warn

import numpy as np

from .basis import CrossTerms, MonomialBasis, default_labels, monomials
from .breakpoint import RootFinder, find_breakpoint
from .constraints import continuity_constraint, stack, zero_constraint
from .data import as_inputs, as_weights, prepare_samples
from .design import block_diagonal, design_matrix
from .errors import DimensionMismatch, UnderconstrainedSplit
from .inputs import SampleSet
from .result import FitResult, GoodnessOfFit
from .solver import SolverOptions, solve_lsq
from .util import cputime, frozen_array


@dataclass(frozen=True)
class FitOptions:
    """Options shared by the fitting entry points.

    Every field can also be passed to the fit functions as a keyword
    override, e.g. ``fit_polynomial(x, z, 3, cross_terms="tensor")``.
    """

    zero_point: Optional[Any] = None
    weights: Optional[Any] = None
    name: Optional[str] = None
    variable_labels: Optional[Sequence[str]] = None
    cross_terms: CrossTerms = "total"

    # piece-wise only
    smoothness: int = 0
    split_guess: Optional[float] = None
    bracket: Optional[Tuple[float, float]] = None
    root_method: Union[str, RootFinder, None] = None
    breakpoint_slice: Optional[Any] = None

    solver: SolverOptions = field(default_factory=SolverOptions)


def _resolve_options(options: Optional[FitOptions], overrides: Dict[str, Any]) -> FitOptions:
    opts = FitOptions() if options is None else options
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides:
        opts = replace(opts, **overrides)
    return opts


def _labels_for(opts: FitOptions, m: int) -> Tuple[str, ...]:
    if opts.variable_labels is None:
        return default_labels(m)
    labels = tuple(str(v) for v in opts.variable_labels)
    if len(labels) != m:
        raise DimensionMismatch(f"Got {len(labels)} variable labels for {m} input columns.")
    return labels


def _default_name(n: int, m: int) -> str:
    return "poly" + str(n) * m


def _from_sample_set(samples: SampleSet, opts: FitOptions) -> FitOptions:
    """Fill unset options from a SampleSet's weights/labels/name."""
    fill: Dict[str, Any] = {}
    if opts.weights is None and samples.weights is not None:
        fill["weights"] = samples.weights
    if opts.variable_labels is None and samples.variable_labels is not None:
        fill["variable_labels"] = samples.variable_labels
    if opts.name is None and samples.name is not None:
        fill["name"] = samples.name
    return replace(opts, **fill) if fill else opts


def fit_polynomial(
    x: Any,
    z: Any = None,
    degree: Optional[int] = None,
    zero_point: Optional[Any] = None,
    weights: Optional[Any] = None,
    *,
    options: Optional[FitOptions] = None,
    **overrides: Any,
) -> FitResult:
    """Fit a multivariate polynomial of degree `degree` to (x, z).

    x is a 1D array (one variable), a (k, m) array, a tuple of m columns, or a
    SampleSet (then z must be omitted). Rows with NaN targets are dropped.

    zero_point: one value per variable (or fewer, left-padded with FREE = 1);
    the fit is 0 wherever every x_j with zero_point[j] == 0 is 0 at the same
    time (the single hyperplane x_j = 0 when only one axis is marked). NaN or
    None means no zero constraint.
    weights: scalar (no weighting) or one entry per row.
    """
    if degree is None:
        raise TypeError("fit_polynomial() missing required argument: degree")
    opts = _resolve_options(options, dict(overrides, zero_point=zero_point, weights=weights))

    meta: Dict[str, Any] = {}
    if isinstance(x, SampleSet):
        if z is not None:
            raise TypeError("If x is a SampleSet, do not also pass z.")
        opts = _from_sample_set(x, opts)
        meta = dict(x.meta)
        x, z = x.x, x.z
    elif z is None:
        raise TypeError("fit_polynomial() missing required argument: z")

    timing: Dict[str, float] = {}
    with cputime(timing, "all"):
        samples = prepare_samples(x, z, opts.weights)
        m = samples.nvars
        basis = monomials(degree, m, opts.cross_terms)
        labels = _labels_for(opts, m)

        with cputime(timing, "zero"):
            Aeq = zero_constraint(basis, opts.zero_point, labels=labels)

        with cputime(timing, "obj"):
            system = design_matrix(basis, samples.x, samples.z, samples.w)

        with cputime(timing, "lsq"):
            sol = solve_lsq(system.C, system.d, Aeq, opts.solver)

    return FitResult(
        name=opts.name or _default_name(basis.degree, m),
        basis=basis,
        coefficients=frozen_array(sol.q.reshape(1, -1)),
        labels=labels,
        gof=GoodnessOfFit(
            rmse=float(np.sqrt(sol.resnorm)),
            resnorm=sol.resnorm,
            n_samples=system.nrows,
            n_dropped=system.n_dropped,
        ),
        split=None,
        timing=timing,
        success=sol.success,
        message=sol.message,
        stats={"solver": sol.stats, "constraints": Aeq.labels, "meta": meta},
    )


def _piece_on_slice(
    basis: MonomialBasis, q: np.ndarray, rest: np.ndarray
) -> Any:
    """f(t) = piece evaluated at (t, rest...)."""

    def f(t: float) -> float:
        pt = np.concatenate([[float(t)], rest]).reshape(1, -1)
        return float(basis(pt)[0] @ q)

    return f


def fit_piecewise_polynomial(
    x_below: Any,
    x_above: Any,
    z: Any = None,
    degree: Optional[int] = None,
    split: Optional[float] = None,
    zero_axes: Optional[Any] = None,
    *,
    options: Optional[FitOptions] = None,
    **overrides: Any,
) -> Tuple[FitResult, float]:
    """Fit two polynomial pieces joined continuously at x1 = split.

    z holds the targets of the lower piece followed by those of the upper
    piece. If x_below and x_above are SampleSets, z must be omitted.

    split: where the pieces meet; None (or NaN) fits the pieces independently
    and searches for the intersection starting from `split_guess` (default:
    the largest x1 of the lower piece).
    zero_axes: zero point applied to both pieces (see fit_polynomial).
    smoothness (option): also match x1-derivatives up to this order.

    Returns (fit, split).
    """
    if degree is None:
        raise TypeError("fit_piecewise_polynomial() missing required argument: degree")
    opts = _resolve_options(options, dict(overrides, zero_point=zero_axes))

    meta: Dict[str, Any] = {}
    if isinstance(x_below, SampleSet) or isinstance(x_above, SampleSet):
        if not (isinstance(x_below, SampleSet) and isinstance(x_above, SampleSet)):
            raise TypeError("Pass SampleSets for both pieces or for neither.")
        if z is not None:
            raise TypeError("If the pieces are SampleSets, do not also pass z.")
        lower, upper = x_below, x_above
        if opts.weights is None and (lower.weights is not None or upper.weights is not None):
            wa = np.ones(lower.nrows) if lower.weights is None else lower.weights
            wb = np.ones(upper.nrows) if upper.weights is None else upper.weights
            opts = replace(opts, weights=np.concatenate([wa, wb]))
        opts = _from_sample_set(lower, opts)
        meta = dict(lower.meta)
        x_below, x_above = lower.x, upper.x
        z = np.concatenate([lower.z, upper.z])
    elif z is None:
        raise TypeError("fit_piecewise_polynomial() missing required argument: z")

    if split is not None and np.isnan(float(split)):
        split = None

    timing: Dict[str, float] = {}
    with cputime(timing, "all"):
        xa = as_inputs(x_below)
        xb = as_inputs(x_above)
        if xa.shape[1] != xb.shape[1]:
            raise DimensionMismatch(
                f"x_below and x_above must have the same number of columns; "
                f"got {xa.shape[1]} and {xb.shape[1]}."
            )
        ka, kb = xa.shape[0], xb.shape[0]
        Z = np.asarray(z, dtype=float).reshape(-1)
        if Z.shape[0] != ka + kb:
            raise DimensionMismatch(
                f"z must hold {ka} + {kb} = {ka + kb} targets; got {Z.shape[0]}."
            )
        W = as_weights(opts.weights, ka + kb)

        m = xa.shape[1]
        basis = monomials(degree, m, opts.cross_terms)
        labels = _labels_for(opts, m)
        r = basis.size
        if basis.degree == 0:
            raise UnderconstrainedSplit(
                "A piece-wise fit needs degree >= 1; constant pieces cannot be "
                "joined or intersected meaningfully."
            )

        with cputime(timing, "zero"):
            Azero = zero_constraint(basis, opts.zero_point, pieces=2, labels=labels)
            if split is not None:
                Acont = continuity_constraint(
                    basis, split, smoothness=opts.smoothness, labels=labels
                )
                Aeq = stack(Azero, Acont)
            else:
                Aeq = Azero

        with cputime(timing, "obj"):
            system = block_diagonal(
                [
                    design_matrix(basis, xa, Z[:ka], W[:ka]),
                    design_matrix(basis, xb, Z[ka:], W[ka:]),
                ]
            )

        with cputime(timing, "lsq"):
            sol = solve_lsq(system.C, system.d, Aeq, opts.solver)

        qa, qb = sol.q[:r], sol.q[r:]
        source = "given"
        if split is None:
            source = "search"
            with cputime(timing, "split"):
                split = _search_split(basis, qa, qb, xa, xb, opts)

    fit = FitResult(
        name=opts.name or _default_name(basis.degree, m),
        basis=basis,
        coefficients=frozen_array(np.vstack([qa, qb])),
        labels=labels,
        gof=GoodnessOfFit(
            rmse=float(np.sqrt(sol.resnorm)),
            resnorm=sol.resnorm,
            n_samples=system.nrows,
            n_dropped=system.n_dropped,
        ),
        split=float(split),
        timing=timing,
        success=sol.success,
        message=sol.message,
        stats={
            "solver": sol.stats,
            "constraints": Aeq.labels,
            "split_source": source,
            "smoothness": int(opts.smoothness) if source == "given" else None,
            "meta": meta,
        },
    )
    return fit, float(split)


def _search_split(
    basis: MonomialBasis,
    qa: np.ndarray,
    qb: np.ndarray,
    xa: np.ndarray,
    xb: np.ndarray,
    opts: FitOptions,
) -> float:
    m = basis.nvars
    if opts.breakpoint_slice is None:
        rest = np.zeros(m - 1)
    else:
        rest = np.atleast_1d(np.asarray(opts.breakpoint_slice, dtype=float)).reshape(-1)
        if rest.shape[0] != m - 1:
            raise DimensionMismatch(
                f"breakpoint_slice needs {m - 1} value(s) for the non-split variables; "
                f"got {rest.shape[0]}."
            )

    guess = opts.split_guess
    if guess is None:
        guess = float(np.max(xa[:, 0]))

    x0 = find_breakpoint(
        _piece_on_slice(basis, qa, rest),
        _piece_on_slice(basis, qb, rest),
        guess,
        bracket=opts.bracket,
        method=opts.root_method,
    )

    lo = float(min(np.min(xa[:, 0]), np.min(xb[:, 0])))
    hi = float(max(np.max(xa[:, 0]), np.max(xb[:, 0])))
    if not lo <= x0 <= hi:
        warn(
            f"Breakpoint {x0:g} lies outside the sampled range [{lo:g}, {hi:g}].",
            UserWarning,
            stacklevel=3,
        )
    return x0
