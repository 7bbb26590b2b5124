"""pwpfit public API."""
from .basis import MonomialBasis, monomials
from .breakpoint import find_breakpoint
from .constraints import FREE, EqualityConstraint, continuity_constraint, zero_constraint
from .data import grid_to_samples
from .design import design_matrix
from .errors import (
    DimensionMismatch,
    FitError,
    IllConditioned,
    InvalidDegree,
    NoConvergence,
    NonFiniteSample,
    UnderconstrainedSplit,
)
from .fit import FitOptions, fit_piecewise_polynomial, fit_polynomial
from .inputs import SampleSet
from .plotting import plot_fit
from .result import FitCollection, FitResult, GoodnessOfFit
from .solver import SolverOptions, solve_lsq
from . import export

__all__ = [
    "FREE",
    "DimensionMismatch",
    "EqualityConstraint",
    "FitCollection",
    "FitError",
    "FitOptions",
    "FitResult",
    "GoodnessOfFit",
    "IllConditioned",
    "InvalidDegree",
    "MonomialBasis",
    "NoConvergence",
    "NonFiniteSample",
    "SampleSet",
    "SolverOptions",
    "UnderconstrainedSplit",
    "continuity_constraint",
    "design_matrix",
    "export",
    "find_breakpoint",
    "fit_piecewise_polynomial",
    "fit_polynomial",
    "grid_to_samples",
    "monomials",
    "plot_fit",
    "solve_lsq",
    "zero_constraint",
]
