"""Exception taxonomy for the fitting engine."""

from __future__ import annotations

from typing import Optional, Tuple


class FitError(Exception):
    """Base class for all pwpfit failures."""


class InvalidDegree(FitError, ValueError):
    """Polynomial degree or variable count is malformed."""


class DimensionMismatch(FitError, ValueError):
    """Row or column counts of the inputs do not agree."""


class NonFiniteSample(FitError, ValueError):
    """Sample inputs or targets hold inf, or inputs hold NaN."""

    def __init__(self, message: str, *, rows: Tuple[int, ...] = ()) -> None:
        super().__init__(message)
        self.rows = rows


class UnderconstrainedSplit(FitError, ValueError):
    """Continuity was requested on a basis that cannot carry it."""


class IllConditioned(FitError, RuntimeError):
    """The solver could not honour the equality constraints."""

    def __init__(
        self,
        message: str,
        *,
        constraint: Optional[str] = None,
        violation: Optional[float] = None,
    ) -> None:
        super().__init__(message)
        self.constraint = constraint
        self.violation = violation


class NoConvergence(FitError, RuntimeError):
    """The breakpoint root finder failed to locate an intersection."""
