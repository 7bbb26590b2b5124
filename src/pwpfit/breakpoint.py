from __future__ import annotations

from typing import Callable, Optional, Tuple, Union

import numpy as np
from scipy.optimize import root_scalar

from .errors import NoConvergence

RootFinder = Callable[[Callable[[float], float], float, Optional[Tuple[float, float]]], float]

_BRACKETED = ("brentq", "brenth", "ridder", "bisect", "toms748")
ROOT_METHODS = ("secant",) + _BRACKETED


def _scipy_root(
    h: Callable[[float], float],
    guess: float,
    bracket: Optional[Tuple[float, float]],
    method: str,
    xtol: float,
    maxiter: int,
) -> float:
    if method in _BRACKETED:
        sol = root_scalar(h, method=method, bracket=bracket, xtol=xtol, maxiter=maxiter)
    else:
        step = 1e-4 * (abs(guess) + 1.0)
        sol = root_scalar(h, method="secant", x0=guess, x1=guess + step, xtol=xtol, maxiter=maxiter)
    if not sol.converged:
        raise NoConvergence(
            f"Breakpoint search ({method}) did not converge after {sol.iterations} "
            f"iterations: {sol.flag}."
        )
    return float(sol.root)


def find_breakpoint(
    fa: Callable[[float], float],
    fb: Callable[[float], float],
    guess: float,
    *,
    bracket: Optional[Tuple[float, float]] = None,
    method: Union[str, RootFinder, None] = None,
    xtol: float = 1e-12,
    maxiter: int = 100,
) -> float:
    """Find x0 with fa(x0) == fb(x0) by a derivative-free root search on fa - fb.

    Without a bracket the secant method starts from `guess`; with a bracket
    Brent's method is used. `method` may name any scipy.optimize.root_scalar
    derivative-free method or be a callable ``(h, guess, bracket) -> x0``.
    Only one root is returned even if the pieces intersect several times;
    pass a bracket (or the split itself) to select a specific one.
    """
    guess = float(guess)
    if not np.isfinite(guess):
        raise ValueError(f"Initial guess must be finite; got {guess}.")

    def h(x: float) -> float:
        return float(fa(x)) - float(fb(x))

    if method is None:
        method = "brentq" if bracket is not None else "secant"
    if not callable(method) and method not in ROOT_METHODS:
        raise ValueError(f"Unknown root method {method!r}. Available: {ROOT_METHODS}")
    if method in _BRACKETED and bracket is None:
        raise ValueError(f"Root method {method!r} requires a bracket.")

    with np.errstate(all="ignore"):
        try:
            if callable(method):
                x0 = float(method(h, guess, bracket))
            else:
                x0 = _scipy_root(h, guess, bracket, str(method), xtol, int(maxiter))
        except NoConvergence:
            raise
        except (ValueError, RuntimeError, ArithmeticError) as exc:
            raise NoConvergence(f"Breakpoint search failed: {exc}") from exc

        if not np.isfinite(x0):
            raise NoConvergence(f"Breakpoint search returned a non-finite value {x0}.")

        gap = abs(h(x0))
        scale = max(1.0, abs(float(fa(x0))), abs(float(fb(x0))))
    if not np.isfinite(gap) or gap > 1e-8 * scale:
        raise NoConvergence(
            f"Breakpoint search stopped at x={x0:g} where the pieces still differ by {gap:.3g}."
        )
    return x0
