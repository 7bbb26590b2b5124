from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence, Tuple

import numpy as np

from .result import FitResult


def plot_fit(
    fit: FitResult,
    *,
    ax: Optional[Any] = None,
    x: Optional[Any] = None,
    z: Optional[Any] = None,
    xg: Optional[np.ndarray] = None,
    at: Optional[Sequence[float]] = None,
    pieces: bool = False,
    data_kwargs: Optional[Mapping[str, Any]] = None,
    line_kwargs: Optional[Mapping[str, Any]] = None,
    split_kwargs: Optional[Mapping[str, Any]] = None,
    show_split: bool = True,
) -> Tuple[Any, Any]:
    """Plot a fit along its first variable on a Matplotlib Axes.

    Parameters
    ----------
    fit : FitResult
        Fit to draw. For fits in more than one variable the curve is the
        slice through `at` (values of x2..xm, default zeros).
    ax : matplotlib.axes.Axes, optional
        If None, a new figure/axes is created.
    x, z : array-like, optional
        1D data to overlay (first-variable coordinate and target).
    xg : ndarray, optional
        Grid for the fit line. Defaults to 400 points over the x range.
    pieces : bool
        If True, draw both pieces of a piece-wise fit over the whole grid.
    data_kwargs, line_kwargs, split_kwargs : dict, optional
        Styling kwargs for the data markers, fit line and split marker.
    show_split : bool
        Draw a vertical dashed line at the split of a piece-wise fit.
    """
    import matplotlib.pyplot as plt

    if ax is None:
        fig, ax = plt.subplots()
    else:
        fig = ax.figure

    data_kwargs = dict(data_kwargs or {})
    line_kwargs = dict(line_kwargs or {})
    split_kwargs = dict(split_kwargs or {})

    rest = np.zeros(fit.nvars - 1) if at is None else np.asarray(at, dtype=float).reshape(-1)
    if rest.shape[0] != fit.nvars - 1:
        raise ValueError(
            f"plot_fit needs {fit.nvars - 1} slice value(s) in `at`; got {rest.shape[0]}."
        )

    x_arr = None
    if x is not None and z is not None:
        x_arr = np.asarray(x, dtype=float).reshape(-1)
        z_arr = np.asarray(z, dtype=float).reshape(-1)
        if x_arr.shape != z_arr.shape:
            raise ValueError("plot_fit requires x and z to have the same shape.")
        data_kwargs.setdefault("marker", "+")
        data_kwargs.setdefault("linestyle", "none")
        data_kwargs.setdefault("label", "data")
        ax.plot(x_arr, z_arr, **data_kwargs)

    if xg is None:
        if x_arr is not None and x_arr.size:
            lo, hi = float(np.nanmin(x_arr)), float(np.nanmax(x_arr))
        elif fit.is_piecewise:
            lo, hi = fit.split - 1.0, fit.split + 1.0
        else:
            lo, hi = -1.0, 1.0
        xg = np.linspace(lo, hi, 400)
    xg = np.asarray(xg, dtype=float).reshape(-1)

    if fit.nvars == 1:
        pts = xg
    else:
        pts = np.column_stack([xg] + [np.full_like(xg, v) for v in rest])

    line_kwargs.setdefault("label", fit.name)
    ax.plot(xg, fit(pts), **line_kwargs)

    if fit.is_piecewise:
        if pieces:
            for i in range(fit.pieces):
                ax.plot(xg, fit.piece(i)(pts), linestyle=":", lw=1, label=f"{fit.name} piece {i}")
        if show_split:
            split_kwargs.setdefault("color", "k")
            split_kwargs.setdefault("linestyle", "--")
            split_kwargs.setdefault("lw", 1)
            ax.axvline(fit.split, **split_kwargs)

    ax.set_xlabel(fit.labels[0])
    ax.set_ylabel(fit.name)
    return fig, ax
