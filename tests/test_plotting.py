import numpy as np
import pytest

from pwpfit import fit_piecewise_polynomial, fit_polynomial, grid_to_samples


def test_plot_piecewise_fit_with_data():
    matplotlib = pytest.importorskip("matplotlib")
    matplotlib.use("Agg", force=True)
    import matplotlib.pyplot as plt

    from pwpfit.plotting import plot_fit

    xa = np.array([-2.0, -1.0, 0.0])
    xb = np.array([1.0, 2.0])
    z = np.array([-2.0, -1.0, 0.0, 2.0, 4.0])
    fit, _ = fit_piecewise_polynomial(xa, xb, z, 1, split=0.0, variable_labels=("alpha",))

    fig, ax = plot_fit(fit, x=np.concatenate([xa, xb]), z=z, pieces=True)
    assert ax.get_xlabel() == "alpha"
    assert ax.get_ylabel() == fit.name
    # data, fit, two pieces, split marker
    assert len(ax.lines) == 5
    plt.close(fig)


def test_plot_surface_slice_checks_slice_length():
    matplotlib = pytest.importorskip("matplotlib")
    matplotlib.use("Agg", force=True)
    import matplotlib.pyplot as plt

    from pwpfit.plotting import plot_fit

    axis = np.linspace(-1.0, 1.0, 4)
    X, _ = grid_to_samples([axis, axis], np.zeros((4, 4)))
    fit = fit_polynomial(X, X[:, 0] + X[:, 1], 1)

    fig, ax = plt.subplots()
    out_fig, out_ax = plot_fit(fit, ax=ax, at=[0.5])
    assert out_ax is ax
    assert out_fig is fig
    line = ax.lines[0]
    assert np.allclose(line.get_ydata(), line.get_xdata() + 0.5)

    with pytest.raises(ValueError, match="slice"):
        plot_fit(fit, ax=ax, at=[0.5, 1.0])
    plt.close(fig)
