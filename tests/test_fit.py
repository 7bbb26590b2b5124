import numpy as np
import pytest

from pwpfit import (
    FREE,
    DimensionMismatch,
    FitOptions,
    InvalidDegree,
    SampleSet,
    fit_polynomial,
    grid_to_samples,
    monomials,
)


def _grid(n=5):
    axis = np.linspace(-1.0, 1.0, n)
    X, _ = grid_to_samples([axis, axis], np.zeros((n, n)))
    return X


def test_linear_fit_through_three_points():
    fit = fit_polynomial([0.0, 1.0, 2.0], [0.0, 1.0, 2.0], 1, weights=1)
    assert np.allclose(fit.coefficients[0], [0.0, 1.0], atol=1e-10)
    assert fit.rmse == pytest.approx(0.0, abs=1e-8)
    assert fit.name == "poly1"
    assert not fit.is_piecewise
    assert fit.gof.n_samples == 3


def test_exact_polynomial_is_recovered():
    X = _grid()
    q_true = np.array([0.5, -1.0, 2.0, 0.3, -0.7, 1.1])
    z = monomials(2, 2)(X) @ q_true
    fit = fit_polynomial(X, z, 2)
    assert np.allclose(fit.coefficients[0], q_true, atol=1e-8)
    assert fit.rmse < 1e-8
    assert fit.name == "poly22"


def test_zero_point_makes_fit_vanish_on_hyperplane():
    X = _grid()
    z = X[:, 0] * X[:, 1]
    fit = fit_polynomial(X, z, 2, zero_point=[FREE, 0.0])
    xs = np.linspace(-5.0, 5.0, 11)
    on_plane = np.column_stack([xs, np.zeros_like(xs)])
    assert np.allclose(fit(on_plane), 0.0, atol=1e-12)
    assert fit.coefficients[0][4] == pytest.approx(1.0, abs=1e-8)
    assert len(fit.stats["constraints"]) == 3


def test_zero_point_holds_for_noisy_data():
    rng = np.random.default_rng(3)
    X = _grid(7)
    z = 1.0 + X[:, 0] + 2.0 * X[:, 1] + rng.normal(0.0, 0.1, X.shape[0])
    fit = fit_polynomial(X, z, 3, zero_point=[0.0])
    xs = np.linspace(-2.0, 2.0, 9)
    assert np.allclose(fit(np.column_stack([xs, np.zeros_like(xs)])), 0.0, atol=1e-10)


def test_nan_rows_are_ignored():
    x = np.linspace(0.0, 3.0, 10)
    z = 1.0 + 2.0 * x - 0.5 * x**2
    z_nan = z.copy()
    z_nan[[2, 7]] = np.nan
    keep = ~np.isnan(z_nan)
    with_nan = fit_polynomial(x, z_nan, 2)
    without = fit_polynomial(x[keep], z[keep], 2)
    assert np.allclose(with_nan.coefficients, without.coefficients)
    assert with_nan.gof.n_dropped == 2
    assert with_nan.gof.n_samples == 8


def test_weights_scale_residuals():
    fit = fit_polynomial([0.0, 0.0], [0.0, 1.0], 0, weights=[1.0, 3.0])
    assert fit.coefficients[0][0] == pytest.approx(0.9)


def test_row_mismatch_raises():
    with pytest.raises(DimensionMismatch):
        fit_polynomial([0.0, 1.0, 2.0], [0.0, 1.0], 1)


def test_invalid_degree_raises():
    with pytest.raises(InvalidDegree):
        fit_polynomial([0.0, 1.0], [0.0, 1.0], -1)


def test_missing_arguments_raise_type_error():
    with pytest.raises(TypeError):
        fit_polynomial([0.0, 1.0], [0.0, 1.0])
    with pytest.raises(TypeError):
        fit_polynomial([0.0, 1.0], degree=1)


def test_unknown_override_raises_type_error():
    with pytest.raises(TypeError):
        fit_polynomial([0.0, 1.0], [0.0, 1.0], 1, colour="red")


def test_options_and_overrides():
    opts = FitOptions(name="Cz", cross_terms="none")
    X = _grid()
    z = X[:, 0] ** 2 + X[:, 1]
    fit = fit_polynomial(X, z, 2, options=opts, cross_terms="tensor")
    assert fit.name == "Cz"
    assert fit.basis.cross_terms == "tensor"
    assert fit.basis.size == 9


def test_sample_set_input_carries_labels_and_meta():
    x = np.linspace(-0.2, 0.4, 6)
    ss = SampleSet.from_arrays(
        x=x, z=0.1 + 4.0 * x, variable_labels=("alpha",), name="Cl", meta={"run": 7}
    )
    fit = fit_polynomial(ss, degree=1)
    assert fit.name == "Cl"
    assert fit.labels == ("alpha",)
    assert fit.stats["meta"] == {"run": 7}
    assert np.allclose(fit.coefficients[0], [0.1, 4.0])


def test_sample_set_rejects_extra_targets():
    ss = SampleSet.from_arrays(x=[0.0, 1.0], z=[0.0, 1.0])
    with pytest.raises(TypeError):
        fit_polynomial(ss, [0.0, 1.0], 1)


def test_label_count_must_match_columns():
    with pytest.raises(DimensionMismatch):
        fit_polynomial(_grid(), np.zeros(25), 1, variable_labels=("alpha",))


def test_timing_is_recorded():
    fit = fit_polynomial([0.0, 1.0, 2.0], [1.0, 2.0, 3.0], 1)
    assert {"all", "zero", "obj", "lsq"} <= set(fit.timing)
    assert all(t >= 0.0 for t in fit.timing.values())


def test_two_zero_axes_vanish_only_on_their_intersection():
    axis = np.linspace(-1.0, 1.0, 4)
    X, _ = grid_to_samples([axis, axis, axis], np.zeros((4, 4, 4)))
    z = 1.0 + X[:, 0] + 2.0 * X[:, 1] + 3.0 * X[:, 2]
    fit = fit_polynomial(X, z, 1, zero_point=[FREE, 0.0, 0.0])
    assert np.allclose(fit.coefficients[0], [0.0, 0.0, 2.0, 3.0], atol=1e-10)
    assert fit([0.5, 0.0, 0.0]) == pytest.approx(0.0, abs=1e-12)
    # x2 = 0 alone is not enough
    assert fit([0.5, 0.0, 1.0]) == pytest.approx(3.0)
    assert fit([0.5, 1.0, 0.0]) == pytest.approx(2.0)
