import warnings

import numpy as np
import pytest

from pwpfit import (
    DimensionMismatch,
    EqualityConstraint,
    IllConditioned,
    SolverOptions,
    monomials,
    solve_lsq,
)


def _constraint(A, b, labels=None):
    A = np.asarray(A, dtype=float)
    labels = tuple(labels) if labels else tuple(f"row {i}" for i in range(A.shape[0]))
    return EqualityConstraint(A=A, b=np.asarray(b, dtype=float), labels=labels)


def test_unconstrained_recovers_exact_polynomial():
    x = np.linspace(-1.0, 2.0, 8)
    C = monomials(3, 1)(x)
    q_true = np.array([0.5, -1.0, 0.25, 2.0])
    sol = solve_lsq(C, C @ q_true)
    assert np.allclose(sol.q, q_true, atol=1e-10)
    assert sol.resnorm == pytest.approx(0.0, abs=1e-18)
    assert sol.success


@pytest.mark.parametrize("algorithm", ["active-set", "slsqp"])
def test_equality_constraint_projects_solution(algorithm):
    sol = solve_lsq(
        np.eye(2),
        [1.0, 2.0],
        _constraint([[1.0, 1.0]], [1.0]),
        SolverOptions(algorithm=algorithm),
    )
    assert np.allclose(sol.q, [0.0, 1.0], atol=1e-6)
    assert sol.resnorm == pytest.approx(2.0, rel=1e-6)
    assert sol.stats["n_constraints"] == 1


def test_active_bound_warns():
    with pytest.warns(UserWarning, match="bound"):
        sol = solve_lsq(np.eye(2), [1.0, 1.0], options=SolverOptions(bound=1.0))
    assert np.allclose(sol.q, [0.5, 0.5])
    assert sol.stats["bound_active"]


def test_slsqp_respects_bound():
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", UserWarning)
        sol = solve_lsq(np.eye(2), [1.0, 1.0], options=SolverOptions(algorithm="slsqp", bound=1.0))
    assert np.allclose(sol.q, [0.5, 0.5], atol=1e-6)
    assert sol.stats["backend"] == "slsqp"


def test_default_bound_active_at_large_coefficients():
    with pytest.warns(UserWarning, match="bound"):
        sol = solve_lsq(np.eye(2), [1e4, 1e4])
    assert np.allclose(sol.q, [5e3, 5e3])


def test_bound_none_disables_inequality():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        sol = solve_lsq(np.eye(2), [1e4, 1e4], options=SolverOptions(bound=None))
    assert np.allclose(sol.q, [1e4, 1e4])


def test_underdetermined_system_returns_minimum_norm():
    sol = solve_lsq(np.ones((1, 3)), [3.0])
    assert np.allclose(sol.q, [1.0, 1.0, 1.0])
    assert sol.resnorm == pytest.approx(0.0, abs=1e-18)


def test_inconsistent_equalities_raise_with_label():
    c = _constraint([[1.0, 0.0], [1.0, 0.0]], [0.0, 1.0], labels=("first", "second"))
    with pytest.raises(IllConditioned) as exc:
        solve_lsq(np.eye(2), [1.0, 1.0], c)
    assert exc.value.constraint in ("first", "second")
    assert exc.value.violation > 0.0


def test_bound_incompatible_with_equalities_raises():
    c = _constraint([[1.0, 1.0]], [2.0])
    with pytest.raises(IllConditioned):
        solve_lsq(np.eye(2), [1.0, 1.0], c, SolverOptions(bound=1.0))


def test_constraint_width_must_match_design():
    with pytest.raises(DimensionMismatch):
        solve_lsq(np.eye(2), [1.0, 1.0], EqualityConstraint.empty(3))


def test_unknown_algorithm_raises():
    with pytest.raises(ValueError, match="Available"):
        solve_lsq(np.eye(2), [1.0, 1.0], options=SolverOptions(algorithm="simplex"))


def test_backend_registry():
    from pwpfit.backends import AVAILABLE_BACKENDS, get_backend

    assert AVAILABLE_BACKENDS == ("active-set", "slsqp")
    assert get_backend("slsqp").name == "slsqp"
