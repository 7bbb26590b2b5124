import numpy as np
import pytest

from pwpfit import InvalidDegree, DimensionMismatch, monomials
from pwpfit.basis import basis_size


def test_single_variable_basis_is_powers():
    b = monomials(3, 1)
    assert b.terms == ((0,), (1,), (2,), (3,))
    assert np.allclose(b(2.0), [1.0, 2.0, 4.0, 8.0])
    assert b(np.array([1.0, 2.0, 3.0])).shape == (3, 4)


def test_two_variable_total_degree_order():
    b = monomials(2, 2)
    assert b.terms == ((0, 0), (1, 0), (0, 1), (2, 0), (1, 1), (0, 2))
    rows = b(np.array([[1.0, 2.0], [3.0, 4.0]]))
    assert rows.shape == (2, 6)
    assert np.allclose(rows[1], [1.0, 3.0, 4.0, 9.0, 12.0, 16.0])


def test_cross_term_policies():
    assert monomials(2, 2, "none").terms == ((0, 0), (1, 0), (0, 1), (2, 0), (0, 2))
    assert monomials(1, 2, "tensor").terms == ((0, 0), (1, 0), (0, 1), (1, 1))


@pytest.mark.parametrize("cross_terms", ["total", "tensor", "none"])
@pytest.mark.parametrize("n", [0, 1, 2, 4])
@pytest.mark.parametrize("m", [1, 2, 3])
def test_basis_size_matches_closed_form(cross_terms, n, m):
    b = monomials(n, m, cross_terms)
    assert b.size == basis_size(n, m, cross_terms)
    if m == 1:
        assert b.size == n + 1


def test_basis_is_deterministic():
    a = monomials(3, 3)
    b = monomials(3, 3)
    assert a.terms == b.terms
    assert np.array_equal(a.exponents, b.exponents)
    assert a == b
    assert hash(a) == hash(b)


@pytest.mark.parametrize(
    "n, m, cross_terms",
    [(-1, 1, "total"), (2, 0, "total"), (2.5, 1, "total"), (2, 1, "bogus")],
)
def test_invalid_degree_raises(n, m, cross_terms):
    with pytest.raises(InvalidDegree):
        monomials(n, m, cross_terms)


def test_point_with_wrong_arity_raises():
    b = monomials(2, 2)
    with pytest.raises(DimensionMismatch):
        b(np.zeros(3))


def test_exponents_are_read_only():
    b = monomials(2, 2)
    with pytest.raises(ValueError):
        b.exponents[0, 0] = 5


def test_term_names():
    b = monomials(2, 2)
    assert b.term_names(("a", "b")) == ("1", "a", "b", "a^2", "a*b", "b^2")
    assert monomials(1, 1).term_names() == ("1", "x")


def test_split_component_and_derivatives():
    b = monomials(3, 1)
    assert np.allclose(b.split_component(2.0), [1.0, 2.0, 4.0, 8.0])
    assert np.allclose(b.split_component(2.0, order=1), [0.0, 1.0, 4.0, 12.0])
    assert np.allclose(b.split_component(2.0, order=2), [0.0, 0.0, 2.0, 12.0])


def test_groups_collect_non_split_exponents():
    b = monomials(1, 2)
    groups = dict((k, v.tolist()) for k, v in b.groups(axis=0))
    assert groups == {(0,): [0, 1], (1,): [2]}
