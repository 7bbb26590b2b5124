import numpy as np
import pytest

from pwpfit import FitCollection, export, fit_piecewise_polynomial, fit_polynomial, grid_to_samples


def _kink():
    fit, _ = fit_piecewise_polynomial(
        [-2.0, -1.0, 0.0], [1.0, 2.0], [-2.0, -1.0, 0.0, 2.0, 4.0], 1, split=0.0, name="Cx"
    )
    return fit.with_labels(["alpha"])


def _surface():
    axis = np.linspace(-1.0, 1.0, 5)
    X, _ = grid_to_samples([axis, axis], np.zeros((5, 5)))
    z = 0.5 - X[:, 0] + 2.0 * X[:, 0] * X[:, 1]
    return fit_polynomial(X, z, 2, name="Cm", variable_labels=("alpha", "beta"))


def _load(source):
    namespace = {}
    exec(compile(source, "<pwpfit-export>", "exec"), namespace)
    return namespace


def test_latex_single_fit():
    text = export.to_latex(_surface())
    assert text.startswith("% THIS FILE HAS BEEN WRITTEN BY pwpfit.export.to_latex %")
    assert "\\begin{align}" in text
    assert "Cm\\!\\left(alpha,beta\\right)" in text
    assert "\\num{" in text
    assert "alpha beta" in text


def test_latex_piecewise_uses_cases():
    text = export.to_latex(_kink(), variables={"alpha": r"\alpha"})
    assert "\\begin{cases}" in text
    assert r"\alpha \leq" in text
    assert "\\text{otherwise}" in text


def test_latex_positional_variables_and_file(tmp_path):
    path = tmp_path / "coeffs.tex"
    text = export.to_latex(FitCollection([_surface()]), path, variables=["a", "b"], env="equation")
    assert path.read_text(encoding="utf-8") == text
    assert "\\begin{equation}" in text
    assert "Cm\\!\\left(a,b\\right)" in text


def test_python_source_matches_fit():
    surface = _surface()
    kink = _kink()
    ns = _load(export.to_python([surface, kink]))
    for a, b in [(-0.5, 0.25), (0.0, 0.0), (0.75, -1.0)]:
        assert ns["Cm"](a, b) == pytest.approx(surface([a, b]), abs=1e-12)
    for a in [-1.5, 0.0, 0.5, 2.0]:
        assert ns["Cx"](a) == pytest.approx(kink(a), abs=1e-12)


def test_python_identifiers_are_sanitized():
    fit = _kink().with_name("C-x 2")
    source = export.to_python(fit)
    assert "def C_x_2(alpha):" in source
    _load(source)


def test_export_picks_format_by_suffix(tmp_path):
    fit = _kink()
    tex = export.export(fit, tmp_path / "fits.tex")
    py = export.export(fit, tmp_path / "fits.py")
    assert "\\begin{align}" in tex
    assert "def Cx(alpha):" in py
    with pytest.raises(ValueError):
        export.export(fit, tmp_path / "fits.txt")
