import tempfile
from pathlib import Path

import numpy as np

from pwpfit import FREE, FitCollection, SampleSet, export, fit_piecewise_polynomial

# Aerodynamic coefficients on an (alpha, beta) grid with a stall at alpha ~ 0.3.
alpha = np.linspace(-0.2, 1.2, 15)
beta = np.linspace(-0.3, 0.3, 7)
istar = 5
a_stall = alpha[istar]


def cx_pre(a):
    return 0.02 + 0.1 * a + 2.0 * a**2


def cx_post(a):
    return cx_pre(a) - 1.5 * (a - a_stall)


# 1) locate the stall from the beta = 0 slice
cx0 = np.where(alpha <= a_stall, cx_pre(alpha), cx_post(alpha))
lo = alpha <= a_stall
_, x0 = fit_piecewise_polynomial(
    alpha[lo], alpha[~lo], np.concatenate([cx0[lo], cx0[~lo]]), 3
)
print(f"stall at alpha = {x0:.4f}")

# 2) fit every coefficient over the full grid, continuous along alpha = x0
A, B = np.meshgrid(alpha, beta, indexing="ij")
grids = {
    "Cx": np.where(A <= a_stall, cx_pre(A), cx_post(A)) + 0.5 * B**2,
    "Cy": -0.8 * B + 0.2 * A * B,
    "Cm": np.where(A <= a_stall, -0.05 - 0.4 * A, -0.05 - 0.4 * A - 0.6 * (A - a_stall))
    + 0.1 * B**2,
}
zero_axes = {"Cy": [FREE, 0.0]}

fits = FitCollection(labels=("alpha", "beta"))
for name, values in grids.items():
    data = SampleSet.from_grid(
        axes=(alpha, beta), values=values, variable_labels=("alpha", "beta"), name=name
    )
    lower, upper = data.split(a_stall)
    fit, _ = fit_piecewise_polynomial(
        lower, upper, degree=3, split=x0, zero_axes=zero_axes.get(name)
    )
    fits.append(fit)

print(fits.summary(digits=3))

# 3) export
with tempfile.TemporaryDirectory() as tmp:
    tex = export.export(
        fits, Path(tmp) / "coeffs.tex", variables={"alpha": r"\alpha", "beta": r"\beta"}
    )
    src = export.export(fits, Path(tmp) / "coeffs.py")

print(tex.splitlines()[0])
namespace = {}
exec(src, namespace)
for name in fits.names:
    print(f"{name}(0.5, 0.1): fit={fits[name]([0.5, 0.1]):.6f}  exported={namespace[name](0.5, 0.1):.6f}")
