import numpy as np

from pwpfit import fit_piecewise_polynomial

# Two linear regimes; where they meet is unknown.
rng = np.random.default_rng(3)
alpha = np.linspace(-0.2, 0.6, 33)
knee = 0.27
cl = np.where(alpha <= knee, 0.2 + 5.5 * alpha, 0.2 + 5.5 * knee - 2.0 * (alpha - knee))
cl = cl + rng.normal(0, 0.005, size=alpha.size)

# Rough separation of the regimes; the exact split is found from the fit.
below = alpha <= 0.26
x_below, x_above = alpha[below], alpha[~below]
z = np.concatenate([cl[below], cl[~below]])

free, x0 = fit_piecewise_polynomial(x_below, x_above, z, 1)
print(free.summary())
print(f"intersection (secant): {x0:.4f}  (true knee {knee})")

_, x0_brent = fit_piecewise_polynomial(x_below, x_above, z, 1, bracket=(0.0, 0.5))
print(f"intersection (brentq): {x0_brent:.4f}")

joined, _ = fit_piecewise_polynomial(x_below, x_above, z, 1, split=x0, name="Cl")
print()
print(joined.summary())
print("timing [s]:", {k: round(v, 6) for k, v in joined.timing.items()})
