import numpy as np
import matplotlib.pyplot as plt

from pwpfit import fit_piecewise_polynomial, plot_fit

# Lift curve: linear up to the stall angle, then a parabola.
a_stall = 0.25
alpha = np.linspace(-0.2, 0.5, 29)
cl = np.where(
    alpha <= a_stall,
    0.2 + 5.5 * alpha,
    0.2 + 5.5 * a_stall - 8.0 * (alpha - a_stall) ** 2,
)
rng = np.random.default_rng(2)
cl = cl + rng.normal(0, 0.01, size=alpha.size)

below = alpha <= a_stall
x_below, x_above = alpha[below], alpha[~below]
z = np.concatenate([cl[below], cl[~below]])

kinked, _ = fit_piecewise_polynomial(
    x_below, x_above, z, 2, split=a_stall, name="Cl", variable_labels=("alpha",)
)
smooth, _ = fit_piecewise_polynomial(
    x_below, x_above, z, 2, split=a_stall, smoothness=1, name="Cl (C1)",
    variable_labels=("alpha",),
)

print(kinked.summary())
print()
print(smooth.summary())
print("jump at split:", kinked.piece(0)(a_stall) - kinked.piece(1)(a_stall))

fig, ax = plot_fit(kinked, x=alpha, z=cl, pieces=True)
plot_fit(smooth, ax=ax, show_split=False, line_kwargs={"linestyle": "--"})
ax.legend()
plt.show()
