import numpy as np
import matplotlib.pyplot as plt

from pwpfit import fit_polynomial, plot_fit

rng = np.random.default_rng(0)
x = np.linspace(0, 10, 20)
z = 2.0 * x - 1.0 + rng.normal(0, 0.5, size=x.size)

fit = fit_polynomial(x, z, 1, name="line")
print(fit.summary(digits=4))
print("f(5) =", fit(5.0))

fig, ax = plot_fit(fit, x=x, z=z)
ax.legend()
plt.show()
