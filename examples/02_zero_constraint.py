import numpy as np

from pwpfit import FREE, SampleSet, fit_polynomial

# Side-force coefficient on an (alpha, beta) grid: odd in beta, so it must
# vanish for beta = 0 whatever alpha is.
alpha = np.linspace(-0.2, 0.4, 13)
beta = np.linspace(-0.3, 0.3, 7)
A, B = np.meshgrid(alpha, beta, indexing="ij")

rng = np.random.default_rng(1)
CY = -0.8 * B + 0.5 * A * B + 0.02 + rng.normal(0, 0.01, size=A.shape)

data = SampleSet.from_grid(
    axes=(alpha, beta), values=CY, variable_labels=("alpha", "beta"), name="Cy"
)

free = fit_polynomial(data, degree=2)
odd = fit_polynomial(data, degree=2, zero_point=[FREE, 0.0])

print(free.summary())
print()
print(odd.summary())

on_plane = np.column_stack([alpha, np.zeros_like(alpha)])
print("max |free(alpha, 0)| =", np.max(np.abs(free(on_plane))))
print("max |odd(alpha, 0)|  =", np.max(np.abs(odd(on_plane))))
print("constraints:", odd.stats["constraints"])
