"""
===========================================================
Anderson acceleration of a linear fixed-point iteration
===========================================================
Compare the residuals of the plain iteration ``x <- A x + b`` with its
type-1 and type-2 Anderson accelerated versions.
"""
import matplotlib.pyplot as plt

import numpy as np

from pyaa import FixedPointSolver
from pyaa.utils.data import make_linear_contraction, make_affine_map


n_features = 200
A, b, x_star = make_linear_contraction(n_features, rate=0.98, random_state=0)
fun = make_affine_map(A, b)
x0 = np.zeros(n_features)

results = {}
results["No acceleration"] = FixedPointSolver(
    max_iter=1000, tol=1e-10, memory=0).solve(fun, x0)[1]

for memory in (2, 5, 10):
    for variant in ("type1", "type2"):
        solver = FixedPointSolver(
            max_iter=1000, tol=1e-10, memory=memory, variant=variant)
        results[f"AA-{variant[-1]}, memory {memory}"] = solver.solve(fun, x0)[1]

fig, ax = plt.subplots(figsize=(6, 4))
for label, res_out in results.items():
    ax.semilogy(res_out, label=label)

ax.set_xlabel("iteration")
ax.set_ylabel(r"$\|x - f(x)\|_2$")
ax.legend()
plt.show(block=False)
