import numpy as np

from pyaa.accelerator import AndersonAccelerator, MAX_AA_NRM
from pyaa.solvers.base import BaseSolver


class FixedPointSolver(BaseSolver):
    r"""Fixed-point iteration with Anderson acceleration.

    Iterates :math:`x_{k+1} = f(x_k)`, letting an
    :class:`~pyaa.AndersonAccelerator` extrapolate every map output.

    Attributes
    ----------
    max_iter : int, default 100
        Maximum number of iterations.

    tol : float, default 1e-8
        Tolerance on the residual norm :math:`\|x - f(x)\|_2`.

    memory : int, default 5
        Anderson memory. 0 gives the plain fixed-point iteration.

    variant : {'type1', 'type2'}, default 'type1'
        Anderson acceleration variant.

    max_weight_norm : float, default 1e4
        Safeguard threshold of the accelerator.

    backend : {'blas', 'numba'} or object, default 'blas'
        Dense linear algebra backend of the accelerator.

    verbose : bool or int, default False
        Amount of verbosity. 0/False is silent.
    """

    def __init__(self, max_iter=100, tol=1e-8, memory=5, variant="type1",
                 max_weight_norm=MAX_AA_NRM, backend="blas", verbose=0):
        self.max_iter = max_iter
        self.tol = tol
        self.memory = memory
        self.variant = variant
        self.max_weight_norm = max_weight_norm
        self.backend = backend
        self.verbose = verbose

    def _solve(self, fun, x0):
        res_out = []
        x = x0.copy()
        stop_crit = np.inf

        with AndersonAccelerator(
                x.shape[0], self.memory, variant=self.variant,
                max_weight_norm=self.max_weight_norm, backend=self.backend,
                dtype=x.dtype, verbose=max(self.verbose - 1, 0)) as accelerator:
            for n_iter in range(self.max_iter):
                fx = np.array(fun(x), dtype=x.dtype)
                # the residual of the current iterate is known before acceleration
                stop_crit = np.linalg.norm(x - fx)
                res_out.append(stop_crit)

                if self.verbose:
                    print(f"Iteration {n_iter + 1}: residual {stop_crit:.2e}")

                if stop_crit < self.tol:
                    if self.verbose:
                        print(f"Stopping criterion max violation: {stop_crit:.2e}")
                    break

                accelerator.step(fx, x)
                x = fx

        return x, np.array(res_out), stop_crit
