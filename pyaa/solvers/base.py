from abc import abstractmethod, ABC

import numpy as np
from sklearn.utils import check_array


class BaseSolver(ABC):
    """Base class for fixed-point solvers."""

    @abstractmethod
    def _solve(self, fun, x0):
        """Find a fixed point of ``fun`` starting from ``x0``.

        Parameters
        ----------
        fun : callable
            Fixed-point map, taking and returning arrays of shape
            (n_features,).

        x0 : array, shape (n_features,)
            Initial iterate.

        Returns
        -------
        x : array, shape (n_features,)
            Last iterate.

        res_out : array, shape (n_iter,)
            The residual norms ``||x - fun(x)||`` at every iteration.

        stop_crit : float
            Value of stopping criterion at convergence.
        """

    def solve(self, fun, x0, *, run_checks=True):
        """Solve the fixed-point problem after validating its inputs.

        Examples
        --------
        >>> ...
        >>> x, res_out, stop_crit = solver.solve(fun, x0)
        """
        if run_checks:
            if not callable(fun):
                raise TypeError(
                    f"`fun` should be callable, got {type(fun).__name__}")
            x0 = check_array(x0, ensure_2d=False,
                             dtype=[np.float64, np.float32], copy=True)
            if x0.ndim != 1:
                raise ValueError(
                    f"`x0` should be a 1d array, got shape {x0.shape}")

        return self._solve(fun, x0)
