import numbers

import numpy as np
from sklearn.utils import check_array, check_scalar

from pyaa.backends import get_backend
from pyaa.utils.validation import check_variant


MAX_AA_NRM = 1e4

# status codes returned by ``AndersonAccelerator.step``
DISABLED = 0
WARMUP = 0
REJECTED = -1


class AllocationError(MemoryError):
    """Raised when the history buffers of an accelerator cannot be allocated."""


class AcceleratorState:
    """Buffers of an Anderson accelerator, allocated once and zero filled.

    History matrices are stored in Fortran order so that each history
    column is a contiguous vector.

    Parameters
    ----------
    dimension : int
        Length ``l`` of the iterate.

    memory : int
        Number ``k`` of history columns, must be positive.

    dtype : numpy dtype
        Precision of every floating point buffer.

    Attributes
    ----------
    iteration : int
        Number of accelerated steps performed so far.

    x_prev, f_prev : ndarray, shape (l,)
        Iterate and map output passed at the previous step.

    g, g_prev : ndarray, shape (l,)
        Current and previous residuals ``x - f(x)``.

    y, s, d : ndarray, shape (l,)
        Differences ``g - g_prev``, ``x - x_prev`` and ``f - f_prev``.

    Y, S, D : ndarray, shape (l, k)
        Circular history of ``y``, ``s`` and ``d``.

    M : ndarray, shape (k, k)
        Gram matrix ``S.T @ Y`` (type-1) or ``Y.T @ Y`` (type-2).

    work : ndarray, shape (k,)
        Right hand side, then weights, of the small linear system.

    ipiv : ndarray, shape (k,)
        Pivot indices of the last LU factorization.
    """

    def __init__(self, dimension, memory, dtype):
        self.iteration = 0

        self.x_prev = np.zeros(dimension, dtype=dtype)
        self.f_prev = np.zeros(dimension, dtype=dtype)
        self.g = np.zeros(dimension, dtype=dtype)
        self.g_prev = np.zeros(dimension, dtype=dtype)

        self.y = np.zeros(dimension, dtype=dtype)
        self.s = np.zeros(dimension, dtype=dtype)
        self.d = np.zeros(dimension, dtype=dtype)

        self.Y = np.zeros((dimension, memory), dtype=dtype, order='F')
        self.S = np.zeros((dimension, memory), dtype=dtype, order='F')
        self.D = np.zeros((dimension, memory), dtype=dtype, order='F')
        self.M = np.zeros((memory, memory), dtype=dtype, order='F')

        self.work = np.zeros(memory, dtype=dtype)
        self.ipiv = np.zeros(memory, dtype=np.int32)


class AndersonAccelerator:
    r"""Anderson acceleration of a fixed-point iteration.

    The host iteration computes ``f = fun(x)`` and calls ``step(f, x)``;
    ``f`` is overwritten in place with the extrapolated point when the
    acceleration succeeds, and left to the raw map output otherwise.
    The next iterate is then ``x = f``.

    The extrapolation combines the last ``memory`` differences of iterates
    and residuals ``g = x - fun(x)``. The combination weights solve a small
    ``memory x memory`` system built from the Gram matrix ``S.T @ Y``
    (type-1) or ``Y.T @ Y`` (type-2).

    Parameters
    ----------
    dimension : int
        Length of the iterate vector.

    memory : int
        Number of history columns kept. If ``memory <= 0``, acceleration is
        disabled and ``step`` is a no-op.

    variant : {'type1', 'type2'} or bool, default 'type1'
        Anderson acceleration variant. ``True`` stands for type-1.

    max_weight_norm : float, default 1e4
        Steps whose combination weights have a larger Euclidean norm are
        rejected.

    backend : {'blas', 'numba'} or object, default 'blas'
        Dense linear algebra backend, see :mod:`pyaa.backends`.

    dtype : {np.float64, np.float32}, default np.float64
        Precision of the buffers. Vectors passed to ``step`` must use it.

    verbose : int, default 0
        Amount of verbosity. 0/False is silent, 1 reports rejected steps,
        2 also reports accepted steps.

    sink : callable or None, default None
        Receives diagnostic messages as strings. If ``None``, messages are
        printed when ``verbose`` is set.

    Attributes
    ----------
    state_ : AcceleratorState or None
        History buffers, ``None`` when disabled or released.

    n_accepted_ : int
        Number of extrapolations applied.

    n_rejected_ : int
        Number of extrapolations rejected by the safeguard.

    last_info_ : int or None
        Factorization diagnostic of the last solve.

    last_weight_norm_ : float or None
        Norm of the weights computed by the last solve.

    References
    ----------
    .. [1] Walker, H. F. and Ni, P.
           "Anderson Acceleration for Fixed-Point Iterations", 2011,
           SIAM J. Numer. Anal.
           https://epubs.siam.org/doi/10.1137/10078356X

    .. [2] Zhang, J., O'Donoghue, B. and Boyd, S.
           "Globally Convergent Type-I Anderson Acceleration for Nonsmooth
           Fixed-Point Iterations", 2020, SIAM J. Optim.
           https://epubs.siam.org/doi/10.1137/18M1232772
    """

    def __init__(self, dimension, memory, variant="type1",
                 max_weight_norm=MAX_AA_NRM, backend="blas", dtype=np.float64,
                 verbose=0, sink=None):
        check_scalar(dimension, "dimension", numbers.Integral, min_val=1)
        check_scalar(memory, "memory", numbers.Integral)
        check_scalar(max_weight_norm, "max_weight_norm", numbers.Real,
                     min_val=0, include_boundaries="neither")

        dtype = np.dtype(dtype)
        if dtype not in (np.float32, np.float64):
            raise ValueError(
                f"Only float32 and float64 are supported. Got {dtype}")

        self.dimension = int(dimension)
        self.memory = int(memory)
        self._type1 = check_variant(variant)
        self.max_weight_norm = max_weight_norm
        self.backend = get_backend(backend)
        self.dtype = dtype
        self.verbose = verbose
        self.sink = sink

        self.n_accepted_, self.n_rejected_ = 0, 0
        self.last_info_, self.last_weight_norm_ = None, None
        self.state_ = None
        self._released = False

        if self.memory <= 0:
            return

        try:
            self.state_ = AcceleratorState(self.dimension, self.memory, dtype)
        except (MemoryError, ValueError) as e:
            self._emit("Failed to allocate memory for AA.")
            raise AllocationError(
                f"Could not allocate Anderson acceleration buffers for "
                f"dimension={self.dimension} and memory={self.memory}") from e

    @property
    def enabled(self):
        """Whether ``step`` may modify its input."""
        return self.memory > 0

    @property
    def type1(self):
        """Whether the type-1 variant is used."""
        return self._type1

    @property
    def iteration(self):
        """Number of (non disabled) calls to ``step`` so far."""
        return 0 if self.state_ is None else self.state_.iteration

    def step(self, f, x):
        """Record ``(x, f)`` and overwrite ``f`` with the extrapolated point.

        Parameters
        ----------
        f : ndarray, shape (dimension,)
            Map output ``fun(x)``, updated in place. Must be a writable array
            of the accelerator ``dtype``.

        x : ndarray, shape (dimension,)
            Current iterate.

        Returns
        -------
        status : int
            ``DISABLED`` (0) if acceleration is disabled, ``WARMUP`` (0) on
            the first call, ``REJECTED`` (-1) when the safeguard refused the
            extrapolation, otherwise the factorization diagnostic (0).
        """
        if self._released:
            raise RuntimeError("Cannot step an accelerator after release().")
        if not self.enabled:
            return DISABLED

        f, x = self._validate(f, x)
        state = self.state_

        self._update_history(f, x)

        iteration = state.iteration
        state.iteration += 1
        if iteration == 0:
            return WARMUP

        # number of history columns holding data
        n_valid = min(iteration, self.memory)
        return self._solve(f, n_valid)

    def release(self):
        """Drop every history buffer.

        Safe on a disabled accelerator; calling it again has no effect.
        """
        self.state_ = None
        self._released = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.release()
        return False

    def _validate(self, f, x):
        # non finite values are left to the safeguard
        x = check_array(x, ensure_2d=False, dtype=self.dtype,
                        ensure_all_finite=False)
        f_checked = check_array(f, ensure_2d=False, dtype=self.dtype, copy=False,
                                ensure_all_finite=False)

        if f_checked is not f or not f.flags.writeable:
            raise ValueError(
                f"`f` is updated in place, it must be a writable ndarray of "
                f"dtype {self.dtype}. Got {type(f).__name__} of dtype "
                f"{getattr(f, 'dtype', None)}")
        for name, vec in (("x", x), ("f", f)):
            if vec.shape != (self.dimension,):
                raise ValueError(
                    f"`{name}` should have shape ({self.dimension},), "
                    f"got {vec.shape}")
        return f, x

    def _update_history(self, f, x):
        # at this point x_prev, f_prev, g_prev hold the previous call values
        state, bk = self.state_, self.backend
        idx = state.iteration % self.memory

        state.g[:] = x
        bk.axpy(-1., f, state.g)
        state.s[:] = x
        bk.axpy(-1., state.x_prev, state.s)
        state.d[:] = f
        bk.axpy(-1., state.f_prev, state.d)
        state.y[:] = state.g
        bk.axpy(-1., state.g_prev, state.y)

        state.Y[:, idx] = state.y
        state.S[:, idx] = state.s
        state.D[:, idx] = state.d

        state.x_prev[:] = x
        state.f_prev[:] = f
        self._set_gram()
        state.g_prev[:] = state.g

    def _set_gram(self):
        # M = S.T @ Y or Y.T @ Y, over all columns, unwritten ones are zero
        state = self.state_
        anchor = state.S if self.type1 else state.Y
        self.backend.gemm(True, False, 1., anchor, state.Y, 0., state.M)

    def _solve(self, f, n_valid):
        state, bk = self.state_, self.backend
        anchor = state.S if self.type1 else state.Y

        # the system always has size memory x memory, so it stays singular
        # until every history column has been written once
        bk.gemv(True, 1., anchor, state.g, 0., state.work)
        weights, ipiv, info = bk.gesv(state.M, state.work)
        state.work[:] = weights
        state.ipiv[:] = ipiv
        nrm = bk.norm2(state.work)

        self.last_info_, self.last_weight_norm_ = info, nrm
        # a non finite Gram matrix means a non finite history column
        if (info != 0 or not np.isfinite(state.M).all()
                or not np.isfinite(nrm) or nrm >= self.max_weight_norm):
            self.n_rejected_ += 1
            self._emit(f"Error in AA, iter: {state.iteration}, info: {info}, "
                       f"norm {nrm:.2e}")
            return REJECTED

        # f -= D @ weights
        bk.gemv(False, -1., state.D[:, :n_valid], state.work[:n_valid], 1., f)
        self.n_accepted_ += 1
        if max(self.verbose - 1, 0):
            self._emit(f"AA step accepted, iter: {state.iteration}, "
                       f"norm {nrm:.2e}")
        return info

    def _emit(self, msg):
        if self.sink is not None:
            self.sink(msg)
        elif self.verbose:
            print(msg)
