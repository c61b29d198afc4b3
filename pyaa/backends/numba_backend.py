import numpy as np
from numba import njit

from pyaa.backends.base import BaseBackend


@njit
def _nrm2(x):
    # scale by the largest entry to avoid overflow, like reference BLAS
    scale = 0.
    for i in range(x.shape[0]):
        if np.isnan(x[i]):
            return np.nan
        if abs(x[i]) > scale:
            scale = abs(x[i])
    if scale == 0.:
        return 0.
    ssq = 0.
    for i in range(x.shape[0]):
        tmp = x[i] / scale
        ssq += tmp * tmp
    return scale * np.sqrt(ssq)


@njit
def _axpy(alpha, x, y):
    for i in range(y.shape[0]):
        y[i] += alpha * x[i]


@njit
def _gemv(trans, alpha, A, x, beta, y):
    n_rows, n_cols = A.shape
    for i in range(y.shape[0]):
        y[i] *= beta

    if trans:
        for j in range(n_cols):
            tmp = 0.
            for i in range(n_rows):
                tmp += A[i, j] * x[i]
            y[j] += alpha * tmp
    else:
        # column oriented loop, A is stored in Fortran order
        for j in range(n_cols):
            tmp = alpha * x[j]
            for i in range(n_rows):
                y[i] += tmp * A[i, j]


@njit
def _gemm(trans_a, trans_b, alpha, A, B, beta, C):
    n_rows, n_cols = C.shape
    inner = A.shape[0] if trans_a else A.shape[1]

    for i in range(n_rows):
        for j in range(n_cols):
            tmp = 0.
            for p in range(inner):
                a_ip = A[p, i] if trans_a else A[i, p]
                b_pj = B[j, p] if trans_b else B[p, j]
                tmp += a_ip * b_pj
            C[i, j] = alpha * tmp + beta * C[i, j]


@njit
def _lu_factor(lu, ipiv):
    """In place LU factorization with partial pivoting.

    Mirrors LAPACK ``?getrf``: the factorization is carried through when an
    exact zero pivot is met, and the first such pivot is reported.

    Parameters
    ----------
    lu : array, shape (n, n)
        Matrix to factorize, overwritten with ``L`` (unit diagonal omitted)
        and ``U``.

    ipiv : array, shape (n,)
        Filled with 0-based pivot indices.

    Returns
    -------
    info : int
        ``0`` on success, ``j + 1`` if ``U[j, j]`` is exactly zero.
    """
    n = lu.shape[0]
    info = 0

    for j in range(n):
        # find pivot
        p = j
        max_val = abs(lu[j, j])
        for i in range(j + 1, n):
            if abs(lu[i, j]) > max_val:
                max_val = abs(lu[i, j])
                p = i
        ipiv[j] = p

        if lu[p, j] == 0.:
            if info == 0:
                info = j + 1
            continue

        if p != j:
            for c in range(n):
                tmp = lu[j, c]
                lu[j, c] = lu[p, c]
                lu[p, c] = tmp

        pivot = lu[j, j]
        for i in range(j + 1, n):
            lu[i, j] /= pivot
            for c in range(j + 1, n):
                lu[i, c] -= lu[i, j] * lu[j, c]

    return info


@njit
def _lu_solve(lu, ipiv, x):
    n = lu.shape[0]

    for j in range(n):
        p = ipiv[j]
        if p != j:
            tmp = x[j]
            x[j] = x[p]
            x[p] = tmp

    # L has unit diagonal
    for i in range(n):
        for c in range(i):
            x[i] -= lu[i, c] * x[c]

    for i in range(n - 1, -1, -1):
        for c in range(i + 1, n):
            x[i] -= lu[i, c] * x[c]
        x[i] /= lu[i, i]


@njit
def _gesv(A, b):
    n = A.shape[0]
    lu = np.empty((n, n), dtype=A.dtype)
    lu[:, :] = A
    x = b.copy()
    ipiv = np.zeros(n, dtype=np.int32)

    info = _lu_factor(lu, ipiv)
    if info == 0:
        _lu_solve(lu, ipiv, x)
    return x, ipiv, info


class NumbaBackend(BaseBackend):
    """Dense backend made of jit-compiled loops.

    It does not depend on any external BLAS library. Kernels are compiled
    on first use for each precision.
    """

    def norm2(self, x):
        return _nrm2(x)

    def axpy(self, alpha, x, y):
        _axpy(alpha, x, y)

    def gemv(self, trans, alpha, A, x, beta, y):
        _gemv(bool(trans), alpha, A, x, beta, y)

    def gemm(self, trans_a, trans_b, alpha, A, B, beta, C):
        _gemm(bool(trans_a), bool(trans_b), alpha, A, B, beta, C)

    def gesv(self, A, b):
        x, ipiv, info = _gesv(A, b)
        return x, ipiv, int(info)
