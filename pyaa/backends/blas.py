from functools import lru_cache

import numpy as np
from scipy.linalg.blas import get_blas_funcs
from scipy.linalg.lapack import get_lapack_funcs

from pyaa.backends.base import BaseBackend


@lru_cache()
def _cached_routines(dtype):
    """Fetch (and cache) the BLAS/LAPACK routines matching ``dtype``."""
    probe = np.empty(0, dtype=dtype)
    nrm2, axpy, gemv, gemm = get_blas_funcs(
        ("nrm2", "axpy", "gemv", "gemm"), (probe,))
    gesv, = get_lapack_funcs(("gesv",), (probe,))
    return dict(nrm2=nrm2, axpy=axpy, gemv=gemv, gemm=gemm, gesv=gesv)


class BlasBackend(BaseBackend):
    """Dense backend calling the BLAS and LAPACK libraries shipped with scipy.

    Single precision arrays are dispatched to the ``s*`` routines and double
    precision ones to the ``d*`` routines.
    """

    def _routine(self, name, arr):
        return _cached_routines(np.dtype(arr.dtype))[name]

    def norm2(self, x):
        return self._routine("nrm2", x)(x)

    def axpy(self, alpha, x, y):
        # f2py works in place on contiguous inputs and on a copy otherwise
        y[...] = self._routine("axpy", y)(x, y, a=alpha)

    def gemv(self, trans, alpha, A, x, beta, y):
        y[...] = self._routine("gemv", A)(
            alpha, A, x, beta=beta, y=y, trans=int(trans))

    def gemm(self, trans_a, trans_b, alpha, A, B, beta, C):
        C[...] = self._routine("gemm", A)(
            alpha, A, B, beta=beta, c=C,
            trans_a=int(trans_a), trans_b=int(trans_b))

    def gesv(self, A, b):
        _, ipiv, x, info = self._routine("gesv", A)(A, b[:, None])
        return np.ravel(x), ipiv, int(info)
