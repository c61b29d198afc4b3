from abc import abstractmethod, ABC


class BaseBackend(ABC):
    """Base class for dense linear algebra backends.

    A backend provides the five primitives used by
    :class:`~pyaa.AndersonAccelerator`. Every array argument is a numpy
    array, possibly a non contiguous view (e.g. a column of a Fortran-ordered
    history matrix), and all arrays passed in a single call share the same
    floating point precision.

    Output arguments are updated in place, in the BLAS convention.

    Notes
    -----
    The accelerator does not require subclassing: any object implementing
    the methods listed in ``_required_attr`` is accepted.
    """

    _required_attr = ("norm2", "axpy", "gemv", "gemm", "gesv")

    @abstractmethod
    def norm2(self, x):
        """Return the Euclidean norm of ``x``.

        Parameters
        ----------
        x : array, shape (n,)
            Vector.

        Returns
        -------
        nrm : float
            ``||x||_2``.
        """

    @abstractmethod
    def axpy(self, alpha, x, y):
        """Compute ``y <- alpha * x + y`` in place.

        Parameters
        ----------
        alpha : float
            Scaling of ``x``.

        x : array, shape (n,)
            Vector added.

        y : array, shape (n,)
            Vector updated in place.
        """

    @abstractmethod
    def gemv(self, trans, alpha, A, x, beta, y):
        """Compute ``y <- alpha * op(A) @ x + beta * y`` in place.

        Parameters
        ----------
        trans : bool
            If ``True``, ``op(A) = A.T``, else ``op(A) = A``.

        alpha : float
            Scaling of the product.

        A : array, shape (m, n)
            Matrix.

        x : array, shape (n,) or (m,) if ``trans``
            Vector.

        beta : float
            Scaling of ``y`` before accumulation.

        y : array, shape (m,) or (n,) if ``trans``
            Vector updated in place.
        """

    @abstractmethod
    def gemm(self, trans_a, trans_b, alpha, A, B, beta, C):
        """Compute ``C <- alpha * op(A) @ op(B) + beta * C`` in place.

        Parameters
        ----------
        trans_a, trans_b : bool
            Whether to transpose ``A`` (resp. ``B``).

        alpha : float
            Scaling of the product.

        A, B : array
            Matrices with compatible shapes.

        beta : float
            Scaling of ``C`` before accumulation.

        C : array
            Matrix updated in place.
        """

    @abstractmethod
    def gesv(self, A, b):
        """Solve ``A @ x = b`` by LU factorization with partial pivoting.

        ``A`` and ``b`` are left untouched.

        Parameters
        ----------
        A : array, shape (n, n)
            Square matrix.

        b : array, shape (n,)
            Right hand side.

        Returns
        -------
        x : array, shape (n,)
            Solution. Its content is unspecified when ``info != 0``.

        ipiv : array, shape (n,)
            Pivot indices (0-based): row ``i`` was interchanged with
            row ``ipiv[i]``.

        info : int
            ``0`` on success, ``i > 0`` if ``U[i-1, i-1]`` is exactly zero
            (singular matrix), ``i < 0`` if the ``-i``-th argument is illegal.
        """
