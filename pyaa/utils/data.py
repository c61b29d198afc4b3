import numpy as np
from scipy.linalg import qr
from sklearn.utils import check_random_state


def make_linear_contraction(
        n_features=50, rate=0.9, spread=0.1, symmetric=True, random_state=None):
    r"""Generate an affine contraction and its fixed point.

    The map is

    .. math ::
        f(x) = A x + b

    where :math:`A = Q \operatorname{diag}(\lambda) Q^{-1}` has eigenvalues
    :math:`\lambda` evenly spaced in :math:`[spread \times rate, rate]`, so
    that the plain iteration :math:`x_{k+1} = f(x_k)` converges linearly
    with rate ``rate``.

    Parameters
    ----------
    n_features : int
        Dimension of the iterate.

    rate : float
        Spectral radius of ``A``, in :math:`[0, 1[`.

    spread : float
        Ratio between the smallest and largest eigenvalue of ``A``, in
        :math:`]0, 1]`.

    symmetric : bool
        If ``True``, ``Q`` is orthogonal and ``A`` symmetric. Otherwise ``Q``
        is a random well conditioned matrix.

    random_state : int | RandomState instance | None (default)
        Determines random number generation for data generation. Use an int to
        make the randomness deterministic.

    Returns
    -------
    A : ndarray, shape (n_features, n_features)
        Linear part of the map.

    b : ndarray, shape (n_features,)
        Offset of the map.

    x_star : ndarray, shape (n_features,)
        Fixed point, solution of :math:`(I - A) x = b`.
    """
    if not 0 <= rate < 1:
        raise ValueError(f"`rate` should be in [0, 1[, got {rate}")
    if not 0 < spread <= 1:
        raise ValueError(f"`spread` should be in ]0, 1], got {spread}")

    rng = check_random_state(random_state)
    eigvals = np.linspace(spread * rate, rate, n_features)

    Q, _ = qr(rng.randn(n_features, n_features))
    if symmetric:
        A = (Q * eigvals) @ Q.T
    else:
        P = Q + 0.5 * np.eye(n_features)
        A = (P * eigvals) @ np.linalg.inv(P)

    b = rng.randn(n_features)
    x_star = np.linalg.solve(np.eye(n_features) - A, b)
    return A, b, x_star


def make_affine_map(A, b):
    """Return the map ``x -> A @ x + b``.

    Parameters
    ----------
    A : ndarray, shape (n_features, n_features)
        Linear part.

    b : ndarray, shape (n_features,)
        Offset.

    Returns
    -------
    fun : callable
        The affine map, returning a new array at each call.
    """
    def fun(x):
        return A @ x + b
    return fun
