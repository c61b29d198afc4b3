from .base import BaseBackend
from .blas import BlasBackend
from .numba_backend import NumbaBackend

from pyaa.utils.validation import check_backend_attr


BACKENDS = {
    "blas": BlasBackend,
    "numba": NumbaBackend,
}


def get_backend(backend):
    """Return a backend instance from its name or validate a custom one.

    Parameters
    ----------
    backend : {'blas', 'numba'} or object
        Name of a shipped backend, or an instance implementing the
        :class:`BaseBackend` methods.

    Returns
    -------
    backend : object
        Backend instance.

    Raises
    ------
    ValueError
        if ``backend`` is an unknown name.

    AttributeError
        if a custom ``backend`` misses some primitives.
    """
    if isinstance(backend, str):
        if backend not in BACKENDS:
            raise ValueError(
                f"Unknown backend {backend!r}. Expected one of "
                f"{tuple(BACKENDS)} or a backend instance.")
        return BACKENDS[backend]()

    check_backend_attr(backend, BaseBackend._required_attr)
    return backend


__all__ = ["BaseBackend", "BlasBackend", "NumbaBackend", "get_backend"]
