from .data import make_linear_contraction, make_affine_map  # noqa F401
from .validation import check_backend_attr, check_variant  # noqa F401
