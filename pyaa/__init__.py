__version__ = '0.1dev'

from pyaa.accelerator import (  # noqa F401
    AndersonAccelerator, AcceleratorState, AllocationError,
    MAX_AA_NRM, DISABLED, WARMUP, REJECTED,
)
from .solvers import FixedPointSolver  # noqa F401
