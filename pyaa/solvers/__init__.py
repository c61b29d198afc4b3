from .base import BaseSolver
from .fixed_point import FixedPointSolver


__all__ = ["BaseSolver", "FixedPointSolver"]
