"""
frechet-fsd: Continuous Fréchet Distance via Free-Space Diagrams

This package decides and computes the continuous Fréchet distance between
two polygonal curves in the plane, using the free-space diagram, a
monotone-reachability decision and a binary search over critical values.
"""

from .exceptions import FrechetLogicError, IndexOutOfRange, InvalidCurve
from .model import Curve, Point
from .free_space import FreeInterval, FreeSpaceDiagram
from .critical_values import CriticalValueSet
from .decision import (
    DecisionProblem,
    ReachabilityMethod,
    decide,
    is_reachable,
)
from .distance import FrechetResult, frechet_distance, frechet_search
from .curve_frechet import discrete_frechet_distance
from .pairwise import frechet_distance_matrix, mean_frechet_distance

__version__ = "0.1.0"

__all__ = [
    # Errors
    "FrechetLogicError",
    "IndexOutOfRange",
    "InvalidCurve",
    # Data model
    "Curve",
    "Point",
    # Free space
    "FreeInterval",
    "FreeSpaceDiagram",
    # Critical values
    "CriticalValueSet",
    # Decision problem
    "DecisionProblem",
    "ReachabilityMethod",
    "decide",
    "is_reachable",
    # Distance
    "FrechetResult",
    "frechet_distance",
    "frechet_search",
    # Discrete bound
    "discrete_frechet_distance",
    # Collections of curves
    "frechet_distance_matrix",
    "mean_frechet_distance",
]
