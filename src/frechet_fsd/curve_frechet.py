from __future__ import annotations

from typing import Union

import numpy as np
from numpy.typing import ArrayLike
from scipy.spatial.distance import cdist

from .model import Curve, as_curve


def discrete_frechet_distance(
    curve_a: Union[Curve, ArrayLike],
    curve_b: Union[Curve, ArrayLike],
) -> float:
    """
    Compute the discrete Fréchet distance between two polygonal curves.

    Only vertex-to-vertex couplings are considered (Eiter & Mannila), so the
    result is always an upper bound on the continuous Fréchet distance and
    equals it when both curves are single points.

    Parameters
    ----------
    curve_a : Curve or array-like, shape (n_a, 2)
        Sequence of points defining the first curve.
    curve_b : Curve or array-like, shape (n_b, 2)
        Sequence of points defining the second curve.

    Returns
    -------
    float
        Discrete Fréchet distance between the two curves (non-negative).
    """
    A = as_curve(curve_a).points
    B = as_curve(curve_b).points

    n_a = A.shape[0]
    n_b = B.shape[0]
    dist = cdist(A, B, metric="euclidean")

    # Iterative DP (non-recursive to avoid recursion depth issues)
    ca = np.empty((n_a, n_b), dtype=np.float64)
    ca[0, 0] = dist[0, 0]
    for i in range(1, n_a):
        ca[i, 0] = max(ca[i - 1, 0], dist[i, 0])
    for j in range(1, n_b):
        ca[0, j] = max(ca[0, j - 1], dist[0, j])

    for i in range(1, n_a):
        for j in range(1, n_b):
            ca[i, j] = max(
                min(ca[i - 1, j], ca[i - 1, j - 1], ca[i, j - 1]),
                dist[i, j],
            )

    return float(ca[n_a - 1, n_b - 1])
