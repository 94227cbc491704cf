from __future__ import annotations

from typing import List, Sequence, Tuple, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.spatial.distance import squareform

from .decision import ReachabilityMethod
from .distance import frechet_distance
from .exceptions import FrechetLogicError
from .model import Curve, as_curve


Array2D = NDArray[np.float64]
CurveLike = Union[Curve, ArrayLike]


def _distance(
    P: Curve,
    Q: Curve,
    method: ReachabilityMethod,
    use_bounds: bool,
) -> float:
    d = frechet_distance(P, Q, method=method, use_bounds=use_bounds)
    if d is None:
        raise FrechetLogicError(f"no Fréchet distance between {P!r} and {Q!r}")
    return d


def frechet_distance_matrix(
    curves: Sequence[CurveLike],
    *,
    method: Union[ReachabilityMethod, str] = ReachabilityMethod.PROPAGATION,
    use_bounds: bool = True,
) -> Array2D:
    """
    Symmetric matrix of continuous Fréchet distances between curves.

    Only the upper triangle is computed; the diagonal is zero.

    Parameters
    ----------
    curves : sequence of Curve or array-like
        Curves to compare.
    method : ReachabilityMethod or str
        Decision algorithm for every probe.
    use_bounds : bool
        Restrict each search to the endpoint / discrete Fréchet bounds.

    Returns
    -------
    (n, n) array
        ``D[i, j]`` is the Fréchet distance between ``curves[i]`` and
        ``curves[j]``.

    Raises
    ------
    ValueError
        If ``curves`` is empty.
    """
    if len(curves) == 0:
        raise ValueError("curves must not be empty")

    method = ReachabilityMethod(method)
    parsed = [as_curve(c) for c in curves]
    n = len(parsed)
    if n == 1:
        return np.zeros((1, 1), dtype=np.float64)

    condensed: List[float] = []
    for i in range(n - 1):
        for j in range(i + 1, n):
            condensed.append(_distance(parsed[i], parsed[j], method, use_bounds))

    return squareform(np.asarray(condensed, dtype=np.float64))


def mean_frechet_distance(
    pairs: Sequence[Tuple[CurveLike, CurveLike]],
    *,
    method: Union[ReachabilityMethod, str] = ReachabilityMethod.PROPAGATION,
) -> float:
    """
    Average continuous Fréchet distance over a sequence of curve pairs.

    Raises
    ------
    ValueError
        If ``pairs`` is empty.
    """
    if not pairs:
        raise ValueError("pairs must not be empty")

    method = ReachabilityMethod(method)
    distances: List[float] = []

    for P, Q in pairs:
        distances.append(_distance(as_curve(P), as_curve(Q), method, use_bounds=False))

    return float(np.mean(distances))
