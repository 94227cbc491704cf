"""
Continuous Fréchet distance by binary search over critical values.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .critical_values import CriticalValueSet
from .curve_frechet import discrete_frechet_distance
from .decision import ReachabilityMethod, is_reachable
from .exceptions import FrechetLogicError
from .free_space import FreeSpaceDiagram
from .model import Curve, as_curve


logger = logging.getLogger(__name__)

Array1D = NDArray[np.float64]

# Slack on the discrete upper bound, which is computed along another path
BOUND_RTOL = 1e-9


@dataclass(frozen=True)
class FrechetResult:
    """
    Outcome of a Fréchet distance search.

    Attributes
    ----------
    distance : float or None
        Smallest feasible critical value, or None if there was nothing to
        search (infeasible).
    n_critical_values : int
        Number of distinct critical values of the pair of curves.
    n_candidates : int
        Number of values the binary search ran over (fewer than
        ``n_critical_values`` when bounds were used).
    probes : tuple of (float, bool)
        Every tolerance probed, in order, with its decision.
    """

    distance: Optional[float]
    n_critical_values: int
    n_candidates: int
    probes: Tuple[Tuple[float, bool], ...] = ()

    @property
    def n_probes(self) -> int:
        return len(self.probes)

    @property
    def feasible(self) -> bool:
        return self.distance is not None


def _bounded_candidates(values: Array1D, curve_p: Curve, curve_q: Curve) -> Array1D:
    """
    Critical values between the endpoint lower bound and the discrete
    Fréchet upper bound of the continuous distance.
    """
    P, Q = curve_p.points, curve_q.points
    lower = max(
        float(np.linalg.norm(P[0] - Q[0])),
        float(np.linalg.norm(P[-1] - Q[-1])),
    )
    upper = discrete_frechet_distance(curve_p, curve_q)
    upper = upper * (1.0 + BOUND_RTOL) + BOUND_RTOL

    kept = values[(values >= lower) & (values <= upper)]
    logger.debug(
        "bounds [%g, %g] keep %d of %d critical values", lower, upper, kept.size, values.size
    )
    return kept


def frechet_search(
    curve_p: Union[Curve, ArrayLike],
    curve_q: Union[Curve, ArrayLike],
    *,
    method: Union[ReachabilityMethod, str] = ReachabilityMethod.PROPAGATION,
    use_bounds: bool = False,
    critical_values: Optional[CriticalValueSet] = None,
) -> FrechetResult:
    """
    Compute the continuous Fréchet distance between two polygonal curves.

    The decision "are P and Q within eps" only changes at critical values,
    so the distance is the smallest critical value for which a monotone
    path exists. It is found by binary search, building a fresh free-space
    diagram for every probe.

    Parameters
    ----------
    curve_p, curve_q : Curve or array-like, shape (n, 2)
        The two curves.
    method : ReachabilityMethod or str
        Decision algorithm used for each probe.
    use_bounds : bool
        If True, only search critical values between the larger endpoint
        distance and the discrete Fréchet distance. The result is the same;
        fewer probes are made.
    critical_values : CriticalValueSet, optional
        Precomputed critical values for this pair of curves.

    Returns
    -------
    FrechetResult
        Distance (None if infeasible) and search statistics.

    Raises
    ------
    FrechetLogicError
        If critical values exist but none of the probed ones is feasible.
    """
    P = as_curve(curve_p)
    Q = as_curve(curve_q)
    method = ReachabilityMethod(method)

    if critical_values is None:
        critical_values = CriticalValueSet.compute(P, Q)
    values = critical_values.values
    candidates = _bounded_candidates(values, P, Q) if use_bounds else values

    if candidates.size == 0:
        logger.debug("no critical values; infeasible")
        return FrechetResult(
            distance=None,
            n_critical_values=int(values.size),
            n_candidates=0,
        )

    lo, hi = 0, int(candidates.size) - 1
    best: Optional[float] = None
    probes = []

    while lo <= hi:
        mid = lo + (hi - lo) // 2
        eps = float(candidates[mid])
        diagram = FreeSpaceDiagram.build(P, Q, eps)
        feasible = is_reachable(diagram, method=method)
        probes.append((eps, feasible))
        logger.debug("probe eps=%.12g feasible=%s", eps, feasible)

        if feasible:
            best = eps
            hi = mid - 1
        else:
            lo = mid + 1

    if best is None:
        raise FrechetLogicError(
            f"no feasible critical value among {candidates.size} candidates; "
            f"largest probed was {float(candidates[-1]):.12g}"
        )

    logger.debug("Fréchet distance %.12g after %d probes", best, len(probes))
    return FrechetResult(
        distance=best,
        n_critical_values=int(values.size),
        n_candidates=int(candidates.size),
        probes=tuple(probes),
    )


def frechet_distance(
    curve_p: Union[Curve, ArrayLike],
    curve_q: Union[Curve, ArrayLike],
    *,
    method: Union[ReachabilityMethod, str] = ReachabilityMethod.PROPAGATION,
    use_bounds: bool = False,
) -> Optional[float]:
    """
    Convenience wrapper: the continuous Fréchet distance, or None if
    infeasible.

    Examples
    --------
    >>> frechet_distance([(0, 0), (3, 3)], [(1, 0), (3, 2)])
    1.0
    """
    return frechet_search(
        curve_p,
        curve_q,
        method=method,
        use_bounds=use_bounds,
    ).distance
