"""
Decision procedure: is there a monotone path through the free space?

A path from grid point ``(0, 0)`` to ``(q-1, p-1)`` that stays in the free
space and never decreases in either coordinate exists exactly when the two
curves are within Fréchet distance ``eps``. The free space inside one cell
is convex, so it is enough to track, for every boundary segment, the lowest
reachable parameter: from a reachable point on the left boundary every free
point of the top boundary is reachable, and every free point of the right
boundary at or above it. The bottom boundary is symmetric.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Dict, List, Tuple, Union

import numpy as np
from numpy.typing import ArrayLike

from .free_space import FreeSpaceDiagram
from .geometry import PARAMETER_TOLERANCE, TANGENT_TOLERANCE
from .model import Curve, as_curve


logger = logging.getLogger(__name__)

_UNREACHED = math.inf


class ReachabilityMethod(str, Enum):
    """Algorithms for the monotone-path decision."""

    PROPAGATION = "propagation"
    """Forward propagation over cells in row/column order (default)."""

    SEARCH = "search"
    """Worklist search over boundary segments with a visited record."""


def _start_free(diagram: FreeSpaceDiagram) -> bool:
    p, q = diagram.p, diagram.q
    if p == 1 and q == 1:
        gap = diagram.curve_p.points[0] - diagram.curve_q.points[0]
        eps2 = diagram.eps * diagram.eps
        return float(gap @ gap) <= eps2 * (1.0 + TANGENT_TOLERANCE)

    in_l = p >= 2 and bool(diagram.l_free[0, 0]) and diagram.l_low[0, 0] <= PARAMETER_TOLERANCE
    in_b = q >= 2 and bool(diagram.b_free[0, 0]) and diagram.b_low[0, 0] <= PARAMETER_TOLERANCE
    return in_l or in_b


def _end_free(diagram: FreeSpaceDiagram) -> bool:
    p, q = diagram.p, diagram.q
    if p == 1 and q == 1:
        return _start_free(diagram)

    top = 1.0 - PARAMETER_TOLERANCE
    in_l = p >= 2 and bool(diagram.l_free[p - 2, q - 1]) and diagram.l_high[p - 2, q - 1] >= top
    in_b = q >= 2 and bool(diagram.b_free[q - 2, p - 1]) and diagram.b_high[q - 2, p - 1] >= top
    return in_l or in_b


def _advance(entry: float, low: float, high: float) -> float:
    """
    Lowest reachable parameter on a segment ``[low, high]`` entered no lower
    than ``entry``; ``_UNREACHED`` if the two do not overlap.
    """
    start = max(low, entry)
    if start > high + PARAMETER_TOLERANCE:
        return _UNREACHED
    return min(start, high)


def _propagate(diagram: FreeSpaceDiagram) -> bool:
    p, q = diagram.p, diagram.q
    l_low, l_high, l_free = diagram.l_low, diagram.l_high, diagram.l_free
    b_low, b_high, b_free = diagram.b_low, diagram.b_high, diagram.b_free
    top = 1.0 - PARAMETER_TOLERANCE

    # Lowest reachable parameter on every boundary segment
    lr = np.full((max(p - 1, 0), q), _UNREACHED)
    br = np.full((max(q - 1, 0), p), _UNREACHED)

    # Column x = 0: straight up from the start corner
    for b in range(p - 1):
        if not l_free[b, 0] or l_low[b, 0] > PARAMETER_TOLERANCE:
            break
        if b > 0 and l_high[b - 1, 0] < top:
            break
        lr[b, 0] = 0.0

    # Row y = 0: straight right from the start corner
    for a in range(q - 1):
        if not b_free[a, 0] or b_low[a, 0] > PARAMETER_TOLERANCE:
            break
        if a > 0 and b_high[a - 1, 0] < top:
            break
        br[a, 0] = 0.0

    for a in range(q - 1):
        for b in range(p - 1):
            left = lr[b, a]
            bottom = br[a, b]
            if left == _UNREACHED and bottom == _UNREACHED:
                continue

            # Right boundary of cell (a, b)
            if l_free[b, a + 1]:
                low, high = l_low[b, a + 1], l_high[b, a + 1]
                if bottom != _UNREACHED:
                    lr[b, a + 1] = low
                else:
                    lr[b, a + 1] = _advance(left, low, high)

            # Top boundary of cell (a, b)
            if b_free[a, b + 1]:
                low, high = b_low[a, b + 1], b_high[a, b + 1]
                if left != _UNREACHED:
                    br[a, b + 1] = low
                else:
                    br[a, b + 1] = _advance(bottom, low, high)

    reached_l = p >= 2 and lr[p - 2, q - 1] != _UNREACHED and l_high[p - 2, q - 1] >= top
    reached_b = q >= 2 and br[q - 2, p - 1] != _UNREACHED and b_high[q - 2, p - 1] >= top
    return bool(reached_l or reached_b)


def _search(diagram: FreeSpaceDiagram) -> bool:
    p, q = diagram.p, diagram.q
    l_low, l_high, l_free = diagram.l_low, diagram.l_high, diagram.l_free
    b_low, b_high, b_free = diagram.b_low, diagram.b_high, diagram.b_free
    top = 1.0 - PARAMETER_TOLERANCE

    # State: (family, row, column) -> lowest entry parameter pushed so far
    best: Dict[Tuple[str, int, int], float] = {}
    stack: List[Tuple[str, int, int, float]] = []

    def push(family: str, i: int, j: int, entry: float) -> None:
        if entry == _UNREACHED:
            return
        key = (family, i, j)
        if entry < best.get(key, _UNREACHED):
            best[key] = entry
            stack.append((family, i, j, entry))

    if p >= 2 and l_free[0, 0] and l_low[0, 0] <= PARAMETER_TOLERANCE:
        push("L", 0, 0, 0.0)
    if q >= 2 and b_free[0, 0] and b_low[0, 0] <= PARAMETER_TOLERANCE:
        push("B", 0, 0, 0.0)

    visits = 0
    while stack:
        family, i, j, entry = stack.pop()
        if entry > best[(family, i, j)]:
            continue
        visits += 1

        if family == "L":
            # Vertical segment x = a, y in [b, b + 1]
            b, a = i, j
            high = l_high[b, a]
            if b == p - 2 and a == q - 1 and high >= top:
                logger.debug("search reached end after %d visits", visits)
                return True
            if high >= top and b + 1 <= p - 2 and l_free[b + 1, a]:
                if l_low[b + 1, a] <= PARAMETER_TOLERANCE:
                    push("L", b + 1, a, 0.0)
            if a <= q - 2:
                if l_free[b, a + 1]:
                    push("L", b, a + 1, _advance(entry, l_low[b, a + 1], l_high[b, a + 1]))
                if b_free[a, b + 1]:
                    push("B", a, b + 1, float(b_low[a, b + 1]))
        else:
            # Horizontal segment y = b, x in [a, a + 1]
            a, b = i, j
            high = b_high[a, b]
            if a == q - 2 and b == p - 1 and high >= top:
                logger.debug("search reached end after %d visits", visits)
                return True
            if high >= top and a + 1 <= q - 2 and b_free[a + 1, b]:
                if b_low[a + 1, b] <= PARAMETER_TOLERANCE:
                    push("B", a + 1, b, 0.0)
            if b <= p - 2:
                if b_free[a, b + 1]:
                    push("B", a, b + 1, _advance(entry, b_low[a, b + 1], b_high[a, b + 1]))
                if l_free[b, a + 1]:
                    push("L", b, a + 1, float(l_low[b, a + 1]))

    logger.debug("search exhausted after %d visits", visits)
    return False


def is_reachable(
    diagram: FreeSpaceDiagram,
    *,
    method: Union[ReachabilityMethod, str] = ReachabilityMethod.PROPAGATION,
) -> bool:
    """
    Decide whether a monotone path crosses the free-space diagram.

    Parameters
    ----------
    diagram : FreeSpaceDiagram
        Diagram built for the tolerance under test.
    method : ReachabilityMethod or str
        ``"propagation"`` (default) or ``"search"``. Both give the same
        answer; propagation runs in O(p * q).

    Returns
    -------
    bool
        True if the start corner ``(0, 0)`` reaches the end corner
        ``(q-1, p-1)`` monotonically through free space.
    """
    method = ReachabilityMethod(method)

    if not (_start_free(diagram) and _end_free(diagram)):
        return False
    if diagram.p == 1 and diagram.q == 1:
        return True

    if method is ReachabilityMethod.SEARCH:
        return _search(diagram)
    return _propagate(diagram)


def decide(
    curve_p: Union[Curve, ArrayLike],
    curve_q: Union[Curve, ArrayLike],
    eps: float,
    *,
    method: Union[ReachabilityMethod, str] = ReachabilityMethod.PROPAGATION,
) -> bool:
    """Convenience wrapper: build the diagram for ``eps`` and decide."""
    diagram = FreeSpaceDiagram.build(as_curve(curve_p), as_curve(curve_q), eps)
    return is_reachable(diagram, method=method)


class DecisionProblem:
    """
    The Fréchet decision problem for a fixed pair of curves.

    The answer is computed on construction and again on every call to
    :meth:`set_epsilon`; it is never carried over between tolerances.

    Examples
    --------
    >>> problem = DecisionProblem([(0, 0), (3, 3)], [(1, 0), (3, 2)], 1.0)
    >>> problem.exists()
    True
    >>> problem.set_epsilon(0.5)
    >>> problem.exists()
    False
    """

    def __init__(
        self,
        curve_p: Union[Curve, ArrayLike],
        curve_q: Union[Curve, ArrayLike],
        eps: float,
        *,
        method: Union[ReachabilityMethod, str] = ReachabilityMethod.PROPAGATION,
    ) -> None:
        self._curve_p = as_curve(curve_p)
        self._curve_q = as_curve(curve_q)
        self._method = ReachabilityMethod(method)
        self.set_epsilon(eps)

    @property
    def curve_p(self) -> Curve:
        return self._curve_p

    @property
    def curve_q(self) -> Curve:
        return self._curve_q

    @property
    def epsilon(self) -> float:
        return self._diagram.eps

    @property
    def method(self) -> ReachabilityMethod:
        return self._method

    @property
    def diagram(self) -> FreeSpaceDiagram:
        return self._diagram

    def set_epsilon(self, eps: float) -> None:
        """Rebuild the free space for ``eps`` and recompute the answer."""
        self._diagram = FreeSpaceDiagram.build(self._curve_p, self._curve_q, eps)
        self._exists = is_reachable(self._diagram, method=self._method)

    def exists(self) -> bool:
        """True if a monotone path exists at the current tolerance."""
        return self._exists

    def __repr__(self) -> str:
        return (
            f"DecisionProblem(p={self._curve_p.n_points}, q={self._curve_q.n_points}, "
            f"eps={self.epsilon:g}, exists={self._exists})"
        )
