"""
Free-space diagram of two polygonal curves for a fixed tolerance.

The diagram lives on the grid ``[0, q-1] x [0, p-1]`` where ``p = len(P)``
and ``q = len(Q)``: the x axis follows Q and the y axis follows P. Only the
cell boundaries are stored, as two families of intervals:

* ``L`` with shape ``(p-1, q)``: cell ``(i, j)`` is the part of edge ``i``
  of P within ``eps`` of vertex ``j`` of Q, i.e. the vertical grid segment
  from ``(j, i + low)`` to ``(j, i + high)``.
* ``B`` with shape ``(q-1, p)``: cell ``(i, j)`` is the part of edge ``i``
  of Q within ``eps`` of vertex ``j`` of P, i.e. the horizontal grid segment
  from ``(i + low, j)`` to ``(i + high, j)``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from .exceptions import IndexOutOfRange
from .geometry import ball_edge_intervals
from .model import Curve, Point


Array2D = NDArray[np.float64]
Mask = NDArray[np.bool_]


@dataclass(frozen=True)
class FreeInterval:
    """
    Free part ``[low, high]`` of an edge, as edge parameters in ``[0, 1]``.

    A single touching point is stored with ``low == high``.
    """

    low: float
    high: float

    @property
    def is_point(self) -> bool:
        return self.low == self.high

    def __contains__(self, t: float) -> bool:
        return self.low <= t <= self.high


def _frozen(arr: np.ndarray) -> np.ndarray:
    arr.flags.writeable = False
    return arr


@dataclass(frozen=True, eq=False)
class FreeSpaceDiagram:
    """
    Boundary intervals of the free space of ``curve_p`` and ``curve_q``.

    Build with :meth:`build`; the arrays are read-only afterwards and a new
    diagram is built for every tolerance.

    Attributes
    ----------
    curve_p, curve_q : Curve
        The two curves; P indexes rows (y), Q indexes columns (x).
    eps : float
        Tolerance the diagram was built for.
    l_low, l_high : (p-1, q) arrays
        Interval bounds of the ``L`` family, NaN where there is no contact.
    l_free : (p-1, q) bool array
        True where the ball around the Q vertex meets the P edge.
    b_low, b_high, b_free : (q-1, p) arrays
        Same for the ``B`` family.
    """

    curve_p: Curve
    curve_q: Curve
    eps: float
    l_low: Array2D
    l_high: Array2D
    l_free: Mask
    b_low: Array2D
    b_high: Array2D
    b_free: Mask

    @classmethod
    def build(cls, curve_p: Curve, curve_q: Curve, eps: float) -> "FreeSpaceDiagram":
        """
        Compute the ``L`` and ``B`` interval families for tolerance ``eps``.

        Raises
        ------
        ValueError
            If ``eps`` is negative or not finite.
        """
        eps = float(eps)
        if not math.isfinite(eps) or eps < 0.0:
            raise ValueError(f"eps must be a finite non-negative number; got {eps}")

        P = curve_p.points
        Q = curve_q.points

        l_low, l_high, l_free = ball_edge_intervals(P[:-1], P[1:], Q, eps)
        b_low, b_high, b_free = ball_edge_intervals(Q[:-1], Q[1:], P, eps)

        return cls(
            curve_p=curve_p,
            curve_q=curve_q,
            eps=eps,
            l_low=_frozen(l_low),
            l_high=_frozen(l_high),
            l_free=_frozen(l_free),
            b_low=_frozen(b_low),
            b_high=_frozen(b_high),
            b_free=_frozen(b_free),
        )

    @property
    def p(self) -> int:
        return self.curve_p.n_points

    @property
    def q(self) -> int:
        return self.curve_q.n_points

    @property
    def shape(self) -> Tuple[int, int]:
        """Grid extent ``(q - 1, p - 1)`` along x and y."""
        return (self.q - 1, self.p - 1)

    def _cell(
        self, low: Array2D, high: Array2D, free: Mask, i: int, j: int, name: str
    ) -> Optional[FreeInterval]:
        rows, cols = free.shape
        if not (0 <= i < rows and 0 <= j < cols):
            raise IndexOutOfRange(
                f"{name} cell ({i}, {j}) out of range for shape ({rows}, {cols})"
            )
        if not free[i, j]:
            return None
        return FreeInterval(float(low[i, j]), float(high[i, j]))

    def l_cell(self, i: int, j: int) -> Optional[FreeInterval]:
        """Free part of edge ``i`` of P around vertex ``j`` of Q, or None."""
        return self._cell(self.l_low, self.l_high, self.l_free, i, j, "L")

    def b_cell(self, i: int, j: int) -> Optional[FreeInterval]:
        """Free part of edge ``i`` of Q around vertex ``j`` of P, or None."""
        return self._cell(self.b_low, self.b_high, self.b_free, i, j, "B")

    def l_segment(self, i: int, j: int) -> Optional[Tuple[Point, Point]]:
        """``L`` cell as a vertical segment in grid coordinates."""
        cell = self.l_cell(i, j)
        if cell is None:
            return None
        return (float(j), i + cell.low), (float(j), i + cell.high)

    def b_segment(self, i: int, j: int) -> Optional[Tuple[Point, Point]]:
        """``B`` cell as a horizontal segment in grid coordinates."""
        cell = self.b_cell(i, j)
        if cell is None:
            return None
        return (i + cell.low, float(j)), (i + cell.high, float(j))

    def n_free_cells(self) -> int:
        return int(self.l_free.sum() + self.b_free.sum())
