from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

import numpy as np
from numpy.typing import NDArray

from .geometry import bisector_crossing, closest_distances
from .model import Curve


logger = logging.getLogger(__name__)

Array1D = NDArray[np.float64]
Array2D = NDArray[np.float64]


def _readonly(values: Array1D) -> Array1D:
    arr = np.ascontiguousarray(values, dtype=np.float64)
    arr.flags.writeable = False
    return arr


def _type_a(P: Array2D, Q: Array2D) -> Array1D:
    values = [
        float(np.linalg.norm(P[0] - Q[0])),
        float(np.linalg.norm(P[-1] - Q[-1])),
    ]
    # A single point must cover every vertex of the other curve
    if P.shape[0] == 1:
        values.extend(np.linalg.norm(Q - P[0], axis=1).tolist())
    if Q.shape[0] == 1:
        values.extend(np.linalg.norm(P - Q[0], axis=1).tolist())
    return np.asarray(values, dtype=np.float64)


def _type_b(P: Array2D, Q: Array2D) -> Array1D:
    # Vertices of P against edges of Q, then vertices of Q against edges of P
    p_on_q = closest_distances(Q[:-1], Q[1:], P).T
    q_on_p = closest_distances(P[:-1], P[1:], Q).T
    return np.concatenate([p_on_q.ravel(), q_on_p.ravel()])


def _type_c_one_way(V: Array2D, E: Array2D) -> Array1D:
    """Bisector events for vertex pairs of ``V`` against edges of ``E``."""
    starts, ends = E[:-1], E[1:]
    if starts.shape[0] == 0:
        return np.empty(0, dtype=np.float64)

    chunks = []
    n = V.shape[0]
    for i in range(n - 1):
        for j in range(i + 1, n):
            crossings, found = bisector_crossing(V[i], V[j], starts, ends)
            if found.any():
                chunks.append(np.linalg.norm(crossings[found] - V[i], axis=1))

    if not chunks:
        return np.empty(0, dtype=np.float64)
    return np.concatenate(chunks)


def _type_c(P: Array2D, Q: Array2D) -> Array1D:
    return np.concatenate([_type_c_one_way(P, Q), _type_c_one_way(Q, P)])


@dataclass(frozen=True, eq=False)
class CriticalValueSet:
    """
    Candidate tolerances at which the Fréchet decision can change.

    Attributes
    ----------
    type_a : array
        Distances between the start vertices and between the end vertices.
        When one curve is a single point, also its distance to every vertex
        of the other curve.
    type_b : array
        For every vertex of one curve and edge of the other, the distance
        from the vertex to the closest point of the edge.
    type_c : array
        For every vertex pair ``i < j`` of one curve and edge of the other,
        the distance from vertex ``i`` to where the perpendicular bisector of
        the pair crosses the edge.
    values : array
        Union of the three, sorted ascending, exact duplicates removed.
    """

    type_a: Array1D
    type_b: Array1D
    type_c: Array1D
    values: Array1D

    @classmethod
    def compute(cls, curve_p: Curve, curve_q: Curve) -> "CriticalValueSet":
        """
        Enumerate all critical values of ``curve_p`` and ``curve_q``.

        Runs in O(p^2 q + q^2 p) time, dominated by the bisector events.
        """
        P = curve_p.points
        Q = curve_q.points

        type_a = _type_a(P, Q)
        type_b = _type_b(P, Q)
        type_c = _type_c(P, Q)
        values = np.unique(np.concatenate([type_a, type_b, type_c]))

        logger.debug(
            "critical values: %d type A, %d type B, %d type C, %d distinct",
            type_a.size,
            type_b.size,
            type_c.size,
            values.size,
        )

        return cls(
            type_a=_readonly(type_a),
            type_b=_readonly(type_b),
            type_c=_readonly(type_c),
            values=_readonly(values),
        )

    def __len__(self) -> int:
        return int(self.values.size)

    def __iter__(self) -> Iterator[float]:
        return iter(self.values.tolist())

    def __getitem__(self, index: int) -> float:
        return float(self.values[index])

    def predecessor(self, value: float) -> "float | None":
        """Largest critical value strictly below ``value``, or None."""
        idx = int(np.searchsorted(self.values, value, side="left"))
        if idx == 0:
            return None
        return float(self.values[idx - 1])
