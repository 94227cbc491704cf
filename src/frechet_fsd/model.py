from __future__ import annotations

from typing import Iterable, Tuple

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .exceptions import IndexOutOfRange, InvalidCurve


Array2D = NDArray[np.float64]
Point = Tuple[float, float]


class Curve:
    """
    An immutable polygonal curve in the plane.

    Vertices are indexed ``0..n-1`` and edge ``i`` is the segment between
    vertex ``i`` and vertex ``i + 1``, so a curve of ``n`` points has
    ``n - 1`` edges. A single point is a valid curve with no edges.

    Parameters
    ----------
    points : array-like, shape (n, 2)
        Ordered vertices of the curve. The data is copied and the stored
        array is flagged read-only.

    Raises
    ------
    InvalidCurve
        If ``points`` is empty, not a sequence of 2D points, or contains
        non-finite coordinates.
    """

    __slots__ = ("_points",)

    def __init__(self, points: ArrayLike) -> None:
        try:
            arr = np.array(points, dtype=np.float64)
        except (TypeError, ValueError) as exc:
            raise InvalidCurve(f"points must be numeric 2D coordinates: {exc}") from exc

        if arr.size == 0:
            raise InvalidCurve("a curve needs at least one point")
        if arr.ndim == 1 and arr.shape[0] == 2:
            # A bare (x, y) pair is a one-point curve
            arr = arr.reshape(1, 2)
        if arr.ndim != 2 or arr.shape[1] != 2:
            raise InvalidCurve(f"points must have shape (n, 2); got {arr.shape}")
        if not np.isfinite(arr).all():
            raise InvalidCurve("points must have finite coordinates")

        arr.flags.writeable = False
        self._points = arr

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> "Curve":
        """Build a curve from an iterable of ``(x, y)`` pairs."""
        return cls([tuple(p) for p in points])

    @property
    def points(self) -> Array2D:
        """Read-only ``(n, 2)`` array of vertices."""
        return self._points

    @property
    def n_points(self) -> int:
        return int(self._points.shape[0])

    @property
    def n_edges(self) -> int:
        return self.n_points - 1

    def __len__(self) -> int:
        return self.n_points

    def point(self, index: int) -> Point:
        if not 0 <= index < self.n_points:
            raise IndexOutOfRange(
                f"point index {index} out of range for curve with {self.n_points} points"
            )
        x, y = self._points[index]
        return (float(x), float(y))

    def edge(self, index: int) -> Tuple[Point, Point]:
        if not 0 <= index < self.n_edges:
            raise IndexOutOfRange(
                f"edge index {index} out of range for curve with {self.n_edges} edges"
            )
        return self.point(index), self.point(index + 1)

    def length(self) -> float:
        """Total Euclidean length of the curve."""
        if self.n_points < 2:
            return 0.0
        steps = np.diff(self._points, axis=0)
        return float(np.hypot(steps[:, 0], steps[:, 1]).sum())

    def reversed(self) -> "Curve":
        return Curve(self._points[::-1])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Curve):
            return NotImplemented
        return self._points.shape == other._points.shape and bool(
            np.array_equal(self._points, other._points)
        )

    def __hash__(self) -> int:
        return hash(self._points.tobytes())

    def __repr__(self) -> str:
        pts = ", ".join(f"({x:g}, {y:g})" for x, y in self._points)
        return f"Curve([{pts}])"


def as_curve(x: "Curve | ArrayLike") -> Curve:
    """Return ``x`` unchanged if it is already a curve, else wrap it."""
    if isinstance(x, Curve):
        return x
    return Curve(x)
