"""
Exact-as-floats geometric predicates shared by the free-space builder and
the critical-value enumerator.

Every function is vectorised over edges and vertices: edges are given as two
``(m, 2)`` arrays of start and end points, vertices as an ``(n, 2)`` array,
and per-pair results come back as ``(m, n)`` arrays.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np
from numpy.typing import NDArray


Array2D = NDArray[np.float64]
Array1D = NDArray[np.float64]
Mask = NDArray[np.bool_]


# Parameters this close to 0 or 1 are snapped onto the edge end
PARAMETER_TOLERANCE = 1e-9

# Relative tolerance on |d^2 - eps^2| under which a ball is tangent to a line
TANGENT_TOLERANCE = 1e-9

# Rounding allowance on a projected point, in units in the last place of the
# largest coordinate involved
COORDINATE_ULPS = 16.0

# Tolerance on the projection parameter when testing a bisector endpoint touch
BISECTOR_TOLERANCE = 1e-6


def _edge_vectors(starts: Array2D, ends: Array2D) -> Tuple[Array2D, Array1D]:
    d = ends - starts
    return d, np.einsum("ij,ij->i", d, d)


def project_parameters(starts: Array2D, ends: Array2D, vertices: Array2D) -> Array2D:
    """
    Unclamped parameter of each vertex's orthogonal projection onto the
    supporting line of each edge.

    Zero-length edges have no line; their parameter is 0 so that the
    projection is the edge point itself.
    """
    d, len2 = _edge_vectors(starts, ends)
    diff = vertices[np.newaxis, :, :] - starts[:, np.newaxis, :]
    dot = np.einsum("mnk,mk->mn", diff, d)

    degenerate = len2 == 0.0
    safe_len2 = np.where(degenerate, 1.0, len2)
    t = dot / safe_len2[:, np.newaxis]
    t[degenerate, :] = 0.0
    return t


def closest_distances(starts: Array2D, ends: Array2D, vertices: Array2D) -> Array2D:
    """
    Distance from each vertex to the closest point of each edge.

    The projection parameter is clamped to ``[0, 1]``; clamped cases use the
    edge endpoint directly rather than the interpolated point.
    """
    d, _ = _edge_vectors(starts, ends)
    t = project_parameters(starts, ends, vertices)[..., np.newaxis]

    interior = starts[:, np.newaxis, :] + t * d[:, np.newaxis, :]
    closest = np.where(
        t <= 0.0,
        starts[:, np.newaxis, :],
        np.where(t >= 1.0, ends[:, np.newaxis, :], interior),
    )
    return np.linalg.norm(vertices[np.newaxis, :, :] - closest, axis=-1)


def _rounding_slack(starts: Array2D, ends: Array2D, vertices: Array2D) -> Array2D:
    """
    Absolute error allowance on the distance from a vertex to its projection
    onto an edge, proportional to the largest coordinate magnitude involved.
    """
    edge_mag = np.maximum(np.abs(starts).max(axis=1), np.abs(ends).max(axis=1))
    vertex_mag = np.abs(vertices).max(axis=1)
    mag = np.maximum(edge_mag[:, np.newaxis], vertex_mag[np.newaxis, :])
    return COORDINATE_ULPS * np.finfo(np.float64).eps * mag


def _snap(t: Array2D) -> Array2D:
    t = np.where(t <= PARAMETER_TOLERANCE, 0.0, t)
    return np.where(t >= 1.0 - PARAMETER_TOLERANCE, 1.0, t)


def ball_edge_intervals(
    starts: Array2D,
    ends: Array2D,
    vertices: Array2D,
    eps: float,
) -> Tuple[Array2D, Array2D, Mask]:
    """
    Sub-interval of each edge lying within ``eps`` of each vertex.

    Parameters
    ----------
    starts, ends : (m, 2) arrays
        Edge endpoints.
    vertices : (n, 2) array
        Ball centres.
    eps : float
        Ball radius.

    Returns
    -------
    low, high : (m, n) arrays
        Interval bounds as edge parameters in ``[0, 1]``; NaN where there
        is no contact.
    free : (m, n) bool array
        True where the ball meets the edge. A single touching point gives
        ``low == high``.

    Notes
    -----
    The ball meets the supporting line in ``[t - r, t + r]`` with ``t`` the
    unclamped projection parameter and ``r = sqrt(eps^2 - d^2) / |edge|``;
    this is then intersected with ``[0, 1]``. Zero-length edges are a plain
    point-distance comparison and, when within reach, free over ``[0, 1]``.

    Tangency is decided against ``eps^2`` alone, widened by the rounding
    error of the projected point; it does not depend on the edge length.
    """
    d, len2 = _edge_vectors(starts, ends)
    t = project_parameters(starts, ends, vertices)

    proj = starts[:, np.newaxis, :] + t[..., np.newaxis] * d[:, np.newaxis, :]
    dist2 = np.sum((vertices[np.newaxis, :, :] - proj) ** 2, axis=-1)
    eps2 = float(eps) * float(eps)

    # Tangency band: relative to eps^2, widened only by coordinate rounding
    slack = _rounding_slack(starts, ends, vertices)
    band = TANGENT_TOLERANCE * eps2 + slack * (2.0 * float(eps) + slack)
    tangent = np.abs(dist2 - eps2) <= band
    meets_line = (dist2 < eps2) | tangent

    degenerate = len2 == 0.0
    length = np.sqrt(np.where(degenerate, 1.0, len2))
    half = np.where(tangent, 0.0, np.sqrt(np.maximum(eps2 - dist2, 0.0)))
    r = half / length[:, np.newaxis]

    lo = t - r
    hi = t + r
    free = meets_line & (hi >= -PARAMETER_TOLERANCE) & (lo <= 1.0 + PARAMETER_TOLERANCE)

    low = _snap(np.clip(lo, 0.0, 1.0))
    high = _snap(np.clip(hi, 0.0, 1.0))

    if degenerate.any():
        point_dist2 = np.sum(
            (vertices[np.newaxis, :, :] - starts[:, np.newaxis, :]) ** 2, axis=-1
        )
        within = point_dist2 <= eps2 * (1.0 + TANGENT_TOLERANCE)
        free[degenerate, :] = within[degenerate, :]
        low[degenerate, :] = 0.0
        high[degenerate, :] = 1.0

    low = np.where(free, low, np.nan)
    high = np.where(free, high, np.nan)
    return low, high, free


def bisector_crossing(
    a: Array1D,
    b: Array1D,
    starts: Array2D,
    ends: Array2D,
) -> Tuple[Array2D, Mask]:
    """
    Where the perpendicular bisector of ``a`` and ``b`` crosses each edge.

    Both edge endpoints are projected onto the vector ``a -> b``; the
    bisector sits at parameter 0.5 of that vector. An edge whose endpoints
    project strictly to the same side of 0.5 is not crossed. An endpoint
    projecting within ``BISECTOR_TOLERANCE`` of 0.5 is itself the crossing
    (the one nearer ``a`` if both do); otherwise the crossing divides the
    edge in the ratio ``(0.5 - pa) : (pb - 0.5)``.

    Returns
    -------
    crossings : (m, 2) array
        Crossing points; rows where ``found`` is False are meaningless.
    found : (m,) bool array
    """
    m = starts.shape[0]
    d = np.asarray(b, dtype=np.float64) - np.asarray(a, dtype=np.float64)
    len2 = float(d @ d)

    if len2 == 0.0 or m == 0:
        # Coincident vertices have no bisector
        return np.zeros((m, 2), dtype=np.float64), np.zeros(m, dtype=bool)

    pa = ((starts - a) @ d) / len2
    pb = ((ends - a) @ d) / len2

    apart = ((pa < 0.5) & (pb < 0.5)) | ((pa > 0.5) & (pb > 0.5))
    start_on = np.abs(pa - 0.5) < BISECTOR_TOLERANCE
    end_on = np.abs(pb - 0.5) < BISECTOR_TOLERANCE
    both_on = start_on & end_on

    r1 = (0.5 - pa)[:, np.newaxis]
    r2 = (pb - 0.5)[:, np.newaxis]
    with np.errstate(divide="ignore", invalid="ignore"):
        crossings = (r2 * starts + r1 * ends) / (r1 + r2)

    nearer_start = np.sum((starts - a) ** 2, axis=1) < np.sum((ends - a) ** 2, axis=1)
    crossings = np.where((start_on & ~end_on)[:, np.newaxis], starts, crossings)
    crossings = np.where((end_on & ~start_on)[:, np.newaxis], ends, crossings)
    crossings = np.where(
        both_on[:, np.newaxis],
        np.where(nearer_start[:, np.newaxis], starts, ends),
        crossings,
    )
    return crossings, ~apart
