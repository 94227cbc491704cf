import logging
import math

import numpy as np
import pytest

from frechet_fsd import (
    CriticalValueSet,
    Curve,
    FrechetLogicError,
    ReachabilityMethod,
    decide,
    discrete_frechet_distance,
    frechet_distance,
    frechet_search,
)


METHODS = [ReachabilityMethod.PROPAGATION, ReachabilityMethod.SEARCH]

CASES = [
    pytest.param([(0, 0), (3, 3)], [(1, 0), (3, 2)], 1.0, id="two-segments"),
    pytest.param(
        [(0, 0), (1, 1), (2, 2)], [(0, 0), (1, 1), (2, 2)], 0.0, id="identical-diagonal"
    ),
    pytest.param(
        [(0, 0), (1, 1), (2, 0)], [(0, 0), (1, 1), (2, 0)], 0.0, id="identical"
    ),
    pytest.param(
        [(0, 0), (1000, 0)],
        [(0, 0), (500, 0.03), (1000, 0)],
        0.03,
        id="long-edge-bump",
    ),
    pytest.param([(0, 0), (5, 0)], [(0, 1), (0, -2)], math.sqrt(29.0), id="end-gap"),
    pytest.param(
        [(0, 0), (1, 2), (2, 0), (3, 2)],
        [(0, 1), (1, -1), (2, 1), (3, -1)],
        3.0,
        id="zigzag",
    ),
    pytest.param(
        [(0, 0), (1, 1), (2, 2), (3, 3)],
        [(1, -1), (2, 0), (3, 1), (4, 2)],
        math.sqrt(2.0),
        id="shifted",
    ),
    pytest.param(
        [(1, 0), (2, 0), (4, 0), (5, 0)], [(1, 0), (3, 3), (5, 0)], 3.0, id="triangle"
    ),
    pytest.param([(0, 0)], [(0, 1), (0, 3)], 3.0, id="point-segment"),
    pytest.param([(0, 0), (4, 0)], [(2, 1)], math.sqrt(5.0), id="segment-point"),
    pytest.param([(0, 0)], [(3, 4)], 5.0, id="two-points"),
]


@pytest.mark.parametrize("method", METHODS)
@pytest.mark.parametrize("P, Q, expected", CASES)
def test_known_distances(P, Q, expected, method):
    assert frechet_distance(P, Q, method=method) == pytest.approx(expected, abs=1e-9)


@pytest.mark.parametrize("P, Q, expected", CASES)
def test_bounded_search_agrees(P, Q, expected):
    plain = frechet_search(P, Q)
    bounded = frechet_search(P, Q, use_bounds=True)

    assert bounded.distance == pytest.approx(plain.distance)
    assert bounded.n_candidates <= plain.n_candidates
    assert bounded.n_critical_values == plain.n_critical_values


def test_between_endpoint_and_discrete_bounds():
    P = Curve([(0, 0), (2, 1), (4, 2), (6, 1)])
    Q = Curve([(0, 1), (2, 3), (4, 2), (6, 0)])

    d = frechet_distance(P, Q)

    assert d is not None
    assert 1.0 - 1e-9 <= d <= discrete_frechet_distance(P, Q) + 1e-9


def test_random_pairs_properties(random_pairs):
    for P, Q in random_pairs:
        result = frechet_search(P, Q)
        d = result.distance
        cvs = CriticalValueSet.compute(P, Q)

        assert d in cvs.values
        assert decide(P, Q, d)
        below = cvs.predecessor(d)
        assert below is None or not decide(P, Q, below)

        endpoint = max(
            np.linalg.norm(P.points[0] - Q.points[0]),
            np.linalg.norm(P.points[-1] - Q.points[-1]),
        )
        assert endpoint - 1e-9 <= d <= discrete_frechet_distance(P, Q) + 1e-9

        assert frechet_distance(Q, P) == pytest.approx(d)
        assert frechet_distance(P, Q, use_bounds=True) == pytest.approx(d)
        assert frechet_distance(P, Q, method="search") == pytest.approx(d)


def test_reversing_both_curves(random_pairs):
    for P, Q in random_pairs:
        forward = frechet_distance(P, Q)
        backward = frechet_distance(P.reversed(), Q.reversed())
        assert backward == pytest.approx(forward)


def test_identity(random_curve, rng):
    for n in (1, 2, 5):
        curve = random_curve(rng, n)
        assert frechet_distance(curve, curve) == 0.0


def test_search_statistics():
    result = frechet_search([(0, 0), (3, 3)], [(1, 0), (3, 2)])

    assert result.feasible
    assert result.distance == 1.0
    assert result.n_candidates == result.n_critical_values
    assert 1 <= result.n_probes <= math.ceil(math.log2(result.n_candidates)) + 1
    assert (1.0, True) in result.probes
    assert all(isinstance(ok, bool) for _, ok in result.probes)


def test_precomputed_critical_values():
    P = Curve([(0, 0), (3, 3)])
    Q = Curve([(1, 0), (3, 2)])
    cvs = CriticalValueSet.compute(P, Q)

    assert frechet_search(P, Q, critical_values=cvs).distance == 1.0


def test_empty_critical_values_are_infeasible():
    empty = np.empty(0)
    cvs = CriticalValueSet(type_a=empty, type_b=empty, type_c=empty, values=empty)

    result = frechet_search([(0, 0), (3, 3)], [(1, 0), (3, 2)], critical_values=cvs)

    assert result.distance is None
    assert not result.feasible
    assert result.n_probes == 0


def test_no_feasible_candidate_is_a_logic_error():
    values = np.array([0.1])
    empty = np.empty(0)
    cvs = CriticalValueSet(type_a=values, type_b=empty, type_c=empty, values=values)

    with pytest.raises(FrechetLogicError):
        frechet_search([(0, 0), (3, 3)], [(1, 0), (3, 2)], critical_values=cvs)


def test_unknown_method():
    with pytest.raises(ValueError):
        frechet_distance([(0, 0), (1, 1)], [(0, 1), (1, 2)], method="bfs")


def test_probes_are_logged(caplog):
    caplog.set_level(logging.DEBUG, logger="frechet_fsd.distance")

    frechet_distance([(0, 0), (3, 3)], [(1, 0), (3, 2)])

    assert "probe eps=" in caplog.text
    assert "Fréchet distance 1" in caplog.text


@pytest.mark.parametrize("k", [1e-3, 1e3])
def test_distance_scales_with_curves(random_pairs, k):
    for P, Q in random_pairs:
        scaled = frechet_distance(Curve(P.points * k), Curve(Q.points * k))
        assert scaled == pytest.approx(k * frechet_distance(P, Q), rel=1e-6)
