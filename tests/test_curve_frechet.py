import math

import numpy as np
import pytest

from frechet_fsd import Curve, discrete_frechet_distance, frechet_distance


def test_discrete_known_value():
    P = np.array([[1, 1], [2, 1], [2, 2]])
    Q = np.array([[2, 2], [0, 1], [2, 4]])

    assert discrete_frechet_distance(P, Q) == pytest.approx(2.0)


def test_discrete_triangle_exceeds_continuous():
    t1 = [(1, 0), (2, 0), (4, 0), (5, 0)]
    t2 = [(1, 0), (3, 3), (5, 0)]

    assert discrete_frechet_distance(t1, t2) == pytest.approx(math.sqrt(10.0))
    assert frechet_distance(t1, t2) == pytest.approx(3.0)


def test_discrete_identity_and_symmetry(random_pairs):
    for P, Q in random_pairs:
        assert discrete_frechet_distance(P, P) == 0.0
        assert discrete_frechet_distance(P, Q) == discrete_frechet_distance(Q, P)


def test_discrete_single_points():
    assert discrete_frechet_distance(Curve([(0, 0)]), Curve([(3, 4)])) == 5.0
    assert discrete_frechet_distance([(0, 0)], [(0, 1), (0, 3)]) == 3.0


def test_discrete_is_upper_bound(random_pairs):
    for P, Q in random_pairs:
        assert frechet_distance(P, Q) <= discrete_frechet_distance(P, Q) + 1e-9
