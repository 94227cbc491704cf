from typing import Callable, List, Tuple

import numpy as np
import pytest

from frechet_fsd import Curve


def _random_walk(rng: np.random.RandomState, n: int) -> Curve:
    steps = rng.uniform(-2.0, 2.0, size=(n, 2))
    steps[:, 0] += 1.0  # drift right so curves are roughly comparable
    return Curve(np.cumsum(steps, axis=0))


@pytest.fixture
def rng() -> np.random.RandomState:
    return np.random.RandomState(42)


@pytest.fixture
def random_curve() -> Callable[[np.random.RandomState, int], Curve]:
    return _random_walk


@pytest.fixture
def random_pairs() -> List[Tuple[Curve, Curve]]:
    """Reproducible curve pairs of assorted sizes, including single points."""
    rng = np.random.RandomState(7)
    sizes = [(1, 1), (1, 4), (4, 1), (2, 2), (2, 5), (3, 3), (4, 6), (5, 5), (6, 3), (7, 7)]
    return [(_random_walk(rng, p), _random_walk(rng, q)) for p, q in sizes]
