import random

import matplotlib

matplotlib.use("Agg")

import pytest

from minesolve import MoveSelector, SolverConfig


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def selector(rng):
    return MoveSelector(SolverConfig(), rng)


@pytest.fixture
def staircase_grid():
    # Hazard at (1, 1) only: the reduced matrix proves (1, 0) safe.
    return [
        [1, 1, 1],
        [-1, -1, -1],
    ]


@pytest.fixture
def overlap_grid():
    # Two revealed ones sharing (0, 1) and (1, 1); row 2 lies off the frontier.
    return [
        [1, -1, 1],
        [-1, -1, -1],
        [-1, -1, -1],
    ]
