import random

import pytest

from minesolve import (
    BoardSnapshot,
    FrontierIndex,
    InconsistentBoardError,
    NoMoveAvailableError,
    enumerate_combinations,
    estimate_move,
)
from minesolve.probability import (
    binomial_pmf,
    bucket_weights,
    cell_risks,
    group_by_hazard_count,
)


def _setup(grid):
    board = BoardSnapshot.from_grid(grid)
    frontier = FrontierIndex(board)
    combos = enumerate_combinations(board, frontier).combinations
    return board, frontier, combos


def test_binomial_pmf_values():
    assert binomial_pmf(2, 1, 0.5) == pytest.approx(0.5)
    assert binomial_pmf(4, 2, 0.5) == pytest.approx(0.375)
    assert binomial_pmf(0, 0, 0.0) == pytest.approx(1.0)
    assert binomial_pmf(3, 4, 0.5) == 0.0


def test_bucket_weights_are_normalized_over_observed_counts():
    weights = bucket_weights([1, 2], 4, 0.5)
    assert weights == pytest.approx({1: 0.4, 2: 0.6})
    assert sum(weights.values()) == pytest.approx(1.0)


def test_bucket_weights_fall_back_to_uniform():
    assert bucket_weights([1, 2], 4, 0.0) == pytest.approx({1: 0.5, 2: 0.5})
    assert bucket_weights([], 4, 0.5) == {}


def test_group_by_hazard_count_is_ascending(overlap_grid):
    _, _, combos = _setup(overlap_grid)

    buckets = group_by_hazard_count(combos)

    assert list(buckets) == [1, 2]
    assert buckets[1] == [(False, False, True, False), (True, False, False, False)]
    assert buckets[2] == [(False, True, False, True)]


@pytest.mark.parametrize("total", [2, 3, 4, 5])
def test_weights_sum_to_one(overlap_grid, total):
    board, frontier, combos = _setup(overlap_grid)

    estimate = estimate_move(board, frontier, combos, total, 0, random.Random(0))

    assert sum(estimate.weights.values()) == pytest.approx(1.0)


def test_bucket_beating_outside_risk_gives_its_safe_cell(overlap_grid):
    board, frontier, combos = _setup(overlap_grid)

    estimate = estimate_move(board, frontier, combos, 3, 0, random.Random(0))

    assert estimate.weights == pytest.approx({1: 8 / 17, 2: 9 / 17})
    assert estimate.expected_inside == pytest.approx(26 / 17)
    assert estimate.outside_probability == pytest.approx((3 - 26 / 17) / 3)
    assert estimate.strategy == "bucket"
    assert estimate.move == (0, 1)


def test_first_bucket_scan_reproduces_legacy_comparison(overlap_grid):
    board, frontier, combos = _setup(overlap_grid)

    estimate = estimate_move(
        board, frontier, combos, 3, 0, random.Random(0), bucket_scan="first"
    )

    assert estimate.strategy == "outside"
    assert estimate.move in {(2, 0), (2, 1), (2, 2)}


def test_outside_choice_is_reproducible(overlap_grid):
    board, frontier, combos = _setup(overlap_grid)

    moves = {
        estimate_move(
            board, frontier, combos, 3, 0, random.Random(42), bucket_scan="first"
        ).move
        for _ in range(5)
    }

    assert len(moves) == 1


def test_no_outside_cell_falls_back_to_least_risk():
    board, frontier, combos = _setup([[1, -1, 1], [-1, -1, -1]])

    estimate = estimate_move(board, frontier, combos, 2, 0, random.Random(0))

    assert estimate.outside_probability is None
    assert estimate.strategy == "least_risk"
    assert estimate.move == (0, 1)


def test_cell_risks_aggregate_bucket_weights():
    buckets = {1: [(True, False), (False, True)], 2: [(True, True)]}
    risks = cell_risks(buckets, {1: 0.5, 2: 0.5}, 2)
    assert risks.tolist() == pytest.approx([0.75, 0.75])


def test_nothing_to_weigh_picks_a_random_unknown_cell():
    board = BoardSnapshot.from_grid([[-1, 1, -1]])
    frontier = FrontierIndex(board)

    estimate = estimate_move(board, frontier, [], 1, 0, random.Random(0))

    assert estimate.strategy == "random"
    assert estimate.move in {(0, 0), (0, 2)}


def test_no_unknown_cell_raises():
    board = BoardSnapshot.from_grid([[0, 0]])
    with pytest.raises(NoMoveAvailableError):
        estimate_move(board, FrontierIndex(board), [()], 0, 0, random.Random(0))


def test_remaining_hazards_must_fit(overlap_grid):
    board, frontier, combos = _setup(overlap_grid)
    with pytest.raises(InconsistentBoardError):
        estimate_move(board, frontier, combos, 8, 0, random.Random(0))
    with pytest.raises(InconsistentBoardError):
        estimate_move(board, frontier, combos, 1, 2, random.Random(0))
