import pytest

from minesolve import (
    BoardSnapshot,
    FrontierIndex,
    enumerate_combinations,
    is_valid_combination,
)
from minesolve.utils import EXCLUDED


@pytest.fixture
def long_strip():
    # 25 frontier cells under a row of ones; hazards sit at every third column.
    board = BoardSnapshot.from_grid([[1] * 25, [-1] * 25])
    return board, FrontierIndex(board)


def test_pair_yields_both_placements_in_search_order():
    board = BoardSnapshot.from_grid([[-1, 1, -1]])
    frontier = FrontierIndex(board)

    result = enumerate_combinations(board, frontier)

    assert result.combinations == [(False, True), (True, False)]
    assert result.nodes_visited == 5
    assert not result.truncated


def test_wide_frontier_stays_within_default_budget(long_strip):
    board, frontier = long_strip
    assert len(frontier) == 25

    result = enumerate_combinations(board, frontier, 60000)

    assert result.combinations
    assert result.nodes_visited <= 60000
    expected = tuple(i % 3 == 0 for i in range(25))
    assert result.combinations == [expected]
    for combo in result.combinations:
        assert is_valid_combination(board, frontier, combo)


def test_budget_exhaustion_stops_the_search(long_strip):
    board, frontier = long_strip

    result = enumerate_combinations(board, frontier, 10)

    assert result.truncated
    assert result.nodes_visited == 10
    assert result.combinations == []


def test_truncated_run_is_a_prefix_of_the_full_run(long_strip):
    board, frontier = long_strip
    full = enumerate_combinations(board, frontier, 60000)

    partial = enumerate_combinations(board, frontier, full.nodes_visited - 1)

    assert partial.truncated
    assert partial.nodes_visited == full.nodes_visited - 1
    assert partial.combinations == full.combinations[: len(partial.combinations)]


def test_empty_frontier_has_the_empty_placement():
    board = BoardSnapshot.from_grid([[-1, 2, -1, -1]]).normalized({(0, 0), (0, 2)})
    frontier = FrontierIndex(board)

    result = enumerate_combinations(board, frontier)

    assert result.combinations == [()]
    assert result.nodes_visited == 1


def test_zero_count_keeps_its_neighbors_clear():
    # (0, 2) shows 0, so the only placement for (0, 1) is (1, 0).
    board = BoardSnapshot(((EXCLUDED, 1, 0), (-1, -1, -1)))
    frontier = FrontierIndex(board)

    result = enumerate_combinations(board, frontier)

    assert list(frontier) == [(1, 0), (1, 1), (1, 2)]
    assert result.combinations == [(True, False, False)]


def test_revealed_count_without_frontier_neighbors_yields_nothing():
    board = BoardSnapshot(((EXCLUDED, 1),))

    result = enumerate_combinations(board, FrontierIndex(board))

    assert result.combinations == []
    assert result.nodes_visited == 0


def test_is_valid_combination_checks_every_count():
    board = BoardSnapshot.from_grid([[-1, 1, -1]])
    frontier = FrontierIndex(board)

    assert is_valid_combination(board, frontier, (True, False))
    assert not is_valid_combination(board, frontier, (True, True))
    assert not is_valid_combination(board, frontier, (False, False))
    with pytest.raises(ValueError):
        is_valid_combination(board, frontier, (True,))


def test_non_positive_budget_is_rejected(long_strip):
    board, frontier = long_strip
    with pytest.raises(ValueError):
        enumerate_combinations(board, frontier, 0)
