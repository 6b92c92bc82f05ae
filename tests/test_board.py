import numpy as np
import pytest

from minesolve import BoardSnapshot, InconsistentBoardError, InvalidBoardError
from minesolve.utils import EXCLUDED, get_neighborhoods


@pytest.mark.parametrize(
    "grid",
    [
        [],
        [[]],
        [[-1, -1], [-1]],
        [[-1, 9]],
        [[-2, 1]],
        [[-1, 1.5]],
        [[-1, True]],
        [[-1, "1"]],
        "-1 -1",
        [-1, -1],
    ],
)
def test_from_grid_rejects_malformed_input(grid):
    with pytest.raises(InvalidBoardError):
        BoardSnapshot.from_grid(grid)


def test_invalid_board_error_is_a_value_error():
    with pytest.raises(ValueError):
        BoardSnapshot.from_grid([[10]])


def test_from_grid_accepts_numpy_arrays():
    board = BoardSnapshot.from_grid(np.array([[-1, 1], [1, 1]]))
    assert board.rows == 2
    assert board.cols == 2
    assert board.value((0, 0)) == -1
    assert isinstance(board.value((1, 1)), int)


def test_queries_are_bounds_checked():
    board = BoardSnapshot.from_grid([[-1, 1], [1, 1]])
    with pytest.raises(IndexError):
        board.value((2, 0))
    with pytest.raises(IndexError):
        board.neighbors((0, -1))


def test_neighbors_exclude_self_and_off_grid_cells():
    board = BoardSnapshot.from_grid([[-1] * 3 for _ in range(3)])
    assert board.neighbors((0, 0)) == ((0, 1), (1, 0), (1, 1))
    assert len(board.neighbors((1, 1))) == 8
    assert (1, 1) not in board.neighbors((1, 1))


def test_get_neighborhoods_rejects_empty_grid():
    with pytest.raises(ValueError):
        get_neighborhoods(0, 3)


def test_unknown_count_and_untouched():
    untouched = BoardSnapshot.from_grid([[-1, -1], [-1, -1]])
    assert untouched.is_untouched()
    assert untouched.unknown_count() == 4

    board = BoardSnapshot.from_grid([[-1, 1], [-1, 1]])
    assert not board.is_untouched()
    assert board.unknown_count() == 2
    assert list(board.unknown_cells()) == [(0, 0), (1, 0)]
    assert list(board.revealed_cells()) == [(0, 1), (1, 1)]


def test_normalized_returns_new_board_and_leaves_original_alone():
    board = BoardSnapshot.from_grid([[-1, 1, 0], [-1, 1, 0]])

    normalized = board.normalized({(0, 0)})

    assert normalized.to_list() == [[EXCLUDED, 0, 0], [-1, 0, 0]]
    assert normalized.is_excluded((0, 0))
    assert board.to_list() == [[-1, 1, 0], [-1, 1, 0]]


def test_normalized_decrements_once_per_new_hazard():
    board = BoardSnapshot.from_grid([[-1, 2, -1]])

    normalized = board.normalized({(0, 0), (0, 2)})

    assert normalized.value((0, 1)) == 0
    # Excluding an already excluded cell changes nothing.
    assert normalized.normalized({(0, 0)}) == normalized


def test_normalized_rejects_hazard_on_revealed_cell():
    board = BoardSnapshot.from_grid([[-1, 1, 0]])
    with pytest.raises(InconsistentBoardError):
        board.normalized({(0, 1)})


def test_normalized_rejects_count_below_zero():
    board = BoardSnapshot.from_grid([[-1, 0]])
    with pytest.raises(InconsistentBoardError):
        board.normalized({(0, 0)})


def test_format_marks_cell_kinds():
    board = BoardSnapshot.from_grid([[-1, 1, -1]]).normalized({(0, 0)})
    assert board.format() == "* 0 ."
