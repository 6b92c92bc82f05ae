import pytest

from minesolve import Minesweeper


@pytest.mark.parametrize("seed", range(20))
def test_first_reveal_is_never_a_hazard(seed):
    game = Minesweeper(5, 5, 20, seed=seed)
    status, payload = game.reveal((2, 2))
    assert status != -1
    assert (2, 2) not in game.hazards
    assert len(game.hazards) == 20


def test_safe_neighborhood_rule_clears_first_neighbors():
    game = Minesweeper(6, 6, 20, placement_rule="safe_neighborhood", seed=1)
    game.reveal((3, 3))
    for cell in game.neighbors((3, 3)):
        assert cell not in game.hazards
    assert game.counts[3][3] == 0


def test_flood_fill_on_empty_board_wins_at_once():
    game = Minesweeper(4, 5, 0, seed=0)
    status, payload = game.reveal((0, 0))
    assert status == 1
    assert len(payload["revealed_cells"]) == 20
    assert game.snapshot() == [[0] * 5 for _ in range(4)]


def test_snapshot_hides_unrevealed_cells():
    game = Minesweeper(4, 4, 3, seed=2)
    assert game.snapshot() == [[-1] * 4 for _ in range(4)]

    game.reveal((0, 0))
    snap = game.snapshot()
    for r in range(4):
        for c in range(4):
            if game.revealed[r][c]:
                assert snap[r][c] == game.counts[r][c]
            else:
                assert snap[r][c] == -1


def test_hitting_a_hazard_loses():
    game = Minesweeper(4, 4, 5, seed=3)
    game.place_hazards((0, 0))
    hazard = sorted(game.hazards)[0]

    status, payload = game.reveal(hazard)

    assert status == -1
    assert payload["all_hazards"] == frozenset(game.hazards)
    assert game.reveal((3, 3)) == (0, {})


@pytest.mark.parametrize(
    "args",
    [
        (0, 4, 1),
        (4, 4, -1),
        (3, 3, 9),
    ],
)
def test_invalid_games_are_rejected(args):
    with pytest.raises(ValueError):
        Minesweeper(*args)


def test_unknown_placement_rule_is_rejected():
    with pytest.raises(ValueError):
        Minesweeper(4, 4, 2, placement_rule="anywhere")


def test_reveal_outside_board_raises():
    game = Minesweeper(3, 3, 1, seed=0)
    with pytest.raises(ValueError):
        game.reveal((3, 0))


def test_format_board_shows_hazards_when_asked():
    game = Minesweeper(3, 3, 1, seed=0)
    game.reveal((0, 0))
    assert "M" in game.format_board(reveal_all=True)
