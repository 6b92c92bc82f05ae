"""Analysis and benchmarking tools for the move selector."""

import logging
import random
from collections import Counter
from typing import Dict, List, Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np

from .config import SolverConfig
from .engine import Minesweeper
from .solver import MoveSelector

logger = logging.getLogger(__name__)

PHASES = ("opening", "deduction", "probability")

# Standard difficulty levels: (rows, cols, hazards)
LEVELS: Dict[str, Tuple[int, int, int]] = {
    "beginner": (9, 9, 10),
    "intermediate": (16, 16, 40),
    "expert": (16, 30, 99),
}


def play_game(
    rows: int,
    cols: int,
    hazards_count: int,
    *,
    config: Optional[SolverConfig] = None,
    seed: Optional[int] = None,
    placement_rule: str = "safe_cell",
    max_moves: Optional[int] = None,
) -> Dict[str, object]:
    """
    Play one game to the end, asking a MoveSelector for every move.

    Args:
        rows: Board rows.
        cols: Board columns.
        hazards_count: Hazards on the board.
        config: Solver settings.
        seed: Seeds both the hazard placement and the solver's generator.
        placement_rule: Hazard placement rule passed to the game board.
        max_moves: Safety cap on the number of moves; defaults to the
            number of cells.

    Returns:
        Dict with "status" (-1 loss, 1 win), "moves", "revealed_cells_count",
        "phase_counts" (moves per phase), "truncated_count" (probability
        moves made on a truncated enumeration) and "moves_sequence".

    Raises:
        RuntimeError: If the selector repeats a revealed cell or the game
            does not end within max_moves.
    """
    game = Minesweeper(rows, cols, hazards_count, placement_rule, seed=seed)
    rng = random.Random(seed) if seed is not None else None
    selector = MoveSelector(config, rng)

    phase_counts: Counter = Counter()
    truncated_count = 0
    moves_sequence: List[Tuple[int, int, str]] = []
    limit = max_moves if max_moves is not None else rows * cols

    status = 0
    for _ in range(limit):
        decision = selector.decide(game.snapshot(), hazards_count)
        r, c = decision.move
        if game.revealed[r][c]:
            raise RuntimeError(f"Selector chose already revealed cell {decision.move}.")

        phase_counts[decision.phase] += 1
        if decision.detail.get("truncated"):
            truncated_count += 1
        moves_sequence.append((r, c, decision.phase))

        status, _ = game.reveal(decision.move)
        if status != 0:
            break
    else:
        raise RuntimeError(f"Game did not finish within {limit} moves.")

    revealed_cells_count = sum(
        1
        for r in range(rows)
        for c in range(cols)
        if game.revealed[r][c] and (r, c) not in game.hazards
    )

    return {
        "status": status,
        "moves": len(moves_sequence),
        "revealed_cells_count": revealed_cells_count,
        "phase_counts": {phase: phase_counts[phase] for phase in PHASES},
        "truncated_count": truncated_count,
        "moves_sequence": moves_sequence,
    }


def run_many_games(
    rows: int,
    cols: int,
    hazards_count: int,
    runs: int,
    *,
    config: Optional[SolverConfig] = None,
    seed: Optional[int] = None,
    placement_rule: str = "safe_cell",
) -> Dict[str, float]:
    """
    Play many independent games and return averaged metrics plus win rate.

    Args:
        rows: Board rows.
        cols: Board columns.
        hazards_count: Hazards on the board.
        runs: Number of games, must be > 0.
        config: Solver settings.
        seed: Base seed; game i uses seed + i. None leaves games unseeded.
        placement_rule: Hazard placement rule passed to the game board.

    Returns:
        Dict with "win_rate", "avg_moves", "avg_revealed_cells_count",
        "avg_<phase>_moves" for each phase, "avg_truncated_count" and
        "guess_failure_rate" (losses per probability move).
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    statuses = np.zeros(runs, dtype=int)
    moves = np.zeros(runs, dtype=float)
    revealed = np.zeros(runs, dtype=float)
    truncated = np.zeros(runs, dtype=float)
    phases = {phase: np.zeros(runs, dtype=float) for phase in PHASES}

    for i in range(runs):
        game_seed = seed + i if seed is not None else None
        result = play_game(
            rows,
            cols,
            hazards_count,
            config=config,
            seed=game_seed,
            placement_rule=placement_rule,
        )
        statuses[i] = result["status"]
        moves[i] = result["moves"]
        revealed[i] = result["revealed_cells_count"]
        truncated[i] = result["truncated_count"]
        phase_counts = result["phase_counts"]
        for phase in PHASES:
            phases[phase][i] = phase_counts[phase]  # type: ignore[index]

    out: Dict[str, float] = {
        "win_rate": float(np.mean(statuses == 1)),
        "avg_moves": float(moves.mean()),
        "avg_revealed_cells_count": float(revealed.mean()),
        "avg_truncated_count": float(truncated.mean()),
    }
    for phase in PHASES:
        out[f"avg_{phase}_moves"] = float(phases[phase].mean())

    total_guesses = float(phases["probability"].sum())
    losses = float(np.sum(statuses == -1))
    out["guess_failure_rate"] = losses / total_guesses if total_guesses > 0 else 0.0

    logger.info(
        "%dx%d with %d hazards: win rate %.3f over %d games",
        rows,
        cols,
        hazards_count,
        out["win_rate"],
        runs,
    )
    return out


def run_standard_levels(
    runs: int,
    *,
    config: Optional[SolverConfig] = None,
    seed: Optional[int] = None,
    show_plots: bool = True,
) -> Dict[str, Dict[str, float]]:
    """
    Benchmark the selector on the standard difficulty levels and plot summaries.

    Args:
        runs: Games per level.
        config: Solver settings.
        seed: Base seed for every level.
        show_plots: If True, draw the phase-mix and win-rate charts.

    Returns:
        Mapping level name -> statistics from run_many_games().

    Standard difficulty levels:
        - Beginner: 9x9, 10 hazards
        - Intermediate: 16x16, 40 hazards
        - Expert: 16x30, 99 hazards
    """
    results: Dict[str, Dict[str, float]] = {}
    for level, (r, c, m) in LEVELS.items():
        results[level] = run_many_games(r, c, m, runs, config=config, seed=seed)

    if show_plots:
        plot_level_results(results)

    return results


def plot_level_results(results: Dict[str, Dict[str, float]]) -> None:
    """Draw the average moves per phase and the win rate for each level."""
    level_names = list(results.keys())
    x = np.arange(len(level_names))

    # 1) Moves by phase
    bar_w = 0.25
    plt.figure()  # type: ignore[misc]
    for offset, phase in zip((-bar_w, 0.0, bar_w), PHASES):
        values = [results[n][f"avg_{phase}_moves"] for n in level_names]
        plt.bar(x + offset, values, width=bar_w, label=phase)  # type: ignore[misc]
    plt.xticks(x, level_names)  # type: ignore[misc]
    plt.ylabel("Average moves")  # type: ignore[misc]
    plt.title("Average moves by phase (per game)")  # type: ignore[misc]
    plt.legend()  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]

    # 2) Win rate by level
    win_rates = [results[n]["win_rate"] for n in level_names]

    plt.figure()  # type: ignore[misc]
    plt.bar(x, win_rates)  # type: ignore[misc]
    plt.xticks(x, level_names)  # type: ignore[misc]
    plt.ylabel("Win rate")  # type: ignore[misc]
    plt.ylim(0.0, 1.0)  # type: ignore[misc]
    plt.title("Win rate by difficulty level")  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]


def summarize_phase_mix(results: Dict[str, float]) -> Dict[str, float]:
    """
    Turn one run_many_games() result into fractions of moves per phase.

    Raises:
        KeyError: If a required metric is missing.
        ZeroDivisionError: If no moves were recorded.
    """
    counts = {phase: float(results[f"avg_{phase}_moves"]) for phase in PHASES}
    total = sum(counts.values())
    if total == 0.0:
        raise ZeroDivisionError("No moves recorded; cannot compute fractions.")

    out = {f"{phase}_frac": value / total for phase, value in counts.items()}
    out["guess_success_prob"] = 1.0 - float(results["guess_failure_rate"])
    return out
