"""
Quickstart example for minesolve.

Asks for single moves on hand-written boards, then plays whole games.
"""

import logging

from minesolve import Minesweeper, MoveSelector, SolverConfig, best_move
from minesolve.analysis import LEVELS, play_game, run_many_games


def main():
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    print("=" * 60)
    print("minesolve - Quickstart Example")
    print("=" * 60)

    # Example 1: One move on a partly revealed board
    print("\n1. Best move on a small board (3 hazards)...")
    print("-" * 60)
    grid = [
        [1, -1, 1],
        [-1, -1, -1],
        [-1, -1, -1],
    ]
    selector = MoveSelector(SolverConfig(seed=0))
    decision = selector.decide(grid, 3)
    print(f"Move: {decision.move}  phase: {decision.phase}")
    print(f"Strategy: {decision.detail.get('strategy')}")
    print(f"Bucket weights: {decision.detail.get('weights')}")

    # Example 2: Drive a game step by step
    print("\n2. Playing a Beginner game move by move...")
    print("-" * 60)
    rows, cols, hazards = LEVELS["beginner"]
    game = Minesweeper(rows, cols, hazards, "safe_neighborhood", seed=7)
    status = 0
    moves = 0
    while status == 0:
        move = best_move(game.snapshot(), hazards, seed=moves)
        status, _ = game.reveal(move)
        moves += 1
    print(f"Result: {'WON' if status == 1 else 'LOST'} after {moves} moves")
    print(game.format_board(reveal_all=True))

    # Example 3: Per-phase breakdown of one game
    print("\n3. Phase breakdown of an Intermediate game...")
    print("-" * 60)
    result = play_game(16, 16, 40, seed=1)
    print(f"Status: {result['status']}  moves: {result['moves']}")
    for phase, count in result["phase_counts"].items():
        print(f"  {phase:12s} {count}")

    # Example 4: Win rates by difficulty level
    print("\n4. Win rates by difficulty level (10 games each)...")
    print("-" * 60)
    for name, (r, c, m) in LEVELS.items():
        stats = run_many_games(r, c, m, 10, seed=0)
        print(f"{name:15s} ({r}x{c}, {m:2d} hazards): {stats['win_rate']*100:5.1f}% win rate")

    print("\n" + "=" * 60)
    print("Done! See README.md for more detailed usage instructions.")
    print("=" * 60)


if __name__ == "__main__":
    main()
