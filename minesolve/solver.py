"""Move selection: deterministic deduction first, then probabilistic guessing."""

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence

from .board import BoardSnapshot
from .config import SolverConfig
from .deduction import deduce
from .enumeration import enumerate_combinations
from .errors import InvalidBoardError
from .frontier import FrontierIndex
from .matrix import build_constraint_matrix, row_reduce
from .probability import estimate_move
from .utils import Cell

logger = logging.getLogger(__name__)


@dataclass
class Decision:
    """
    One move and how it was found.

    Attributes:
        move: (row, col) of the cell to reveal.
        phase: "opening", "deduction" or "probability".
        detail: Phase-specific facts (deduction rule, known hazards,
            enumeration counts, probability strategy).
    """

    move: Cell
    phase: str
    detail: Dict[str, Any] = field(default_factory=dict)


class MoveSelector:
    """
    Chooses the next cell to reveal on a partially revealed board.

    The selector keeps no board state between calls: each decision builds
    its frontier, constraint matrix and known hazards from scratch. The only
    state it owns is its configuration and random generator.

    The decision runs in tiers:
    1. Opening: an untouched board gets a fixed opening cell.
    2. Deduction: row reduction, saturation counting and normalization
       look for a cell that is safe under every valid completion.
    3. Probability: placements over the frontier are enumerated under a
       node budget and weighed against the risk of an off-frontier cell.
    """

    def __init__(
        self,
        config: Optional[SolverConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Args:
            config: Solver settings; defaults to SolverConfig().
            rng: Random generator for the opening and fallback guesses. When
                omitted, one is seeded from config.seed.
        """
        self.config: SolverConfig = config if config is not None else SolverConfig()
        self.rng: random.Random = (
            rng if rng is not None else random.Random(self.config.seed)
        )

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def select_move(
        self, grid: Sequence[Sequence[int]], total_hazards: int
    ) -> Cell:
        """
        Return the (row, col) of the next cell to reveal.

        Args:
            grid: Rectangular rows, -1 for Unknown and 0..8 for revealed counts.
            total_hazards: Number of hazards on the whole board.

        Raises:
            InvalidBoardError: If the input is malformed or nothing is left
                to reveal.
            InconsistentBoardError: If the revealed counts contradict each other.
        """
        return self.decide(grid, total_hazards).move

    def decide(self, grid: Sequence[Sequence[int]], total_hazards: int) -> Decision:
        """Like select_move(), but also report which phase found the move."""
        board = BoardSnapshot.from_grid(grid)
        self._validate_total(board, total_hazards)

        if board.is_untouched():
            move = self.opening_move(board)
            logger.debug("Untouched board; opening at %s", move)
            return Decision(move, "opening")

        frontier = FrontierIndex(board)
        matrix = build_constraint_matrix(board, frontier)
        reduced = row_reduce(matrix)
        logger.debug(
            "Frontier of %d cells, %d constraint rows", len(frontier), matrix.height
        )

        deduction = deduce(board, frontier, matrix, reduced)
        if deduction.move is not None:
            return Decision(
                deduction.move,
                "deduction",
                {
                    "rule": deduction.rule,
                    "known_hazards": frozenset(deduction.known_hazards),
                },
            )

        normalized = deduction.normalized
        if normalized is None:
            normalized = board.normalized(deduction.known_hazards)
        normalized_frontier = FrontierIndex(normalized)

        enumeration = enumerate_combinations(
            normalized, normalized_frontier, self.config.node_budget
        )
        estimate = estimate_move(
            normalized,
            normalized_frontier,
            enumeration.combinations,
            total_hazards,
            len(deduction.known_hazards),
            self.rng,
            bucket_scan=self.config.bucket_scan,
        )
        return Decision(
            estimate.move,
            "probability",
            {
                "strategy": estimate.strategy,
                "known_hazards": frozenset(deduction.known_hazards),
                "combinations": len(enumeration.combinations),
                "nodes_visited": enumeration.nodes_visited,
                "truncated": enumeration.truncated,
                "weights": estimate.weights,
                "outside_probability": estimate.outside_probability,
            },
        )

    def opening_move(self, board: BoardSnapshot) -> Cell:
        """Return the configured first move for an untouched board."""
        if self.config.opening == "center":
            return (board.rows // 2, board.cols // 2)
        if self.config.opening == "random":
            return (self.rng.randrange(board.rows), self.rng.randrange(board.cols))
        return (0, 0)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    @staticmethod
    def _validate_total(board: BoardSnapshot, total_hazards: int) -> None:
        if isinstance(total_hazards, bool) or not isinstance(total_hazards, int):
            raise InvalidBoardError("total_hazards must be an integer.")
        if total_hazards < 0:
            raise InvalidBoardError("total_hazards must be non-negative.")
        if total_hazards > board.rows * board.cols:
            raise InvalidBoardError("total_hazards exceeds the number of cells.")
        if board.unknown_count() == 0:
            raise InvalidBoardError("Board has no unknown cell left to reveal.")


def best_move(
    grid: Sequence[Sequence[int]],
    total_hazards: int,
    *,
    config: Optional[SolverConfig] = None,
    seed: Optional[int] = None,
) -> Cell:
    """
    Choose the next cell to reveal with a one-off MoveSelector.

    Args:
        grid: Rectangular rows, -1 for Unknown and 0..8 for revealed counts.
        total_hazards: Number of hazards on the whole board.
        config: Solver settings; defaults to SolverConfig().
        seed: Seed for the random generator; overrides config.seed.

    Returns:
        (row, col) of the cell to reveal.
    """
    rng = random.Random(seed) if seed is not None else None
    return MoveSelector(config, rng).select_move(grid, total_hazards)
