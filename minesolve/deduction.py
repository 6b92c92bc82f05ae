"""Deterministic deduction of guaranteed-safe cells and known hazards."""

import logging
from dataclasses import dataclass, field
from typing import Optional, Set

import numpy as np

from .board import BoardSnapshot
from .frontier import FrontierIndex
from .matrix import ConstraintMatrix
from .utils import Cell

logger = logging.getLogger(__name__)


@dataclass
class DeductionResult:
    """
    Outcome of the deterministic phase.

    Attributes:
        move: A cell proven safe, or None if deduction found nothing.
        rule: Which rule proved the move ("lonely_row", "safe_row" or
            "normalized_zero"); None when there is no move.
        known_hazards: Cells proven to hold a hazard during this call.
        normalized: The board with known hazards excluded, or None if a
            move was found before normalization.
    """

    move: Optional[Cell] = None
    rule: Optional[str] = None
    known_hazards: Set[Cell] = field(default_factory=set)
    normalized: Optional[BoardSnapshot] = None


def scan_reduced_matrix(
    reduced: ConstraintMatrix,
    frontier: FrontierIndex,
    known_hazards: Set[Cell],
) -> DeductionResult:
    """
    Look for lonely and safe rows in the reduced matrix.

    A lonely row with RHS 0 proves its cell safe and ends the scan. A lonely
    row whose RHS equals its coefficient proves a hazard, which is added to
    known_hazards. A safe row proves every coefficient-1 cell safe; the first
    is returned.
    """
    for row in range(reduced.height):
        col = reduced.is_lonely_row(row)
        if col is not None:
            rhs = reduced.rhs(row)
            if rhs == 0:
                return DeductionResult(frontier.cell_at(col), "lonely_row", known_hazards)
            if rhs == int(reduced.data[row, col]):
                known_hazards.add(frontier.cell_at(col))
        elif reduced.is_safe_row(row):
            col = int(np.flatnonzero(reduced.coefficients(row) == 1)[0])
            return DeductionResult(frontier.cell_at(col), "safe_row", known_hazards)

    return DeductionResult(known_hazards=known_hazards)


def scan_saturated_rows(
    matrix: ConstraintMatrix,
    frontier: FrontierIndex,
    known_hazards: Set[Cell],
) -> None:
    """Mark every cell of a row whose RHS equals its number of cells as a hazard."""
    for row in range(matrix.height):
        cols = np.flatnonzero(matrix.coefficients(row))
        if len(cols) == matrix.rhs(row):
            for col in cols:
                known_hazards.add(frontier.cell_at(int(col)))


def find_zero_count_move(board: BoardSnapshot) -> Optional[Cell]:
    """Return an Unknown neighbor of a revealed cell whose count is 0, if any."""
    for cell in board.revealed_cells():
        if board.value(cell) != 0:
            continue
        unknowns = board.unknown_neighbors(cell)
        if unknowns:
            return unknowns[0]
    return None


def deduce(
    board: BoardSnapshot,
    frontier: FrontierIndex,
    matrix: ConstraintMatrix,
    reduced: ConstraintMatrix,
) -> DeductionResult:
    """
    Run every deterministic rule and return the first proven-safe cell.

    The reduced matrix is scanned first, then saturated rows of the
    unreduced matrix mark more hazards. The board is normalized with all
    known hazards and rescanned for revealed zeros next to Unknown cells.

    Args:
        board: Snapshot the matrices were built from.
        frontier: Frontier index of that snapshot.
        matrix: Unreduced constraint matrix.
        reduced: Row-reduced copy of matrix.

    Returns:
        A DeductionResult. Its move is None when nothing is provably safe;
        that is a normal outcome, not an error.

    Raises:
        InconsistentBoardError: If normalization uncovers a contradiction.
    """
    known_hazards: Set[Cell] = set()

    result = scan_reduced_matrix(reduced, frontier, known_hazards)
    if result.move is not None:
        logger.debug("Deduced safe cell %s from a %s", result.move, result.rule)
        return result

    scan_saturated_rows(matrix, frontier, known_hazards)

    normalized = board.normalized(known_hazards)
    move = find_zero_count_move(normalized)
    if move is not None:
        logger.debug(
            "Deduced safe cell %s after excluding %d hazards", move, len(known_hazards)
        )
        return DeductionResult(move, "normalized_zero", known_hazards, normalized)

    logger.debug("No deterministic move; %d known hazards", len(known_hazards))
    return DeductionResult(known_hazards=known_hazards, normalized=normalized)
