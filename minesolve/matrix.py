"""Constraint matrix construction and exact integer row reduction."""

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .board import BoardSnapshot
from .errors import InconsistentBoardError
from .frontier import FrontierIndex
from .utils import Cell

logger = logging.getLogger(__name__)


class ConstraintMatrix:
    """
    Linear system over the frontier variables.

    Each row reads: sum(coefficient[i] * x[i]) == rhs, where x[i] is 1 if
    frontier cell i holds a hazard. The last column holds the right-hand side.
    Rows built from the board carry the coordinate of the revealed cell they
    came from in `sources`; reduced matrices mix rows and carry no sources.
    """

    def __init__(self, data: np.ndarray, sources: Sequence[Cell] = ()) -> None:
        if data.ndim != 2 or data.shape[1] < 1:
            raise ValueError("Constraint matrix needs at least the RHS column.")
        self.data: np.ndarray = data
        self.sources: Tuple[Cell, ...] = tuple(sources)

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def variable_count(self) -> int:
        return self.width - 1

    def coefficients(self, row: int) -> np.ndarray:
        return self.data[row, :-1]

    def rhs(self, row: int) -> int:
        return int(self.data[row, -1])

    def is_lonely_row(self, row: int) -> Optional[int]:
        """Return the only non-zero variable column of a row, or None."""
        nonzero = np.flatnonzero(self.coefficients(row))
        if len(nonzero) == 1:
            return int(nonzero[0])
        return None

    def is_safe_row(self, row: int) -> bool:
        """
        A row is safe if its RHS is 0, every coefficient is 0 or 1, and at
        least one coefficient is 1.
        """
        if self.rhs(row) != 0:
            return False
        coeffs = self.coefficients(row)
        return bool(np.all((coeffs == 0) | (coeffs == 1)) and np.any(coeffs == 1))

    def copy(self) -> "ConstraintMatrix":
        return ConstraintMatrix(self.data.copy(), self.sources)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConstraintMatrix):
            return NotImplemented
        return np.array_equal(self.data, other.data)

    def __repr__(self) -> str:
        return f"ConstraintMatrix(rows={self.height}, variables={self.variable_count})"

    def format(self) -> str:
        """Render the matrix one row per line, RHS after a bar (for debugging)."""
        lines: List[str] = []
        for row in self.data:
            coeffs = " ".join(f"{int(v):2d}" for v in row[:-1])
            lines.append(f"{coeffs} | {int(row[-1]):2d}")
        return "\n".join(lines)


# -----------------------------------------------------------------------------
# Construction
# -----------------------------------------------------------------------------


def build_constraint_matrix(
    board: BoardSnapshot, frontier: FrontierIndex
) -> ConstraintMatrix:
    """
    Turn every informative revealed cell into one row of the linear system.

    A revealed cell with value v > 0 and at least one Unknown neighbor yields
    a row with coefficient 1 for each Unknown neighbor and v on the right-hand
    side. Cells with value 0 or without Unknown neighbors yield no row.

    Args:
        board: Snapshot to read the constraints from.
        frontier: Frontier index built from the same board.

    Returns:
        A ConstraintMatrix with len(frontier) + 1 columns.

    Raises:
        InconsistentBoardError: If a count exceeds its number of Unknown
            neighbors, so no placement can satisfy it.
    """
    width = len(frontier) + 1
    rows: List[np.ndarray] = []
    sources: List[Cell] = []

    for cell in board.revealed_cells():
        value = board.value(cell)
        unknowns = board.unknown_neighbors(cell)

        if value > len(unknowns):
            raise InconsistentBoardError(
                f"Cell {cell} shows {value} but has only {len(unknowns)} "
                "unknown neighbors."
            )
        if value == 0 or not unknowns:
            continue

        row = np.zeros(width, dtype=np.int64)
        for n in unknowns:
            row[frontier.index_of(n)] = 1
        row[-1] = value
        rows.append(row)
        sources.append(cell)

    if rows:
        data = np.vstack(rows)
    else:
        data = np.zeros((0, width), dtype=np.int64)

    logger.debug(
        "Built constraint matrix: %d rows x %d variables", len(rows), width - 1
    )
    return ConstraintMatrix(data, sources)


# -----------------------------------------------------------------------------
# Reduction
# -----------------------------------------------------------------------------


def _find_pivot(data: np.ndarray, start_row: int, col: int) -> Optional[int]:
    """
    Return the first row at or below start_row usable as a pivot for col.

    A usable pivot is non-zero and divides every entry of its row, so the row
    can be normalized without leaving the integers.
    """
    for n in range(start_row, data.shape[0]):
        value = data[n, col]
        if value != 0 and not np.any(data[n] % value):
            return n
    return None


def _check_consistency(data: np.ndarray) -> None:
    """
    Reject rows no 0/1 assignment can satisfy.

    Raises:
        InconsistentBoardError: If a row has all-zero coefficients and a
            non-zero RHS, its coefficient gcd does not divide its RHS, or its
            RHS lies outside the range its coefficients can reach.
    """
    for n in range(data.shape[0]):
        coeffs = data[n, :-1]
        rhs = int(data[n, -1])

        if not np.any(coeffs):
            if rhs != 0:
                raise InconsistentBoardError(
                    f"Reduced row {n} demands {rhs} hazards from no cells."
                )
            continue

        g = int(np.gcd.reduce(np.abs(coeffs)))
        if rhs % g:
            raise InconsistentBoardError(
                f"Reduced row {n} has no integer solution (gcd {g}, rhs {rhs})."
            )

        low = int(coeffs[coeffs < 0].sum())
        high = int(coeffs[coeffs > 0].sum())
        if not low <= rhs <= high:
            raise InconsistentBoardError(
                f"Reduced row {n} needs {rhs} but can only reach [{low}, {high}]."
            )


def row_reduce(matrix: ConstraintMatrix) -> ConstraintMatrix:
    """
    Reduce a constraint matrix to row-echelon form with unit pivots.

    Only integer arithmetic is used. The pivot row is normalized by exact
    division, and the pivot column is cleared from every other row by
    repeatedly adding or subtracting the pivot row. Coefficients stay small
    (bounded by the 8-cell neighborhood), so the repetition is cheap.

    A column whose non-zero entries all fail to divide their own rows is left
    without a pivot; every row remains an exact consequence of the input.

    Args:
        matrix: Matrix to reduce. It is not modified.

    Returns:
        A new ConstraintMatrix of the same shape.

    Raises:
        InconsistentBoardError: If the reduced system has an unsatisfiable row.
    """
    data = matrix.data.copy()
    nrows, ncols = data.shape
    nvars = ncols - 1

    i = j = 0
    while i < nrows and j < nvars:
        pivot_row = _find_pivot(data, i, j)
        if pivot_row is None:
            if np.any(data[i:, j]):
                logger.debug("Column %d has no exact pivot; leaving it unpivoted", j)
            j += 1
            continue

        if pivot_row != i:
            data[[i, pivot_row]] = data[[pivot_row, i]]

        data[i] //= data[i, j]

        for n in range(nrows):
            if n == i:
                continue
            while data[n, j] != 0:
                if data[n, j] < 0:
                    data[n] += data[i]
                else:
                    data[n] -= data[i]

        i += 1
        j += 1

    _check_consistency(data)
    return ConstraintMatrix(data)
