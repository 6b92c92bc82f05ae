"""Immutable board snapshot consumed by the move-selection engine."""

import logging
from typing import AbstractSet, Iterator, List, Sequence, Tuple

import numpy as np

from .errors import InconsistentBoardError, InvalidBoardError
from .utils import EXCLUDED, MAX_COUNT, UNKNOWN, Cell, get_neighborhoods

logger = logging.getLogger(__name__)


class BoardSnapshot:
    """
    Read-only view of a partially revealed board.

    Cell values:
        -1     -> Unknown (not revealed)
        0..8   -> Revealed, number of adjacent hazards still unaccounted for
        -2     -> Excluded known hazard (solver-internal, produced by
                  normalized(); never accepted from the caller)
    """

    __slots__ = ("_values", "rows", "cols", "_neighborhoods")

    def __init__(self, values: Tuple[Tuple[int, ...], ...]) -> None:
        """
        Wrap an already validated grid of values.

        Use from_grid() for external input; this constructor trusts its argument.
        """
        self._values = values
        self.rows: int = len(values)
        self.cols: int = len(values[0])
        self._neighborhoods = get_neighborhoods(self.rows, self.cols)

    @classmethod
    def from_grid(cls, grid: Sequence[Sequence[int]]) -> "BoardSnapshot":
        """
        Validate an external grid and freeze it into a snapshot.

        Args:
            grid: Rectangular rows of integers, -1 for Unknown and 0..8 for a
                revealed adjacency count. Nested lists, tuples and 2-D numpy
                integer arrays are accepted.

        Returns:
            A new BoardSnapshot.

        Raises:
            InvalidBoardError: If the grid is empty, ragged, or holds a value
                that is not an integer in -1..8.
        """
        if isinstance(grid, np.ndarray):
            if grid.ndim != 2:
                raise InvalidBoardError("Board array must be two-dimensional.")
            grid = grid.tolist()

        if isinstance(grid, (str, bytes)) or not isinstance(grid, Sequence):
            raise InvalidBoardError("Board must be a sequence of rows.")
        if len(grid) == 0:
            raise InvalidBoardError("Board must have at least one row.")

        width = None
        frozen: List[Tuple[int, ...]] = []
        for r, row in enumerate(grid):
            if isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
                raise InvalidBoardError(f"Row {r} is not a sequence of values.")
            if width is None:
                width = len(row)
                if width == 0:
                    raise InvalidBoardError("Board rows must not be empty.")
            elif len(row) != width:
                raise InvalidBoardError(
                    f"Board is not rectangular: row {r} has {len(row)} cells, "
                    f"expected {width}."
                )

            values: List[int] = []
            for c, v in enumerate(row):
                if isinstance(v, (bool, np.bool_)) or not isinstance(
                    v, (int, np.integer)
                ):
                    raise InvalidBoardError(
                        f"Cell ({r}, {c}) holds a non-integer value {v!r}."
                    )
                v = int(v)
                if v < UNKNOWN or v > MAX_COUNT:
                    raise InvalidBoardError(
                        f"Cell ({r}, {c}) value {v} is outside -1..{MAX_COUNT}."
                    )
                values.append(v)
            frozen.append(tuple(values))

        return cls(tuple(frozen))

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def _check(self, cell: Cell) -> None:
        r, c = cell
        if not (0 <= r < self.rows and 0 <= c < self.cols):
            raise IndexError(
                f"Cell {cell} is outside the {self.rows}x{self.cols} board."
            )

    def value(self, cell: Cell) -> int:
        """Return the stored value of a cell (bounds-checked)."""
        self._check(cell)
        return self._values[cell[0]][cell[1]]

    def is_unknown(self, cell: Cell) -> bool:
        return self.value(cell) == UNKNOWN

    def is_revealed(self, cell: Cell) -> bool:
        return self.value(cell) >= 0

    def is_excluded(self, cell: Cell) -> bool:
        return self.value(cell) == EXCLUDED

    def neighbors(self, cell: Cell) -> Tuple[Cell, ...]:
        """Return the in-grid 8-neighborhood of a cell, excluding the cell itself."""
        self._check(cell)
        return self._neighborhoods[cell]

    def unknown_neighbors(self, cell: Cell) -> List[Cell]:
        return [n for n in self.neighbors(cell) if self._values[n[0]][n[1]] == UNKNOWN]

    def cells(self) -> Iterator[Cell]:
        """Iterate over every coordinate in row-major order."""
        for r in range(self.rows):
            for c in range(self.cols):
                yield (r, c)

    def revealed_cells(self) -> Iterator[Cell]:
        return (cell for cell in self.cells() if self._values[cell[0]][cell[1]] >= 0)

    def unknown_cells(self) -> Iterator[Cell]:
        return (
            cell for cell in self.cells() if self._values[cell[0]][cell[1]] == UNKNOWN
        )

    def unknown_count(self) -> int:
        return sum(row.count(UNKNOWN) for row in self._values)

    def is_untouched(self) -> bool:
        """True if no cell has been revealed yet (the opening position)."""
        return all(v == UNKNOWN for row in self._values for v in row)

    def to_list(self) -> List[List[int]]:
        return [list(row) for row in self._values]

    # -------------------------------------------------------------------------
    # Transformations
    # -------------------------------------------------------------------------

    def normalized(self, known_hazards: AbstractSet[Cell]) -> "BoardSnapshot":
        """
        Return a new snapshot with known hazards excluded and counts adjusted.

        Every known hazard that is still Unknown is marked excluded, and every
        revealed neighbor of such a cell has its count decremented once per
        newly excluded neighbor. Hazards already excluded are left alone.

        Args:
            known_hazards: Coordinates proven to hold a hazard.

        Returns:
            The normalized snapshot; self is not modified.

        Raises:
            InconsistentBoardError: If a known hazard sits on a revealed cell,
                or a count would drop below zero.
        """
        grid = [list(row) for row in self._values]

        for cell in sorted(known_hazards):
            current = self.value(cell)
            if current == EXCLUDED:
                continue
            if current != UNKNOWN:
                raise InconsistentBoardError(
                    f"Cell {cell} is revealed and cannot hold a hazard."
                )

            r, c = cell
            grid[r][c] = EXCLUDED
            for nr, nc in self._neighborhoods[cell]:
                if grid[nr][nc] < 0:
                    continue
                if grid[nr][nc] == 0:
                    raise InconsistentBoardError(
                        f"Cell {(nr, nc)} has more adjacent hazards than its count."
                    )
                grid[nr][nc] -= 1

        logger.debug("Normalized board with %d known hazards", len(known_hazards))
        return BoardSnapshot(tuple(tuple(row) for row in grid))

    # -------------------------------------------------------------------------
    # Dunder helpers
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoardSnapshot):
            return NotImplemented
        return self._values == other._values

    def __hash__(self) -> int:
        return hash(self._values)

    def __repr__(self) -> str:
        return f"BoardSnapshot(rows={self.rows}, cols={self.cols})"

    def format(self) -> str:
        """Render the snapshot as text: '.' unknown, '*' excluded, digits revealed."""

        def cell_char(v: int) -> str:
            if v == UNKNOWN:
                return "."
            if v == EXCLUDED:
                return "*"
            return str(v)

        return "\n".join(" ".join(cell_char(v) for v in row) for row in self._values)
