"""Simulated game board used to drive the move selector end to end."""

import random
from collections import deque
from typing import Deque, Dict, FrozenSet, List, Optional, Set, Tuple

from .utils import UNKNOWN, Cell, get_neighborhoods

PLACEMENT_RULES = ("safe_cell", "safe_neighborhood")


class Minesweeper:
    """Game board with first-move safety, flood-fill reveals and win/loss detection."""

    def __init__(
        self,
        rows: int,
        cols: int,
        hazards_count: int,
        placement_rule: str = "safe_cell",
        seed: Optional[int] = None,
    ) -> None:
        """
        Initialize a game board; hazards are placed on the first reveal.

        Args:
            rows: Number of rows, must be > 0.
            cols: Number of columns, must be > 0.
            hazards_count: Total number of hazards, must be >= 0.
            placement_rule: "safe_cell" keeps only the first revealed cell
                free of hazards; "safe_neighborhood" also keeps its neighbors
                free.
            seed: Seed for hazard placement.

        Raises:
            ValueError: If dimensions are invalid, the rule is unknown, or the
                hazards cannot be placed under the rule.
        """
        if rows <= 0 or cols <= 0:
            raise ValueError("rows and cols must be positive.")
        if hazards_count < 0:
            raise ValueError("hazards_count must be non-negative.")
        if placement_rule not in PLACEMENT_RULES:
            raise ValueError('placement_rule must be "safe_cell" or "safe_neighborhood".')

        reserved = 9 if placement_rule == "safe_neighborhood" else 1
        if hazards_count > rows * cols - reserved:
            raise ValueError(
                f"Cannot place {hazards_count} hazards under {placement_rule}."
            )

        self.rows: int = rows
        self.cols: int = cols
        self.hazards_count: int = hazards_count
        self.placement_rule: str = placement_rule
        self.rng: random.Random = random.Random(seed)

        self.hazards: Set[Cell] = set()
        self.counts: List[List[int]] = [[0] * cols for _ in range(rows)]
        self.revealed: List[List[bool]] = [[False] * cols for _ in range(rows)]
        self.first_move: bool = True

        self.unrevealed_safe_count: int = rows * cols - hazards_count
        self.game_over: bool = False

        self._neighborhoods: Dict[Cell, Tuple[Cell, ...]] = get_neighborhoods(rows, cols)

    def neighbors(self, cell: Cell) -> Tuple[Cell, ...]:
        return self._neighborhoods[cell]

    def place_hazards(self, first: Cell) -> None:
        """
        Place hazards (one-time) so that the first revealed cell is safe.

        Raises:
            ValueError: If hazards were already placed.
        """
        if not self.first_move:
            raise ValueError("Hazards are already placed.")

        safe: Set[Cell] = {first}
        if self.placement_rule == "safe_neighborhood":
            safe |= set(self.neighbors(first))

        eligible: List[Cell] = [
            (r, c)
            for r in range(self.rows)
            for c in range(self.cols)
            if (r, c) not in safe
        ]
        self.hazards = set(self.rng.sample(eligible, self.hazards_count))

        for r in range(self.rows):
            for c in range(self.cols):
                self.counts[r][c] = sum(
                    1 for n in self.neighbors((r, c)) if n in self.hazards
                )
        self.first_move = False

    def flood_fill(self, start: Cell) -> List[Tuple[int, int, int]]:
        """
        Reveal the connected region around start, expanding through zero counts.

        Returns:
            Newly revealed cells as (row, col, count).
        """
        frontier: Deque[Cell] = deque([start])
        visited: Set[Cell] = {start}
        revealed_cells: List[Tuple[int, int, int]] = []

        while frontier:
            r, c = frontier.popleft()
            if self.revealed[r][c]:
                continue

            self.revealed[r][c] = True
            self.unrevealed_safe_count -= 1
            revealed_cells.append((r, c, self.counts[r][c]))

            if self.counts[r][c] == 0:
                for n in self.neighbors((r, c)):
                    if n in visited or self.revealed[n[0]][n[1]]:
                        continue
                    visited.add(n)
                    frontier.append(n)

        return revealed_cells

    def reveal(self, cell: Cell) -> Tuple[int, Dict[str, object]]:
        """
        Reveal a cell and return a status code plus payload.

        Returns:
            (status, payload) where status is -1 (hazard hit), 0 (game goes
            on, or no-op) or 1 (every safe cell revealed). The payload holds
            "revealed_cells" for statuses 0 and 1, and "all_hazards" for -1.

        Raises:
            ValueError: If the cell is outside the board.
        """
        r, c = cell
        if not (0 <= r < self.rows and 0 <= c < self.cols):
            raise ValueError("Cell coordinates are outside the board.")

        if self.game_over or self.revealed[r][c]:
            return 0, {}

        if self.first_move:
            self.place_hazards(cell)

        if cell in self.hazards:
            self.revealed[r][c] = True
            self.game_over = True
            all_hazards: FrozenSet[Cell] = frozenset(self.hazards)
            return -1, {"all_hazards": all_hazards}

        revealed_cells = self.flood_fill(cell)

        if self.unrevealed_safe_count == 0:
            self.game_over = True
            return 1, {"revealed_cells": revealed_cells}

        return 0, {"revealed_cells": revealed_cells}

    def snapshot(self) -> List[List[int]]:
        """Return the visible board: -1 for hidden cells, the count otherwise."""
        return [
            [
                self.counts[r][c] if self.revealed[r][c] and (r, c) not in self.hazards
                else UNKNOWN
                for c in range(self.cols)
            ]
            for r in range(self.rows)
        ]

    def format_board(self, reveal_all: bool = False) -> str:
        """
        Render the board as text with coordinate labels.

        Args:
            reveal_all: If True, show hazards ('M') and every count.
        """

        def cell_str(r: int, c: int) -> str:
            if reveal_all or self.revealed[r][c]:
                if (r, c) in self.hazards:
                    return "M"
                return str(self.counts[r][c])
            return "."

        header = " ".join(f"{c:2d}" for c in range(self.cols))
        out = ["   " + header, "   " + "-" * (3 * self.cols - 1)]
        for r in range(self.rows):
            row_cells = " ".join(f" {cell_str(r, c)}" for c in range(self.cols))
            out.append(f"{r:2d} |" + row_cells)
        return "\n".join(out)
