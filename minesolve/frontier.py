"""Dense variable indexing of the frontier cells of a board."""

from typing import Dict, Iterator, List

from .board import BoardSnapshot
from .utils import Cell


class FrontierIndex:
    """
    Bijection between frontier cells and matrix column indices.

    A frontier cell is an Unknown cell with at least one Revealed neighbor.
    Indices are assigned in row-major scan order, so two indexes built from
    the same board are identical.
    """

    def __init__(self, board: BoardSnapshot) -> None:
        self._cell_to_index: Dict[Cell, int] = {}
        self._index_to_cell: List[Cell] = []

        for cell in board.unknown_cells():
            if any(board.is_revealed(n) for n in board.neighbors(cell)):
                self._cell_to_index[cell] = len(self._index_to_cell)
                self._index_to_cell.append(cell)

    def index_of(self, cell: Cell) -> int:
        """
        Return the column index of a frontier cell.

        Raises:
            KeyError: If the cell is not on the frontier.
        """
        return self._cell_to_index[cell]

    def cell_at(self, index: int) -> Cell:
        """
        Return the frontier cell for a column index.

        Raises:
            IndexError: If index is outside [0, len(self)).
        """
        if index < 0 or index >= len(self._index_to_cell):
            raise IndexError(f"Frontier index {index} out of range.")
        return self._index_to_cell[index]

    def __contains__(self, cell: object) -> bool:
        return cell in self._cell_to_index

    def __len__(self) -> int:
        return len(self._index_to_cell)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._index_to_cell)

    def __repr__(self) -> str:
        return f"FrontierIndex(size={len(self)})"
