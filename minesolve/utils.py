"""Utility functions and cell constants shared by the solver modules."""

from typing import Dict, List, Tuple

Cell = Tuple[int, int]

# Cell values as seen by the solver.
UNKNOWN = -1
EXCLUDED = -2
MAX_COUNT = 8

# Module-level cache: (rows, cols) -> {(r,c): ((nr,nc), ...), ...}
_NEIGHBORHOODS_CACHE: Dict[Tuple[int, int], Dict[Cell, Tuple[Cell, ...]]] = {}


def get_neighborhoods(rows: int, cols: int) -> Dict[Cell, Tuple[Cell, ...]]:
    """
    Precompute and cache 8-connected neighbor coordinates for every cell in a grid.

    Args:
        rows: Number of grid rows. Must be positive.
        cols: Number of grid columns. Must be positive.

    Returns:
        Mapping from each cell (row, col) to a tuple of valid neighboring
        coordinates under 8-connectivity, in row-major order.

    Raises:
        ValueError: If rows or cols is non-positive.
    """
    if rows <= 0 or cols <= 0:
        raise ValueError("rows and cols must be positive.")

    key = (rows, cols)
    cached = _NEIGHBORHOODS_CACHE.get(key)
    if cached is not None:
        return cached

    neighborhoods: Dict[Cell, Tuple[Cell, ...]] = {}
    for r in range(rows):
        for c in range(cols):
            nbrs: List[Cell] = []
            for dr in (-1, 0, 1):
                for dc in (-1, 0, 1):
                    if dr == 0 and dc == 0:
                        continue
                    nr, nc = r + dr, c + dc
                    if 0 <= nr < rows and 0 <= nc < cols:
                        nbrs.append((nr, nc))
            neighborhoods[(r, c)] = tuple(nbrs)

    _NEIGHBORHOODS_CACHE[key] = neighborhoods
    return neighborhoods
