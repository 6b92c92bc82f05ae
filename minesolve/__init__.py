"""
Minesweeper move selector

Chooses the next cell to reveal on a partially revealed board:
- Deduction: exact integer row reduction of the frontier constraints,
  saturation counting and normalization prove cells safe
- Enumeration: budget-bounded branch and bound over frontier placements
- Probability: binomially weighted hazard counts against off-frontier risk
"""

from .board import BoardSnapshot
from .config import SolverConfig
from .deduction import DeductionResult, deduce
from .engine import Minesweeper
from .enumeration import EnumerationResult, enumerate_combinations, is_valid_combination
from .errors import (
    InconsistentBoardError,
    InvalidBoardError,
    NoMoveAvailableError,
    SolverError,
)
from .frontier import FrontierIndex
from .matrix import ConstraintMatrix, build_constraint_matrix, row_reduce
from .probability import Estimate, estimate_move
from .solver import Decision, MoveSelector, best_move

__version__ = "1.0.0"

__all__ = [
    # Entry points
    "MoveSelector",
    "Decision",
    "best_move",
    "SolverConfig",
    # Building blocks
    "BoardSnapshot",
    "FrontierIndex",
    "ConstraintMatrix",
    "build_constraint_matrix",
    "row_reduce",
    "DeductionResult",
    "deduce",
    "EnumerationResult",
    "enumerate_combinations",
    "is_valid_combination",
    "Estimate",
    "estimate_move",
    # Errors
    "SolverError",
    "InvalidBoardError",
    "InconsistentBoardError",
    "NoMoveAvailableError",
    # Simulation
    "Minesweeper",
]
