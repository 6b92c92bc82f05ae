"""Exceptions raised by the move-selection engine."""


class SolverError(Exception):
    """Base class for every error raised while choosing a move."""


class InvalidBoardError(SolverError, ValueError):
    """The caller's snapshot or hazard count is malformed."""


class InconsistentBoardError(SolverError):
    """
    The revealed counts contradict each other.

    No hazard placement can satisfy the board, so no cell can be called safe.
    """


class NoMoveAvailableError(SolverError):
    """There is no Unknown cell left to reveal."""
