"""Exceptions raised by the solver core. The CLI turns them into messages."""


class SolverError(Exception):
    pass


class ParseError(SolverError, ValueError):
    """Malformed position, move or binary mask text."""


class IllegalMoveError(SolverError):
    """Move out of turn, off the board, or onto an occupied cell."""


class NoSuchChildError(SolverError):
    """No child node corresponds to the requested move."""


class GameOverError(SolverError):
    """A move or evaluation query was made on a decided position."""
