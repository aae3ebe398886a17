"""tttsolver package.

Exhaustive game tree and exact minimax for tic-tac-toe, plus a small CLI.

Convenience imports are exposed for common workflows.
"""

from .board import Move, Outcome, Player, Position, empty, from_serialized, parse_move
from .errors import GameOverError, IllegalMoveError, NoSuchChildError, ParseError, SolverError
from .solver import Solver, best_moves_and_evaluation, evaluation_label, principal_line, solve_position
from .tree import Node, build

__all__ = [
    "Move",
    "Outcome",
    "Player",
    "Position",
    "empty",
    "from_serialized",
    "parse_move",
    "Node",
    "build",
    "Solver",
    "best_moves_and_evaluation",
    "principal_line",
    "evaluation_label",
    "solve_position",
    "SolverError",
    "ParseError",
    "IllegalMoveError",
    "NoSuchChildError",
    "GameOverError",
]
