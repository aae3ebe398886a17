"""
Exact minimax over the fully expanded game tree.

Evaluations are from X's perspective: +1 X wins with best play, -1 O wins,
0 draw. X maximizes, O minimizes.
Tie-break policy:
- The principal line follows the LAST best child in row-major move order.
- The best-move set keeps ALL tied children, in move order.
"""
from __future__ import annotations

import logging
import os
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .board import Move, Outcome, Player, Position, to_serialized
from .errors import GameOverError
from .tree import Node, build

logger = logging.getLogger(__name__)

WORKERS_ENV = "TTT_SOLVER_WORKERS"


def evaluation_for_outcome(res: Outcome) -> float:
    if res is Outcome.X_WINS:
        return 1.0
    if res is Outcome.O_WINS:
        return -1.0
    return 0.0


def evaluation_label(value: float) -> str:
    if value > 0.9999:
        return "X is Winning"
    if value < -0.9999:
        return "O is Winning"
    if abs(value) < 0.0001:
        return "Drawn"
    return "Ambiguous"


def evaluate(node: Node) -> Tuple[float, List[Move]]:
    """Return (evaluation, principal line) for `node`."""
    children = node.children()
    if not children:
        return evaluation_for_outcome(node.outcome()), []
    player = node.active_player()
    best = -1.0 if player is Player.X else 1.0
    best_line: List[Move] = []
    for move, child in zip(node.legal_moves(), children):
        value, line = evaluate(child)
        # >= / <= on purpose: a later tie replaces the recorded line
        if (player is Player.X and value >= best) or (player is Player.O and value <= best):
            best = value
            best_line = [move] + line
    return best, best_line


def _evaluate_position(position: Position) -> float:
    return evaluate(build(position))[0]


def resolve_workers(workers: Optional[int]) -> int:
    if workers is None:
        raw = os.getenv(WORKERS_ENV, "").strip()
        try:
            workers = int(raw) if raw else 1
        except ValueError:
            logger.warning("Ignoring %s=%r (not an integer)", WORKERS_ENV, raw)
            workers = 1
    return max(1, workers)


def _child_evaluations(root: Node, workers: int) -> List[float]:
    children = root.children()
    if workers <= 1 or len(children) <= 1:
        return [evaluate(child)[0] for child in children]
    logger.debug("evaluating %d root children with %d workers", len(children), workers)
    with ProcessPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(_evaluate_position, [c.position for c in children]))


def best_moves_and_evaluation(root: Node, workers: Optional[int] = None) -> Tuple[List[Move], float]:
    """All tied-best moves from `root` (in move order) and their shared evaluation."""
    player = root.active_player()
    if player is None:
        raise GameOverError("The game is already over.")
    best = -2.0 if player is Player.X else 2.0
    best_moves: List[Move] = []
    values = _child_evaluations(root, resolve_workers(workers))
    for move, value in zip(root.legal_moves(), values):
        if (player is Player.X and value > best) or (player is Player.O and value < best):
            best = value
            best_moves = [move]
        elif value == best:
            best_moves.append(move)
    return best_moves, best


def principal_line(root: Node) -> Tuple[float, List[Move]]:
    return evaluate(root)


def _moves_text(moves: List[Move]) -> str:
    return ' '.join(f"{m.row}{m.col}" for m in moves)


@dataclass
class SolveResult:
    position: Position
    value: float
    label: str
    best_moves: List[Move] = field(default_factory=list)
    line: List[Move] = field(default_factory=list)

    def as_row(self) -> List[str]:
        return [
            to_serialized(self.position),
            f"{self.value:g}",
            self.label,
            _moves_text(self.best_moves),
            _moves_text(self.line),
        ]


def solve_position(position: Position, workers: Optional[int] = None) -> SolveResult:
    """Build, evaluate and summarize `position`. Raises GameOverError if decided."""
    root = build(position)
    best_moves, value = best_moves_and_evaluation(root, workers=workers)
    _, line = principal_line(root)
    return SolveResult(position, value, evaluation_label(value), best_moves, line)


class Solver:
    """A built tree together with the queries over it."""

    def __init__(self, root: Node):
        self.root = root

    @classmethod
    def from_position(cls, position: Position) -> 'Solver':
        return cls(build(position))

    def depth(self) -> int:
        return self.root.max_depth()

    def evaluation(self) -> float:
        return evaluate(self.root)[0]

    def evaluation_and_line(self) -> Tuple[float, List[Move]]:
        return principal_line(self.root)

    def next_moves_and_evaluation(self, workers: Optional[int] = None) -> Tuple[List[Move], float]:
        return best_moves_and_evaluation(self.root, workers=workers)

    def next_moves(self, workers: Optional[int] = None) -> List[Move]:
        return self.next_moves_and_evaluation(workers=workers)[0]
