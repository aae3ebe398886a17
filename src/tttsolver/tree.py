"""
Exhaustive game tree.

Every node owns its position and one child per legal move, in row-major move
order. Terminal positions have no children. Nothing is shared between
branches: transpositions are expanded again wherever they occur.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Iterator, List, Optional

from .board import (
    Move,
    Outcome,
    Player,
    Position,
    active_player,
    apply_move,
    legal_moves,
    outcome,
)
from .errors import IllegalMoveError, NoSuchChildError

logger = logging.getLogger(__name__)


class Node:
    __slots__ = ('_position', '_children')

    def __init__(self, position: Position, children: tuple = ()):
        self._position = position
        self._children = children

    def __repr__(self) -> str:
        return f"Node({self._position}, n_children={len(self._children)})"

    @property
    def position(self) -> Position:
        return self._position

    def outcome(self) -> Outcome:
        return outcome(self._position)

    def is_terminal(self) -> bool:
        return not self._children

    def legal_moves(self) -> List[Move]:
        return legal_moves(self._position)

    def active_player(self) -> Optional[Player]:
        return active_player(self._position)

    def children(self) -> List['Node']:
        return list(self._children)

    def n_children(self) -> int:
        return len(self._children)

    def child_for(self, move: Move) -> 'Node':
        player = self.active_player()
        if player is None:
            raise NoSuchChildError("Game is already over")
        try:
            target = apply_move(self._position, player, move)
        except IllegalMoveError as e:
            raise NoSuchChildError(f"There is no child with the move {move}") from e
        for child in self._children:
            if child._position == target:
                return child
        raise NoSuchChildError(f"There is no child with the move {move}")

    def max_depth(self) -> int:
        if not self._children:
            return 1
        return 1 + max(child.max_depth() for child in self._children)

    def iter_nodes(self) -> Iterator['Node']:
        """Pre-order walk over this node and all of its descendants."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node._children))


def _build(position: Position) -> Node:
    player = active_player(position)
    if player is None:
        return Node(position)
    children = tuple(_build(apply_move(position, player, mv)) for mv in legal_moves(position))
    return Node(position, children)


def build(position: Position) -> Node:
    """Expand `position` into its complete game tree."""
    t0 = time.perf_counter()
    root = _build(position)
    if logger.isEnabledFor(logging.DEBUG):
        n_nodes = sum(1 for _ in root.iter_nodes())
        logger.debug("built tree from %s: %d nodes in %.3fs", position, n_nodes, time.perf_counter() - t0)
    return root


@dataclass
class TreeStats:
    nodes: int = 0
    max_depth: int = 0
    x_wins: int = 0
    o_wins: int = 0
    draws: int = 0
    ambiguous: int = 0

    @property
    def terminal(self) -> int:
        return self.x_wins + self.o_wins + self.draws + self.ambiguous


def tree_stats(root: Node) -> TreeStats:
    stats = TreeStats(max_depth=root.max_depth())
    for node in root.iter_nodes():
        stats.nodes += 1
        if node.n_children():
            continue
        res = node.outcome()
        if res is Outcome.X_WINS:
            stats.x_wins += 1
        elif res is Outcome.O_WINS:
            stats.o_wins += 1
        elif res is Outcome.DRAW:
            stats.draws += 1
        elif res is Outcome.AMBIGUOUS:
            stats.ambiguous += 1
    return stats
