"""
Board model: two 9-bit masks, one per mark, plus the rules over them.

Notes:
- Cell (row, col) lives at bit (2 - row) * 3 + (2 - col), so a 9-character
  binary string read left to right is the board in row-major order.
- Positions are immutable. Outcome and side-to-move are always derived from
  the masks, never stored.
- X always starts: X is to move whenever it has no more pieces than O.
"""
from __future__ import annotations

from enum import Enum
from typing import Iterator, List, NamedTuple, Optional

from .errors import IllegalMoveError, ParseError

FULL_MASK = 0b111111111

WIN_MASKS = [
    0b111000000, 0b000111000, 0b000000111,
    0b100100100, 0b010010010, 0b001001001,
    0b100010001, 0b001010100,
]

EMPTY_SYMBOL = '_'


class Player(Enum):
    X = 'X'
    O = 'O'

    @property
    def symbol(self) -> str:
        return self.value

    def other(self) -> 'Player':
        return Player.O if self is Player.X else Player.X

    def __str__(self) -> str:
        return self.value


class Outcome(Enum):
    X_WINS = 'x_wins'
    O_WINS = 'o_wins'
    DRAW = 'draw'
    IN_PROGRESS = 'in_progress'
    AMBIGUOUS = 'ambiguous'

    @property
    def winner(self) -> Optional[Player]:
        if self is Outcome.X_WINS:
            return Player.X
        if self is Outcome.O_WINS:
            return Player.O
        return None

    @property
    def is_terminal(self) -> bool:
        return self is not Outcome.IN_PROGRESS

    def describe(self) -> str:
        if self.winner is not None:
            return f"{self.winner} wins"
        return {
            Outcome.DRAW: "Draw",
            Outcome.IN_PROGRESS: "Game in progress",
            Outcome.AMBIGUOUS: "Ambiguous",
        }[self]


class Move(NamedTuple):
    row: int
    col: int

    def __str__(self) -> str:
        return f"({self.row}, {self.col})"


class _Masks(NamedTuple):
    x: int = 0
    o: int = 0


class Position(_Masks):
    """Occupancy of the grid as two disjoint bit masks.

    Raises ParseError for overlapping masks or bits outside the 9 cells.
    """
    __slots__ = ()

    def __new__(cls, x: int = 0, o: int = 0) -> 'Position':
        if x & o:
            raise ParseError(f"Masks overlap: x={x:#011b} o={o:#011b}")
        if x & ~FULL_MASK or o & ~FULL_MASK:
            raise ParseError(f"Masks exceed the 9 cells: x={x:#b} o={o:#b}")
        return super().__new__(cls, x, o)

    def __str__(self) -> str:
        return to_serialized(self)


def cell_bit(row: int, col: int) -> int:
    return 1 << ((2 - row) * 3 + (2 - col))


def popcount(bits: int) -> int:
    return bin(bits).count('1')


def is_victory(bits: int) -> bool:
    return any(bits & mask == mask for mask in WIN_MASKS)


def bits_from_binary(text: str) -> int:
    if len(text) != 9 or any(c not in '01' for c in text):
        raise ParseError(f"Binary string must be 9 characters of 0/1, got {text!r}")
    return int(text, 2)


def empty() -> Position:
    return Position(0, 0)


def from_serialized(text: str) -> Position:
    """Parse 9 symbols (X, O or _) in row-major order; whitespace is ignored."""
    stripped = ''.join(text.split())
    if len(stripped) != 9:
        raise ParseError(f"Invalid position string: {text!r}")
    x = o = 0
    for i, c in enumerate(stripped):
        bit = cell_bit(i // 3, i % 3)
        if c == Player.X.symbol:
            x |= bit
        elif c == Player.O.symbol:
            o |= bit
        elif c != EMPTY_SYMBOL:
            raise ParseError(f"Invalid character: {c!r}")
    return Position(x, o)


def to_serialized(position: Position) -> str:
    return ''.join(symbol_at(position, r, c) for r in range(3) for c in range(3))


def symbol_at(position: Position, row: int, col: int) -> str:
    bit = cell_bit(row, col)
    if position.x & bit:
        return Player.X.symbol
    if position.o & bit:
        return Player.O.symbol
    return EMPTY_SYMBOL


def parse_move(text: str) -> Move:
    """Parse "rc" (e.g. "1 2" or "12") into a Move; rows and columns are 0-2."""
    stripped = ''.join(text.split())
    if len(stripped) != 2 or any(c not in '012' for c in stripped):
        raise ParseError(f"Invalid move string: {text!r}")
    return Move(int(stripped[0]), int(stripped[1]))


def outcome(position: Position) -> Outcome:
    x_victory = is_victory(position.x)
    o_victory = is_victory(position.o)
    # a detected win takes precedence over a full board
    if x_victory and o_victory:
        return Outcome.AMBIGUOUS
    if x_victory:
        return Outcome.X_WINS
    if o_victory:
        return Outcome.O_WINS
    if is_full(position):
        return Outcome.DRAW
    return Outcome.IN_PROGRESS


def is_full(position: Position) -> bool:
    return position.x | position.o == FULL_MASK


def is_occupied(position: Position, move: Move) -> bool:
    return bool((position.x | position.o) & cell_bit(move.row, move.col))


def active_player(position: Position) -> Optional[Player]:
    if outcome(position).is_terminal:
        return None
    if popcount(position.x) <= popcount(position.o):
        return Player.X
    return Player.O


def iter_legal_moves(position: Position) -> Iterator[Move]:
    if outcome(position).is_terminal:
        return
    occupied = position.x | position.o
    for row in range(3):
        for col in range(3):
            if not occupied & cell_bit(row, col):
                yield Move(row, col)


def legal_moves(position: Position) -> List[Move]:
    return list(iter_legal_moves(position))


def apply_move(position: Position, player: Player, move: Move) -> Position:
    """Return a new position with `move` played by `player`.

    Raises IllegalMoveError when it is not `player`'s turn (including when the
    game is already decided) or the target cell is taken.
    """
    if active_player(position) is not player:
        raise IllegalMoveError(f"It is not {player}'s turn")
    if not (0 <= move.row <= 2 and 0 <= move.col <= 2):
        raise IllegalMoveError(f"Move {move} is off the board")
    if is_occupied(position, move):
        raise IllegalMoveError(f"Move {move} has already been made")
    bit = cell_bit(move.row, move.col)
    if player is Player.X:
        return Position(position.x | bit, position.o)
    return Position(position.x, position.o | bit)
