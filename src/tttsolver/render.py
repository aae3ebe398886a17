"""Text rendering of positions and principal lines for the terminal."""
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from colorama import Fore, Style

from .board import Move, Position, active_player, apply_move, symbol_at
from .errors import GameOverError


def _highlight(symbol: str, color: bool) -> str:
    if color:
        return f"{Fore.GREEN}{symbol}{Style.RESET_ALL}"
    return f"[{symbol}]"


def render_board(position: Position, highlight: Optional[Move] = None, color: bool = True) -> str:
    rows = []
    for r in range(3):
        cells = []
        for c in range(3):
            sym = symbol_at(position, r, c)
            if highlight is not None and (r, c) == (highlight.row, highlight.col):
                sym = _highlight(sym, color)
            cells.append(sym)
        rows.append(''.join(cells))
    return '\n'.join(rows)


def render_move_on_board(position: Position, move: Move, color: bool = True) -> str:
    player = active_player(position)
    if player is None:
        raise GameOverError("Game is already over")
    return render_board(apply_move(position, player, move), highlight=move, color=color)


def line_positions(position: Position, line: Sequence[Move]) -> List[Tuple[Optional[Move], Position]]:
    out: List[Tuple[Optional[Move], Position]] = [(None, position)]
    for mv in line:
        last = out[-1][1]
        player = active_player(last)
        if player is None:
            raise GameOverError(f"Line continues past the end of the game at {mv}")
        out.append((mv, apply_move(last, player, mv)))
    return out


def render_line(position: Position, line: Sequence[Move], color: bool = True) -> str:
    return '\n\n'.join(
        render_board(pos, highlight=mv, color=color) for mv, pos in line_positions(position, line)
    )
