from __future__ import annotations

import argparse
import csv
import logging
import os
import sys
from dataclasses import dataclass
from typing import List, Optional

from colorama import just_fix_windows_console

from .board import empty, from_serialized, parse_move
from .errors import SolverError
from .render import render_line, render_move_on_board
from .solver import best_moves_and_evaluation, evaluation_label, principal_line, solve_position
from .tree import build, tree_stats


@dataclass
class SolveArgs:
    position: str
    show_line: bool = False
    color: bool = True
    workers: Optional[int] = None


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ttt-solve", description="Solver for Tic Tac Toe")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument(
        "--no-color",
        dest="color",
        action="store_false",
        default=True,
        help="Highlight moves with [brackets] instead of ANSI colour (also set by NO_COLOR)",
    )
    p.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Processes used to evaluate the root's children (default: $TTT_SOLVER_WORKERS or 1)",
    )

    p_sol = sub.add_parser("solve", help="Solve Tic Tac Toe position")
    p_sol.add_argument(
        "position",
        nargs="*",
        help='Position as 9 symbols of X/O/_ in row-major order, e.g. "XOX O_O XOX" (omit with --stdin)',
    )
    p_sol.add_argument(
        "--line", "-l", action="store_true", help="Show an example optimal line from the best move"
    )
    p_sol.add_argument(
        "--stdin", action="store_true", help="Read many positions from stdin and stream CSV output"
    )

    p_stats = sub.add_parser("stats", help="Size and terminal outcomes of a position's game tree")
    p_stats.add_argument("position", nargs="*", help="Position (default: empty board)")

    p_move = sub.add_parser("move", help="Show the board after the side to move plays a move")
    p_move.add_argument("position", help='Position, e.g. "XO_______"')
    p_move.add_argument("move", help='Move as row then column, e.g. "1 2"')

    return p


def _print_version() -> None:
    try:
        from importlib.metadata import PackageNotFoundError, version as _ver
        print(_ver("tictactoe-solver"))
    except PackageNotFoundError:
        print("unknown")


def _run_solve(args: SolveArgs) -> int:
    board = from_serialized(args.position)
    root = build(board)
    if args.show_line:
        evaluation, line = principal_line(root)
        print(f"\n\nEvaluation:\n{evaluation_label(evaluation)}\n\nLine:\n"
              f"{render_line(board, line, color=args.color)}")
        return 0
    moves, evaluation = best_moves_and_evaluation(root, workers=args.workers)
    moves_str = '\n'.join(str(m) for m in moves)
    print(f"\n\nEvaluation: {evaluation_label(evaluation)}\nIndifferent between these moves:\n{moves_str}")
    return 0


def _run_solve_stdin(workers: Optional[int]) -> int:
    w = csv.writer(sys.stdout)
    w.writerow(["position", "value", "label", "best_moves", "line"])
    for lineno, line in enumerate(sys.stdin, start=1):
        raw = line.strip()
        if not raw:
            continue
        try:
            res = solve_position(from_serialized(raw), workers=workers)
        except SolverError as e:
            logging.warning("line %d skipped: %s", lineno, e)
            continue
        w.writerow(res.as_row())
    return 0


def _run_stats(position: str) -> int:
    board = from_serialized(position) if position else empty()
    st = tree_stats(build(board))
    print(
        f"nodes={st.nodes} max_depth={st.max_depth} terminal={st.terminal} "
        f"x_wins={st.x_wins} o_wins={st.o_wins} draws={st.draws} ambiguous={st.ambiguous}"
    )
    return 0


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if ns.verbose else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    if ns.version:
        _print_version()
        return 0

    color = ns.color and not os.getenv("NO_COLOR")
    if color:
        just_fix_windows_console()
    try:
        if ns.cmd == "solve":
            if ns.stdin:
                return _run_solve_stdin(ns.workers)
            if not ns.position:
                logging.error("Needs a Position!")
                return 2
            return _run_solve(SolveArgs(
                position=''.join(ns.position),
                show_line=ns.line,
                color=color,
                workers=ns.workers,
            ))
        if ns.cmd == "stats":
            return _run_stats(''.join(ns.position))
        if ns.cmd == "move":
            board = from_serialized(ns.position)
            print(render_move_on_board(board, parse_move(ns.move), color=color))
            return 0
    except SolverError as e:
        logging.error("%s", e)
        return 2

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
