from typing import List

import pytest
try:
    from hypothesis import given, strategies as st  # type: ignore
except ModuleNotFoundError:  # pragma: no cover - test infra
    pytest.skip("Hypothesis not installed", allow_module_level=True)

from tttsolver.board import (
    Move,
    Outcome,
    Player,
    active_player,
    apply_move,
    empty,
    from_serialized,
    legal_moves,
    outcome,
    parse_move,
    popcount,
    to_serialized,
)
from tttsolver.errors import IllegalMoveError

ALL_CELLS = [Move(r, c) for r in range(3) for c in range(3)]

boards = st.lists(st.sampled_from("XO_"), min_size=9, max_size=9).map(''.join)


@given(boards)
def test_legal_move_count_matches_empty_cells(text: str):
    p = from_serialized(text)
    assert p.x & p.o == 0
    moves = legal_moves(p)
    if outcome(p) is Outcome.IN_PROGRESS:
        assert len(moves) == 9 - popcount(p.x | p.o)
        assert moves == sorted(moves)
    else:
        assert moves == []
        assert active_player(p) is None


@given(boards)
def test_serialization_is_stable(text: str):
    p = from_serialized(text)
    assert to_serialized(p) == text
    assert from_serialized(to_serialized(p)) == p


@given(boards)
def test_apply_move_only_accepts_legal_moves(text: str):
    p = from_serialized(text)
    player = active_player(p)
    legal = set(legal_moves(p))
    for mv in ALL_CELLS:
        if player is not None and mv in legal:
            child = apply_move(p, player, mv)
            assert outcome(child) in Outcome
            assert popcount(child.x | child.o) == popcount(p.x | p.o) + 1
            with pytest.raises(IllegalMoveError):
                apply_move(p, player.other(), mv)
        else:
            for who in Player:
                with pytest.raises(IllegalMoveError):
                    apply_move(p, who, mv)


@given(st.lists(st.integers(min_value=0, max_value=8), max_size=9))
def test_real_games_are_never_ambiguous(choices: List[int]):
    p = empty()
    for k in choices:
        moves = legal_moves(p)
        if not moves:
            break
        p = apply_move(p, active_player(p), moves[k % len(moves)])
        assert outcome(p) is not Outcome.AMBIGUOUS
        assert p.x & p.o == 0
        assert popcount(p.x) - popcount(p.o) in (0, 1)


@given(
    st.integers(min_value=0, max_value=2),
    st.integers(min_value=0, max_value=2),
    st.sampled_from(["", " ", "\t", "\n "]),
)
def test_parse_move_ignores_whitespace(row: int, col: int, ws: str):
    assert parse_move(f"{ws}{row}{ws}{col}{ws}") == Move(row, col)
