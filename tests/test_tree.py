import logging

import pytest

from tttsolver.board import Move, Outcome, apply_move, from_serialized
from tttsolver.errors import NoSuchChildError
from tttsolver.tree import TreeStats, build, tree_stats


def test_tiny_tree_builds():
    root = build(from_serialized("XOX O_O XOX"))
    assert root.position == from_serialized("XOX O_O XOX")
    assert root.max_depth() == 2
    assert root.n_children() == 1
    child = root.child_for(Move(1, 1))
    assert child.position == from_serialized("XOX OXO XOX")
    assert child.outcome() is Outcome.X_WINS
    assert child.is_terminal()


def test_small_tree_builds():
    root = build(from_serialized("XOX O__ XOX"))
    assert root.max_depth() == 3
    assert root.n_children() == 2
    child = root.child_for(Move(1, 2))
    assert child.position == from_serialized("XOX O_O XOX")
    assert child.n_children() == 1
    assert child.max_depth() == 2


def test_children_follow_legal_move_order():
    root = build(from_serialized("XO_ _X_ ___"))
    player = root.active_player()
    moves = root.legal_moves()
    assert len(root.children()) == len(moves) == 6
    for mv, child in zip(moves, root.children()):
        assert child.position == apply_move(root.position, player, mv)
        assert root.child_for(mv) is child


def test_terminal_node_has_no_children():
    root = build(from_serialized("XOX OXO XOX"))
    assert root.children() == []
    assert root.max_depth() == 1
    assert root.active_player() is None
    with pytest.raises(NoSuchChildError):
        root.child_for(Move(0, 0))


def test_ambiguous_position_is_a_leaf():
    root = build(from_serialized("XXX ___ OOO"))
    assert root.outcome() is Outcome.AMBIGUOUS
    assert root.is_terminal()


def test_child_for_occupied_cell():
    root = build(from_serialized("XO_ ___ ___"))
    with pytest.raises(NoSuchChildError):
        root.child_for(Move(0, 0))


def test_leaves_are_decided():
    root = build(from_serialized("X__ _O_ ___"))
    for node in root.iter_nodes():
        if node.is_terminal():
            assert node.outcome() is not Outcome.IN_PROGRESS
        else:
            assert node.outcome() is Outcome.IN_PROGRESS


def test_iter_nodes_is_preorder():
    root = build(from_serialized("XOX O__ XOX"))
    order = [n.position for n in root.iter_nodes()]
    assert order == [
        from_serialized("XOX O__ XOX"),
        from_serialized("XOX OO_ XOX"),
        from_serialized("XOX O_O XOX"),
        from_serialized("XOX OXO XOX"),
    ]


def test_small_tree_stats():
    st = tree_stats(build(from_serialized("XOX O__ XOX")))
    assert st == TreeStats(nodes=4, max_depth=3, x_wins=1, o_wins=1, draws=0, ambiguous=0)
    assert st.terminal == 2


def test_full_tree_depth(full_tree):
    assert full_tree.max_depth() == 10
    assert full_tree.n_children() == 9


def test_full_tree_stats(full_tree):
    st = tree_stats(full_tree)
    assert st.nodes == 549946
    assert st.max_depth == 10
    assert (st.x_wins, st.o_wins, st.draws, st.ambiguous) == (131184, 77904, 46080, 0)
    assert st.terminal == 255168


def test_build_logs_tree_size(caplog):
    with caplog.at_level(logging.DEBUG, logger="tttsolver.tree"):
        build(from_serialized("XOX O__ XOX"))
    assert "built tree from XOXO__XOX: 4 nodes in" in caplog.text
