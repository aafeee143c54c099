import pytest

from narde.core.board import WHITE, BLACK, BEAR_OFF_POINT
from narde.core.dice import Dice
from narde.core.errors import InvariantViolation
from narde.core.moves import CheckerMove, TurnMove
from narde.core.state import NardeState
from narde.core.state_invariants import assert_state_invariant


def test_default_position():
    state = NardeState()
    assert state.head_count(WHITE) == 15
    assert state.head_count(BLACK) == 15
    assert state.state_to_list() == [[(23, 15)], [(11, 15)]]


def test_apply_and_undo_track_head():
    state = NardeState(debug=True)
    state.start_turn(WHITE, Dice(6, 5))
    assert state.is_first_turn
    assert not state.moved_from_head

    move = CheckerMove(23, 17, 6)
    assert state.apply_move(move, WHITE)
    assert state.moved_from_head
    assert state.flags["moved_from_head"]
    assert state.num_of_checkers(17, WHITE) == 1

    state.undo_move(move, WHITE)
    assert not state.moved_from_head
    assert state.state_to_list() == [[(23, 15)], [(11, 15)]]


def test_pass_changes_nothing():
    state = NardeState()
    before = state.copy()
    assert not state.apply_move(CheckerMove.pass_move(3), WHITE)
    assert state == before


def test_bear_off_and_undo():
    state = NardeState([[(0, 2), (-1, 13)], [(11, 15)]], debug=True)
    state.apply_move(CheckerMove(0, BEAR_OFF_POINT, 1), WHITE)
    assert state.scores[WHITE] == 14
    state.undo_move(CheckerMove(0, BEAR_OFF_POINT, 1), WHITE)
    assert state.scores[WHITE] == 13
    assert state.num_of_checkers(0, WHITE) == 2


def test_moving_from_empty_point_is_fatal():
    state = NardeState()
    with pytest.raises(InvariantViolation) as info:
        state.apply_move(CheckerMove(10, 4, 6), WHITE)
    assert "EMPTY POINT" in str(info.value)
    assert info.value.board is not None


def test_invariants_catch_corruption():
    state = NardeState()
    state.board[WHITE, 23] = 14
    with pytest.raises(InvariantViolation):
        assert_state_invariant(state, "test")


def test_copy_is_deep():
    state = NardeState()
    other = state.copy()
    other.apply_move(CheckerMove(23, 20, 3), WHITE)
    assert state.head_count(WHITE) == 15
    assert state != other


def test_turn_move_strings():
    tmove = TurnMove((CheckerMove(23, 17, 6), CheckerMove(0, BEAR_OFF_POINT, 1), CheckerMove.pass_move(2)))
    assert len(tmove) == 3
    assert tmove.num_non_pass == 2
    assert str(tmove) == "23 >  17 (6) |  0 > off (1) | pass (2)"
