import numpy as np
import pytest

from narde.core.board import WHITE, BLACK, CHANCE_PLAYER, TERMINAL_PLAYER
from narde.core.config import GameConfig, ScoringType, SearchLimits
from narde.core.dice import outcome_from_roll
from narde.core.engine import GameEngine, NodeType
from narde.core.errors import InvalidActionError
from narde.core.moves import CheckerMove
from narde.core.observation import OBSERVATION_SIZE


def _roll(engine, d0, d1):
    engine.apply_action(outcome_from_roll(d0, d1))


# ---------- Chance / turn order ----------
def test_initial_node_is_chance():
    engine = GameEngine()
    assert engine.node_type == NodeType.CHANCE
    assert engine.current_player() == CHANCE_PLAYER
    outcomes = engine.chance_outcomes()
    assert len(outcomes) == 21
    assert sum(p for _, p in outcomes) == pytest.approx(1.0)
    assert engine.legal_actions() == list(range(21))
    assert engine.num_distinct_actions() == 435625
    assert outcome_from_roll(5, 2) == 7
    assert engine.action_to_string(CHANCE_PLAYER, 7) == "chance outcome 7 (roll: 52)"


def test_chance_outcomes_only_at_chance_nodes():
    engine = GameEngine()
    _roll(engine, 5, 2)
    with pytest.raises(ValueError):
        engine.chance_outcomes()


def test_first_roll_goes_to_white_then_alternates():
    engine = GameEngine()
    _roll(engine, 5, 2)
    assert engine.current_player() == WHITE
    assert engine.dice.values == (5, 2)
    engine.apply_action(engine.legal_actions()[0])
    assert engine.current_player() == CHANCE_PLAYER
    _roll(engine, 3, 1)
    assert engine.current_player() == BLACK
    assert engine.state.is_first_turn


# ---------- Head rule through the API ----------
def test_first_turn_six_six_moves_two_head_checkers():
    engine = GameEngine()
    _roll(engine, 6, 6)
    assert engine.legal_actions() == [21593]
    assert engine.action_to_string(WHITE, 21593) == "21593 - 1/7 1/7"


def test_first_turn_four_four_two_head_checkers():
    engine = GameEngine()
    _roll(engine, 4, 4)
    turns = engine.legal_turn_moves().values()
    assert turns
    for tmove in turns:
        assert tmove.num_non_pass == 4
        assert sum(1 for c in tmove if c.from_point == 23) == 2


def test_first_turn_one_one_single_head_checker():
    engine = GameEngine()
    _roll(engine, 1, 1)
    assert engine.legal_actions() == [371198]
    assert engine.action_to_string(WHITE, 371198) == "371198 - 1/2 2/3 3/4 4/5"


def test_later_doubles_leave_head_once(make_engine):
    engine = make_engine([(23, 14), (20, 1)], [(11, 15)], dice=(6, 6))
    for tmove in engine.legal_turn_moves().values():
        assert sum(1 for c in tmove if c.from_point == 23) <= 1


# ---------- Extra turns ----------
def test_doubles_grant_one_extra_turn():
    engine = GameEngine()
    _roll(engine, 6, 6)
    engine.apply_action(21593)
    assert engine.double_turn
    assert engine.turns == 0

    _roll(engine, 2, 1)
    assert engine.current_player() == WHITE
    assert engine.state.is_extra_turn
    assert not engine.state.is_first_turn
    engine.apply_action(engine.legal_actions()[0])
    assert engine.turns == 1

    _roll(engine, 3, 3)
    assert engine.current_player() == BLACK


def test_no_extra_turn_after_extra_turn():
    engine = GameEngine()
    _roll(engine, 6, 6)
    engine.apply_action(21593)
    _roll(engine, 5, 5)
    assert engine.state.is_extra_turn
    engine.apply_action(engine.legal_actions()[0])
    assert not engine.double_turn
    _roll(engine, 2, 1)
    assert engine.current_player() == BLACK


# ---------- Validation ----------
def test_illegal_action_rejected():
    engine = GameEngine()
    _roll(engine, 6, 6)
    with pytest.raises(InvalidActionError):
        engine.apply_action(0)
    with pytest.raises(InvalidActionError):
        engine.apply_action(-5)


def test_chance_outcome_out_of_range():
    engine = GameEngine()
    with pytest.raises(InvalidActionError):
        engine.apply_action(21)


def test_unvalidated_action_is_all_or_nothing():
    engine = GameEngine(config=GameConfig(validate_actions=False, debug=True))
    _roll(engine, 6, 6)
    before = engine.state.copy()
    recorded = len(engine.history)

    # the second half-move starts from an empty point
    bad = engine.codec.encode([CheckerMove(23, 17, 6), CheckerMove(10, 4, 6)], engine.dice)
    with pytest.raises(InvalidActionError):
        engine.apply_action(bad)
    assert engine.state == before
    assert len(engine.history) == recorded
    assert engine.current_player() == WHITE

    engine.apply_action(engine.codec.encode([CheckerMove(23, 17, 6)], engine.dice))
    assert engine.state.head_count(WHITE) == 14
    assert engine.current_player() == CHANCE_PLAYER


def test_must_pass_when_blocked(make_engine):
    engine = make_engine([(23, 15)], [(22, 5), (21, 5), (11, 5)], dice=(2, 1))
    assert engine.must_pass()
    # pass(1) * 150 + pass(2), no low-first offset for a double pass
    assert engine.legal_actions() == [144 * 150 + 145]
    action = engine.legal_actions()[0]
    assert engine.action_to_string(WHITE, action) == f"{action} - Pass"
    before = engine.state.state_to_list()
    engine.apply_action(action)
    assert engine.state.state_to_list() == before
    assert engine.current_player() == CHANCE_PLAYER


# ---------- Legal action sets ----------
BRIDGE_RUN = [(15, 1), (16, 1), (17, 1), (18, 1), (19, 1), (22, 1), (23, 9)]


def _opening_with(engine, cmove):
    return [action for action, tmove in engine.legal_turn_moves().items() if tmove.checker_moves[0] == cmove]


def test_bridge_move_absent_without_opponent_ahead(make_engine):
    engine = make_engine(BRIDGE_RUN, [(11, 15)], dice=(2, 1))
    assert engine.legal_actions()
    # 22/20 (2) then 23/22 (1)
    assert 138 * 150 + 133 not in engine.legal_actions()
    assert _opening_with(engine, CheckerMove(22, 20, 2)) == []


def test_bridge_move_present_with_opponent_ahead(make_engine):
    engine = make_engine(BRIDGE_RUN, [(11, 14), (13, 1)], dice=(2, 1))
    assert 138 * 150 + 133 in engine.legal_actions()
    assert _opening_with(engine, CheckerMove(22, 20, 2))


def test_two_checkers_must_play_both_dice(make_engine):
    engine = make_engine([(20, 1), (16, 1), (-1, 13)], [(14, 1), (12, 1), (8, 1), (11, 12)], dice=(6, 2))
    # 20/18 16/10 in either order; 20/14 and 16/14 land on Black
    assert engine.legal_actions() == [101 * 150 + 121, 121 * 150 + 101]
    for tmove in engine.legal_turn_moves().values():
        assert set(tmove) == {CheckerMove(20, 18, 2), CheckerMove(16, 10, 6)}


def test_single_play_must_use_higher_die(make_engine):
    engine = make_engine([(23, 2), (-1, 13)], [(15, 1), (11, 14)], dice=(6, 2))
    # 23/17 then pass(2)
    assert engine.legal_actions() == [145 * 150 + 143]
    assert engine.action_to_string(WHITE, 145 * 150 + 143) == "21893 - 1/7"


def test_default_limits_truncate_dense_position(make_engine):
    white = [(23, 3), (22, 1), (21, 1), (20, 1), (19, 1), (17, 1), (16, 1),
             (15, 1), (14, 1), (13, 1), (10, 1), (9, 1), (8, 1)]
    engine = make_engine(white, [(11, 15)], dice=(6, 5))
    assert engine.generator.limits == SearchLimits()
    actions = engine.legal_actions()
    assert engine.generator.truncated
    assert len(actions) == SearchLimits().max_sequences
    for tmove in engine.legal_turn_moves().values():
        assert tmove.num_non_pass == 2


# ---------- Terminal / returns ----------
def test_mars_scores_double(make_engine):
    engine = make_engine([(1, 1), (-1, 14)], [(11, 15)], dice=(6, 2))
    assert engine.legal_actions() == [21761]
    assert engine.action_to_string(WHITE, 21761) == "21761 - 23/Off"
    engine.apply_action(21761)
    assert engine.is_terminal()
    assert engine.current_player() == TERMINAL_PLAYER
    assert engine.game_result().type == "MARS"
    assert engine.returns() == [2.0, -2.0]
    assert engine.legal_actions() == []
    with pytest.raises(InvalidActionError):
        engine.apply_action(0)


def test_plain_win(make_engine):
    engine = make_engine([(0, 1), (-1, 14)], [(12, 3), (-1, 12)], dice=(2, 1))
    engine.apply_action(engine.legal_actions()[0])
    assert engine.returns() == [1.0, -1.0]
    assert engine.game_result().type == "WIN"


def test_unfinished_game_returns_zero():
    assert GameEngine().returns() == [0.0, 0.0]


def _tie_engine(make_engine, black):
    config = GameConfig(scoring_type=ScoringType.WIN_LOSS_TIE, debug=True)
    engine = make_engine([(0, 1), (-1, 14)], black, dice=(2, 1), config=config)
    assert engine.legal_actions() == [144 * 150 + 1]
    engine.apply_action(144 * 150 + 1)
    return engine


def test_black_gets_last_roll_for_tie(make_engine):
    engine = _tie_engine(make_engine, [(12, 1), (-1, 14)])
    assert not engine.is_terminal()
    assert engine.current_player() == CHANCE_PLAYER
    _roll(engine, 3, 1)
    assert engine.current_player() == BLACK
    engine.apply_action(engine.legal_actions()[0])
    assert engine.game_result().type == "TIE"
    assert engine.returns() == [0.0, 0.0]


def test_black_misses_last_roll(make_engine):
    engine = _tie_engine(make_engine, [(17, 1), (-1, 14)])
    _roll(engine, 2, 1)
    engine.apply_action(engine.legal_actions()[0])
    assert engine.is_terminal()
    assert engine.returns() == [1.0, -1.0]


def test_tie_roll_needs_fourteen_off(make_engine):
    engine = _tie_engine(make_engine, [(12, 2), (-1, 13)])
    assert engine.is_terminal()
    assert engine.returns() == [1.0, -1.0]


def test_win_loss_scoring_ends_immediately(make_engine):
    engine = make_engine([(0, 1), (-1, 14)], [(12, 1), (-1, 14)], dice=(2, 1))
    engine.apply_action(engine.legal_actions()[0])
    assert engine.is_terminal()
    assert engine.returns() == [1.0, -1.0]


# ---------- Undo ----------
def test_undo_restores_position_and_turn():
    engine = GameEngine()
    _roll(engine, 6, 6)
    before = engine.state.copy()
    engine.apply_action(21593)
    engine.undo_action(WHITE, 21593)
    assert engine.state == before
    assert engine.current_player() == WHITE
    assert engine.legal_actions() == [21593]

    engine.undo_action(CHANCE_PLAYER, outcome_from_roll(6, 6))
    assert engine.is_chance_node()
    assert engine.turns == -1


def test_undo_bear_off(make_engine):
    engine = make_engine([(0, 7), (-1, 8)], [(11, 15)], dice=(1, 3))
    before = engine.state.copy()
    action = engine.legal_actions()[0]
    engine.apply_action(action)
    assert engine.state.scores[WHITE] == 10
    engine.undo_action(WHITE, action)
    assert engine.state == before


def test_undo_mismatch_and_empty_history():
    engine = GameEngine()
    with pytest.raises(ValueError):
        engine.undo_action(CHANCE_PLAYER, 0)
    _roll(engine, 6, 6)
    with pytest.raises(ValueError):
        engine.undo_action(WHITE, 21593)


# ---------- Clone / observation / config ----------
def test_clone_is_independent():
    engine = GameEngine()
    _roll(engine, 6, 6)
    other = engine.clone()
    other.apply_action(21593)
    assert engine.current_player() == WHITE
    assert engine.state.head_count(WHITE) == 15
    assert other.state.head_count(WHITE) == 13


def test_observation_tensor():
    engine = GameEngine()
    obs = engine.observation_tensor(WHITE)
    assert obs.shape == (OBSERVATION_SIZE,)
    assert obs.dtype == np.float32
    assert obs[0] == 15
    assert obs[24] == 15
    assert obs[50] == 0 and obs[51] == 0

    _roll(engine, 5, 2)
    obs = engine.observation_tensor(BLACK)
    assert obs[51] == 1
    assert list(obs[52:]) == [5, 2]
    with pytest.raises(ValueError):
        engine.observation_tensor(CHANCE_PLAYER)


def test_set_state_rejects_bad_positions():
    engine = GameEngine()
    with pytest.raises(ValueError):
        engine.set_state([[(23, 14)], [(11, 15)]])
    with pytest.raises(ValueError):
        engine.set_state([[(23, 14), (11, 1)], [(11, 15)]])


def test_game_config_from_params():
    config = GameConfig.from_params({"scoring_type": "winlosstie_scoring", "max_depth": 4})
    assert config.scoring_type == ScoringType.WIN_LOSS_TIE
    assert config.limits == SearchLimits(max_depth=4)
    with pytest.raises(ValueError):
        GameConfig.from_params({"scoring_type": "cube"})
    with pytest.raises(ValueError):
        GameConfig.from_params({"colour": "red"})
    with pytest.raises(ValueError):
        SearchLimits(max_branching=0)
