import random

import numpy as np
import pytest

from narde.core.board import NUM_CHECKERS
from narde.core.config import GameConfig
from narde.core.engine import GameEngine
from narde.players.random import RandomPlayer


def _check_position(engine):
    state = engine.state
    for player in (0, 1):
        assert state.checkers_on_board(player) + int(state.scores[player]) == NUM_CHECKERS
    assert not ((state.board[0] > 0) & (state.board[1] > 0)).any()


@pytest.mark.parametrize("seed", [1, 7])
def test_random_self_play(seed):
    rng = random.Random(seed)
    engine = GameEngine(config=GameConfig(debug=True), rng=rng)
    steps = 0
    while not engine.is_terminal() and steps < 2000:
        if engine.is_chance_node():
            engine.apply_action(engine.sample_chance_outcome())
        else:
            actions = engine.legal_actions()
            assert actions
            dice = engine.state.dice
            for action in actions:
                moves = engine.codec.decode(engine.current_player(), action, dice)
                assert engine.codec.encode(moves, dice) == action
            engine.apply_action(rng.choice(actions))
        _check_position(engine)
        steps += 1

    if engine.is_terminal():
        returns = engine.returns()
        assert sum(returns) == 0
        assert abs(returns[0]) in (1.0, 2.0)


def test_undo_walks_back_to_start():
    rng = random.Random(3)
    engine = GameEngine(rng=rng)
    start = engine.state.copy()
    applied = []
    for _ in range(40):
        if engine.is_terminal():
            break
        player = engine.current_player()
        if engine.is_chance_node():
            action = engine.sample_chance_outcome()
        else:
            action = rng.choice(engine.legal_actions())
        engine.apply_action(action)
        applied.append((player, action))

    for player, action in reversed(applied):
        engine.undo_action(player, action)
    assert engine.state == start
    assert engine.is_chance_node()
    assert np.array_equal(engine.state.board, start.board)


def test_play_game_with_players():
    rng = random.Random(11)
    engine = GameEngine(RandomPlayer(0, rng), RandomPlayer(1, rng), rng=rng)
    events = list(engine.play_game(max_turns=30))
    assert events[0]["type"] == "start_game"
    assert events[-1]["type"] == "game_over"
    kinds = {e["type"] for e in events}
    assert {"roll_dice", "turn_start", "chosen_move", "turn_end"} <= kinds
    for event in events:
        if event["type"] == "chosen_move":
            assert event["description"].startswith(str(event["action"]))
