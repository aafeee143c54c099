# =========================================================
# --- core_engine.py ---
# =========================================================

import logging
import random
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from narde.players.player import Player

from .board import (
    WHITE, BLACK, CHANCE_PLAYER, TERMINAL_PLAYER, NUM_CHECKERS,
    human_point, opponent,
)
from .codec import ActionCodec, NUM_DISTINCT_ACTIONS
from .config import GameConfig
from .dice import CHANCE_OUTCOMES, NUM_CHANCE_OUTCOMES, Dice, outcome_from_roll
from .errors import InvalidActionError
from .generator import SequenceGenerator
from .moves import CheckerMove, TurnMove
from .observation import observation_tensor
from .rules import GameResult, NardeRules
from .state import NardeState
from .undo import TurnHistory, TurnSnapshot

logger = logging.getLogger(__name__)

# ========================================================

#: Largest absolute return of a game (a mars)
MAX_UTILITY = 2.0


class NodeType(Enum):
    """
    Kind of decision at the current node.

    Attributes:
        CHANCE: Dice are to be rolled.
        PLAYER: A player chooses an action.
        TERMINAL: The game is over.
    """
    CHANCE = 1
    PLAYER = 2
    TERMINAL = 3


class EngineEvents:
    """
    Event factory for game engine events.
    Returns structured dictionaries for UI, logging, or tests.
    """

    def start_game(self, state: NardeState) -> Dict[str, Any]:
        """Event: A new game has started."""
        return {
            "type": "start_game",
            "state": state,
        }

    def roll_dice(self, dice: Tuple[int, int], turn: int, player_type: str, extra_turn: bool) -> Dict[str, Any]:
        """Event: Dice have been rolled."""
        return {
            "type": "roll_dice",
            "dice": dice,
            "turn": turn,
            "player_type": player_type,
            "extra_turn": extra_turn,
        }

    def turn_start(self, turn: int, state: NardeState, bear_off_allowed: bool) -> Dict[str, Any]:
        """Event: A new turn has started."""
        return {
            "type": "turn_start",
            "turn": turn,
            "state": state,
            "bear_off_allowed": bear_off_allowed,
        }

    def no_moves(self, turn: int) -> Dict[str, Any]:
        """Event: Player has no legal half-move and passes."""
        return {
            "type": "no_moves",
            "turn": turn,
        }

    def chosen_move(self, turn: int, action: int, move: Any, description: str) -> Dict[str, Any]:
        """Event: Player has chosen a move."""
        return {
            "type": "chosen_move",
            "turn": turn,
            "action": action,
            "move": move,
            "description": description,
        }

    def turn_end(self, next_turn: int, state: NardeState) -> Dict[str, Any]:
        """Event: The current turn has ended."""
        return {
            "type": "turn_end",
            "next_turn": next_turn,
            "state": state,
        }

    def game_over(self, state: NardeState, result: Optional[GameResult], returns: List[float], turns: int) -> Dict[str, Any]:
        """Event: The game has ended (or was stopped)."""
        return {
            "type": "game_over",
            "state": state,
            "winner": result.winner if result else None,
            "points": result.points if result else 0,
            "result_type": result.type if result else "UNFINISHED",
            "returns": returns,
            "turns": turns,
        }


class GameEngine:
    """
    Long Narde game engine: turn-based game API over the rules core.

    The engine alternates chance nodes (dice rolls) and player nodes (full
    turns encoded as single action ids) until a terminal position.

    Attributes:
        players (list): Optional player objects for play_game().
        config (GameConfig): Game options.
        state (NardeState): Current mutable position.
        rules (NardeRules): Rules engine.
        codec (ActionCodec): Action id codec.
        generator (SequenceGenerator): Bounded turn sequence search.
        history (TurnHistory): Snapshots for undo.
        cur_player (int): Player to act, CHANCE_PLAYER or TERMINAL_PLAYER.
        prev_player (int): Last player who moved.
        double_turn (bool): The next roll is an extra turn for prev_player.
        turns (int): Completed turns, -1 before the first roll.
        player_turns (List[int]): Completed turns per player.
        last_roll_played (bool): Black has taken the last roll of the tie rule.
        rng (random.Random): Random number generator for play_game().
        emit_enabled (bool): If True, yield events during play.
    """

    def __init__(
        self,
        player0: Optional[Player] = None,
        player1: Optional[Player] = None,
        config: Optional[GameConfig] = None,
        state: Optional[NardeState] = None,
        rules: Optional[NardeRules] = None,
        emit_enabled: bool = True,
        rng: Optional[random.Random] = None
    ):
        self.players: list[Optional[Player]] = [player0, player1]
        self.config: GameConfig = config or GameConfig()
        self.state: NardeState = state or NardeState(debug=self.config.debug)
        self.rules: NardeRules = rules or NardeRules()
        self.codec: ActionCodec = ActionCodec()
        self.generator: SequenceGenerator = SequenceGenerator(self.config.limits)
        self.history: TurnHistory = TurnHistory(self.config.max_history)
        self.rng: random.Random = rng or random.Random()
        self.emit_enabled: bool = emit_enabled
        self.events: EngineEvents = EngineEvents()

        self.cur_player: int = CHANCE_PLAYER
        self.prev_player: int = CHANCE_PLAYER
        self.double_turn: bool = False
        self.turns: int = -1
        self.player_turns: List[int] = [0, 0]
        self.last_roll_played: bool = False

        self._legal: Optional[Tuple[Dict[int, TurnMove], int]] = None

    # ---------- Properties ----------
    @property
    def node_type(self) -> NodeType:
        """Tagged kind of the current node."""
        if self.is_terminal():
            return NodeType.TERMINAL
        if self.cur_player == CHANCE_PLAYER:
            return NodeType.CHANCE
        return NodeType.PLAYER

    @property
    def dice(self) -> Dice:
        return self.state.dice

    def current_player(self) -> int:
        """Player to act: 0/1, CHANCE_PLAYER or TERMINAL_PLAYER."""
        return TERMINAL_PLAYER if self.is_terminal() else self.cur_player

    def is_chance_node(self) -> bool:
        return self.node_type == NodeType.CHANCE

    def get_player_type(self, player: int) -> str:
        """Return string representation of a player."""
        return str(self.players[player])

    def num_distinct_actions(self) -> int:
        return NUM_DISTINCT_ACTIONS

    # ---------- Chance ----------
    def chance_outcomes(self) -> List[Tuple[int, float]]:
        """
        Return the 21 dice outcomes with their probabilities.

        Raises:
            ValueError: If the current node is not a chance node.
        """
        if not self.is_chance_node():
            raise ValueError("chance_outcomes() called outside a chance node")
        return [(outcome, prob) for outcome, (_, prob) in enumerate(CHANCE_OUTCOMES)]

    def sample_chance_outcome(self) -> int:
        """Roll two dice with the engine's RNG and return the outcome id."""
        d1, d2 = self.rng.randint(1, 6), self.rng.randint(1, 6)
        return outcome_from_roll(d1, d2)

    # ---------- Legal actions ----------
    def _legal_moves(self) -> Tuple[Dict[int, TurnMove], int]:
        """Generate, select and encode the legal turns of the current player."""
        if self._legal is None:
            turn_moves, max_non_pass = self.generator.generate_legal_moves(self.state, self.rules)
            encoded: Dict[int, TurnMove] = {}
            for tmove in turn_moves:
                encoded.setdefault(self.codec.encode(tmove.checker_moves, self.state.dice), tmove)
            self._legal = (encoded, max_non_pass)
        return self._legal

    def legal_turn_moves(self) -> Dict[int, TurnMove]:
        """Legal action ids of a player node mapped to their turn moves."""
        if self.node_type != NodeType.PLAYER:
            return {}
        return dict(self._legal_moves()[0])

    def legal_actions(self) -> List[int]:
        """
        Return the sorted legal action ids of the current node.

        Chance nodes list the outcome ids, terminal nodes nothing.
        """
        node = self.node_type
        if node == NodeType.TERMINAL:
            return []
        if node == NodeType.CHANCE:
            return list(range(NUM_CHANCE_OUTCOMES))
        return sorted(self._legal_moves()[0])

    def must_pass(self) -> bool:
        """True if the player to act has no legal half-move."""
        return self.node_type == NodeType.PLAYER and self._legal_moves()[1] == 0

    # ---------- Apply / Undo ----------
    def _snapshot(self, actor: int, action: int) -> TurnSnapshot:
        return TurnSnapshot(
            actor=actor,
            action=action,
            cur_player=self.cur_player,
            prev_player=self.prev_player,
            turn=self.state.turn,
            dice=self.state.dice.copy(),
            double_turn=self.double_turn,
            is_first_turn=self.state.is_first_turn,
            head_moves=self.state.head_moves,
            is_extra_turn=self.state.is_extra_turn,
            turns=self.turns,
            player_turns=(self.player_turns[0], self.player_turns[1]),
            last_roll_played=self.last_roll_played,
        )

    def apply_action(self, action: int) -> None:
        """
        Apply a chance outcome or a player's encoded turn.

        Raises:
            InvalidActionError: At a terminal node, or for an action that is
                out of range or (with validate_actions) not legal.
        """
        node = self.node_type
        if node == NodeType.TERMINAL:
            raise InvalidActionError("Cannot apply an action in a terminal state")
        if node == NodeType.CHANCE:
            self._apply_chance(action)
        else:
            self._apply_turn(action)
        self._legal = None

    def _apply_chance(self, outcome: int) -> None:
        if not 0 <= outcome < NUM_CHANCE_OUTCOMES:
            raise InvalidActionError(f"Chance outcome out of range: {outcome}")
        self.history.record(self._snapshot(CHANCE_PLAYER, outcome))

        dice = Dice.from_outcome(outcome)
        if self.turns < 0:
            self.turns = 0
            player, extra = WHITE, False
        elif self.double_turn:
            player, extra = self.prev_player, True
        else:
            player, extra = opponent(self.prev_player), False

        self.state.start_turn(player, dice, is_extra_turn=extra)
        self.double_turn = False
        self.cur_player = player
        logger.debug("Roll %s for player %d (extra=%s, first=%s)",
                     dice.values, player, extra, self.state.is_first_turn)

    def _apply_turn(self, action: int) -> None:
        player = self.cur_player
        if self.config.validate_actions and action not in self._legal_moves()[0]:
            raise InvalidActionError(f"Illegal action {action} for player {player}")

        moves = self.codec.decode(player, action, self.state.dice)
        if not self.config.validate_actions:
            self._check_playable(player, action, moves)
        self.history.record(self._snapshot(player, action))

        non_pass = 0
        for cmove in moves:
            if self.state.apply_move(cmove, player):
                self.state.dice.use(cmove.die)
                non_pass += 1

        if player == BLACK and self.state.scores[WHITE] == NUM_CHECKERS:
            self.last_roll_played = True

        finished = self.state.scores[player] == NUM_CHECKERS
        grant_extra = (self.state.dice.is_double and not self.state.is_extra_turn
                       and non_pass >= 2 and not finished)
        if not grant_extra:
            self.turns += 1
            self.player_turns[player] += 1

        logger.debug("Player %d applied %s (extra turn granted=%s)",
                     player, self.action_to_string(player, action, moves), grant_extra)

        self.prev_player = player
        self.double_turn = grant_extra
        self.state.end_turn()
        self.cur_player = TERMINAL_PLAYER if self.is_terminal() else CHANCE_PLAYER

    def _check_playable(self, player: int, action: int, moves: Sequence[CheckerMove]) -> None:
        """
        Play the decoded half-moves on a scratch copy, one rule check each.

        Only move-by-move validity is checked here, not that the turn is one
        of the selected best sequences.

        Raises:
            InvalidActionError: If any half-move cannot be played in order.
        """
        scratch = self.state.copy()
        for cmove in moves:
            if cmove.is_pass:
                continue
            if (not scratch.dice.is_usable(cmove.die) or
                    not self.rules.is_valid_move(scratch, player, cmove.from_point, cmove.to_point, cmove.die)):
                raise InvalidActionError(f"Action {action} cannot play {cmove!r} for player {player}")
            scratch.apply_move(cmove, player)
            scratch.dice.use(cmove.die)

    def undo_action(self, player: int, action: int) -> None:
        """
        Undo the most recent action.

        Args:
            player: Player who took it (CHANCE_PLAYER for a roll).
            action: The action id or chance outcome that was applied.

        Raises:
            ValueError: If there is nothing to undo or the arguments do not
                match the last recorded action.
        """
        last = self.history.last
        if last is not None and (last.actor != player or last.action != action):
            raise ValueError(
                f"Undo mismatch: last action was {last.action} by {last.actor}, got {action} by {player}"
            )
        snapshot = self.history.pop()

        self.state.dice = snapshot.dice.copy()
        if snapshot.actor != CHANCE_PLAYER:
            moves = self.codec.decode(snapshot.actor, snapshot.action, self.state.dice)
            for cmove in reversed(moves):
                self.state.undo_move(cmove, snapshot.actor)

        self.state.turn = snapshot.turn
        self.state.is_first_turn = snapshot.is_first_turn
        self.state.head_moves = snapshot.head_moves
        self.state.is_extra_turn = snapshot.is_extra_turn

        self.cur_player = snapshot.cur_player
        self.prev_player = snapshot.prev_player
        self.double_turn = snapshot.double_turn
        self.turns = snapshot.turns
        self.player_turns = list(snapshot.player_turns)
        self.last_roll_played = snapshot.last_roll_played
        self._legal = None

    # ---------- Terminal / Returns ----------
    def game_result(self) -> Optional[GameResult]:
        """Check if the game is over, returning a GameResult if so."""
        return self.rules.game_over(self.state, self.config.scoring_type, self.last_roll_played)

    def is_terminal(self) -> bool:
        return self.game_result() is not None

    def returns(self) -> List[float]:
        """
        Per-player returns: +1/-1 for a win, +2/-2 for a mars, zeros for a
        tie or an unfinished game.
        """
        result = self.game_result()
        if result is None or result.winner is None:
            return [0.0, 0.0]
        values = [0.0, 0.0]
        values[result.winner] = float(result.points)
        values[opponent(result.winner)] = -float(result.points)
        return values

    # ---------- Presentation ----------
    def action_to_string(self, player: int, action: int, moves: Optional[Sequence] = None) -> str:
        """
        Human-readable action: "{id} - a/b c/d" with 1-based points counted
        from the mover's head and "Off" for bear-off.
        """
        if player == CHANCE_PLAYER:
            dice = Dice.from_outcome(action)
            return f"chance outcome {action} (roll: {dice.values[0]}{dice.values[1]})"

        if moves is None:
            moves = self.codec.decode(player, action, self.state.dice)
        parts = []
        for cmove in moves:
            if cmove.is_pass:
                continue
            target = "Off" if cmove.is_bear_off else str(human_point(player, cmove.to_point))
            parts.append(f"{human_point(player, cmove.from_point)}/{target}")
        if not parts:
            return f"{action} - Pass"
        return f"{action} - " + " ".join(parts)

    def observation_tensor(self, player: int) -> np.ndarray:
        """Observation vector of the position for a player."""
        return observation_tensor(self.state, player, self.cur_player)

    # ---------- Copy / Setup ----------
    def clone(self) -> "GameEngine":
        """
        Independent copy of the engine. Terminal clones drop the undo history.
        """
        other = GameEngine(
            self.players[0], self.players[1],
            config=self.config,
            state=self.state.copy(),
            rules=self.rules,
            emit_enabled=self.emit_enabled,
            rng=self.rng,
        )
        other.history = TurnHistory(self.config.max_history) if self.is_terminal() else self.history.copy()
        other.cur_player = self.cur_player
        other.prev_player = self.prev_player
        other.double_turn = self.double_turn
        other.turns = self.turns
        other.player_turns = list(self.player_turns)
        other.last_roll_played = self.last_roll_played
        return other

    def set_state(
        self,
        positions: List[List[Tuple[int, int]]],
        player: int = WHITE,
        dice: Optional[Tuple[int, int]] = None,
        is_first_turn: Optional[bool] = None,
        head_moves: int = 0,
    ) -> None:
        """
        Place an arbitrary position, e.g. for tests or analysis.

        Args:
            positions: Per player lists of (point, count); point -1 = borne off.
            player: Player to move.
            dice: Dice of the turn, or None to leave a chance node.
            is_first_turn: Override of the recorded first-turn flag.
            head_moves: Head departures already made this turn.

        Raises:
            ValueError: If the position is invalid.
        """
        self.state.place_checkers_from_list(positions)
        self.history.clear()
        self.double_turn = False
        self.turns = max(self.turns, 0)
        self.last_roll_played = False
        self._legal = None

        if dice is None:
            self.state.turn = player
            self.state.end_turn()
            self.prev_player = opponent(player)
            self.cur_player = CHANCE_PLAYER
        else:
            self.state.start_turn(player, Dice(*dice))
            self.prev_player = opponent(player)
            self.cur_player = player
            if is_first_turn is not None:
                self.state.is_first_turn = is_first_turn
            self.state.head_moves = head_moves

        self.state._assert("set_state")
        if self.is_terminal():
            self.cur_player = TERMINAL_PLAYER

    # ---------- Event Emission ----------
    def emit(self, event: dict) -> Any:
        """Yield an event if emission is enabled."""
        if self.emit_enabled:
            yield event

    # ---------- Game Loop ----------
    def play_game(self, max_turns: Optional[int] = None) -> Iterator[Dict[str, Any]]:
        """
        Play from the current node until the game ends, yielding events.

        Dice are rolled with the engine RNG; moves come from the players.

        Args:
            max_turns (Optional[int]): Stop after this many completed turns.

        Yields:
            dict: Engine events describing the game progression.
        """
        yield from self.emit(self.events.start_game(self.state))

        while not self.is_terminal():
            if max_turns is not None and self.turns >= max_turns:
                break

            if self.is_chance_node():
                self.apply_action(self.sample_chance_outcome())
                turn = self.cur_player
                yield from self.emit(self.events.roll_dice(
                    self.state.dice.values, turn, self.get_player_type(turn), self.state.is_extra_turn))
                yield from self.emit(self.events.turn_start(
                    turn, self.state, self.rules.can_bear_off(self.state, turn)))
                continue

            turn = self.cur_player
            moves = self.legal_turn_moves()
            if self.must_pass():
                yield from self.emit(self.events.no_moves(turn))

            player = self.players[turn]
            if player is None:
                raise ValueError(f"No player object for player {turn}")
            action = player.select_move(moves, self.state.copy(), self.state.dice.values)
            yield from self.emit(self.events.chosen_move(
                turn, action, moves[action], self.action_to_string(turn, action)))

            self.apply_action(action)
            next_turn = self.current_player() if self.is_terminal() else (
                turn if self.double_turn else opponent(turn))
            yield from self.emit(self.events.turn_end(next_turn, self.state))

        result = self.game_result()
        logger.info("Game finished after %d turns: %s", self.turns, result)
        yield from self.emit(self.events.game_over(self.state, result, self.returns(), self.turns))
