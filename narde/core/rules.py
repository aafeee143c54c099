# =========================================================
# --- core_rules.py ---
# =========================================================

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from .board import (
    NUM_POINTS, NUM_CHECKERS, HEAD_POINT, BEAR_OFF_POINT, PASS_POINT,
    BRIDGE_LENGTH, HEAD_EXCEPTION_DOUBLES, WHITE, BLACK,
    destination, opponent, path_index, pips_to_bear_off,
)
from .config import ScoringType
from .errors import InvariantViolation
from .moves import CheckerMove, TurnMove
from .state import NardeState

from narde.utils.bitmask import clear_bit, indices_from_bits, is_bit_set, rotate_right, set_bit

logger = logging.getLogger(__name__)

# =========================================================

class Rule:
    """Base class for Long Narde rules."""

    def __init__(self, rule_id: str, description: str) -> None:
        """
        Initialize a rule.

        Args:
            rule_id: Unique identifier for the rule.
            description: Human-readable description.
        """
        self.id: str = rule_id
        self.description: str = description

    def check(self, state: NardeState, **kwargs) -> Union[bool, int, List[TurnMove], Tuple]:
        """
        Evaluate the rule on the given state.

        Args:
            state: Current game state.
            kwargs: Additional parameters required by the rule.

        Returns:
            The result of the rule.

        Raises:
            NotImplementedError: Must be implemented in subclasses.
        """
        raise NotImplementedError


# --- Specific Rules ---

class MoveTargetRule(Rule):
    """R1: The source holds an own checker and the target matches the die."""

    def __init__(self) -> None:
        super().__init__("R1", "Source must hold an own checker and the target must be the die's destination.")

    def check(self, state: NardeState, player: int, start: int, target: int, die: int, **kwargs) -> bool:
        """
        Check the (source, target, die) triple.

        Args:
            state: Current game state.
            player: Moving player.
            start: Source point.
            target: Destination point or BEAR_OFF_POINT.
            die: Die value.

        Returns:
            True if the triple is consistent with the board, False otherwise.
        """
        if not state.is_on_board(start) or state.num_of_checkers(start, player) == 0:
            return False
        if not 1 <= die <= 6:
            return False
        return target == destination(player, start, die)


class HeadRule(Rule):
    """R2: One checker per turn may leave the head (two on special first-turn doubles)."""

    def __init__(self) -> None:
        super().__init__("R2", "Only one checker may leave the head per turn, two on a first-turn 6-6, 4-4 or 3-3.")

    def head_move_limit(self, state: NardeState) -> int:
        """
        Number of checkers allowed to leave the head this turn.

        Args:
            state: Current game state.

        Returns:
            2 on the first turn with doubles of 6, 4 or 3, otherwise 1.
        """
        dice = state.dice
        if state.is_first_turn and dice.is_double and dice.values[0] in HEAD_EXCEPTION_DOUBLES:
            return 2
        return 1

    def check(self, state: NardeState, player: int, start: int, **kwargs) -> bool:
        """
        Check whether a move from start respects the head rule.

        Returns:
            True if the move is allowed, False otherwise.
        """
        if start != HEAD_POINT[player]:
            return True
        return state.head_moves < self.head_move_limit(state)


class BearOffRule(Rule):
    """R3: Bearing off needs all checkers home and an exact or highest-checker die."""

    def __init__(self) -> None:
        super().__init__("R3", "Bear off only with all checkers home, exactly or from the farthest checker.")

    def _no_checker_farther(self, state: NardeState, player: int, start: int) -> bool:
        """Check that no own checker needs more pips than the one on start."""
        needed = pips_to_bear_off(player, start)
        for point in indices_from_bits(state.occupied_mask(player)):
            if pips_to_bear_off(player, point) > needed:
                return False
        return True

    def check(self, state: NardeState, player: int, start: int, die: int, **kwargs) -> bool:
        """
        Determine if a checker can legally bear off.

        Args:
            state: Current game state.
            player: Moving player.
            start: Source point of the checker.
            die: Die used for the move.

        Returns:
            True if the checker can bear off, False otherwise.
        """
        if not state.all_home(player):
            return False

        needed = pips_to_bear_off(player, start)
        if die == needed:
            return True
        if die > needed:
            return self._no_checker_farther(state, player, start)
        return False


class NoLandingRule(Rule):
    """R4: A checker may not land on a point held by the opponent."""

    def __init__(self) -> None:
        super().__init__("R4", "A checker may not land on a point held by the opponent.")

    def check(self, state: NardeState, player: int, target: int, **kwargs) -> bool:
        """
        Returns:
            True if the target is free of opponent checkers.
        """
        return not is_bit_set(target, state.occupied_mask(opponent(player)))


class BridgeRule(Rule):
    """R5: Six consecutive own points may not trap every opponent checker."""

    def __init__(self) -> None:
        super().__init__("R5", "A 6-point bridge is illegal unless an opponent checker is ahead of it.")

    @staticmethod
    def block_windows(mask: int) -> int:
        """
        Return a mask whose bit s is set when points s .. s+5 (mod 24) are all set in mask.
        """
        windows = mask
        for k in range(1, BRIDGE_LENGTH):
            windows &= rotate_right(mask, k, NUM_POINTS)
        return windows

    def check(self, state: NardeState, player: int, start: int, target: int, **kwargs) -> bool:
        """
        Check whether moving start -> target leaves an illegal bridge.

        The move is simulated on the occupancy mask only. For every fully
        occupied 6-point window, the window's first point on the opponent's
        path is compared against every opponent checker's path position.

        Args:
            state: Current game state.
            player: Moving player.
            start: Source point.
            target: Destination point or BEAR_OFF_POINT.

        Returns:
            True if an illegal bridge would be formed, False otherwise.
        """
        if target == BEAR_OFF_POINT or target == PASS_POINT:
            return False

        opp = opponent(player)
        opp_mask = state.occupied_mask(opp)
        if opp_mask == 0:
            return False

        occ = state.occupied_mask(player)
        if state.num_of_checkers(start, player) == 1:
            occ = clear_bit(start, occ)
        occ = set_bit(target, occ)

        windows = self.block_windows(occ)
        if windows == 0:
            return False

        opp_paths = [path_index(opp, p) for p in indices_from_bits(opp_mask)]
        for first in indices_from_bits(windows):
            block_start = min(path_index(opp, (first + k) % NUM_POINTS) for k in range(BRIDGE_LENGTH))
            if not any(p > block_start for p in opp_paths):
                return True
        return False


class FilterTurnMovesRule(Rule):
    """R6: Keep the longest sequences, then the most non-pass moves, then the higher-die rule."""

    def __init__(self) -> None:
        super().__init__("R6", "Filter turn moves to enforce maximum moves and higher die usage.")

    def check(self, state: NardeState, turn_moves: List[TurnMove], rules: "NardeRules", **kwargs) -> Tuple[List[TurnMove], int]:
        """
        Filter turn moves according to game rules.

        Args:
            state: Position at the start of the turn.
            turn_moves: All generated sequences.
            rules: Rules aggregate used for die playability checks.

        Returns:
            Sorted distinct surviving sequences and the maximal non-pass count.

        Raises:
            InvariantViolation: If the higher-die rule leaves no sequence.
        """
        dice = state.dice
        canonical_pass = TurnMove((CheckerMove.pass_move(dice.values[0]), CheckerMove.pass_move(dice.values[1])))

        if not turn_moves:
            return [canonical_pass], 0

        max_len = max(len(tmove) for tmove in turn_moves)
        turn_moves = [tmove for tmove in turn_moves if len(tmove) == max_len]

        max_non_pass = max(tmove.num_non_pass for tmove in turn_moves)
        if max_non_pass == 0:
            return [canonical_pass], 0
        turn_moves = [tmove for tmove in turn_moves if tmove.num_non_pass == max_non_pass]

        if max_non_pass == 1 and not dice.is_double:
            turn_moves = self._higher_die(state, turn_moves, rules)

        return sorted(set(turn_moves), key=lambda t: t.checker_moves), max_non_pass

    def _higher_die(self, state: NardeState, turn_moves: List[TurnMove], rules: "NardeRules") -> List[TurnMove]:
        """
        Apply the higher-die rule when only one half-move can be played.

        Each die's playability is checked on a copy of the turn's starting
        position with every die unused and no head departure recorded.
        """
        fresh = state.copy()
        fresh.dice = state.dice.fresh()
        fresh.head_moves = 0

        high, low = fresh.dice.high, fresh.dice.low
        high_ok = rules.has_move_with_die(fresh, fresh.turn, high)
        low_ok = rules.has_move_with_die(fresh, fresh.turn, low)

        if high_ok:
            forced = high
        elif low_ok:
            forced = low
        else:
            raise InvariantViolation(
                "[SELECTOR] one half-move playable but neither die is",
                board=state.board.copy(), dice=repr(state.dice), flags=state.flags,
            )

        kept = [tmove for tmove in turn_moves
                if any(cmove.die == forced and not cmove.is_pass for cmove in tmove)]
        if not kept:
            raise InvariantViolation(
                f"[SELECTOR] no sequence uses the forced die {forced}",
                board=state.board.copy(), dice=repr(state.dice), flags=state.flags,
            )
        logger.debug("Higher-die rule: high=%s playable=%s, low=%s playable=%s, forced=%s",
                     high, high_ok, low, low_ok, forced)
        return kept


@dataclass(frozen=True)
class GameResult:
    """Encapsulates the outcome of a completed game."""

    winner: Optional[int]  # None for a tie
    points: int
    type: str  # WIN / MARS / TIE


class GameOverRule(Rule):
    """R7: Check if the game is over, including mars and the last-roll tie."""

    def __init__(self) -> None:
        super().__init__("R7", "Check if game is over and return GameResult if so.")

    def tie_roll_pending(self, state: NardeState, scoring_type: ScoringType, last_roll_played: bool) -> bool:
        """
        True while Black is still owed a last roll to tie.

        Only applies when White finished first and Black has a single
        checker left to bear off.
        """
        return (
            scoring_type == ScoringType.WIN_LOSS_TIE and
            state.scores[WHITE] == NUM_CHECKERS and
            state.scores[BLACK] == NUM_CHECKERS - 1 and
            not last_roll_played
        )

    def check(self, state: NardeState, scoring_type: ScoringType = ScoringType.WIN_LOSS,
              last_roll_played: bool = False, **kwargs) -> Optional[GameResult]:
        """
        Determine if the game is over.

        Args:
            state: Current game state.
            scoring_type: Scoring rule in effect.
            last_roll_played: Black already used the tie roll.

        Returns:
            GameResult if the game is over, None otherwise.
        """
        done = [state.scores[p] == NUM_CHECKERS for p in (WHITE, BLACK)]
        if not any(done):
            return None
        if all(done):
            return GameResult(None, 0, "TIE")
        if self.tie_roll_pending(state, scoring_type, last_roll_played):
            return None

        winner = WHITE if done[WHITE] else BLACK
        mars = state.scores[opponent(winner)] == 0
        if mars:
            return GameResult(winner, 2, "MARS")
        return GameResult(winner, 1, "WIN")


class NardeRules:
    """Aggregates all rules and provides a convenient interface for game logic."""

    def __init__(self) -> None:
        """Initialize all rule instances."""
        self.R1 = MoveTargetRule()
        self.R2 = HeadRule()
        self.R3 = BearOffRule()
        self.R4 = NoLandingRule()
        self.R5 = BridgeRule()
        self.R6 = FilterTurnMovesRule()
        self.R7 = GameOverRule()

        self.rules = [self.R1, self.R2, self.R3, self.R4, self.R5, self.R6, self.R7]

    def is_valid_move(self, state: NardeState, player: int, from_point: int, to_point: int,
                      die: int, enforce_head_rule: bool = True) -> bool:
        """
        Decide whether one checker may travel from_point -> to_point with die.

        Checks run in order and the first failure short-circuits: pass,
        source and destination, head rule, bear-off, landing, bridge.
        """
        if from_point == PASS_POINT:
            return True
        if not self.R1.check(state, player=player, start=from_point, target=to_point, die=die):
            return False
        if enforce_head_rule and not self.R2.check(state, player=player, start=from_point):
            return False
        if to_point == BEAR_OFF_POINT:
            return self.R3.check(state, player=player, start=from_point, die=die)
        if not self.R4.check(state, player=player, target=to_point):
            return False
        return not self.R5.check(state, player=player, start=from_point, target=to_point)

    def forms_illegal_bridge(self, state: NardeState, player: int, from_point: int, to_point: int) -> bool:
        """Return True if the move would leave an illegal bridge."""
        return self.R5.check(state, player=player, start=from_point, target=to_point)

    def head_move_limit(self, state: NardeState) -> int:
        """Return how many checkers may leave the head this turn."""
        return self.R2.head_move_limit(state)

    def can_bear_off(self, state: NardeState, player: int) -> bool:
        """Return True if the player has no checker outside home."""
        return state.all_home(player)

    def valid_moves_with_die(self, state: NardeState, player: int, die: int) -> List[CheckerMove]:
        """All legal half-moves for one die value, ordered by source point."""
        cmoves: List[CheckerMove] = []
        for start in indices_from_bits(state.occupied_mask(player)):
            target = destination(player, start, die)
            if self.is_valid_move(state, player, start, target, die):
                cmoves.append(CheckerMove(start, target, die))
        return cmoves

    def has_move_with_die(self, state: NardeState, player: int, die: int) -> bool:
        """Return True if at least one checker can use the die."""
        for start in indices_from_bits(state.occupied_mask(player)):
            if self.is_valid_move(state, player, start, destination(player, start, die), die):
                return True
        return False

    def select_best(self, state: NardeState, turn_moves: List[TurnMove]) -> Tuple[List[TurnMove], int]:
        """Filter generated sequences down to the mandated best ones."""
        return self.R6.check(state, turn_moves=turn_moves, rules=self)

    def game_over(self, state: NardeState, scoring_type: ScoringType = ScoringType.WIN_LOSS,
                  last_roll_played: bool = False) -> Optional[GameResult]:
        """Check if the game is over and return GameResult."""
        return self.R7.check(state, scoring_type=scoring_type, last_roll_played=last_roll_played)

    def tie_roll_pending(self, state: NardeState, scoring_type: ScoringType, last_roll_played: bool) -> bool:
        """Return True while Black is owed the last roll of the tie variant."""
        return self.R7.tie_roll_pending(state, scoring_type, last_roll_played)
