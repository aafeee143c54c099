# =========================================================
# --- core_codec.py ---
# =========================================================

from typing import List, Sequence

from .board import NUM_POINTS, destination
from .dice import Dice
from .errors import InvalidActionError
from .moves import CheckerMove

# =========================================================

"""
Bidirectional mapping between half-move sequences and integer action ids.

Two disjoint ranges are used:
- Standard range [0, DOUBLES_OFFSET): up to two half-moves, one base-150
  digit each, plus LOW_FIRST_OFFSET when the roll is stored low die first.
- Doubles range [DOUBLES_OFFSET, NUM_DISTINCT_ACTIONS): three or four
  source points of a doubles roll as base-25 digits (24 = pass). The die
  is implied by the dice of the state.
"""

#: Digits 0-143 are normal moves (point * 6 + die - 1), 144-149 passes
PASS_DIGIT_OFFSET = NUM_POINTS * 6
DIGIT_BASE = PASS_DIGIT_OFFSET + 6

#: Added when the lower die was stored first
LOW_FIRST_OFFSET = DIGIT_BASE * DIGIT_BASE

#: Start of the doubles range
DOUBLES_OFFSET = 2 * LOW_FIRST_OFFSET

#: Base-25 digits of the doubles range, 24 marks a pass
DOUBLES_BASE = NUM_POINTS + 1
DOUBLES_PASS_DIGIT = NUM_POINTS
DOUBLES_MOVES = 4

#: Size of the action id space
NUM_DISTINCT_ACTIONS = DOUBLES_OFFSET + DOUBLES_BASE ** DOUBLES_MOVES


class ActionCodec:
    """Encodes turn sequences to action ids and back."""

    # ---------- Single digits ----------
    @staticmethod
    def encode_digit(move: CheckerMove) -> int:
        """
        Encode one half-move as a standard-range digit.

        Raises:
            InvalidActionError: On an impossible die or point.
        """
        if not 1 <= move.die <= 6:
            raise InvalidActionError(f"Invalid die in {move!r}")
        if move.is_pass:
            return PASS_DIGIT_OFFSET + move.die - 1
        if not 0 <= move.from_point < NUM_POINTS:
            raise InvalidActionError(f"Invalid source point in {move!r}")
        return move.from_point * 6 + move.die - 1

    @staticmethod
    def decode_digit(player: int, digit: int) -> CheckerMove:
        """Decode a standard-range digit, recomputing the destination."""
        if digit >= PASS_DIGIT_OFFSET:
            return CheckerMove.pass_move(digit - PASS_DIGIT_OFFSET + 1)
        point, die = divmod(digit, 6)
        die += 1
        return CheckerMove(point, destination(player, point, die), die)

    # ---------- Sequences ----------
    def encode(self, moves: Sequence[CheckerMove], dice: Dice) -> int:
        """
        Encode a sequence of up to four half-moves.

        Args:
            moves: Half-moves in the order they are played.
            dice: Dice of the turn (only values and order are used).

        Returns:
            int: The action id.

        Raises:
            InvalidActionError: If the sequence cannot be encoded.
        """
        moves = list(moves)
        if len(moves) > DOUBLES_MOVES:
            raise InvalidActionError(f"Too many half-moves: {len(moves)}")

        if len(moves) > 2:
            if not dice.is_double:
                raise InvalidActionError("More than two half-moves need a doubles roll")
            return self._encode_doubles(moves)

        padded = list(moves)
        if not padded:
            padded.append(CheckerMove.pass_move(dice.values[0]))
        if len(padded) == 1:
            padded.append(CheckerMove.pass_move(self._other_die(padded[0].die, dice)))

        dig0 = self.encode_digit(padded[0])
        dig1 = self.encode_digit(padded[1])
        action = dig1 * DIGIT_BASE + dig0

        double_pass = padded[0].is_pass and padded[1].is_pass
        if dice.low_first and not double_pass:
            action += LOW_FIRST_OFFSET
        return action

    @staticmethod
    def _other_die(used: int, dice: Dice) -> int:
        """Value of the die left over once `used` is played."""
        first, second = dice.values
        if not dice.is_rolled:
            return used
        return second if used == first else first

    @staticmethod
    def _encode_doubles(moves: List[CheckerMove]) -> int:
        action = 0
        for i in range(DOUBLES_MOVES - 1, -1, -1):
            if i < len(moves) and not moves[i].is_pass:
                point = moves[i].from_point
                if not 0 <= point < NUM_POINTS:
                    raise InvalidActionError(f"Invalid source point in {moves[i]!r}")
                digit = point
            else:
                digit = DOUBLES_PASS_DIGIT
            action = action * DOUBLES_BASE + digit
        return DOUBLES_OFFSET + action

    def decode(self, player: int, action: int, dice: Dice) -> List[CheckerMove]:
        """
        Decode an action id into half-moves for a player.

        Standard ids decode to exactly two half-moves, doubles ids to four
        (trailing passes included).

        Args:
            player: Player the moves belong to.
            action: Action id.
            dice: Dice of the turn; supplies the die of doubles ids.

        Returns:
            List[CheckerMove]: The decoded half-moves.

        Raises:
            InvalidActionError: If the id is outside the action range.
        """
        if not 0 <= action < NUM_DISTINCT_ACTIONS:
            raise InvalidActionError(f"Action {action} outside [0, {NUM_DISTINCT_ACTIONS})")

        if action >= DOUBLES_OFFSET:
            return self._decode_doubles(player, action - DOUBLES_OFFSET, dice)

        if action >= LOW_FIRST_OFFSET:
            action -= LOW_FIRST_OFFSET
        dig1, dig0 = divmod(action, DIGIT_BASE)
        return [self.decode_digit(player, dig0), self.decode_digit(player, dig1)]

    @staticmethod
    def _decode_doubles(player: int, value: int, dice: Dice) -> List[CheckerMove]:
        die = dice.values[0] if dice.is_rolled else 1
        moves: List[CheckerMove] = []
        for _ in range(DOUBLES_MOVES):
            value, digit = divmod(value, DOUBLES_BASE)
            if digit == DOUBLES_PASS_DIGIT:
                moves.append(CheckerMove.pass_move(die))
            else:
                moves.append(CheckerMove(digit, destination(player, digit, die), die))
        return moves
