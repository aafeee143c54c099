# =========================================================
# --- core_state.py ---
# =========================================================

import numpy as np
import copy
from typing import Optional, List, Dict, Any, Tuple

from .board import (
    WHITE, NUM_POINTS, NUM_CHECKERS, HEAD_POINT, DEFAULT_POSITIONS,
    OUTSIDE_HOME_MASK,
)
from .dice import Dice
from .errors import InvariantViolation
from .moves import CheckerMove
from .state_invariants import assert_state_invariant

from narde.utils.bitmask import bits_from_indices, set_bit, clear_bit

# =========================================================

class CheckerMovesMixin:
    """
    Mixin class providing all checker-moving operations:
    - moving, bearing off and restoring checkers
    - applying and undoing half-moves with head bookkeeping
    """

    def move_checker(self, start: int, target: int, player: int) -> None:
        """Move a checker from start to target for the given player."""
        self._remove_checker(start, player)
        self._add_checker(target, player)
        self._assert("move_checker")

    def undo_checker_move(self, start: int, target: int, player: int) -> None:
        """Undo a previously executed checker move."""
        self._remove_checker(target, player)
        self._add_checker(start, player)
        self._assert("undo_checker_move")

    def bear_off(self, point: int, player: int) -> None:
        """Bear off a checker from the board for the given player."""
        self._remove_checker(point, player)
        self.scores[player] += 1
        self._assert("bear_off")

    def undo_bear_off(self, point: int, player: int) -> None:
        """Undo a previously executed bear-off move."""
        if self.scores[player] == 0:
            raise self._violation(f"[UNDO BEAR OFF] player {player} has nothing borne off")
        self.scores[player] -= 1
        self._add_checker(point, player)
        self._assert("undo_bear_off")

    def apply_move(self, move: CheckerMove, player: int) -> bool:
        """
        Apply a single half-move to the board.

        Dice are not touched here; the caller consumes the die.

        Args:
            move (CheckerMove): The move to apply.
            player (int): The moving player.

        Returns:
            bool: True if a checker moved, False for a pass.
        """
        if move.is_pass:
            return False

        if move.from_point == HEAD_POINT[player]:
            self.head_moves += 1

        if move.is_bear_off:
            self.bear_off(move.from_point, player)
        else:
            self.move_checker(move.from_point, move.to_point, player)

        return True

    def undo_move(self, move: CheckerMove, player: int) -> None:
        """
        Undo a previously applied half-move.

        Args:
            move (CheckerMove): The move to undo.
            player (int): The player who made it.
        """
        if move.is_pass:
            return

        if move.is_bear_off:
            self.undo_bear_off(move.from_point, player)
        else:
            self.undo_checker_move(move.from_point, move.to_point, player)

        if move.from_point == HEAD_POINT[player]:
            self.head_moves -= 1


# =========================================================

class NardeState(CheckerMovesMixin):
    """
    Represents the complete mutable Long Narde position.

    Attributes:
        board (np.ndarray): (2, 24) array of checker counts per player and point.
        scores (np.ndarray): Array of 2 integers for checkers borne off per player.
        _occ_mask (List[int]): Occupancy masks for each player.
        turn (int): Player to move (0 or 1).
        dice (Dice): Dice of the current turn.
        is_first_turn (bool): Recorded at the roll: the head held all checkers.
        head_moves (int): Checkers that left the head during this turn.
        is_extra_turn (bool): The turn is a replay granted by doubles.
        debug (bool): Enable state invariant assertions.
    """

    def __init__(self, positions: Optional[List[List[Tuple[int, int]]]] = None, start_player: int = WHITE, debug: bool = False):
        self.debug: bool = debug

        self.board: np.ndarray = np.zeros((2, NUM_POINTS), dtype=np.int8)
        self.scores: np.ndarray = np.zeros(2, dtype=np.int8)

        self._occ_mask: List[int] = [0, 0]

        self.dice: Dice = Dice()
        self.is_first_turn: bool = False
        self.head_moves: int = 0
        self.is_extra_turn: bool = False

        self.start_game(positions, start_player)

    # ---------- Setup / Copy ----------
    def copy(self) -> "NardeState":
        """Return a deep copy of the current position."""
        new_state = NardeState.__new__(NardeState)
        new_state.debug = self.debug
        new_state.board = copy.deepcopy(self.board)
        new_state.scores = copy.deepcopy(self.scores)
        new_state._occ_mask = self._occ_mask.copy()
        new_state.turn = self.turn
        new_state.dice = self.dice.copy()
        new_state.is_first_turn = self.is_first_turn
        new_state.head_moves = self.head_moves
        new_state.is_extra_turn = self.is_extra_turn
        return new_state

    def reset_board(self) -> None:
        """Reset the board, masks and scores to an empty state."""
        self.board[:] = 0
        self.scores[:] = 0
        self._occ_mask[:] = [0, 0]

    def start_game(self, positions: Optional[List[List[Tuple[int, int]]]] = None, start_player: int = WHITE) -> None:
        """Initialize a new game with optional starting positions and starting player."""
        self.reset_board()
        self.turn = start_player
        if positions is None:
            positions = DEFAULT_POSITIONS
        self.place_checkers_from_list(positions)

    def start_turn(self, player: int, dice: Dice, is_extra_turn: bool = False) -> None:
        """
        Hand the move to a player with freshly rolled dice.

        The first-turn flag is recorded here, from the head count before any
        checker moves, and stays fixed for the rest of the turn.
        """
        self.turn = player
        self.dice = dice
        self.head_moves = 0
        self.is_extra_turn = is_extra_turn
        self.is_first_turn = (not is_extra_turn) and self.head_count(player) == NUM_CHECKERS

    def end_turn(self) -> None:
        """Clear the per-turn flags and dice."""
        self.dice = Dice()
        self.head_moves = 0
        self.is_extra_turn = False
        self.is_first_turn = False

    # ---------- Properties ----------
    @property
    def moved_from_head(self) -> bool:
        """True once any checker has left the head during this turn."""
        return self.head_moves > 0

    @property
    def flags(self) -> Dict[str, Any]:
        """Turn flags, used for diagnostics."""
        return {
            "turn": self.turn,
            "is_first_turn": self.is_first_turn,
            "head_moves": self.head_moves,
            "moved_from_head": self.moved_from_head,
            "is_extra_turn": self.is_extra_turn,
            "scores": self.scores.tolist(),
        }

    def occupied_mask(self, player: int) -> int:
        """Occupancy bitmask of a player."""
        return self._occ_mask[player]

    def is_on_board(self, point: int) -> bool:
        """Check if a point index is on the board."""
        return 0 <= point < NUM_POINTS

    def num_of_checkers(self, point: int, player: int) -> int:
        """
        Return the number of checkers on a given point for a specific player.

        Args:
            point (int): Board point index.
            player (int): Player index (0 or 1).

        Returns:
            int: Number of checkers of the player at the point.
        """
        return int(self.board[player, point])

    def checkers_on_board(self, player: int) -> int:
        return int(self.board[player].sum())

    def head_count(self, player: int) -> int:
        return int(self.board[player, HEAD_POINT[player]])

    def all_home(self, player: int) -> bool:
        """True if the player has no checker outside their home."""
        return (self._occ_mask[player] & OUTSIDE_HOME_MASK[player]) == 0

    # ---------- Masks / Updates ----------
    def _update_occupied(self, point: int) -> None:
        """Update the occupancy bitmask for a given point."""
        for player in (0, 1):
            if self.board[player, point] > 0:
                self._occ_mask[player] = set_bit(point, self._occ_mask[player])
            else:
                self._occ_mask[player] = clear_bit(point, self._occ_mask[player])

    def _recompute_masks(self) -> None:
        """Recompute the occupancy masks for both players."""
        for player in (0, 1):
            self._occ_mask[player] = bits_from_indices(np.flatnonzero(self.board[player] > 0))

    # ---------- Checker primitives ----------
    def _add_checker(self, point: int, player: int) -> None:
        """Add a checker to a point for a player and update masks."""
        if not self.is_on_board(point):
            raise self._violation(f"[BAD POINT] cannot add checker to {point}")
        if self.board[player, point] >= NUM_CHECKERS:
            raise self._violation(f"[OVERFLOW] player {player} exceeds {NUM_CHECKERS} checkers on {point}")
        self.board[player, point] += 1
        self._update_occupied(point)

    def _remove_checker(self, point: int, player: int) -> None:
        """Remove a checker from a point for a player and update masks."""
        if not self.is_on_board(point) or self.board[player, point] == 0:
            raise self._violation(f"[EMPTY POINT] player {player} has no checker on {point}")
        self.board[player, point] -= 1
        self._update_occupied(point)

    # ---------- Serialization ----------
    def place_checkers_from_list(self, positions: List[List[Tuple[int, int]]]) -> None:
        """
        Place checkers on the board given a serialized position list.

        Point -1 stands for borne off checkers.

        Raises:
            ValueError: If a player does not own exactly 15 checkers or both
                players share a point.
        """
        self.reset_board()
        for player in (0, 1):
            total = 0
            for point, count in positions[player]:
                if point == -1:
                    self.scores[player] += count
                else:
                    if not self.is_on_board(point) or count < 0:
                        raise ValueError(f"Invalid point entry: {(point, count)}")
                    self.board[player, point] = count
                    total += count
            if total + self.scores[player] != NUM_CHECKERS:
                raise ValueError("Invalid number of checkers")
        if ((self.board[0] > 0) & (self.board[1] > 0)).any():
            raise ValueError("Both players occupy the same point")
        self._recompute_masks()

    def state_to_list(self) -> List[List[Tuple[int, int]]]:
        """Serialize the board into a list of positions per player."""
        positions: List[List[Tuple[int, int]]] = [[], []]
        for player in (0, 1):
            for point in np.flatnonzero(self.board[player]):
                positions[player].append((int(point), int(self.board[player, point])))
            if self.scores[player] > 0:
                positions[player].append((-1, int(self.scores[player])))
        return positions

    def __eq__(self, other: Any) -> bool:
        """Check equality with another NardeState."""
        if not isinstance(other, NardeState):
            return NotImplemented
        return (
            np.array_equal(self.board, other.board) and
            np.array_equal(self.scores, other.scores) and
            self.turn == other.turn and
            self.dice == other.dice and
            self.head_moves == other.head_moves and
            self.is_first_turn == other.is_first_turn and
            self.is_extra_turn == other.is_extra_turn
        )

    __hash__ = None

    # ---------- Debug / Assertions ----------
    def _violation(self, message: str) -> InvariantViolation:
        return InvariantViolation(message, board=self.board.copy(), dice=repr(self.dice), flags=self.flags)

    def _assert(self, where: str = "") -> None:
        """Assert state invariants if debug mode is active."""
        if self.debug:
            assert_state_invariant(self, where)
