# =========================================================
# --- core_moves.py ---
# =========================================================

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Tuple

from .board import PASS_POINT, BEAR_OFF_POINT

# =========================================================

class CheckerMoveType(Enum):
    """
    Enumeration of possible half-move types in Long Narde.

    Attributes:
        NORMAL: Checker moves from one point to another.
        BEAR_OFF: Checker leaves the board.
        PASS: Die is forfeited, no checker moves.
    """
    NORMAL = 1
    BEAR_OFF = 2
    PASS = 3


@dataclass(frozen=True, order=True)
class CheckerMove:
    """
    Represents a single half-move: one checker using one die.

    Attributes:
        from_point (int): Source point, or PASS_POINT for a pass.
        to_point (int): Target point, BEAR_OFF_POINT or PASS_POINT.
        die (int): Die value used for the move.
    """
    from_point: int
    to_point: int
    die: int

    @classmethod
    def pass_move(cls, die: int) -> "CheckerMove":
        """Return a pass consuming the given die."""
        return cls(PASS_POINT, PASS_POINT, die)

    @property
    def is_pass(self) -> bool:
        return self.from_point == PASS_POINT

    @property
    def is_bear_off(self) -> bool:
        return self.to_point == BEAR_OFF_POINT

    @property
    def move_type(self) -> CheckerMoveType:
        if self.is_pass:
            return CheckerMoveType.PASS
        if self.is_bear_off:
            return CheckerMoveType.BEAR_OFF
        return CheckerMoveType.NORMAL

    def __str__(self) -> str:
        """Return a human-readable string representation of the move."""
        kind = self.move_type
        if kind == CheckerMoveType.PASS:
            return f"pass ({self.die})"
        target = "off" if kind == CheckerMoveType.BEAR_OFF else f"{self.to_point}"
        return f"{self.from_point}".rjust(2) + " > " + target.rjust(3) + f" ({self.die})"

    def __repr__(self) -> str:
        """Return a formal string representation (same as __str__)."""
        return str(self)


@dataclass(frozen=True)
class TurnMove:
    """
    Represents a full turn consisting of zero to four half-moves.

    Attributes:
        checker_moves (Tuple[CheckerMove, ...]): Ordered half-moves executed during the turn.
    """
    checker_moves: Tuple[CheckerMove, ...]

    def __iter__(self) -> Iterator[CheckerMove]:
        """
        Return an iterator over the half-moves.

        Returns:
            Iterator[CheckerMove]: Iterator over all half-moves in the turn.
        """
        return iter(self.checker_moves)

    def __len__(self) -> int:
        """
        Return the number of half-moves in the turn, passes included.

        Returns:
            int: Number of moves.
        """
        return len(self.checker_moves)

    @property
    def num_non_pass(self) -> int:
        """Number of half-moves that actually move a checker."""
        return sum(1 for cmove in self.checker_moves if not cmove.is_pass)

    def __str__(self) -> str:
        """
        Return a string representation of all moves in the turn, separated by ' | '.

        Returns:
            str: Human-readable string of the turn's moves.
        """
        return " | ".join(str(cmove) for cmove in self.checker_moves)

    def __repr__(self) -> str:
        """Return a formal string representation (same as __str__)."""
        return str(self)
