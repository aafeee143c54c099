# =========================================================
# --- core_undo.py ---
# =========================================================

from collections import deque
from dataclasses import dataclass
from typing import Optional, Tuple

from .dice import Dice

# =========================================================

@dataclass(frozen=True)
class TurnSnapshot:
    """
    Engine bookkeeping captured right before an action is applied.

    Attributes:
        actor (int): Player who took the action, CHANCE_PLAYER for a roll.
        action (int): Applied action id or chance outcome.
        cur_player (int): Player to act before the action.
        prev_player (int): Player who acted before that.
        turn (int): Side recorded on the position.
        dice (Dice): Copy of the dice before the action.
        double_turn (bool): An extra roll was pending.
        is_first_turn (bool): First-turn flag of the position.
        head_moves (int): Head departures recorded so far.
        is_extra_turn (bool): The turn was a doubles replay.
        turns (int): Completed turns.
        player_turns (Tuple[int, int]): Completed turns per player.
        last_roll_played (bool): Black had already taken the tie roll.
    """
    actor: int
    action: int
    cur_player: int
    prev_player: int
    turn: int
    dice: Dice
    double_turn: bool
    is_first_turn: bool
    head_moves: int
    is_extra_turn: bool
    turns: int
    player_turns: Tuple[int, int]
    last_roll_played: bool


class TurnHistory:
    """
    Bounded log of turn snapshots for exact undo.

    Only the most recent `max_snapshots` actions can be undone.
    """

    def __init__(self, max_snapshots: int = 1000) -> None:
        """
        Initialize the history.

        Args:
            max_snapshots: Maximum number of snapshots kept.
        """
        self.snapshots: deque[TurnSnapshot] = deque(maxlen=max_snapshots)

    def record(self, snapshot: TurnSnapshot) -> None:
        """
        Record a snapshot for later undo.

        Args:
            snapshot: The TurnSnapshot to record.

        Raises:
            ValueError: If snapshot is None.
        """
        if snapshot is None:
            raise ValueError("Snapshot cannot be None")
        self.snapshots.append(snapshot)

    def pop(self) -> TurnSnapshot:
        """
        Remove and return the most recent snapshot.

        Raises:
            ValueError: If there is nothing to undo.
        """
        if not self.snapshots:
            raise ValueError("Nothing to undo")
        return self.snapshots.pop()

    @property
    def last(self) -> Optional[TurnSnapshot]:
        return self.snapshots[-1] if self.snapshots else None

    def clear(self) -> None:
        self.snapshots.clear()

    def copy(self) -> "TurnHistory":
        new_history = TurnHistory(self.snapshots.maxlen)
        new_history.snapshots.extend(self.snapshots)
        return new_history

    def __len__(self) -> int:
        return len(self.snapshots)
