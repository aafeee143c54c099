# =========================================================
# --- core_errors.py ---
# =========================================================

from typing import Any, Dict, Optional

# =========================================================

class InvariantViolation(AssertionError):
    """
    Raised when the engine observes a state that correct move generation
    can never produce (lost checkers, dual occupancy, corrupted dice, ...).

    Attributes:
        board (Any): Copy of the board at the time of the failure.
        dice (Any): Dice description at the time of the failure.
        flags (Dict[str, Any]): Turn flags at the time of the failure.
    """

    def __init__(
        self,
        message: str,
        board: Any = None,
        dice: Any = None,
        flags: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.board = board
        self.dice = dice
        self.flags = dict(flags or {})
        details = [message]
        if board is not None:
            details.append(f"Board=\n{board}")
        if dice is not None:
            details.append(f"Dice={dice}")
        if self.flags:
            details.append(f"Flags={self.flags}")
        super().__init__("\n".join(details))


class InvalidActionError(ValueError):
    """Raised when an action id is out of range or not legal in the current state."""
    pass
