# =========================================================
# --- players_player.py ---
# =========================================================

from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

from narde.core.moves import TurnMove
from narde.core.state import NardeState

# =========================================================

class Player(ABC):
    """
    Abstract base class for a Long Narde player.

    Attributes:
        id (Optional[int]): Player index (0 or 1). Initialized in constructor.
    """

    def __init__(self, id: Optional[int] = None):
        """
        Initialize a player with an optional ID.

        Args:
            id (Optional[int]): Player index (0 or 1). Defaults to None.
        """
        self.id: Optional[int] = id

    @abstractmethod
    def select_move(
        self,
        moves: Dict[int, TurnMove],
        state: NardeState,
        dice: Tuple[int, int]
    ) -> Optional[int]:
        """
        Select a move from the legal moves of the turn.

        Args:
            moves (Dict[int, TurnMove]): Legal action ids mapped to their turn moves.
            state (NardeState): Copy of the current position.
            dice (Tuple[int, int]): Dice rolled for this turn.

        Returns:
            Optional[int]: Selected action id, or None if no move possible.
        """
        pass
