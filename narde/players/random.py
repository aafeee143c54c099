# =========================================================
# --- players_random.py ---
# =========================================================

import random
from typing import Dict, Optional, Tuple

from narde.core.moves import TurnMove
from narde.core.state import NardeState

from .player import Player

# =========================================================

class RandomPlayer(Player):
    """
    Player choosing uniformly among the legal actions.

    Attributes:
        id (int): Player index (0 or 1).
        rng (random.Random): Random number generator.
    """

    def __init__(self, id: int, rng: Optional[random.Random] = None):
        """
        Initialize a RandomPlayer.

        Args:
            id (int): Player index (0 or 1).
            rng (Optional[random.Random]): Optional RNG instance. If None, a new RNG is created.
        """
        super().__init__(id)
        self.rng: random.Random = rng or random.Random()

    def __str__(self) -> str:
        """Return a human-readable name for the player."""
        return f"Random player 🎲 {self.id}"

    def select_move(
        self,
        moves: Dict[int, TurnMove],
        state: NardeState,
        dice: Tuple[int, int]
    ) -> Optional[int]:
        """
        Select an action id randomly from available moves.

        Args:
            moves (Dict[int, TurnMove]): Legal action ids mapped to their turn moves.
            state (NardeState): Copy of the current position.
            dice (Tuple[int, int]): Dice rolled for this turn.

        Returns:
            Optional[int]: Selected action id, or None if no moves available.
        """
        if not moves:
            return None
        return self.rng.choice(sorted(moves))
