# =========================================================
# --- core_observation.py ---
# =========================================================

import numpy as np

from .board import NUM_POINTS, HEAD_POINT, opponent
from .state import NardeState

# =========================================================

#: 24 own points + 24 opponent points + 2 scores + 2 turn flags + 2 dice
OBSERVATION_SIZE = 2 * NUM_POINTS + 6

#: Board columns ordered along each player's path (head first)
PATH_ORDER = tuple(
    np.array([(HEAD_POINT[p] - i) % NUM_POINTS for i in range(NUM_POINTS)])
    for p in (0, 1)
)


def observation_tensor(state: NardeState, player: int, cur_player: int) -> np.ndarray:
    """
    Encode a position from one player's point of view.

    Layout:
    - [0, 24): own checker counts along the own path (head first)
    - [24, 48): opponent checker counts along the opponent's path
    - 48, 49: own and opponent scores
    - 50, 51: own-turn and opponent-turn indicators
    - 52, 53: die values (0 when not rolled)

    Args:
        state: Position to encode.
        player: Observing player (0 or 1).
        cur_player: Player to act, or a pseudo player for chance/terminal.

    Returns:
        np.ndarray: float32 vector of length OBSERVATION_SIZE.
    """
    if player not in (0, 1):
        raise ValueError(f"Invalid observer: {player}")
    opp = opponent(player)

    values = np.zeros(OBSERVATION_SIZE, dtype=np.float32)
    values[:NUM_POINTS] = state.board[player][PATH_ORDER[player]]
    values[NUM_POINTS:2 * NUM_POINTS] = state.board[opp][PATH_ORDER[opp]]

    offset = 2 * NUM_POINTS
    values[offset] = state.scores[player]
    values[offset + 1] = state.scores[opp]
    values[offset + 2] = 1.0 if cur_player == player else 0.0
    values[offset + 3] = 1.0 if cur_player == opp else 0.0
    values[offset + 4] = state.dice.values[0]
    values[offset + 5] = state.dice.values[1]
    return values
