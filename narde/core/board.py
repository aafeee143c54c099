# =========================================================
# --- core_board.py ---
# =========================================================

from narde.utils.bitmask import bits_from_indices, set_all_bits

# =========================================================

"""
Board-related constants and path geometry for Long Narde.

This module defines:
- Players, points and checker counts
- Head points and home regions
- Sentinels for pass and bear-off
- Bitmasks for board regions
- Path arithmetic shared by validator, generator and codec
- Default starting positions
"""

#: Player indices
WHITE = 0
BLACK = 1

#: Pseudo players used by the game API
CHANCE_PLAYER = -1
TERMINAL_PLAYER = -4

#: Board point range (0-23, no bar in Long Narde)
NUM_POINTS = 24
BOARD_START = 0
BOARD_END = NUM_POINTS - 1

#: Total number of checkers per player
NUM_CHECKERS = 15

#: Head (starting stack) point of each player
#: White starts on 23, Black on 11; both move towards lower indices
HEAD_POINT = (23, 11)

#: Sentinels for CheckerMove
PASS_POINT = -1
BEAR_OFF_POINT = -2

#: Path index at which each player's home region starts
#: (the last six points before bearing off)
HOME_PATH_START = 18

#: Number of consecutive points forming a bridge (blockade)
BRIDGE_LENGTH = 6

#: Bitmask representing all playable points on the board
FULL_BOARD_MASK = set_all_bits(BOARD_START, BOARD_END)

#: Bitmasks for each player's home board
#: White: points 0-5, Black: points 12-17
HOME_MASK = (
    set_all_bits(0, 5),
    set_all_bits(12, 17),
)

#: Bitmasks for outside home board (complement of home)
OUTSIDE_HOME_MASK = (
    HOME_MASK[WHITE] ^ FULL_BOARD_MASK,
    HOME_MASK[BLACK] ^ FULL_BOARD_MASK,
)

#: Bitmask of the head point for each player
HEAD_MASK = (
    bits_from_indices([HEAD_POINT[WHITE]]),
    bits_from_indices([HEAD_POINT[BLACK]]),
)

#: Default starting positions
#: Each entry: list of (point, number_of_checkers) for that player
DEFAULT_POSITIONS = [
    [(HEAD_POINT[WHITE], NUM_CHECKERS)],
    [(HEAD_POINT[BLACK], NUM_CHECKERS)],
]

#: Doubles on which two checkers may leave the head on the first turn
HEAD_EXCEPTION_DOUBLES = (3, 4, 6)


# ---------- Path geometry ----------
def opponent(player: int) -> int:
    """Return the other player index."""
    return 1 - player


def path_index(player: int, point: int) -> int:
    """
    Return how far a point lies along the player's path.

    Args:
        player: Player index (0 or 1).
        point: Board point 0-23.

    Returns:
        0 for the head point, 23 for the last point before bearing off.
    """
    return (HEAD_POINT[player] - point) % NUM_POINTS


def point_at(player: int, path: int) -> int:
    """Inverse of path_index: the board point at a given path position."""
    return (HEAD_POINT[player] - path) % NUM_POINTS


def destination(player: int, point: int, die: int) -> int:
    """
    Return the destination of a checker moved by die pips.

    Returns:
        The target point, or BEAR_OFF_POINT if the move leaves the board.
    """
    path = path_index(player, point) + die
    if path >= NUM_POINTS:
        return BEAR_OFF_POINT
    return point_at(player, path)


def pips_to_bear_off(player: int, point: int) -> int:
    """Exact die value needed to bear a checker off from point."""
    return NUM_POINTS - path_index(player, point)


def is_home_point(player: int, point: int) -> bool:
    """True if point lies in the player's home region."""
    return path_index(player, point) >= HOME_PATH_START


def human_point(player: int, point: int) -> int:
    """1-based point number as seen by the player (1 = head)."""
    return path_index(player, point) + 1
