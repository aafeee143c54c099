# =========================================================
# --- core_state_invariants.py ---
# =========================================================

import numpy as np
from typing import Any

from .board import NUM_POINTS, NUM_CHECKERS
from .errors import InvariantViolation
from narde.utils.bitmask import bits_from_indices

# =========================================================

def _violation(state: Any, message: str) -> InvariantViolation:
    """Build an InvariantViolation carrying the state's diagnostic context."""
    return InvariantViolation(
        message,
        board=state.board.copy(),
        dice=repr(state.dice),
        flags=state.flags,
    )


def assert_checker_invariant(state: Any, where: str = "") -> None:
    """
    Check that every player owns exactly NUM_CHECKERS checkers.

    This includes checkers on the board and borne off checkers.

    Args:
        state: The NardeState object to check.
        where: Optional description of where the check is performed (for debugging).

    Raises:
        InvariantViolation: If counts are negative or totals do not add up.
    """
    if (state.board < 0).any():
        raise _violation(state, f"[NEGATIVE COUNT] at {where}")

    for p in (0, 1):
        on_board = int(state.board[p].sum())
        score = int(state.scores[p])
        if not 0 <= score <= NUM_CHECKERS:
            raise _violation(state, f"[SCORE RANGE] Player {p}: score {score} at {where}")
        total = on_board + score
        if total != NUM_CHECKERS:
            raise _violation(
                state,
                f"[CHECKER LOST] Player {p}: {total}/{NUM_CHECKERS} at {where}\n"
                f"Board={on_board}, BearOff={score}"
            )


def assert_occupancy_invariant(state: Any, where: str = "") -> None:
    """
    Check that no point holds checkers of both players.

    Args:
        state: The NardeState object to check.
        where: Optional description of where the check is performed (for debugging).

    Raises:
        InvariantViolation: If any point is occupied by both players.
    """
    both = np.flatnonzero((state.board[0] > 0) & (state.board[1] > 0))
    if both.size:
        raise _violation(state, f"[DUAL OCCUPANCY] points {both.tolist()} at {where}")


def assert_mask_invariant(state: Any, where: str = "") -> None:
    """
    Check that the occupancy masks are consistent with the board.

    Args:
        state: The NardeState object to check.
        where: Optional description of where the check is performed (for debugging).

    Raises:
        InvariantViolation: If any occupancy mask does not match the board.
    """
    for p in (0, 1):
        occ = bits_from_indices(np.flatnonzero(state.board[p][:NUM_POINTS] > 0))
        if state._occ_mask[p] != occ:
            raise _violation(
                state,
                f"[MASK DESYNC] occupied mask mismatch at {where}\n"
                f"Player={p}\n"
                f"Current ={bin(state._occ_mask[p])}\n"
                f"Expected={bin(occ)}"
            )


def assert_state_invariant(state: Any, where: str = "") -> None:
    """
    Perform full invariant check for a Long Narde state.

    This includes:
    - Checker count consistency
    - No dual occupancy
    - Occupancy mask consistency

    Args:
        state: The NardeState object to check.
        where: Optional description of where the check is performed (for debugging).

    Raises:
        InvariantViolation: If any invariant fails.
    """
    assert_checker_invariant(state, where)
    assert_occupancy_invariant(state, where)
    assert_mask_invariant(state, where)
