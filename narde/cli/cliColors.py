# =========================================================
# --- cli_cliColors.py ---
# =========================================================

from typing import Tuple

# =========================================================

class TColor:
    """
    ANSI escape codes for terminal text coloring.

    Attributes:
        WHITE (str): Color for player 0 (White).
        RED (str): Color for player 1 (Black).
        GREEN (str): Highlight color for "from" point.
        YELLOW (str): Highlight color for "to" point.
        PURPLE (str): Highlight color for combined "from + to".
        RESET (str): Reset color to default terminal color.
        BOLD (str): Bold text formatting.
    """
    WHITE: str   = "\033[97m"   # Player 0
    RED: str     = "\033[91m"   # Player 1
    GREEN: str   = "\033[92m"   # Move source highlight
    YELLOW: str  = "\033[93m"   # Move target highlight
    PURPLE: str  = "\033[95m"   # Source + target highlight
    RESET: str   = "\033[0m"    # Reset formatting
    BOLD: str    = "\033[1m"    # Bold text


PLAYER: Tuple[str, str] = (
    f"{TColor.WHITE}(W)hite{TColor.RESET}",  # Player 0 display string
    f"{TColor.RED}(B)lack{TColor.RESET}"     # Player 1 display string
)

PLAYER_PLAIN: Tuple[str, str] = ("(W)hite", "(B)lack")
