# =========================================================
# --- cli_boardDisplay.py ---
# =========================================================

from typing import Optional, Set, Iterable, List
from narde.core.board import NUM_POINTS, WHITE, BLACK
from narde.core.state import NardeState

from .cliColors import TColor
from .cliUtils import clear

# =========================================================

class BoardDisplay:
    """
    Class for displaying the Long Narde board in the terminal.

    The upper row shows points 12-23 left to right, the lower row points
    11-0, so both players run counter-clockwise.

    Attributes:
        state (NardeState): The current game state.
        clear_screen (bool): Whether to clear the screen before drawing.
        field_size (int): Width of a board point for formatting.
        use_color (bool): Whether to use colored output.
    """

    def __init__(self, state: 'NardeState', clear_screen: bool = True, use_color: bool = True) -> None:
        """
        Initializes the BoardDisplay.

        Args:
            state (NardeState): The current game state.
            clear_screen (bool, optional): Whether to clear the screen before drawing. Defaults to True.
            use_color (bool, optional): Whether to use colored output. Defaults to True.
        """
        self.state: 'NardeState' = state
        self.clear_screen: bool = clear_screen
        self.field_size: int = 3
        self.use_color: bool = use_color

    def _paint(self, text: str, color: str) -> str:
        return f"{color}{text}{TColor.RESET}" if self.use_color else text

    def _point_str(self, point: int) -> str:
        """
        Returns a formatted string representing a board point, including colored checkers.

        Args:
            point (int): The board point number.

        Returns:
            str: Formatted string for the point.
        """
        white = self.state.num_of_checkers(point, WHITE)
        black = self.state.num_of_checkers(point, BLACK)

        if white:
            return self._paint(f"W{white}".rjust(self.field_size), TColor.WHITE)
        if black:
            return self._paint(f"B{black}".rjust(self.field_size), TColor.RED)
        return "..."

    def _color_index(
        self,
        point: int,
        from_points: Optional[Iterable[int]] = None,
        to_points: Optional[Iterable[int]] = None
    ) -> str:
        """
        Returns a formatted point index with color coding for moves.

        - GREEN: point is a source (checker moving from)
        - YELLOW: point is a target (checker moving to)
        - PURPLE: point is both source and target

        Args:
            point (int): The board point number.
            from_points (Optional[Iterable[int]]): Points where checkers are moving from.
            to_points (Optional[Iterable[int]]): Points where checkers are moving to.

        Returns:
            str: Colored or formatted point string.
        """
        from_points = from_points or set()
        to_points = to_points or set()

        s = f"{point}".rjust(self.field_size)
        if point in from_points and point in to_points:
            return self._paint(s, TColor.PURPLE)
        if point in from_points:
            return self._paint(s, TColor.GREEN)
        if point in to_points:
            return self._paint(s, TColor.YELLOW)
        return s

    def render(self, from_points: Optional[Set[int]] = None, to_points: Optional[Set[int]] = None) -> List[str]:
        """
        Build the board as a list of text lines.

        Args:
            from_points (Optional[Set[int]]): Points checkers are moving from.
            to_points (Optional[Set[int]]): Points checkers are moving to.

        Returns:
            List[str]: Lines of the board drawing.
        """
        half = NUM_POINTS // 2
        sep = " "

        upper_range = range(half, NUM_POINTS)
        lower_range = range(half - 1, -1, -1)

        lines = [
            self._paint("--- Board ---", TColor.BOLD),
            self._paint("HOME B (12-17)", TColor.RED),
            sep.join(self._color_index(p, from_points, to_points) for p in upper_range),
            sep.join(self._point_str(p) for p in upper_range),
            sep.join(self._point_str(p) for p in lower_range),
            sep.join(self._color_index(p, from_points, to_points) for p in lower_range),
            self._paint("HOME W (0-5)", TColor.WHITE).rjust(half * (self.field_size + 1) - 1),
            "Off  "
            + self._paint(f"W:{int(self.state.scores[WHITE])}", TColor.WHITE) + " | "
            + self._paint(f"B:{int(self.state.scores[BLACK])}", TColor.RED),
        ]
        if self.state.dice.is_rolled:
            lines.append(f"Dice {self.state.dice.values}")
        return lines

    def draw_all(self, from_points: Optional[Set[int]] = None, to_points: Optional[Set[int]] = None) -> None:
        """
        Draws the entire board, including points, borne off checkers and dice.

        Args:
            from_points (Optional[Set[int]]): Points checkers are moving from.
            to_points (Optional[Set[int]]): Points checkers are moving to.
        """
        if self.clear_screen:
            clear()
        print("\n".join(self.render(from_points, to_points)))
