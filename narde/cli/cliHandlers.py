# =========================================================
# --- cli_cliHandlers.py ---
# =========================================================

from typing import Any, Dict, Callable

from .cliColors import PLAYER, PLAYER_PLAIN
from .cliUtils import interruptible_sleep
from .boardDisplay import BoardDisplay

# =========================================================

class CLIHandlers:
    """
    Handles engine events for terminal visualization of a game.

    Attributes:
        delay (float): Delay in seconds between event prints to allow user to follow the game.
        use_color (bool): Whether to use colored output.
        clear_screen (bool): Whether to clear the screen before drawing the board.
    """

    def __init__(self, delay: float = 1.5, use_color: bool = True, clear_screen: bool = True):
        """
        Initialize the CLI handler.

        Args:
            delay (float): Sleep duration between events (default 1.5 seconds).
            use_color (bool): Colored output (default True).
            clear_screen (bool): Clear the terminal before each board (default True).
        """
        self.delay: float = delay
        self.use_color: bool = use_color
        self.clear_screen: bool = clear_screen
        self.names = PLAYER if use_color else PLAYER_PLAIN

    def _board(self, state: Any) -> BoardDisplay:
        return BoardDisplay(state, clear_screen=self.clear_screen, use_color=self.use_color)

    # ---------------- Event Handlers ----------------
    def handle_start_game(self, event: Dict[str, Any]) -> None:
        """
        Handle the start of a game: show the initial board.

        Args:
            event (dict): Event data with 'state'.
        """
        self._board(event["state"]).draw_all()
        print(f"\nNew game. {self.names[0]} starts.")
        interruptible_sleep(self.delay)

    def handle_roll_dice(self, event: Dict[str, Any]) -> None:
        """
        Handle dice roll event: display dice and player type.

        Args:
            event (dict): Event data with 'dice', 'turn', 'player_type' and 'extra_turn'.
        """
        extra = " (extra turn)" if event["extra_turn"] else ""
        print(f"\n{self.names[event['turn']]} rolled 🎲🎲: {event['dice']}{extra}")
        print(f"({event.get('player_type')})")
        interruptible_sleep(self.delay)

    def handle_turn_start(self, event: Dict[str, Any]) -> None:
        """
        Handle start of a turn: display board and current player.

        Args:
            event (dict): Event data with 'state', 'turn', and 'bear_off_allowed'.
        """
        self._board(event["state"]).draw_all()
        print(f"\nTurn: {self.names[event['turn']]}")
        if event['bear_off_allowed']:
            print("\nBearing off allowed!\n")
        interruptible_sleep(self.delay)

    def handle_no_moves(self, event: Dict[str, Any]) -> None:
        """
        Handle event when no legal moves are available for a player.

        Args:
            event (dict): Event data with 'turn'.
        """
        print("\nNo legal moves available!\n")
        interruptible_sleep(self.delay)

    def handle_chosen_move(self, event: Dict[str, Any]) -> None:
        """
        Handle event when a player has chosen a move.

        Args:
            event (dict): Event data with 'turn', 'move' and 'description'.
        """
        print(f"\n{self.names[event['turn']]} chose {event['description']}   [{event['move']}]")
        interruptible_sleep(self.delay)

    def handle_turn_end(self, event: Dict[str, Any]) -> None:
        """
        Handle event when a turn ends.

        Args:
            event (dict): Event data with 'next_turn'.
        """
        if event["next_turn"] in (0, 1):
            print(f"\nTurn ended. Next player: {self.names[event['next_turn']]}")
        interruptible_sleep(self.delay)

    def handle_game_over(self, event: Dict[str, Any]) -> None:
        """
        Handle game over event: display winner and game result.

        Args:
            event (dict): Event data with 'state', 'winner', 'points', 'result_type' and 'turns'.
        """
        self._board(event["state"]).draw_all()
        winner = event["winner"]
        who = self.names[winner] if winner is not None else "nobody"
        print(f"\nGame Over! Winner: {who}, Points: {event['points']}, "
              f"Type: {event['result_type']}, Turns: {event['turns']}\n")

    # ---------------- Handler Mapping ----------------
    @property
    def handlers(self) -> Dict[str, Callable[[Dict[str, Any]], None]]:
        """
        Returns a dictionary mapping event types to their handler functions.

        Returns:
            dict: Mapping of event type strings to handler methods.
        """
        return {
            "start_game": self.handle_start_game,
            "roll_dice": self.handle_roll_dice,
            "turn_start": self.handle_turn_start,
            "no_moves": self.handle_no_moves,
            "chosen_move": self.handle_chosen_move,
            "turn_end": self.handle_turn_end,
            "game_over": self.handle_game_over,
        }
