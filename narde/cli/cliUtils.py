# =========================================================
# --- cli_cliUtils.py ---
# =========================================================
import os
import time

# =========================================================

class ExitGame(Exception):
    """
    Custom exception to indicate that the session should stop.
    Raised when the user presses Ctrl+C while games are running.
    """
    pass


def interruptible_sleep(seconds: float) -> None:
    """
    Sleep for a given number of seconds in small intervals,
    turning Ctrl+C into ExitGame.

    Args:
        seconds (float): Total duration to sleep in seconds.

    Raises:
        ExitGame: If the user presses Ctrl+C.
    """
    start: float = time.time()
    try:
        while time.time() - start < seconds:
            time.sleep(0.05)
    except KeyboardInterrupt:
        raise ExitGame()


def clear() -> None:
    """
    Clear the terminal screen.
    Uses 'cls' on Windows and 'clear' on Unix-based systems.
    """
    os.system('cls' if os.name == 'nt' else 'clear')
