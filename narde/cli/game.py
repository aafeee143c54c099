# =========================================================
# --- cli_game.py ---
# =========================================================

import argparse
import logging
import random
from typing import Any, Dict, List, Optional

from narde.core.config import GameConfig, ScoringType
from narde.core.engine import GameEngine
from narde.players.random import RandomPlayer

from .cliUtils import ExitGame, clear
from .cliHandlers import CLIHandlers

logger = logging.getLogger(__name__)

# =========================================================

class CLISetup:
    """
    Factory and setup utilities for configuring players
    and initializing the game engine for the CLI.
    """

    @staticmethod
    def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
        """
        Parse command line options.

        Args:
            argv (Optional[List[str]]): Arguments, defaults to sys.argv.

        Returns:
            argparse.Namespace: Parsed options.
        """
        parser = argparse.ArgumentParser(description="Long Narde random self-play")
        parser.add_argument("--games", type=int, default=1, help="number of games to play")
        parser.add_argument("--seed", type=int, default=None, help="seed for dice and players")
        parser.add_argument("--scoring", choices=[s.value for s in ScoringType],
                            default=ScoringType.WIN_LOSS.value, help="scoring rule")
        parser.add_argument("--max-turns", type=int, default=None, help="stop a game after this many turns")
        parser.add_argument("--watch", action="store_true", help="draw the board after every event")
        parser.add_argument("--delay", type=float, default=0.5, help="seconds between events when watching")
        parser.add_argument("--no-color", action="store_true", help="disable ANSI colors")
        parser.add_argument("--debug", action="store_true", help="check state invariants after every move")
        parser.add_argument("--log-level", default="WARNING",
                            choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="logging level")
        return parser.parse_args(argv)

    @staticmethod
    def setup_engine(args: argparse.Namespace, rng: random.Random) -> GameEngine:
        """
        Initialize the game engine with configuration and two random players.

        Args:
            args (argparse.Namespace): Parsed options.
            rng (random.Random): Shared random generator.

        Returns:
            GameEngine: Fully configured game engine.
        """
        config = GameConfig.from_params({"scoring_type": args.scoring, "debug": args.debug})
        return GameEngine(
            RandomPlayer(id=0, rng=rng),
            RandomPlayer(id=1, rng=rng),
            config=config,
            rng=rng,
        )


class NardeCLI:
    """
    Main command-line controller running random self-play games.
    """

    def __init__(self, watch: bool = False, delay: float = 0.5, use_color: bool = True):
        """
        Initialize the CLI.

        Args:
            watch (bool): Whether to draw every event.
            delay (float): Delay in seconds between UI updates.
            use_color (bool): Colored output.
        """
        self.setup = CLISetup()
        self.watch = watch
        self.handlers = CLIHandlers(delay, use_color=use_color, clear_screen=watch).handlers

    def play_game(self, engine: GameEngine, max_turns: Optional[int] = None) -> Dict[str, Any]:
        """
        Run one game and dispatch events to CLI handlers when watching.

        Args:
            engine (GameEngine): The configured game engine.
            max_turns (Optional[int]): Turn limit for the game.

        Returns:
            dict: The final game_over event.
        """
        final: Dict[str, Any] = {}
        for event in engine.play_game(max_turns=max_turns):
            if event["type"] == "game_over":
                final = event
            if self.watch:
                handler = self.handlers.get(event["type"])
                if handler:
                    handler(event)
        return final

    @staticmethod
    def summarize(results: List[Dict[str, Any]]) -> str:
        """Format win, mars and tie counts of a session."""
        wins = [0, 0]
        mars = [0, 0]
        ties = unfinished = 0
        for result in results:
            if result["result_type"] == "TIE":
                ties += 1
            elif result["winner"] is None:
                unfinished += 1
            else:
                wins[result["winner"]] += 1
                if result["result_type"] == "MARS":
                    mars[result["winner"]] += 1
        turns = sum(r["turns"] for r in results) / max(len(results), 1)
        return (f"games={len(results)} white={wins[0]} (mars {mars[0]}) "
                f"black={wins[1]} (mars {mars[1]}) ties={ties} unfinished={unfinished} "
                f"avg_turns={turns:.1f}")

    def run(self, args: argparse.Namespace) -> int:
        """
        Play the requested number of games and print a summary.

        Returns:
            int: Process exit code.
        """
        rng = random.Random(args.seed)
        results: List[Dict[str, Any]] = []
        try:
            for game_no in range(args.games):
                engine = self.setup.setup_engine(args, rng)
                result = self.play_game(engine, args.max_turns)
                logger.info("Game %d: %s %s", game_no + 1, result["result_type"], result["returns"])
                results.append(result)
        except (ExitGame, KeyboardInterrupt):
            print("\nSession interrupted by user.")
        print(self.summarize(results))
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = CLISetup.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if args.watch:
        clear()
    cli = NardeCLI(watch=args.watch, delay=args.delay, use_color=not args.no_color)
    return cli.run(args)


# ---------------- Main ----------------
if __name__ == "__main__":
    raise SystemExit(main())
