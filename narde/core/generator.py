# =========================================================
# --- core_generator.py ---
# =========================================================

import logging
from typing import List, Optional, Tuple

from .config import SearchLimits
from .moves import CheckerMove, TurnMove
from .state import NardeState
from .rules import NardeRules

logger = logging.getLogger(__name__)

# =========================================================

class HalfMovesGenerator:
    """Generates legal half-moves for the usable dice of a state."""

    def generate_moves(self, state: NardeState, rules: NardeRules, player: Optional[int] = None) -> List[CheckerMove]:
        """
        Generate all legal half-moves for the current player over every usable die value.

        Args:
            state: Current game state.
            rules: Game rules engine.
            player: Moving player, defaults to state.turn.

        Returns:
            Sorted list of legal CheckerMove instances.
        """
        if player is None:
            player = state.turn

        cmoves: List[CheckerMove] = []
        for die in state.dice.usable_values():
            cmoves.extend(rules.valid_moves_with_die(state, player, die))

        return sorted(cmoves)


class SequenceGenerator:
    """
    Generates turn sequences (TurnMove) by bounded depth-first search.

    The search runs on its own copy of the state. Every half-move is
    applied and its die consumed before descending, then undone and its
    die released when the frame is exhausted.

    Attributes:
        limits (SearchLimits): Depth, branching and sequence count bounds.
        truncated (bool): True if the last search hit any bound.
    """

    def __init__(self, limits: Optional[SearchLimits] = None) -> None:
        self.limits: SearchLimits = limits or SearchLimits()
        self.truncated: bool = False
        self.half_moves = HalfMovesGenerator()

    def _candidates(self, state: NardeState, rules: NardeRules, player: int) -> List[CheckerMove]:
        """Half-moves expandable from the current node, capped at max_branching."""
        cmoves = self.half_moves.generate_moves(state, rules, player)
        if len(cmoves) > self.limits.max_branching:
            self._truncate("branching", len(cmoves))
            cmoves = cmoves[:self.limits.max_branching]
        return cmoves

    def _truncate(self, bound: str, value: int) -> None:
        if not self.truncated:
            logger.warning("Sequence search truncated: %s limit hit (%d)", bound, value)
        self.truncated = True

    def generate_all_turn_moves(self, state: NardeState, rules: NardeRules) -> List[TurnMove]:
        """
        Generate every maximal sequence reachable with the current dice.

        A node is recorded as a sequence when it has no legal half-move,
        its dice are exhausted, or a search bound is reached. A player with
        no legal half-move at all gets a single pass sequence.

        Args:
            state: Current game state (not modified).
            rules: Game rules engine.

        Returns:
            List of TurnMove sequences in search order.
        """
        self.truncated = False
        work = state.copy()
        player = work.turn

        root = self._candidates(work, rules, player)
        if not root:
            return [TurnMove((CheckerMove.pass_move(work.dice.values[0]),))]

        turn_moves: List[TurnMove] = []
        path: List[CheckerMove] = []
        stack: List[Tuple[List[CheckerMove], int]] = [(root, 0)]

        while stack:
            candidates, idx = stack[-1]

            if idx >= len(candidates):
                stack.pop()
                if path:
                    last = path.pop()
                    work.undo_move(last, player)
                    work.dice.release(last.die)
                continue

            stack[-1] = (candidates, idx + 1)
            cmove = candidates[idx]
            work.apply_move(cmove, player)
            work.dice.use(cmove.die)
            path.append(cmove)

            children: List[CheckerMove] = []
            if not work.dice.exhausted:
                if len(path) >= self.limits.max_depth:
                    self._truncate("depth", len(path))
                else:
                    children = self._candidates(work, rules, player)

            if children:
                stack.append((children, 0))
                continue

            turn_moves.append(TurnMove(tuple(path)))
            path.pop()
            work.undo_move(cmove, player)
            work.dice.release(cmove.die)

            if len(turn_moves) >= self.limits.max_sequences:
                self._truncate("sequences", len(turn_moves))
                break

        return turn_moves

    def generate_legal_moves(self, state: NardeState, rules: NardeRules) -> Tuple[List[TurnMove], int]:
        """
        Generate all legal turn moves after filtering according to rules.

        Args:
            state: Current game state.
            rules: Game rules engine.

        Returns:
            Filtered list of legal TurnMove sequences and the maximal number
            of non-pass half-moves.
        """
        all_moves = self.generate_all_turn_moves(state, rules)
        return rules.select_best(state, all_moves)
