# =========================================================
# --- core_config.py ---
# =========================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

# =========================================================

class ScoringType(Enum):
    """
    Scoring rule of a game.

    Attributes:
        WIN_LOSS: The first player to bear off all checkers wins.
        WIN_LOSS_TIE: Black gets a last roll to tie after White finishes.
    """
    WIN_LOSS = "winloss_scoring"
    WIN_LOSS_TIE = "winlosstie_scoring"


@dataclass(frozen=True)
class SearchLimits:
    """
    Bounds of the turn sequence search.

    Attributes:
        max_depth (int): Deepest half-move chain explored.
        max_branching (int): Candidate half-moves expanded per node.
        max_sequences (int): Sequences recorded before the search stops.
    """
    max_depth: int = 6
    max_branching: int = 30
    max_sequences: int = 200

    def __post_init__(self) -> None:
        for name in ("max_depth", "max_branching", "max_sequences"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be positive")


@dataclass(frozen=True)
class GameConfig:
    """
    Game-level options.

    Attributes:
        scoring_type (ScoringType): Scoring rule.
        limits (SearchLimits): Sequence search bounds.
        validate_actions (bool): Reject actions that are not currently legal.
        max_history (int): Turn snapshots kept for undo.
        debug (bool): Check state invariants after every mutation.
    """
    scoring_type: ScoringType = ScoringType.WIN_LOSS
    limits: SearchLimits = field(default_factory=SearchLimits)
    validate_actions: bool = True
    max_history: int = 1000
    debug: bool = False

    @classmethod
    def from_params(cls, params: Optional[Mapping[str, Any]] = None) -> "GameConfig":
        """
        Build a configuration from string-keyed parameters.

        Args:
            params: Mapping such as {"scoring_type": "winlosstie_scoring"}.

        Returns:
            GameConfig: The parsed configuration.

        Raises:
            ValueError: On unknown keys or values.
        """
        params = dict(params or {})
        kwargs: Dict[str, Any] = {}

        if "scoring_type" in params:
            raw = params.pop("scoring_type")
            try:
                kwargs["scoring_type"] = raw if isinstance(raw, ScoringType) else ScoringType(raw)
            except ValueError:
                raise ValueError(f"Unknown scoring_type: {raw!r}") from None

        limit_keys = ("max_depth", "max_branching", "max_sequences")
        limit_kwargs = {k: int(params.pop(k)) for k in limit_keys if k in params}
        if limit_kwargs:
            kwargs["limits"] = SearchLimits(**limit_kwargs)

        for key in ("validate_actions", "debug"):
            if key in params:
                kwargs[key] = bool(params.pop(key))
        if "max_history" in params:
            kwargs["max_history"] = int(params.pop("max_history"))

        if params:
            raise ValueError(f"Unknown game parameters: {sorted(params)}")
        return cls(**kwargs)
