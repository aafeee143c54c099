import pytest

from narde.core.board import WHITE
from narde.core.config import GameConfig
from narde.core.engine import GameEngine


@pytest.fixture
def make_engine():
    """Build an engine on a custom position, optionally with dice already rolled."""

    def _make(white, black, player=WHITE, dice=None, config=None, **kwargs):
        engine = GameEngine(config=config or GameConfig(debug=True))
        engine.set_state([white, black], player=player, dice=dice, **kwargs)
        return engine

    return _make
