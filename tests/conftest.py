"""Pytest configuration and fixtures."""

import pytest

from pokercore.engine import EngineConfig, PokerEngine
from pokercore.game.cards import parse_cards


@pytest.fixture
def cards():
    """Parse a card string like 'Ah Kh' into a list of cards."""
    return parse_cards


@pytest.fixture
def engine():
    """Engine with a background worker and a fixed seed."""
    eng = PokerEngine(EngineConfig(
        equity_iterations=400,
        strategy_iterations=200,
        seed=1234,
    ))
    yield eng
    eng.cleanup()


@pytest.fixture
def sync_engine():
    """Engine that computes everything on the calling thread."""
    eng = PokerEngine(EngineConfig(
        equity_iterations=400,
        strategy_iterations=200,
        use_worker=False,
        seed=1234,
    ))
    yield eng
    eng.cleanup()
