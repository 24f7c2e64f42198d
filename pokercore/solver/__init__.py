"""Strategy synthesis module."""

from .ranges import Position, OPENING_RANGES, optimal_range, in_opening_range, top_hands
from .strategy import (
    ActionType,
    GameContext,
    GtoAction,
    GtoStrategy,
    StrategySynthesizer,
)

__all__ = [
    "Position",
    "OPENING_RANGES",
    "optimal_range",
    "in_opening_range",
    "top_hands",
    "ActionType",
    "GameContext",
    "GtoAction",
    "GtoStrategy",
    "StrategySynthesizer",
]
