"""Engine facade, caches and background dispatch."""

from .cache import LRUCache, CacheStats
from .dispatcher import (
    CancelToken,
    Dispatcher,
    WorkerTimeout,
    WorkerUnavailable,
)
from .core import (
    EngineConfig,
    PokerEngine,
    calculate_hand_strength,
    calculate_quick_equity,
    get_hand_description,
)

__all__ = [
    "LRUCache",
    "CacheStats",
    "CancelToken",
    "Dispatcher",
    "WorkerTimeout",
    "WorkerUnavailable",
    "EngineConfig",
    "PokerEngine",
    "calculate_hand_strength",
    "calculate_quick_equity",
    "get_hand_description",
]
