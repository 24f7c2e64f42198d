"""
pokercore: poker decision-support engine

Hand evaluation, Monte Carlo equity against a random opponent and a
heuristic (not equilibrium) strategy synthesizer, served through cached,
background-dispatched calls.
"""

__version__ = "0.1.0"

from .engine import EngineConfig, PokerEngine

__all__ = ["EngineConfig", "PokerEngine", "__version__"]
