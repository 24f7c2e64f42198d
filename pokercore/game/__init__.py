"""Game representation module."""

from .cards import (
    Card,
    Hand as CardHand,
    Deck,
    InvalidCardError,
    DuplicateCardError,
    parse_card,
    parse_cards,
    canonical_key,
    remaining_deck,
)
from .evaluator import HandCategory, HandEvaluation, evaluate_cards, compare_evaluations
from .equity import EquityCalculator, EquityResult, calculate_equity

__all__ = [
    "Card",
    "CardHand",
    "Deck",
    "InvalidCardError",
    "DuplicateCardError",
    "parse_card",
    "parse_cards",
    "canonical_key",
    "remaining_deck",
    "HandCategory",
    "HandEvaluation",
    "evaluate_cards",
    "compare_evaluations",
    "EquityCalculator",
    "EquityResult",
    "calculate_equity",
]
