"""Preflop opening ranges by table position."""

from enum import Enum

from pokercore.game.cards import Hand, get_all_hands, parse_range
from pokercore.game.evaluator import preflop_strength


class Position(Enum):
    """Coarse table position."""
    EARLY = "early"
    MIDDLE = "middle"
    LATE = "late"


# Range notation, expanded with parse_range.
_OPENING_NOTATION = {
    Position.EARLY: [
        "99+", "ATs+", "AKo", "KJs+", "QJs", "JTs",
    ],
    Position.MIDDLE: [
        "77+", "A9s+", "AQo+", "KTs+", "QTs+", "JTs", "T9s",
    ],
    Position.LATE: [
        "22+", "A2s+", "ATo+", "K9s+", "Q9s+", "J9s+",
        "T8s+", "98s", "87s", "76s", "65s",
    ],
}


def _expand(notation: list[str]) -> list[str]:
    hands: list[str] = []
    for part in notation:
        for hand in parse_range(part):
            if hand not in hands:
                hands.append(hand)
    return hands


OPENING_RANGES: dict[Position, list[str]] = {
    position: _expand(notation)
    for position, notation in _OPENING_NOTATION.items()
}


def optimal_range(position: Position) -> list[str]:
    """Hands worth opening from a position, strongest groups first."""
    return list(OPENING_RANGES[Position(position)])


def in_opening_range(hand: Hand, position: Position) -> bool:
    """Check whether a starting hand is in the opening range for a position."""
    return hand.canonical in OPENING_RANGES[Position(position)]


# All 169 starting hands, strongest first by chart score.
RANKED_HANDS: list[str] = sorted(
    get_all_hands(),
    key=lambda h: preflop_strength(Hand.from_string(h)),
    reverse=True,
)


def top_hands(percentage: float) -> list[str]:
    """
    The strongest `percentage` percent of the 169 starting hands.

    Args:
        percentage: Share of hand classes to include (0-100)

    Returns:
        Hands in canonical notation, strongest first
    """
    if percentage <= 0:
        return []
    if percentage >= 100:
        return list(RANKED_HANDS)
    count = int(percentage / 100 * len(RANKED_HANDS))
    return RANKED_HANDS[:count]
