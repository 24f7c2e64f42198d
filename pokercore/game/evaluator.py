"""
Hand evaluation.

Ranks any 0-7 card collection into one of ten categories. For six or
seven cards every five-card subset is ranked and the best one kept, since
the best hand is not necessarily formed by the first five cards seen.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Sequence
import functools
import itertools

from .cards import Card, Hand, RANK_STR


class HandCategory(IntEnum):
    """Poker hand categories, ordered weakest to strongest."""
    HIGH_CARD = 0
    PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8
    ROYAL_FLUSH = 9

    @property
    def label(self) -> str:
        """Human-readable name, e.g. 'Full House'."""
        return self.name.replace("_", " ").title()


_TOP_CATEGORY = HandCategory.ROYAL_FLUSH


@dataclass(frozen=True)
class HandEvaluation:
    """
    Result of evaluating a set of cards.

    `kickers` holds the decisive ranks first, then the tie-breakers, so two
    evaluations of the same category compare exactly by their kickers.
    """
    category: HandCategory
    strength: float
    description: str
    kickers: tuple[int, ...] = ()

    @property
    def sort_key(self) -> tuple[int, tuple[int, ...]]:
        return (int(self.category), self.kickers)


NO_HAND = HandEvaluation(
    category=HandCategory.HIGH_CARD,
    strength=0.0,
    description="No hand",
    kickers=(),
)


def _strength(category: HandCategory, kickers: Sequence[int]) -> float:
    """Map a category and kickers onto [0, 1]."""
    if category == HandCategory.ROYAL_FLUSH:
        return 1.0
    # Kickers read as base-15 digits: strictly below 1 for ranks <= 14.
    fraction = 0.0
    scale = 1.0
    for rank in kickers:
        scale /= 15
        fraction += rank * scale
    return (int(category) + fraction) / int(_TOP_CATEGORY)


def _describe(category: HandCategory, kickers: Sequence[int]) -> str:
    names = [RANK_STR[r] for r in kickers]
    if category == HandCategory.ROYAL_FLUSH:
        return "Royal Flush"
    if category in (HandCategory.STRAIGHT_FLUSH, HandCategory.STRAIGHT):
        return f"{category.label}, {names[0]} high"
    if category == HandCategory.FOUR_OF_A_KIND:
        return f"Four of a Kind, {names[0]}s"
    if category == HandCategory.FULL_HOUSE:
        return f"Full House, {names[0]}s full of {names[1]}s"
    if category == HandCategory.FLUSH:
        return f"Flush, {names[0]} high"
    if category == HandCategory.THREE_OF_A_KIND:
        return f"Three of a Kind, {names[0]}s"
    if category == HandCategory.TWO_PAIR:
        return f"Two Pair, {names[0]}s and {names[1]}s"
    if category == HandCategory.PAIR:
        return f"Pair of {names[0]}s"
    return f"High Card, {names[0]}"


def _make(category: HandCategory, kickers: Sequence[int]) -> HandEvaluation:
    kickers = tuple(kickers)
    return HandEvaluation(
        category=category,
        strength=_strength(category, kickers),
        description=_describe(category, kickers),
        kickers=kickers,
    )


def _straight_top(unique_desc: list[int]) -> int:
    """Top rank of a five-rank run, 5 for the wheel, 0 if none."""
    if len(unique_desc) != 5:
        return 0
    if unique_desc[0] - unique_desc[4] == 4:
        return unique_desc[0]
    if unique_desc == [14, 5, 4, 3, 2]:
        return 5
    return 0


def _grouped(ranks: Iterable[int]) -> list[tuple[int, int]]:
    """(count, rank) pairs, largest groups first, then highest rank."""
    counts: dict[int, int] = {}
    for r in ranks:
        counts[r] = counts.get(r, 0) + 1
    return sorted(((cnt, r) for r, cnt in counts.items()), reverse=True)


@functools.lru_cache(maxsize=100_000)
def _rank_five(cards: tuple[tuple[int, int], ...]) -> HandEvaluation:
    """Rank exactly five (rank, suit) pairs."""
    ranks = sorted((r for r, _ in cards), reverse=True)
    is_flush = len({s for _, s in cards}) == 1

    groups = _grouped(ranks)
    unique_desc = sorted({r for r in ranks}, reverse=True)
    top = _straight_top(unique_desc)

    if is_flush and top:
        if top == 14:
            return _make(HandCategory.ROYAL_FLUSH, (14,))
        return _make(HandCategory.STRAIGHT_FLUSH, (top,))

    if groups[0][0] == 4:
        return _make(HandCategory.FOUR_OF_A_KIND, (groups[0][1], groups[1][1]))

    if groups[0][0] == 3 and groups[1][0] == 2:
        return _make(HandCategory.FULL_HOUSE, (groups[0][1], groups[1][1]))

    if is_flush:
        return _make(HandCategory.FLUSH, ranks)

    if top:
        return _make(HandCategory.STRAIGHT, (top,))

    return _rank_groups(groups)


def _rank_groups(groups: list[tuple[int, int]]) -> HandEvaluation:
    """Rank on pairing structure alone (no flush or straight possible)."""
    shape = [cnt for cnt, _ in groups]
    ordered = [r for _, r in groups]

    if shape[0] == 4:
        return _make(HandCategory.FOUR_OF_A_KIND, ordered)
    if shape[0] == 3:
        if len(shape) > 1 and shape[1] >= 2:
            return _make(HandCategory.FULL_HOUSE, ordered[:2])
        return _make(HandCategory.THREE_OF_A_KIND, ordered)
    if shape[0] == 2:
        if len(shape) > 1 and shape[1] == 2:
            return _make(HandCategory.TWO_PAIR, ordered)
        return _make(HandCategory.PAIR, ordered)
    return _make(HandCategory.HIGH_CARD, ordered)


def evaluate_cards(cards: Iterable[Card]) -> HandEvaluation:
    """
    Evaluate the best hand available from up to seven cards.

    Fewer than two cards yields a zero-strength "No hand" result. Two to
    four cards are ranked on pairs and trips only, since flushes and
    straights need five cards.
    """
    pairs = sorted(((c.rank, c.suit) for c in cards), reverse=True)

    if len(pairs) < 2:
        return NO_HAND
    if len(pairs) < 5:
        return _rank_groups(_grouped(r for r, _ in pairs))
    if len(pairs) == 5:
        return _rank_five(tuple(pairs))

    # Combinations of a sorted sequence stay sorted, so subsets share cache keys.
    return max(
        (_rank_five(combo) for combo in itertools.combinations(pairs, 5)),
        key=lambda ev: ev.sort_key,
    )


def compare_evaluations(a: HandEvaluation, b: HandEvaluation) -> int:
    """Positive if a beats b, negative if b beats a, zero on a tie."""
    ka, kb = a.sort_key, b.sort_key
    if ka > kb:
        return 1
    if ka < kb:
        return -1
    return 0


def preflop_strength(hand: Hand) -> float:
    """
    Chart-style 0-1 score for two hole cards.

    Pairs score on rank; other hands on their two ranks with bonuses for
    being suited and connected.
    """
    high = hand.card1.rank
    low = hand.card2.rank

    if hand.is_pair:
        score = 50 + high * 2
    else:
        gap = high - low
        score = high * 2 + low * 0.5
        if hand.is_suited:
            score += 8
        if gap <= 4:
            score += 5
        if gap == 1:
            score += 3

    return min(1.0, max(0.0, score / 120))
