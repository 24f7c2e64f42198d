"""Card, deck and card-set utilities."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Optional

import numpy as np
from treys import Card as TreysCard


class InvalidCardError(ValueError):
    """Raised when a card token has an unknown rank or suit."""


class DuplicateCardError(ValueError):
    """Raised when the same card appears twice in one hole + board set."""


class Rank(IntEnum):
    """Card ranks (2-14 where 14 is Ace)."""
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14


class Suit(IntEnum):
    """Card suits."""
    CLUBS = 0
    DIAMONDS = 1
    HEARTS = 2
    SPADES = 3


# Mapping for string conversion
RANK_STR = {
    2: "2", 3: "3", 4: "4", 5: "5", 6: "6", 7: "7", 8: "8", 9: "9",
    10: "T", 11: "J", 12: "Q", 13: "K", 14: "A"
}
STR_RANK = {v: k for k, v in RANK_STR.items()}

SUIT_STR = {0: "c", 1: "d", 2: "h", 3: "s"}
STR_SUIT = {v: k for k, v in SUIT_STR.items()}

SUIT_SYMBOLS = {0: "♣", 1: "♦", 2: "♥", 3: "♠"}
SYMBOL_SUIT = {v: k for k, v in SUIT_SYMBOLS.items()}


@dataclass(frozen=True)
class Card:
    """A playing card."""
    rank: int  # 2-14
    suit: int  # 0-3

    def __str__(self) -> str:
        return f"{RANK_STR[self.rank]}{SUIT_STR[self.suit]}"

    def __repr__(self) -> str:
        return str(self)

    @property
    def symbol(self) -> str:
        """Display form with a suit symbol, e.g. 'A♥'."""
        return f"{RANK_STR[self.rank]}{SUIT_SYMBOLS[self.suit]}"

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Parse card from string like 'As', 'Th', '10h' or 'Q♥'."""
        return parse_card(s)

    def to_treys(self) -> int:
        """Convert to treys library card format."""
        return TreysCard.new(str(self))


def parse_card(token: str) -> Card:
    """
    Parse a single card token.

    Accepts a rank character (or '10') followed by a suit letter (c/d/h/s)
    or suit symbol.

    Raises:
        InvalidCardError: if the rank or suit is not recognised
    """
    if not isinstance(token, str):
        raise InvalidCardError(f"Invalid card string: {token!r}")

    s = token.strip()
    if s[:2] == "10":
        s = "T" + s[2:]
    if len(s) != 2:
        raise InvalidCardError(f"Invalid card string: {token!r}")

    rank_char = s[0].upper()
    suit_char = s[1]

    if rank_char not in STR_RANK:
        raise InvalidCardError(f"Invalid rank: {rank_char}")

    if suit_char in SYMBOL_SUIT:
        suit = SYMBOL_SUIT[suit_char]
    elif suit_char.lower() in STR_SUIT:
        suit = STR_SUIT[suit_char.lower()]
    else:
        raise InvalidCardError(f"Invalid suit: {suit_char}")

    return Card(rank=STR_RANK[rank_char], suit=suit)


def parse_cards(text: str) -> list[Card]:
    """
    Parse a run of cards like 'AsKh Td' or 'As,Kh,Td'.

    Separators are optional.
    """
    tokens = text.replace(",", " ").split()
    cards = []
    for token in tokens:
        i = 0
        while i < len(token):
            width = 3 if token[i:i + 2] == "10" else 2
            cards.append(parse_card(token[i:i + width]))
            i += width
    return cards


@dataclass
class Hand:
    """A two-card starting hand."""
    card1: Card
    card2: Card

    def __post_init__(self):
        # Ensure card1 has higher or equal rank
        if self.card1.rank < self.card2.rank:
            self.card1, self.card2 = self.card2, self.card1

    @property
    def is_pair(self) -> bool:
        """Check if hand is a pocket pair."""
        return self.card1.rank == self.card2.rank

    @property
    def is_suited(self) -> bool:
        """Check if hand is suited."""
        return self.card1.suit == self.card2.suit

    @property
    def canonical(self) -> str:
        """
        Get canonical hand notation (e.g., 'AKs', 'QQ', '72o').

        This groups equivalent hands regardless of specific suits.
        """
        r1 = RANK_STR[self.card1.rank]
        r2 = RANK_STR[self.card2.rank]

        if self.is_pair:
            return f"{r1}{r2}"
        elif self.is_suited:
            return f"{r1}{r2}s"
        else:
            return f"{r1}{r2}o"

    @property
    def cards(self) -> list[Card]:
        return [self.card1, self.card2]

    def __str__(self) -> str:
        return f"{self.card1}{self.card2}"

    def __repr__(self) -> str:
        return f"Hand({self.card1}, {self.card2})"

    @classmethod
    def from_cards(cls, cards: Iterable[Card]) -> "Hand":
        """Build a hand from exactly two cards."""
        cards = list(cards)
        if len(cards) != 2:
            raise ValueError(f"A starting hand needs 2 cards, got {len(cards)}")
        return cls(cards[0], cards[1])

    @classmethod
    def from_string(cls, s: str) -> "Hand":
        """Parse hand from string like 'AsKh' or 'AKs'."""
        if len(s) == 4:
            # Specific cards: 'AsKh'
            card1 = Card.from_string(s[:2])
            card2 = Card.from_string(s[2:])
            return cls(card1, card2)
        elif len(s) == 2:
            # Pair: 'AA'
            rank = STR_RANK[s[0].upper()]
            return cls(
                Card(rank, Suit.SPADES),
                Card(rank, Suit.HEARTS)
            )
        elif len(s) == 3:
            # Suited or offsuit: 'AKs' or 'AKo'
            r1 = STR_RANK[s[0].upper()]
            r2 = STR_RANK[s[1].upper()]
            suited = s[2].lower() == 's'

            if suited:
                return cls(Card(r1, Suit.SPADES), Card(r2, Suit.SPADES))
            else:
                return cls(Card(r1, Suit.SPADES), Card(r2, Suit.HEARTS))
        else:
            raise InvalidCardError(f"Invalid hand string: {s}")


def full_deck() -> list[Card]:
    """All 52 cards, ordered by rank then suit."""
    return [
        Card(rank, suit)
        for rank in range(2, 15)
        for suit in range(4)
    ]


class Deck:
    """A standard 52-card deck."""

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.cards: list[Card] = []
        self.reset()

    def reset(self) -> None:
        """Reset deck to full 52 cards."""
        self.cards = full_deck()

    def shuffle(self) -> None:
        """Shuffle the deck in place."""
        order = self.rng.permutation(len(self.cards))
        self.cards = [self.cards[i] for i in order]

    def deal(self, n: int = 1) -> list[Card]:
        """Deal n cards from the deck."""
        if n > len(self.cards):
            raise ValueError(f"Cannot deal {n} cards, only {len(self.cards)} remaining")
        dealt = self.cards[:n]
        self.cards = self.cards[n:]
        return dealt

    def remove(self, cards: Iterable[Card]) -> None:
        """Remove specific cards from the deck."""
        for card in cards:
            if card in self.cards:
                self.cards.remove(card)

    def __len__(self) -> int:
        return len(self.cards)


def sort_cards(cards: Iterable[Card]) -> list[Card]:
    """Sort cards by rank descending, then suit descending."""
    return sorted(cards, key=lambda c: (c.rank, c.suit), reverse=True)


def canonical_key(cards: Iterable[Card]) -> str:
    """
    Order-independent key for a set of cards.

    Used for cache lookups: 'KhAh' and 'AhKh' give the same key.
    """
    return "".join(str(c) for c in sort_cards(cards))


def remaining_deck(known_cards: Iterable[Card]) -> list[Card]:
    """Deck minus the known cards, in deck order."""
    known = set(known_cards)
    return [c for c in full_deck() if c not in known]


def ensure_distinct(*groups: Iterable[Card]) -> None:
    """
    Check that no card is repeated across the given groups.

    Raises:
        DuplicateCardError: naming the repeated cards
    """
    seen: set[Card] = set()
    duplicates: list[Card] = []
    for group in groups:
        for card in group:
            if card in seen:
                duplicates.append(card)
            seen.add(card)
    if duplicates:
        names = ", ".join(str(c) for c in duplicates)
        raise DuplicateCardError(f"Duplicate cards detected: {names}")


def get_all_hands() -> list[str]:
    """Generate all 169 unique starting hands in canonical form."""
    hands = []
    ranks = "AKQJT98765432"

    # Pairs
    for r in ranks:
        hands.append(f"{r}{r}")

    # Non-pairs
    for i, r1 in enumerate(ranks):
        for r2 in ranks[i+1:]:
            hands.append(f"{r1}{r2}s")  # Suited
            hands.append(f"{r1}{r2}o")  # Offsuit

    return hands


def parse_range(range_str: str) -> list[str]:
    """
    Parse a hand range string into list of hands.

    Examples:
        "AA" -> ["AA"]
        "AKs" -> ["AKs"]
        "TT+" -> ["TT", "JJ", "QQ", "KK", "AA"]
        "ATs+" -> ["ATs", "AJs", "AQs", "AKs"]
        "22-55" -> ["22", "33", "44", "55"]
    """
    hands = []
    range_str = range_str.strip()

    # Pair plus: "TT+"
    if len(range_str) == 3 and range_str[2] == "+" and range_str[0] == range_str[1]:
        start_rank = STR_RANK[range_str[0]]
        for rank in range(start_rank, 15):
            hands.append(f"{RANK_STR[rank]}{RANK_STR[rank]}")
        return hands

    # Pair range: "22-55"
    if "-" in range_str and len(range_str) == 5:
        low = STR_RANK[range_str[0]]
        high = STR_RANK[range_str[3]]
        for rank in range(low, high + 1):
            hands.append(f"{RANK_STR[rank]}{RANK_STR[rank]}")
        return hands

    # Suited/offsuit plus: "ATs+"
    if len(range_str) == 4 and range_str[3] == "+":
        high_rank = STR_RANK[range_str[0]]
        low_rank = STR_RANK[range_str[1]]
        suited = range_str[2] == "s"

        suffix = "s" if suited else "o"
        for rank in range(low_rank, high_rank):
            hands.append(f"{RANK_STR[high_rank]}{RANK_STR[rank]}{suffix}")
        return hands

    # Single hand
    return [range_str]
