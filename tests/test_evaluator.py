"""Tests for hand evaluation."""

import itertools
import random

import pytest
from treys import Evaluator

from pokercore.game.cards import Hand, full_deck, parse_cards
from pokercore.game.evaluator import (
    HandCategory, NO_HAND, compare_evaluations, evaluate_cards, preflop_strength,
)


def evaluate(text):
    return evaluate_cards(parse_cards(text))


# treys rank classes run 1 (straight flush) .. 9 (high card)
TREYS_CLASS = {
    1: {HandCategory.STRAIGHT_FLUSH, HandCategory.ROYAL_FLUSH},
    2: {HandCategory.FOUR_OF_A_KIND},
    3: {HandCategory.FULL_HOUSE},
    4: {HandCategory.FLUSH},
    5: {HandCategory.STRAIGHT},
    6: {HandCategory.THREE_OF_A_KIND},
    7: {HandCategory.TWO_PAIR},
    8: {HandCategory.PAIR},
    9: {HandCategory.HIGH_CARD},
}


class TestCategories:
    @pytest.mark.parametrize("text, category", [
        ("Ah Kh Qh Jh Th", HandCategory.ROYAL_FLUSH),
        ("9c 8c 7c 6c 5c", HandCategory.STRAIGHT_FLUSH),
        ("Ah Ac Ad As Kh", HandCategory.FOUR_OF_A_KIND),
        ("Kh Kc Kd 7h 7c", HandCategory.FULL_HOUSE),
        ("Ad 9d 7d 5d 3d", HandCategory.FLUSH),
        ("8h 7c 6d 5s 4h", HandCategory.STRAIGHT),
        ("Qh Qc Qd 8h 3c", HandCategory.THREE_OF_A_KIND),
        ("Jh Jc 9d 9s 2h", HandCategory.TWO_PAIR),
        ("Th Tc Ad 7s 3h", HandCategory.PAIR),
        ("Ah 9c 7d 5s 3h", HandCategory.HIGH_CARD),
    ])
    def test_five_card_categories(self, text, category):
        assert evaluate(text).category == category

    def test_wheel_straight(self):
        ev = evaluate("Ah 2c 3d 4s 5h")
        assert ev.category == HandCategory.STRAIGHT
        assert ev.kickers == (5,)

    def test_wheel_loses_to_six_high(self):
        wheel = evaluate("Ah 2c 3d 4s 5h")
        six_high = evaluate("2h 3c 4d 5s 6h")
        assert compare_evaluations(six_high, wheel) > 0

    def test_steel_wheel(self):
        ev = evaluate("Ad 2d 3d 4d 5d")
        assert ev.category == HandCategory.STRAIGHT_FLUSH
        assert ev.kickers == (5,)

    def test_no_wraparound_straight(self):
        assert evaluate("Qh Kc Ad 2s 3h").category == HandCategory.HIGH_CARD

    def test_royal_flush_strength(self):
        ev = evaluate("Ah Kh Qh Jh Th")
        assert ev.strength == 1.0
        assert "Royal Flush" in ev.description

    def test_full_house_description(self):
        ev = evaluate("Kh Kd Kc 8h 8s")
        assert ev.category == HandCategory.FULL_HOUSE
        assert ev.description == "Full House, Ks full of 8s"


class TestBestOfSeven:
    def test_best_subset_not_first_five(self):
        # First five cards make only a pair; the flush needs the last two.
        ev = evaluate("Ah Ac 2h 7h 9s Kh 4h")
        assert ev.category == HandCategory.FLUSH
        assert ev.kickers == (14, 13, 7, 4, 2)

    def test_straight_flush_beats_flush_in_seven(self):
        ev = evaluate("9h 8h 7h 6h 5h Ah Kh")
        assert ev.category == HandCategory.STRAIGHT_FLUSH
        assert ev.kickers == (9,)

    def test_two_trips_make_full_house(self):
        ev = evaluate("9h 9c 9d 4s 4h 4c Ks")
        assert ev.category == HandCategory.FULL_HOUSE
        assert ev.kickers == (9, 4)

    def test_three_pairs_use_best_two(self):
        ev = evaluate("Qh Qc 8d 8s 3h 3c As")
        assert ev.category == HandCategory.TWO_PAIR
        assert ev.kickers == (12, 8, 14)

    def test_six_cards(self):
        ev = evaluate("Kh Kd Kc 8h 8s 2d")
        assert ev.category == HandCategory.FULL_HOUSE

    def test_order_independent(self):
        cards = parse_cards("Ah Ac 2h 7h 9s Kh 4h")
        baseline = evaluate_cards(cards)
        rng = random.Random(7)
        for _ in range(10):
            shuffled = cards[:]
            rng.shuffle(shuffled)
            assert evaluate_cards(shuffled) == baseline

    def test_matches_treys_on_random_hands(self):
        treys = Evaluator()
        rng = random.Random(42)
        deck = full_deck()

        for _ in range(300):
            dealt = rng.sample(deck, 7)
            ours = evaluate_cards(dealt)
            rank = treys.evaluate(
                [c.to_treys() for c in dealt[:2]],
                [c.to_treys() for c in dealt[2:]],
            )
            assert ours.category in TREYS_CLASS[treys.get_rank_class(rank)]

    def test_comparison_matches_treys(self):
        treys = Evaluator()
        rng = random.Random(99)
        deck = full_deck()

        for _ in range(200):
            dealt = rng.sample(deck, 9)
            board = dealt[4:]
            a, b = dealt[:2], dealt[2:4]
            ours = compare_evaluations(evaluate_cards(a + board), evaluate_cards(b + board))
            board_t = [c.to_treys() for c in board]
            rank_a = treys.evaluate([c.to_treys() for c in a], board_t)
            rank_b = treys.evaluate([c.to_treys() for c in b], board_t)
            # Lower is better in treys
            expected = (rank_b > rank_a) - (rank_b < rank_a)
            assert ours == expected


class TestShortHands:
    def test_no_cards(self):
        assert evaluate_cards([]) == NO_HAND

    def test_one_card(self):
        ev = evaluate("Ah")
        assert ev.category == HandCategory.HIGH_CARD
        assert ev.strength == 0.0
        assert ev.description == "No hand"
        assert ev.kickers == ()

    def test_preflop_high_card(self):
        ev = evaluate("Ah 9c")
        assert ev.category == HandCategory.HIGH_CARD
        assert ev.kickers == (14, 9)

    def test_preflop_pair(self):
        assert evaluate("Ah Ac").category == HandCategory.PAIR

    def test_four_cards_no_flush(self):
        assert evaluate("Ah Kh Qh Jh").category == HandCategory.HIGH_CARD

    def test_four_cards_two_pair(self):
        assert evaluate("Ah Ac Kh Kc").category == HandCategory.TWO_PAIR


class TestStrength:
    def test_strength_bounds(self):
        for text in ["2c 3d 4h 5s 7c", "Ah Kh Qh Jh 9h", "Kh Kd Kc Ks Ah"]:
            assert 0.0 <= evaluate(text).strength < 1.0

    def test_strength_increases_with_category(self):
        ordered = [
            "Ah 9c 7d 5s 3h",
            "Th Tc Ad 7s 3h",
            "Jh Jc 9d 9s 2h",
            "Qh Qc Qd 8h 3c",
            "8h 7c 6d 5s 4h",
            "Ad 9d 7d 5d 3d",
            "Kh Kc Kd 7h 7c",
            "Ah Ac Ad As Kh",
            "9c 8c 7c 6c 5c",
            "Ah Kh Qh Jh Th",
        ]
        strengths = [evaluate(t).strength for t in ordered]
        assert strengths == sorted(strengths)
        assert len(set(strengths)) == len(strengths)

    def test_strength_increases_within_category(self):
        low = evaluate("2h 2c 9d 7s 4h")
        high = evaluate("Ah Ac 9d 7s 4h")
        assert high.strength > low.strength

    def test_best_straight_flush_below_royal(self):
        assert evaluate("Kh Qh Jh Th 9h").strength < 1.0


class TestCompare:
    def test_antisymmetric(self):
        a = evaluate("Ah Ac 9d 7s 4h")
        b = evaluate("Kh Kc 9d 7s 4h")
        assert compare_evaluations(a, b) == -compare_evaluations(b, a)
        assert compare_evaluations(a, b) > 0

    def test_equal(self):
        a = evaluate("Ah Ac 9d 7s 4h")
        assert compare_evaluations(a, a) == 0

    def test_kicker_decides(self):
        a = evaluate("Ah Ac Kd 7s 4h")
        b = evaluate("Ad As Qd 7c 4d")
        assert compare_evaluations(a, b) > 0

    def test_split_pot(self):
        a = evaluate("Ah Kc 9d 9s 9h 2c 3c")
        b = evaluate("Ad Kd 9d 9s 9h 2c 3c")
        assert compare_evaluations(a, b) == 0


class TestPreflopStrength:
    def test_aces_strongest(self):
        scores = {h: preflop_strength(Hand.from_string(h)) for h in ["AA", "KK", "AKs", "72o"]}
        assert scores["AA"] == max(scores.values())
        assert scores["72o"] == min(scores.values())

    def test_suited_beats_offsuit(self):
        assert preflop_strength(Hand.from_string("AKs")) > preflop_strength(Hand.from_string("AKo"))

    def test_bounded(self):
        ranks = "AKQJT98765432"
        for r1, r2 in itertools.combinations_with_replacement(ranks, 2):
            score = preflop_strength(Hand.from_string(f"{r1}{r2}" if r1 == r2 else f"{r1}{r2}o"))
            assert 0.0 <= score <= 1.0
