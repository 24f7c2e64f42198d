"""Equity calculation utilities."""

from dataclasses import dataclass
from typing import Optional, Sequence
import logging
import math

import numpy as np

from .cards import Card, Hand, ensure_distinct, remaining_deck
from .evaluator import compare_evaluations, evaluate_cards

logger = logging.getLogger(__name__)

# How often (in trials) a running simulation looks at its cancel token.
CANCEL_CHECK_INTERVAL = 256


class CalculationCancelled(Exception):
    """Raised inside a simulation whose cancel token has been set."""


def confidence_for(iterations: int) -> float:
    """
    Confidence in an estimate built from `iterations` trials.

    Strictly increasing in the trial count, 0 for no trials and always
    below 1.
    """
    if iterations <= 0:
        return 0.0
    return 1.0 - 1.0 / math.sqrt(iterations + 1)


@dataclass(frozen=True)
class EquityResult:
    """Win/tie/loss rates against a random opponent hand."""
    win_rate: float
    tie_rate: float
    lose_rate: float
    confidence: float
    iterations: int = 0

    @property
    def equity(self) -> float:
        """Share of the pot won on average (ties split)."""
        return self.win_rate + self.tie_rate / 2

    @classmethod
    def from_counts(cls, wins: int, ties: int, losses: int) -> "EquityResult":
        total = wins + ties + losses
        if total == 0:
            return cls(0.0, 0.0, 0.0, 0.0, 0)
        return cls(
            win_rate=wins / total,
            tie_rate=ties / total,
            lose_rate=losses / total,
            confidence=confidence_for(total),
            iterations=total,
        )


class EquityCalculator:
    """
    Monte Carlo equity against a uniformly random opponent.

    Each trial deals the opponent's two cards and the rest of the board
    from the cards not already known, then evaluates both seven-card hands.
    """

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()

    def simulate(
        self,
        hole: Sequence[Card],
        board: Sequence[Card],
        iterations: int,
        token=None,
    ) -> EquityResult:
        """
        Estimate win/tie/loss rates for `hole` on `board`.

        Args:
            hole: Hero's hole cards (0-2)
            board: Known board cards (0-5)
            iterations: Number of trials
            token: Optional object with a `cancelled` attribute, checked
                periodically

        Returns:
            EquityResult with rates summing to 1
        """
        if iterations < 1:
            raise ValueError(f"iterations must be positive, got {iterations}")
        ensure_distinct(hole, board)
        if len(hole) > 2:
            raise ValueError(f"Hole has {len(hole)} cards, at most 2 allowed")
        if len(board) > 5:
            raise ValueError(f"Board has {len(board)} cards, at most 5 allowed")

        hole = list(hole)
        board = list(board)
        available = remaining_deck(hole + board)
        runout = 5 - len(board)
        needed = 2 + runout
        hole_needed = 2 - len(hole)

        wins = ties = losses = 0

        for i in range(iterations):
            if token is not None and i % CANCEL_CHECK_INTERVAL == 0 and token.cancelled:
                raise CalculationCancelled(f"cancelled after {i} of {iterations} trials")

            picks = self.rng.choice(len(available), size=needed + hole_needed, replace=False)
            dealt = [available[j] for j in picks]

            opponent = dealt[:2]
            full_board = board + dealt[2:needed]
            hero = hole + dealt[needed:]

            result = compare_evaluations(
                evaluate_cards(hero + full_board),
                evaluate_cards(opponent + full_board),
            )
            if result > 0:
                wins += 1
            elif result < 0:
                losses += 1
            else:
                ties += 1

        logger.debug(
            "Simulated %d trials for %s | %s: %d/%d/%d",
            iterations, hole, board, wins, ties, losses,
        )
        return EquityResult.from_counts(wins, ties, losses)

    def hand_vs_hand(
        self,
        hand1: Hand,
        hand2: Hand,
        board: list[Card],
        num_simulations: int = 10000,
    ) -> tuple[float, float, float]:
        """
        Calculate equity of hand1 vs hand2 on a board.

        Args:
            hand1: First hand
            hand2: Second hand
            board: Board cards (0-5)
            num_simulations: Number of Monte Carlo simulations

        Returns:
            Tuple of (hand1_win_rate, hand2_win_rate, tie_rate)
        """
        ensure_distinct(hand1.cards, hand2.cards, board)

        remaining = 5 - len(board)

        if remaining == 0:
            # Exact evaluation
            result = compare_evaluations(
                evaluate_cards(hand1.cards + board),
                evaluate_cards(hand2.cards + board),
            )
            if result > 0:
                return (1.0, 0.0, 0.0)
            elif result < 0:
                return (0.0, 1.0, 0.0)
            else:
                return (0.0, 0.0, 1.0)

        # Monte Carlo simulation
        available = remaining_deck(hand1.cards + hand2.cards + list(board))

        wins1 = wins2 = ties = 0

        for _ in range(num_simulations):
            picks = self.rng.choice(len(available), size=remaining, replace=False)
            full_board = list(board) + [available[i] for i in picks]

            result = compare_evaluations(
                evaluate_cards(hand1.cards + full_board),
                evaluate_cards(hand2.cards + full_board),
            )

            if result > 0:
                wins1 += 1
            elif result < 0:
                wins2 += 1
            else:
                ties += 1

        total = num_simulations
        return (wins1 / total, wins2 / total, ties / total)


def calculate_equity(
    hole: Sequence[Card],
    board: Sequence[Card] = (),
    iterations: int = 2000,
    seed: Optional[int] = None,
) -> EquityResult:
    """
    One-off equity estimate against a random opponent.

    Args:
        hole: Hero's hole cards
        board: Board cards
        iterations: Number of simulations
        seed: Optional RNG seed for reproducible runs

    Returns:
        EquityResult
    """
    calculator = EquityCalculator(np.random.default_rng(seed))
    return calculator.simulate(hole, board, iterations)
