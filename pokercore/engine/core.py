"""
Poker decision-support engine.

Ties the evaluator, equity simulator and strategy synthesizer together
behind result caches and a background dispatcher. Construct one engine per
caller (or share one explicitly); there is no module-level instance.
"""

from concurrent.futures import Future
from dataclasses import dataclass
from typing import Optional, Sequence, Union
import logging
import threading

import numpy as np

from pokercore.game.cards import Card, Hand, canonical_key, ensure_distinct
from pokercore.game.equity import EquityCalculator, EquityResult
from pokercore.game.evaluator import (
    HandEvaluation,
    compare_evaluations,
    evaluate_cards,
    preflop_strength,
)
from pokercore.solver.ranges import Position, in_opening_range, optimal_range, top_hands
from pokercore.solver.strategy import GameContext, GtoStrategy, StrategySynthesizer
from .cache import CacheStats, LRUCache
from .dispatcher import CancelToken, Dispatcher

logger = logging.getLogger(__name__)


@dataclass
class EngineConfig:
    """Configuration for the poker engine."""
    equity_iterations: int = 2000          # Interactive equity runs
    full_analysis_iterations: int = 20000  # "Full analysis" equity runs
    strategy_iterations: int = 600         # Equity trials behind a strategy
    timeout: Optional[float] = 5.0         # Seconds before falling back (None = wait)
    fallback_fraction: float = 0.1         # Share of iterations used by the fallback
    min_fallback_iterations: int = 100
    evaluation_cache_size: int = 4096
    result_cache_size: int = 512
    cache_ttl: Optional[float] = None      # Seconds; None keeps entries until evicted
    use_worker: bool = True
    seed: Optional[int] = None


def _resolved(value) -> Future:
    future: Future = Future()
    future.set_result(value)
    return future


def _check_cards(hole: Sequence[Card], board: Sequence[Card]) -> None:
    if len(hole) > 2:
        raise ValueError(f"Hole has {len(hole)} cards, at most 2 allowed")
    if len(board) > 5:
        raise ValueError(f"Board has {len(board)} cards, at most 5 allowed")
    ensure_distinct(hole, board)


def spot_key(hole: Sequence[Card], board: Sequence[Card]) -> str:
    """Cache key that keeps hole and board cards apart, e.g. 'AhKh|QhJhTh'."""
    return f"{canonical_key(hole)}|{canonical_key(board)}"


class PokerEngine:
    """
    Hand evaluation, equity and strategy behind caches and a worker.

    Evaluation and comparison run synchronously. Equity and strategy
    return Futures that resolve on the background worker, or immediately
    when the worker is unavailable or the result is cached.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()
        cfg = self.config

        self._seeds = np.random.SeedSequence(cfg.seed)
        self._seed_lock = threading.Lock()
        self.synthesizer = StrategySynthesizer()

        self._evaluations = LRUCache(cfg.evaluation_cache_size, cfg.cache_ttl, name="evaluations")
        self._equities = LRUCache(cfg.result_cache_size, cfg.cache_ttl, name="equity")
        self._strategies = LRUCache(cfg.result_cache_size, cfg.cache_ttl, name="strategies")

        self._dispatcher = Dispatcher(timeout=cfg.timeout, use_worker=cfg.use_worker)

    def __enter__(self) -> "PokerEngine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    def _rng(self) -> np.random.Generator:
        # One generator per calculation; Generators are not thread-safe.
        with self._seed_lock:
            child = self._seeds.spawn(1)[0]
        return np.random.default_rng(child)

    def _fallback_iterations(self, iterations: int) -> int:
        reduced = int(iterations * self.config.fallback_fraction)
        return min(iterations, max(self.config.min_fallback_iterations, reduced))

    def evaluate_hand(
        self,
        hole: Sequence[Card],
        board: Sequence[Card] = (),
    ) -> HandEvaluation:
        """
        Evaluate the best hand from hole and board cards.

        Raises:
            DuplicateCardError: if a card appears twice
        """
        hole, board = list(hole), list(board)
        _check_cards(hole, board)

        key = canonical_key(hole + board)
        cached = self._evaluations.get(key)
        if cached is not None:
            logger.debug("Evaluation cache hit for %s", key)
            return cached

        evaluation = evaluate_cards(hole + board)
        self._evaluations.put(key, evaluation)
        return evaluation

    def compare_hands(
        self,
        hand_a: Sequence[Card],
        hand_b: Sequence[Card],
        board: Sequence[Card] = (),
    ) -> int:
        """Positive if hand_a wins on the board, negative if hand_b wins, zero on a tie."""
        return compare_evaluations(
            self.evaluate_hand(hand_a, board),
            self.evaluate_hand(hand_b, board),
        )

    def calculate_equity(
        self,
        hole: Sequence[Card],
        board: Sequence[Card] = (),
        iterations: Optional[int] = None,
    ) -> "Future[EquityResult]":
        """
        Estimate win/tie/loss rates against a random opponent.

        Args:
            hole: Hero's hole cards
            board: Known board cards (0-5)
            iterations: Monte Carlo trials (default: config.equity_iterations)

        Returns:
            Future resolving to an EquityResult
        """
        hole, board = list(hole), list(board)
        _check_cards(hole, board)
        if iterations is None:
            iterations = self.config.equity_iterations
        if iterations < 1:
            raise ValueError(f"iterations must be positive, got {iterations}")

        key = (spot_key(hole, board), iterations)
        cached = self._equities.get(key)
        if cached is not None:
            logger.debug("Equity cache hit for %s", key)
            return _resolved(cached)

        rng, fallback_rng = self._rng(), self._rng()

        def compute(token: CancelToken) -> EquityResult:
            result = EquityCalculator(rng).simulate(hole, board, iterations, token)
            self._equities.put(key, result)
            return result

        def fallback() -> EquityResult:
            reduced = self._fallback_iterations(iterations)
            return EquityCalculator(fallback_rng).simulate(hole, board, reduced)

        return self._dispatcher.submit(("equity",) + key, compute, fallback)

    def calculate_full_equity(
        self,
        hole: Sequence[Card],
        board: Sequence[Card] = (),
    ) -> "Future[EquityResult]":
        """Equity with the larger full-analysis iteration count."""
        return self.calculate_equity(hole, board, self.config.full_analysis_iterations)

    def calculate_gto_strategy(
        self,
        hole: Sequence[Card],
        board: Sequence[Card],
        pot_size: float,
        stack_size: float,
        position: Union[Position, str] = Position.MIDDLE,
    ) -> "Future[GtoStrategy]":
        """
        Approximate strategy for a spot.

        Heuristic only: see StrategySynthesizer.

        Returns:
            Future resolving to a GtoStrategy
        """
        hole, board = list(hole), list(board)
        _check_cards(hole, board)
        context = GameContext(pot_size, stack_size, Position(position))

        key = (spot_key(hole, board), float(pot_size), float(stack_size), context.position.value)
        cached = self._strategies.get(key)
        if cached is not None:
            logger.debug("Strategy cache hit for %s", key)
            return _resolved(cached)

        iterations = self.config.strategy_iterations
        rng, fallback_rng = self._rng(), self._rng()

        def compute(token: CancelToken) -> GtoStrategy:
            strategy = self._synthesize(hole, board, context, iterations, rng, token)
            self._strategies.put(key, strategy)
            return strategy

        def fallback() -> GtoStrategy:
            reduced = self._fallback_iterations(iterations)
            return self._synthesize(hole, board, context, reduced, fallback_rng)

        return self._dispatcher.submit(("strategy",) + key, compute, fallback)

    def _synthesize(
        self,
        hole: list[Card],
        board: list[Card],
        context: GameContext,
        iterations: int,
        rng: np.random.Generator,
        token: Optional[CancelToken] = None,
    ) -> GtoStrategy:
        equity = EquityCalculator(rng).simulate(hole, board, iterations, token)
        strength = equity.equity
        notes = [f"Equity vs random hand: {equity.equity:.1%}"]

        if not board and len(hole) == 2:
            hand = Hand.from_cards(hole)
            strength = 0.5 * preflop_strength(hand) + 0.5 * equity.equity
            verdict = "in" if in_opening_range(hand, context.position) else "outside"
            notes.append(
                f"{hand.canonical} is {verdict} the {context.position.value} position opening range"
            )
        elif board:
            notes.append(f"Made hand: {evaluate_cards(hole + board).description}")

        return self.synthesizer.synthesize(
            strength, context, postflop=bool(board), notes=notes,
        )

    def generate_optimal_ranges(self, position: Union[Position, str]) -> list[str]:
        """Opening range for a position."""
        return optimal_range(Position(position))

    def range_from_percentage(self, percentage: float) -> list[str]:
        """Top `percentage` percent of starting hands, strongest first."""
        return top_hands(percentage)

    def clear_cache(self) -> None:
        """Drop all cached evaluations, equities and strategies."""
        self._evaluations.clear()
        self._equities.clear()
        self._strategies.clear()
        logger.debug("Cleared engine caches")

    def cache_size(self) -> int:
        return self._evaluations.size() + self._equities.size() + self._strategies.size()

    def cache_stats(self) -> dict[str, CacheStats]:
        return {
            cache.name: cache.stats()
            for cache in (self._evaluations, self._equities, self._strategies)
        }

    def average_confidence(self) -> float:
        """Mean confidence of cached equity results."""
        return self._equities.average_confidence()

    def cleanup(self) -> None:
        """Clear caches and stop the background worker."""
        self.clear_cache()
        self._dispatcher.shutdown()


def calculate_hand_strength(
    engine: PokerEngine,
    hole: Sequence[Card],
    board: Sequence[Card] = (),
) -> float:
    """Strength (0-1) of the best hand."""
    return engine.evaluate_hand(hole, board).strength


def calculate_quick_equity(
    engine: PokerEngine,
    hole: Sequence[Card],
    board: Sequence[Card] = (),
) -> float:
    """Win rate from an interactive-size equity run, waiting for the result."""
    return engine.calculate_equity(hole, board).result().win_rate


def get_hand_description(
    engine: PokerEngine,
    hole: Sequence[Card],
    board: Sequence[Card] = (),
) -> str:
    """Human-readable description of the best hand."""
    return engine.evaluate_hand(hole, board).description
