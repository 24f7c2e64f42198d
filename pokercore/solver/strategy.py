"""
Heuristic strategy synthesis.

This is an approximation, not an equilibrium solve: the strength range
[0, 1] is split into overlapping bands, each band proposes an action with
a weight, and the weights are normalised into frequencies. Exact GTO
play would need a counterfactual-regret solver over a full game tree.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from .ranges import Position

# Upper bound on the reported exploitability figure.
MAX_EXPLOITABILITY = 0.05

POSITION_ADJUSTMENT = {
    Position.EARLY: -0.03,
    Position.MIDDLE: 0.0,
    Position.LATE: 0.03,
}


class ActionType(Enum):
    """Actions a strategy can recommend."""
    FOLD = "fold"
    CHECK = "check"
    CALL = "call"
    RAISE = "raise"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class GameContext:
    """Pot, stack and position for a decision."""
    pot_size: float
    stack_size: float
    position: Position = Position.MIDDLE

    def __post_init__(self):
        if self.pot_size <= 0:
            raise ValueError(f"pot_size must be positive, got {self.pot_size}")
        if self.stack_size <= 0:
            raise ValueError(f"stack_size must be positive, got {self.stack_size}")
        if not isinstance(self.position, Position):
            object.__setattr__(self, "position", Position(self.position))


@dataclass(frozen=True)
class GtoAction:
    """One action in a strategy with its frequency and value."""
    action: ActionType
    frequency: float
    expected_value: float
    reasoning: str
    sizing: Optional[float] = None

    def __str__(self) -> str:
        if self.sizing is not None:
            return f"{self.action}_{self.sizing:.1f}"
        return str(self.action)


@dataclass(frozen=True)
class GtoStrategy:
    """
    Action distribution for a spot.

    `expected_value` is the frequency-weighted EV of the actions;
    `exploitability` is a heuristic figure in [0, MAX_EXPLOITABILITY).
    Immutable, since cached strategies are shared between callers.
    """
    actions: tuple[GtoAction, ...]
    expected_value: float
    exploitability: float
    strength: float = 0.0
    notes: tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "actions", tuple(self.actions))
        object.__setattr__(self, "notes", tuple(self.notes))

    def get_action(self, action: ActionType) -> Optional[GtoAction]:
        """Get the entry for an action, or None if it is not played."""
        for entry in self.actions:
            if entry.action == action:
                return entry
        return None

    def get_action_probability(self, action: ActionType) -> float:
        """Get probability of taking an action."""
        entry = self.get_action(action)
        return entry.frequency if entry else 0.0

    @property
    def primary(self) -> GtoAction:
        """Most frequent action."""
        return max(self.actions, key=lambda a: a.frequency)

    def __repr__(self) -> str:
        action_strs = [f"{a}: {a.frequency:.2f}" for a in self.actions]
        return f"GtoStrategy({{{', '.join(action_strs)}}}, ev={self.expected_value:.2f})"


def _band_weights(strength: float, postflop: bool) -> dict[ActionType, float]:
    """Raw weight per action; fold and raise bands overlap so one is always live."""
    s = strength
    weights = {
        ActionType.FOLD: max(0.0, 0.5 - s),
        ActionType.CHECK: max(0.0, 0.2 - abs(s - 0.45)) if postflop else 0.0,
        ActionType.CALL: max(0.0, 0.3 - abs(s - 0.55)),
        ActionType.RAISE: max(0.0, s - 0.45),
    }
    return weights


class StrategySynthesizer:
    """
    Maps a hand strength and game context to an action distribution.

    Strength is expected on [0, 1]; the engine feeds it an equity estimate
    against a random hand, blended with a chart score preflop.
    """

    def __init__(self, max_exploitability: float = MAX_EXPLOITABILITY):
        self.max_exploitability = max_exploitability

    def effective_strength(self, strength: float, context: GameContext) -> float:
        """Apply the position adjustment and clamp to [0, 1]."""
        adjusted = strength + POSITION_ADJUSTMENT[context.position]
        return float(min(1.0, max(0.0, adjusted)))

    def raise_sizing(self, strength: float, context: GameContext) -> float:
        """Pot fraction growing with strength, never more than the stack."""
        return min(context.stack_size, context.pot_size * (0.5 + strength))

    def synthesize(
        self,
        strength: float,
        context: GameContext,
        postflop: bool = True,
        notes: Optional[list[str]] = None,
    ) -> GtoStrategy:
        """
        Build a strategy from strength and context.

        Args:
            strength: Hand strength or equity (0-1)
            context: Pot, stack and position
            postflop: Whether checking is a pot-control option
            notes: Extra context lines to carry on the strategy

        Returns:
            GtoStrategy with at least one action
        """
        s = self.effective_strength(strength, context)
        weights = _band_weights(s, postflop)

        live = [(action, w) for action, w in weights.items() if w > 0]
        probs = np.array([w for _, w in live])
        probs = probs / probs.sum()

        pot = context.pot_size
        stack = context.stack_size

        actions = []
        for (action, _), freq in zip(live, probs):
            if freq <= 0:
                continue
            actions.append(self._build_action(action, float(freq), s, pot, stack, context))

        expected_value = float(sum(a.frequency * a.expected_value for a in actions))
        top = max(a.frequency for a in actions)
        exploitability = self.max_exploitability * (1.0 - top)

        return GtoStrategy(
            actions=actions,
            expected_value=expected_value,
            exploitability=exploitability,
            strength=s,
            notes=tuple(notes or ()),
        )

    def _build_action(
        self,
        action: ActionType,
        frequency: float,
        s: float,
        pot: float,
        stack: float,
        context: GameContext,
    ) -> GtoAction:
        if action == ActionType.FOLD:
            return GtoAction(
                action=action,
                frequency=frequency,
                expected_value=-pot * 0.1,
                reasoning="Weak hand strength suggests folding",
            )
        if action == ActionType.CHECK:
            return GtoAction(
                action=action,
                frequency=frequency,
                expected_value=s * pot * 0.5,
                reasoning="Marginal strength; check to control the pot",
            )
        if action == ActionType.CALL:
            return GtoAction(
                action=action,
                frequency=frequency,
                expected_value=s * pot - (1 - s) * stack * 0.1,
                reasoning="Moderate hand strength suggests calling",
            )
        if action == ActionType.RAISE:
            sizing = self.raise_sizing(s, context)
            return GtoAction(
                action=action,
                frequency=frequency,
                expected_value=s * pot * 1.5 - (1 - s) * sizing,
                reasoning="Strong hand strength suggests raising",
                sizing=sizing,
            )
        raise ValueError(f"Unknown action: {action}")
