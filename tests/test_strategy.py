"""Tests for strategy synthesis and opening ranges."""

import dataclasses

import pytest

from pokercore.game.cards import Hand, get_all_hands
from pokercore.solver.ranges import (
    OPENING_RANGES, RANKED_HANDS, Position, in_opening_range, optimal_range, top_hands,
)
from pokercore.solver.strategy import (
    MAX_EXPLOITABILITY, ActionType, GameContext, StrategySynthesizer,
)


@pytest.fixture
def synthesizer():
    return StrategySynthesizer()


@pytest.fixture
def context():
    return GameContext(pot_size=100.0, stack_size=1000.0)


STRENGTHS = [0.0, 0.1, 0.3, 0.45, 0.5, 0.55, 0.7, 0.9, 1.0]


class TestGameContext:
    def test_position_coerced(self):
        ctx = GameContext(10, 100, "late")
        assert ctx.position == Position.LATE

    @pytest.mark.parametrize("pot, stack", [(0, 100), (-5, 100), (10, 0), (10, -1)])
    def test_rejects_non_positive(self, pot, stack):
        with pytest.raises(ValueError):
            GameContext(pot, stack)

    def test_unknown_position(self):
        with pytest.raises(ValueError):
            GameContext(10, 100, "button")


class TestSynthesize:
    @pytest.mark.parametrize("strength", STRENGTHS)
    @pytest.mark.parametrize("postflop", [True, False])
    def test_actions_well_formed(self, synthesizer, context, strength, postflop):
        strategy = synthesizer.synthesize(strength, context, postflop=postflop)

        assert strategy.actions
        assert all(a.frequency > 0 for a in strategy.actions)
        assert sum(a.frequency for a in strategy.actions) == pytest.approx(1.0)

        kinds = [a.action for a in strategy.actions]
        assert len(kinds) == len(set(kinds))

    @pytest.mark.parametrize("strength", STRENGTHS)
    def test_exploitability_bounded(self, synthesizer, context, strength):
        strategy = synthesizer.synthesize(strength, context)
        assert 0.0 <= strategy.exploitability < MAX_EXPLOITABILITY

    @pytest.mark.parametrize("stack", [1.0, 20.0, 1000.0])
    def test_raise_sizing_within_stack(self, synthesizer, stack):
        ctx = GameContext(pot_size=100.0, stack_size=stack)
        strategy = synthesizer.synthesize(0.95, ctx)
        raise_action = strategy.get_action(ActionType.RAISE)

        assert raise_action is not None
        assert 0 < raise_action.sizing <= stack

    def test_weak_hand_mostly_folds(self, synthesizer, context):
        strategy = synthesizer.synthesize(0.1, context)
        assert strategy.primary.action == ActionType.FOLD
        assert strategy.get_action(ActionType.RAISE) is None

    def test_strong_hand_mostly_raises(self, synthesizer, context):
        strategy = synthesizer.synthesize(0.95, context)
        assert strategy.primary.action == ActionType.RAISE
        assert strategy.get_action_probability(ActionType.FOLD) == 0.0

    def test_no_check_preflop(self, synthesizer, context):
        strategy = synthesizer.synthesize(0.45, context, postflop=False)
        assert strategy.get_action(ActionType.CHECK) is None

    def test_check_available_postflop(self, synthesizer, context):
        strategy = synthesizer.synthesize(0.45, context, postflop=True)
        assert strategy.get_action_probability(ActionType.CHECK) > 0

    def test_position_shifts_strength(self, synthesizer):
        early = synthesizer.synthesize(0.6, GameContext(100, 1000, Position.EARLY))
        late = synthesizer.synthesize(0.6, GameContext(100, 1000, Position.LATE))

        assert late.strength > early.strength
        assert (late.get_action_probability(ActionType.RAISE)
                > early.get_action_probability(ActionType.RAISE))

    def test_strength_clamped(self, synthesizer):
        strategy = synthesizer.synthesize(1.0, GameContext(100, 1000, Position.LATE))
        assert strategy.strength == 1.0

    def test_expected_value_is_weighted(self, synthesizer, context):
        strategy = synthesizer.synthesize(0.55, context)
        expected = sum(a.frequency * a.expected_value for a in strategy.actions)
        assert strategy.expected_value == pytest.approx(expected)

    def test_notes_carried(self, synthesizer, context):
        strategy = synthesizer.synthesize(0.5, context, notes=["hello"])
        assert strategy.notes == ("hello",)

    def test_strategy_is_immutable(self, synthesizer, context):
        notes = ["hello"]
        strategy = synthesizer.synthesize(0.5, context, notes=notes)
        notes.append("later")

        assert isinstance(strategy.actions, tuple)
        assert strategy.notes == ("hello",)
        with pytest.raises(dataclasses.FrozenInstanceError):
            strategy.notes = ()
        with pytest.raises(AttributeError):
            strategy.actions.append(strategy.actions[0])

    def test_repr(self, synthesizer, context):
        assert "GtoStrategy" in repr(synthesizer.synthesize(0.5, context))


class TestRanges:
    def test_ranges_are_valid_hands(self):
        all_hands = set(get_all_hands())
        for position, hands in OPENING_RANGES.items():
            assert hands
            assert set(hands) <= all_hands

    def test_ranges_widen_with_position(self):
        early = set(optimal_range(Position.EARLY))
        middle = set(optimal_range(Position.MIDDLE))
        late = set(optimal_range(Position.LATE))

        assert early <= middle <= late
        assert len(early) < len(late)

    def test_premium_hands_everywhere(self):
        for position in Position:
            assert in_opening_range(Hand.from_string("AA"), position)
            assert in_opening_range(Hand.from_string("AKs"), position)

    def test_trash_nowhere(self):
        for position in Position:
            assert not in_opening_range(Hand.from_string("72o"), position)

    def test_ranked_hands_cover_all_classes(self):
        assert len(RANKED_HANDS) == 169
        assert set(RANKED_HANDS) == set(get_all_hands())
        assert RANKED_HANDS[0] == "AA"
        assert RANKED_HANDS.index("72o") > 150

    @pytest.mark.parametrize("percentage, expected", [
        (0, 0), (-10, 0), (10, 16), (50, 84), (100, 169), (150, 169),
    ])
    def test_top_hands_size(self, percentage, expected):
        assert len(top_hands(percentage)) == expected

    def test_top_hands_strongest_first(self):
        hands = top_hands(5)
        assert hands[0] == "AA"
        assert "KK" in hands
        assert "72o" not in top_hands(50)

    def test_top_hands_nested(self):
        small, large = set(top_hands(10)), set(top_hands(30))
        assert small <= large

    def test_top_hands_returns_copy(self):
        hands = top_hands(100)
        hands.clear()
        assert len(top_hands(100)) == 169

    def test_returns_copy(self):
        hands = optimal_range(Position.EARLY)
        hands.append("72o")
        assert "72o" not in optimal_range(Position.EARLY)
