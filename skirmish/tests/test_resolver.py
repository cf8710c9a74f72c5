"""
Tests for contested-roll action resolution.

Tests:
- Outcome banding at every boundary
- End-to-end success / critical success / cannot afford
- Critical failure penalty
- Halts never mutate state
- Emitted events
"""

import pytest

from ..engine_core.action import ActionDefinition, ActionOutcome, EffectType
from ..engine_core.dice import ScriptedDice
from ..engine_core.encounter import Encounter
from ..engine_core.events import EventName
from ..engine_core.resolver import ActionResolver, band_outcome, weighted_modifier
from .conftest import COMBAT, Kind


@pytest.fixture
def hero(allocator, player_factory):
    return player_factory.create(allocator, "Hero", {"hp": 100, "mp": 50})


@pytest.fixture
def goblin(allocator, goblin_factory):
    return goblin_factory.create(allocator, "Goblin", {"hp": 30})


@pytest.fixture
def encounter(hero, goblin):
    return Encounter(enemies=[goblin], turn_order=[hero, goblin], phase=COMBAT)


@pytest.fixture
def resolve(ruleset, sink):
    """resolve(action, actioner, actionee, rolls, encounter, phase)"""
    def _resolve(action, actioner, actionee, rolls=(), encounter=None, phase=COMBAT):
        dice = ScriptedDice(rolls)
        resolver = ActionResolver(ruleset.permission_graph, dice, sink)
        return resolver.resolve(action, actioner, actionee, phase, encounter), dice
    return _resolve


class TestBanding:
    """Outcome band boundaries."""

    @pytest.mark.parametrize("value, outcome", [
        (-13, ActionOutcome.CRITICAL_FAILURE),
        (-12, ActionOutcome.FAILURE),
        (-1, ActionOutcome.FAILURE),
        (0, ActionOutcome.SUCCESS),
        (10, ActionOutcome.SUCCESS),
        (10.5, ActionOutcome.SUCCESS),
        (11, ActionOutcome.CRITICAL_SUCCESS),
    ])
    def test_boundaries(self, value, outcome):
        assert band_outcome(value) == outcome

    def test_weighted_modifier(self, stats_schema, hero):
        hero.num_attrs.set("strength", 20)
        weights = stats_schema.create({"strength": 0.5, "mp": 0.1})
        assert weighted_modifier(weights, hero) == pytest.approx(15.0)


class TestScenarios:
    """End-to-end resolution with forced rolls."""

    def test_success(self, resolve, fireball, hero, goblin, encounter):
        """Rolls 15 vs 5 -> 10 -> success; mp 50->40, hp 30->10."""
        result, _ = resolve(fireball, hero, goblin, [15, 5], encounter)
        assert result.outcome == ActionOutcome.SUCCESS
        assert result.result_value == 10
        assert hero.num("mp") == 40
        assert goblin.num("hp") == 10

    def test_critical_success_doubles_add(self, resolve, fireball, hero, goblin, encounter):
        """Rolls 20 vs 1 -> 19 -> critical; hp 30 - 40 = -10, unclamped."""
        result, _ = resolve(fireball, hero, goblin, [20, 1], encounter)
        assert result.outcome == ActionOutcome.CRITICAL_SUCCESS
        assert goblin.num("hp") == -10
        assert hero.num("mp") == 40

    def test_cannot_afford(self, resolve, fireball, hero, goblin, encounter):
        """mp 5 < cost 10 -> halt, no rolls drawn, nothing changes."""
        hero.num_attrs.set("mp", 5)
        result, dice = resolve(fireball, hero, goblin, [15, 5], encounter)
        assert result.outcome == ActionOutcome.CANNOT_AFFORD
        assert result.halted
        assert result.result_value is None
        assert dice.calls == 0
        assert hero.num("mp") == 5
        assert goblin.num("hp") == 30

    def test_critical_set_is_not_doubled(self, resolve, stats_schema, hero, goblin, encounter):
        """Set effects land the same value on success and critical success."""
        petrify = ActionDefinition.define(
            stats_schema, "Petrify", Kind.FIREBALL, effect={"hp": 1}, effect_type=EffectType.SET,
        )
        result, _ = resolve(petrify, hero, goblin, [20, 1], encounter)
        assert result.outcome == ActionOutcome.CRITICAL_SUCCESS
        assert goblin.num("hp") == 1

    def test_failure_spends_cost_only(self, resolve, fireball, hero, goblin, encounter):
        result, _ = resolve(fireball, hero, goblin, [5, 10], encounter)
        assert result.outcome == ActionOutcome.FAILURE
        assert hero.num("mp") == 40
        assert goblin.num("hp") == 30

    def test_modifiers_enter_result(self, resolve, stats_schema, hero, goblin, encounter):
        hero.num_attrs.set("strength", 20)
        goblin.num_attrs.set("defense", 10)
        strike = ActionDefinition.define(
            stats_schema, "Strike", Kind.FIREBALL,
            actioner_mod={"strength": 0.5}, actionee_mod={"defense": 0.2}, effect={"hp": -2},
        )
        result, _ = resolve(strike, hero, goblin, [10, 10], encounter)
        assert result.actioner_mod == pytest.approx(10.0)
        assert result.actionee_mod == pytest.approx(2.0)
        assert result.result_value == pytest.approx(8.0)
        assert goblin.num("hp") == 28


class TestCriticalFailure:
    """Critical failure charges the cost a second time."""

    def test_pays_twice(self, resolve, fireball, hero, goblin, encounter):
        """Rolls 1 vs 20 -> -19; mp 50 -> 40 -> 30, goblin untouched."""
        result, _ = resolve(fireball, hero, goblin, [1, 20], encounter)
        assert result.outcome == ActionOutcome.CRITICAL_FAILURE
        assert hero.num("mp") == 30
        assert goblin.num("hp") == 30

    def test_second_payment_floored_at_zero(self, resolve, fireball, hero, goblin, encounter):
        hero.num_attrs.set("mp", 15)
        resolve(fireball, hero, goblin, [1, 20], encounter)
        assert hero.num("mp") == 0


class TestHalts:
    """Precondition halts."""

    def test_no_encounter_not_allowed(self, resolve, fireball, hero, goblin):
        result, dice = resolve(fireball, hero, goblin, [15, 5], encounter=None)
        assert result.outcome == ActionOutcome.NOT_ALLOWED
        assert dice.calls == 0
        assert hero.num("mp") == 50

    def test_wrong_direction_not_allowed(self, resolve, claw, hero, goblin, encounter):
        """Claw is granted goblin -> player only."""
        result, _ = resolve(claw, hero, goblin, [15, 5], encounter)
        assert result.outcome == ActionOutcome.NOT_ALLOWED
        assert goblin.num("hp") == 30

    def test_wrong_phase_not_allowed(self, resolve, fireball, hero, goblin, encounter):
        result, _ = resolve(fireball, hero, goblin, [15, 5], encounter, phase="parley")
        assert result.outcome == ActionOutcome.NOT_ALLOWED


class TestEvents:
    """Events emitted during resolution."""

    def test_success_sequence(self, resolve, sink, fireball, hero, goblin, encounter):
        resolve(fireball, hero, goblin, [15, 5], encounter)
        assert sink.names() == [
            EventName.ACTION_ATTEMPT.value,
            EventName.COST_PAID.value,
            EventName.ROLL_RESULT.value,
            EventName.EFFECT_APPLIED.value,
        ]
        effect = sink.of(EventName.EFFECT_APPLIED)[0]
        assert effect["original_value"] == 30
        assert effect["new_value"] == 10
        assert effect["critical"] is False

    def test_halt_event(self, resolve, sink, fireball, hero, goblin, encounter):
        hero.num_attrs.set("mp", 0)
        resolve(fireball, hero, goblin, [], encounter)
        assert sink.names() == [EventName.ACTION_ATTEMPT.value, EventName.HALT.value]
        assert sink.of(EventName.HALT)[0]["outcome"] == "cannot_afford"

    def test_failure_emits_no_effect(self, resolve, sink, fireball, hero, goblin, encounter):
        resolve(fireball, hero, goblin, [5, 10], encounter)
        assert sink.names()[-1] == EventName.NO_EFFECT.value

    def test_penalty_event(self, resolve, sink, fireball, hero, goblin, encounter):
        resolve(fireball, hero, goblin, [1, 20], encounter)
        names = sink.names()
        assert EventName.PENALTY.value in names
        assert names.count(EventName.COST_PAID.value) == 2

    def test_failing_sink_does_not_break_resolution(self, ruleset, fireball, hero, goblin, encounter):
        def broken(name, payload):
            raise RuntimeError("listener bug")

        resolver = ActionResolver(ruleset.permission_graph, ScriptedDice([15, 5]), broken)
        result = resolver.resolve(fireball, hero, goblin, COMBAT, encounter)
        assert result.outcome == ActionOutcome.SUCCESS
        assert goblin.num("hp") == 10
