"""
Tests for enemy policies and move evaluation.

Tests:
- Policies only pick allowed moves
- Seeded randomness is reproducible
- Heuristic scoring prefers finishing blows
"""

import pytest

from ..bots import (
    BotPolicy,
    EvaluationWeights,
    FirstAllowedPolicy,
    HeuristicPolicy,
    MoveEvaluator,
    RandomPolicy,
    outcome_probabilities,
)
from ..engine_core.action import ActionOutcome


class TestBaselinePolicies:
    """Tests for first-allowed and random selection."""

    def test_first_allowed(self, combat_world):
        moves = combat_world.allowed_moves(combat_world.player)
        decision = FirstAllowedPolicy().select_move(combat_world, combat_world.player, moves)
        assert decision.move == moves[0]
        assert decision.evaluated_moves == 1

    def test_random_selects_allowed(self, combat_world):
        moves = combat_world.allowed_moves(combat_world.player)
        bot = RandomPolicy(seed=42)
        for _ in range(10):
            assert bot.select_move(combat_world, combat_world.player, moves).move in moves

    def test_random_is_reproducible(self, combat_world):
        moves = combat_world.allowed_moves(combat_world.player)
        picks_a = [m.target.name for m in _picks(RandomPolicy(seed=7), combat_world, moves)]
        picks_b = [m.target.name for m in _picks(RandomPolicy(seed=7), combat_world, moves)]
        assert picks_a == picks_b

    @pytest.mark.parametrize("policy", [FirstAllowedPolicy(), RandomPolicy(seed=1), HeuristicPolicy()])
    def test_empty_moves_rejected(self, policy, combat_world):
        with pytest.raises(ValueError):
            policy.select_move(combat_world, combat_world.player, [])

    def test_policy_name(self):
        assert HeuristicPolicy().get_name() == "HeuristicPolicy"
        assert isinstance(RandomPolicy(), BotPolicy)


def _picks(policy, world, moves, count=8):
    return [policy.select_move(world, world.player, moves).move for _ in range(count)]


class TestOutcomeProbabilities:
    """Tests for the exact contested-roll distribution."""

    def test_sums_to_one(self):
        assert sum(outcome_probabilities(0).values()) == pytest.approx(1.0)

    def test_even_contest(self):
        """With no edge, success (>= 0) covers 210 of 400 roll pairs."""
        probs = outcome_probabilities(0)
        success = probs[ActionOutcome.SUCCESS] + probs[ActionOutcome.CRITICAL_SUCCESS]
        assert success == pytest.approx(210 / 400)

    def test_overwhelming_edge(self):
        assert outcome_probabilities(30)[ActionOutcome.CRITICAL_SUCCESS] == pytest.approx(1.0)


class TestHeuristicPolicy:
    """Tests for expected-value move selection."""

    def test_prefers_finishing_blow(self, combat_world):
        snag, grub = combat_world.encounter.enemies
        grub.num_attrs.set("hp", 15)
        moves = combat_world.allowed_moves(combat_world.player)
        decision = HeuristicPolicy().select_move(combat_world, combat_world.player, moves)
        assert decision.move.target is grub
        assert decision.evaluated_moves == 2
        assert len(decision.evaluation_details) == 2

    def test_evaluation_breakdown(self, combat_world):
        snag = combat_world.encounter.enemies[0]
        move = combat_world.allowed_moves(combat_world.player)[0]
        evaluation = MoveEvaluator().evaluate(combat_world, combat_world.player, move)
        assert move.target is snag
        assert evaluation.edge == 0
        assert evaluation.feature_breakdown["cost"] > 10
        assert evaluation.feature_breakdown["effect_magnitude"] > 0

    def test_cost_weight_lowers_score(self, combat_world):
        move = combat_world.allowed_moves(combat_world.player)[0]
        cheap = MoveEvaluator(EvaluationWeights(cost=0.0)).evaluate(combat_world, combat_world.player, move)
        pricey = MoveEvaluator(EvaluationWeights(cost=5.0)).evaluate(combat_world, combat_world.player, move)
        assert cheap.score > pricey.score

    def test_heuristic_enemy_in_play(self, ruleset, dice, sink):
        from ..engine_core.world import World

        ruleset.enemy_policy = HeuristicPolicy()
        world = World(ruleset, sink=sink, dice=dice)
        world.create_player("Hero", num_attrs={"hp": 100})
        world.start_encounter()
        world.pass_turn()
        dice.push(10, 10)
        report = world.play_turn()
        assert report.move.kind == "Claw"
        assert world.player.num("hp") == 95
