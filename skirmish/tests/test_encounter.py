"""
Tests for encounter scheduling and persistence.
"""

import pytest

from ..engine_core.encounter import Encounter
from .conftest import COMBAT


@pytest.fixture
def trio(allocator, player_factory, goblin_factory):
    return (
        player_factory.create(allocator, "Hero"),
        goblin_factory.create(allocator, "Snag"),
        goblin_factory.create(allocator, "Grub"),
    )


@pytest.fixture
def encounter(trio):
    hero, snag, grub = trio
    return Encounter(enemies=[snag, grub], turn_order=[hero, snag, grub], phase=COMBAT)


class TestTurnOrder:
    """Tests for the circular turn pointer."""

    def test_current_entity(self, encounter, trio):
        assert encounter.current_entity() is trio[0]

    def test_advance_wraps_and_counts_rounds(self, encounter, trio):
        hero, snag, grub = trio
        assert encounter.advance_turn() is snag
        assert encounter.advance_turn() is grub
        assert encounter.round == 1
        assert encounter.advance_turn() is hero
        assert encounter.round == 2
        assert encounter.current_turn_index == 0

    def test_empty_order(self):
        encounter = Encounter(enemies=[])
        assert encounter.current_entity() is None
        assert encounter.advance_turn() is None

    def test_remove_before_pointer_keeps_current(self, encounter, trio):
        hero, snag, grub = trio
        encounter.advance_turn()
        encounter.advance_turn()
        encounter.remove(snag)
        assert encounter.current_entity() is grub
        assert encounter.enemies == [grub]

    def test_remove_current_moves_to_next(self, encounter, trio):
        hero, snag, grub = trio
        encounter.advance_turn()
        encounter.remove(snag)
        assert encounter.current_entity() is grub


class TestEncounterData:
    """Tests for the uid-only persisted form."""

    def test_to_data(self, encounter):
        encounter.advance_turn()
        assert encounter.to_data() == {
            "phase": COMBAT,
            "currentTurnIndex": 1,
            "enemies": [1, 2],
            "turnOrder": [0, 1, 2],
            "round": 1,
        }

    def test_from_data_relinks_shared_instances(self, encounter, trio):
        table = {entity.uid: entity for entity in trio}
        restored = Encounter.from_data(encounter.to_data(), table)
        assert restored.turn_order[0] is trio[0]
        assert restored.enemies[1] is trio[2]
        assert restored.phase == COMBAT

    def test_dangling_uids_dropped_with_warning(self, trio):
        hero, snag, _ = trio
        table = {hero.uid: hero, snag.uid: snag}
        warnings = []
        restored = Encounter.from_data(
            {"phase": COMBAT, "currentTurnIndex": 2, "enemies": [1, 99], "turnOrder": [0, 99, 1]},
            table,
            warnings,
        )
        assert restored.enemies == [snag]
        assert restored.turn_order == [hero, snag]
        assert restored.current_turn_index == 1
        assert restored.current_entity() is snag
        assert len(warnings) == 2

    def test_dangling_uid_before_pointer_keeps_current(self, trio):
        """Dropping a uid ahead of the pointer does not shift the turn."""
        hero, snag, _ = trio
        table = {hero.uid: hero, snag.uid: snag}
        restored = Encounter.from_data(
            {"phase": COMBAT, "currentTurnIndex": 1, "enemies": [1], "turnOrder": [99, 0, 1]},
            table,
        )
        assert restored.current_entity() is hero

    def test_dangling_current_uid_moves_to_next(self, trio):
        hero, snag, _ = trio
        table = {hero.uid: hero, snag.uid: snag}
        restored = Encounter.from_data(
            {"phase": COMBAT, "currentTurnIndex": 1, "enemies": [1], "turnOrder": [0, 99, 1]},
            table,
        )
        assert restored.current_entity() is snag

    def test_round_defaults_to_one(self, trio):
        table = {entity.uid: entity for entity in trio}
        restored = Encounter.from_data({"enemies": [1], "turnOrder": [0, 1]}, table)
        assert restored.round == 1
        assert restored.current_turn_index == 0
