"""
Tests for entities, factories and uid allocation.
"""

import pytest

from ..engine_core.entity import EntityFactory, UidAllocator
from ..errors import RuleConfigError
from .conftest import Kind


class TestUidAllocator:
    """Tests for the per-session uid counter."""

    def test_monotonic_from_zero(self, allocator):
        assert [allocator.allocate() for _ in range(3)] == [0, 1, 2]

    def test_sessions_are_independent(self):
        """Two allocators never share state."""
        first, second = UidAllocator(), UidAllocator()
        first.allocate()
        first.allocate()
        assert second.allocate() == 0

    def test_restore_never_below_issued(self):
        allocator = UidAllocator()
        allocator.restore(2, issued=[0, 5, 3])
        assert allocator.allocate() == 6

    def test_restore_uses_saved_counter(self):
        allocator = UidAllocator()
        allocator.restore(10, issued=[0, 1])
        assert allocator.allocate() == 10


class TestEntityFactory:
    """Tests for typed entity construction."""

    def test_create_assigns_uid_and_type(self, allocator, player_factory):
        hero = player_factory.create(allocator, "Hero", {"hp": 100})
        goblin = player_factory.create(allocator, "Other")
        assert hero.uid == 0
        assert goblin.uid == 1
        assert hero.type == "Player"
        assert hero.num("hp") == 100
        assert hero.txt_attrs.get("poisoned") is False

    def test_enum_type_normalized(self, player_factory):
        assert player_factory.entity_type == Kind.PLAYER.value

    def test_missing_schema_rejected(self, stats_schema):
        with pytest.raises(RuleConfigError):
            EntityFactory(Kind.PLAYER, stats_schema, None)

    def test_missing_type_rejected(self, stats_schema, flags_schema):
        with pytest.raises(RuleConfigError):
            EntityFactory("", stats_schema, flags_schema)

    def test_data_round_trip_keeps_uid(self, allocator, goblin_factory):
        """from_data keeps the stored uid and does not touch the allocator."""
        allocator.restore(41)
        goblin = goblin_factory.create(allocator, "Snag", {"hp": 30}, {"stunned": True}, "green")
        restored = goblin_factory.from_data(goblin.to_data())
        assert restored.uid == 41
        assert restored.name == "Snag"
        assert restored.description == "green"
        assert restored.num_attrs == goblin.num_attrs
        assert restored.txt_attrs.get("stunned") is True
        assert allocator.next_uid == 42

    def test_description_argument_wins_over_factory_default(self, allocator, stats_schema, flags_schema):
        factory = EntityFactory(Kind.GOBLIN, stats_schema, flags_schema, description="A goblin")
        chief = factory.create(allocator, "Snag", description="Chief of the warband")
        grunt = factory.create(allocator, "Grub")
        assert chief.description == "Chief of the warband"
        assert grunt.description == "A goblin"

    def test_identity_equality(self, allocator, goblin_factory):
        """Entities compare by identity."""
        a = goblin_factory.create(allocator, "Twin")
        b = goblin_factory.from_data(a.to_data())
        assert a is not b
        assert a != b
        assert a == a
