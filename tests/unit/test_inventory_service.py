"""Unit tests for the Inventory & Slot Manager."""

import pytest

from marcoland.errors import (
    EquipmentNotFound,
    InvalidRequest,
    ItemNotFound,
    SlotMismatch,
    StrengthRequirement,
)
from marcoland.services.catalog_service import EquipmentCatalog
from marcoland.services.inventory_service import InventoryManager


@pytest.fixture
def uow(database):
    """Run a callable against a fresh InventoryManager in its own transaction."""

    def _run(fn):
        with database.unit_of_work() as session:
            return fn(InventoryManager(session, EquipmentCatalog(session)))

    return _run


@pytest.fixture
def player_id(make_player):
    return make_player(gold=0, strength=10, speed=10)


class TestAddRemove:
    def test_add_item_is_unequipped(self, uow, player_id, equipment_ids):
        item_id = uow(lambda inv: inv.add_item(player_id, equipment_ids["Rusty Dagger"]))

        bag = uow(lambda inv: [item.id for item in inv.unequipped(player_id)])
        assert bag == [item_id]
        assert uow(lambda inv: inv.equipped(player_id)) == {}

    def test_add_unknown_equipment(self, uow, player_id):
        with pytest.raises(EquipmentNotFound):
            uow(lambda inv: inv.add_item(player_id, 424242))

    def test_remove_equipped_item(self, uow, player_id, equipment_ids):
        item_id = uow(lambda inv: inv.add_item(player_id, equipment_ids["Rusty Dagger"]))
        uow(lambda inv: inv.equip(player_id, item_id, "weapon"))

        removed = uow(lambda inv: inv.remove_item(player_id, item_id).id)

        assert removed == item_id
        assert uow(lambda inv: inv.equipped(player_id)) == {}
        assert uow(lambda inv: inv.unequipped(player_id)) == []

    def test_remove_requires_ownership(self, uow, player_id, make_player, equipment_ids):
        other = make_player()
        item_id = uow(lambda inv: inv.add_item(other, equipment_ids["Sandals"]))

        with pytest.raises(ItemNotFound, match="Item not found in inventory"):
            uow(lambda inv: inv.remove_item(player_id, item_id))


class TestEquip:
    def test_swap_displaces_occupant(self, uow, player_id, equipment_ids):
        dagger = uow(lambda inv: inv.add_item(player_id, equipment_ids["Rusty Dagger"]))
        sword = uow(lambda inv: inv.add_item(player_id, equipment_ids["Short Sword"]))

        assert uow(lambda inv: inv.equip(player_id, dagger, "weapon")) is None
        displaced = uow(lambda inv: inv.equip(player_id, sword, "weapon").id)

        assert displaced == dagger
        equipped = uow(
            lambda inv: {slot: item.id for slot, item in inv.equipped(player_id).items()}
        )
        assert equipped == {"weapon": sword}
        assert [item.id for item in uow(lambda inv: inv.unequipped(player_id))] == [dagger]

    def test_reequip_same_item_is_noop(self, uow, player_id, equipment_ids):
        cap = uow(lambda inv: inv.add_item(player_id, equipment_ids["Leather Cap"]))
        uow(lambda inv: inv.equip(player_id, cap, "head"))

        assert uow(lambda inv: inv.equip(player_id, cap, "head")) is None
        assert list(uow(lambda inv: inv.equipped(player_id))) == ["head"]

    def test_slot_mismatch(self, uow, player_id, equipment_ids):
        dagger = uow(lambda inv: inv.add_item(player_id, equipment_ids["Rusty Dagger"]))

        with pytest.raises(SlotMismatch):
            uow(lambda inv: inv.equip(player_id, dagger, "head"))

    def test_invalid_slot_name(self, uow, player_id, equipment_ids):
        dagger = uow(lambda inv: inv.add_item(player_id, equipment_ids["Rusty Dagger"]))

        with pytest.raises(InvalidRequest, match="Invalid slot"):
            uow(lambda inv: inv.equip(player_id, dagger, "tail"))

    def test_strength_requirement(self, uow, player_id, equipment_ids):
        long_sword = uow(lambda inv: inv.add_item(player_id, equipment_ids["Long Sword"]))

        with pytest.raises(StrengthRequirement):
            uow(lambda inv: inv.equip(player_id, long_sword, "weapon"))
        assert uow(lambda inv: inv.equipped(player_id)) == {}

    def test_encumbrance_counts_other_slots(self, uow, make_player, equipment_ids):
        weakling = make_player(strength=3, speed=10)
        vest = uow(lambda inv: inv.add_item(weakling, equipment_ids["Padded Vest"]))
        cap = uow(lambda inv: inv.add_item(weakling, equipment_ids["Leather Cap"]))
        leggings = uow(lambda inv: inv.add_item(weakling, equipment_ids["Cloth Leggings"]))
        uow(lambda inv: inv.equip(weakling, vest, "body"))
        uow(lambda inv: inv.equip(weakling, cap, "head"))

        with pytest.raises(StrengthRequirement):
            uow(lambda inv: inv.equip(weakling, leggings, "legs"))


class TestUnequip:
    def test_unequip_returns_item_to_bag(self, uow, player_id, equipment_ids):
        cap = uow(lambda inv: inv.add_item(player_id, equipment_ids["Leather Cap"]))
        uow(lambda inv: inv.equip(player_id, cap, "head"))

        removed = uow(lambda inv: inv.unequip(player_id, "head").id)

        assert removed == cap
        assert uow(lambda inv: inv.equipped(player_id)) == {}

    def test_unequip_empty_slot_is_noop(self, uow, player_id):
        assert uow(lambda inv: inv.unequip(player_id, "feet")) is None


class TestCombatStats:
    def test_stats_follow_equipped_items(self, uow, make_player, equipment_ids):
        player_id = make_player(strength=20, speed=20)
        helm = uow(lambda inv: inv.add_item(player_id, equipment_ids["Iron Helm"]))
        sword = uow(lambda inv: inv.add_item(player_id, equipment_ids["Short Sword"]))
        uow(lambda inv: inv.equip(player_id, helm, "head"))
        uow(lambda inv: inv.equip(player_id, sword, "weapon"))

        stats = uow(lambda inv: inv.combat_stats(player_id))

        assert stats.total_protection == 3
        assert stats.total_encumbrance == 3
        assert stats.speed_modifier == pytest.approx(0.925)
        assert (stats.weapon_damage_min, stats.weapon_damage_max) == (3, 8)
