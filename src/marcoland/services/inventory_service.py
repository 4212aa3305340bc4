"""Inventory & Slot Manager for MarcoLand.

Creates and removes owned items and moves them in and out of equip slots.
Callers lock the owner's ledger row first; the manager relies on that lock
to serialize slot changes for one owner.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from marcoland.domain.enums import EquipmentSlot
from marcoland.domain.equipment import CombatStats, build_combat_stats, can_equip
from marcoland.domain.rules_config import DEFAULT_RULES, RulesConfig
from marcoland.errors import (
    InvalidRequest,
    ItemNotFound,
    PlayerNotFound,
    SlotMismatch,
    StrengthRequirement,
)
from marcoland.interfaces import IEquipmentCatalog
from marcoland.models import InventoryItem, Player, new_uuid


def parse_slot(slot: str) -> EquipmentSlot:
    """Validate a slot name from the outside world."""
    try:
        return EquipmentSlot(slot)
    except ValueError as exc:
        valid = ", ".join(s.value for s in EquipmentSlot)
        raise InvalidRequest(f"Invalid slot. Must be one of: {valid}", slot=slot) from exc


class InventoryManager:
    """Owned items and equip slots for players within one session."""

    def __init__(
        self,
        session: Session,
        catalog: IEquipmentCatalog,
        rules: RulesConfig = DEFAULT_RULES,
    ):
        self.session = session
        self.catalog = catalog
        self.rules = rules

    def add_item(self, owner_id: str, equipment_id: int) -> str:
        """Create an unequipped item of ``equipment_id`` owned by ``owner_id``."""
        self.catalog.lookup(equipment_id)
        item = InventoryItem(id=new_uuid(), owner_id=owner_id, equipment_id=equipment_id)
        self.session.add(item)
        self.session.flush()
        return item.id

    def get_owned(self, owner_id: str, inventory_id: str) -> InventoryItem:
        """Return an item only if ``owner_id`` owns it.

        Raises:
            ItemNotFound: If the item does not exist or belongs to someone else
        """
        item = self.session.scalars(
            select(InventoryItem).where(
                InventoryItem.id == inventory_id, InventoryItem.owner_id == owner_id
            )
        ).one_or_none()
        if item is None:
            raise ItemNotFound(inventory_id=inventory_id)
        return item

    def remove_item(self, owner_id: str, inventory_id: str) -> InventoryItem:
        """Delete an owned item; an equipped item leaves its slot with it."""
        item = self.get_owned(owner_id, inventory_id)
        if item.equipped_slot is not None:
            item.equipped_slot = None
            self.session.flush()
        self.session.delete(item)
        self.session.flush()
        return item

    def equip(self, owner_id: str, inventory_id: str, slot: str) -> InventoryItem | None:
        """Equip an item, displacing the slot's current occupant.

        Args:
            owner_id: Player equipping the item
            inventory_id: Owned item to equip
            slot: Target slot

        Returns:
            The item that was displaced from the slot, if any

        Raises:
            ItemNotFound: If the item is not owned by ``owner_id``
            SlotMismatch: If the item does not fit ``slot``
            StrengthRequirement: If the owner cannot carry the item
        """
        target = parse_slot(slot)
        item = self.get_owned(owner_id, inventory_id)
        definition = item.equipment
        if definition.slot_type != target.value:
            raise SlotMismatch(
                f"{definition.name} goes in the {definition.slot_type} slot, not {target.value}",
                slot=target.value,
                item_slot=definition.slot_type,
            )

        occupant = self._occupant(owner_id, target)
        if occupant is not None and occupant.id == item.id:
            return None

        player = self._player(owner_id)
        load = sum(
            equipped.equipment.encumbrance
            for equipped_slot, equipped in self.equipped(owner_id).items()
            if equipped_slot != target.value
        )
        if not can_equip(
            player.strength, definition.strength_required, load, definition.encumbrance
        ):
            raise StrengthRequirement(
                strength=player.strength,
                strength_required=definition.strength_required,
                encumbrance=load + definition.encumbrance,
            )

        if occupant is not None:
            # Clear the slot first so the unique (owner, slot) pair is never doubled
            occupant.equipped_slot = None
            self.session.flush()
        item.equipped_slot = target.value
        self.session.flush()
        return occupant

    def unequip(self, owner_id: str, slot: str) -> InventoryItem | None:
        """Empty ``slot`` and return the item that was in it."""
        occupant = self._occupant(owner_id, parse_slot(slot))
        if occupant is None:
            return None
        occupant.equipped_slot = None
        self.session.flush()
        return occupant

    def equipped(self, owner_id: str) -> dict[str, InventoryItem]:
        items = self.session.scalars(
            select(InventoryItem).where(
                InventoryItem.owner_id == owner_id, InventoryItem.equipped_slot.is_not(None)
            )
        )
        return {item.equipped_slot: item for item in items}

    def unequipped(self, owner_id: str) -> list[InventoryItem]:
        return [
            *self.session.scalars(
                select(InventoryItem)
                .where(InventoryItem.owner_id == owner_id, InventoryItem.equipped_slot.is_(None))
                .order_by(InventoryItem.created_at, InventoryItem.id)
            )
        ]

    def combat_stats(self, owner_id: str) -> CombatStats:
        player = self._player(owner_id)
        definitions = [item.equipment for item in self.equipped(owner_id).values()]
        return build_combat_stats(definitions, player.speed, self.rules)

    def _occupant(self, owner_id: str, slot: EquipmentSlot) -> InventoryItem | None:
        return self.session.scalars(
            select(InventoryItem).where(
                InventoryItem.owner_id == owner_id, InventoryItem.equipped_slot == slot.value
            )
        ).one_or_none()

    def _player(self, owner_id: str) -> Player:
        player = self.session.get(Player, owner_id)
        if player is None:
            raise PlayerNotFound(player_id=owner_id)
        return player
