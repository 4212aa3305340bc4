"""Inventory & Slot Manager Protocol Interface."""

from typing import Protocol

from marcoland.domain.equipment import CombatStats
from marcoland.models import InventoryItem


class IInventoryManager(Protocol):
    """Protocol for owned items and their equip slots.

    Every mutation preserves the invariant that an owner never has two items
    equipped in the same slot.
    """

    def add_item(self, owner_id: str, equipment_id: int) -> str:
        """Create an unequipped item and return its inventory id."""
        ...

    def remove_item(self, owner_id: str, inventory_id: str) -> InventoryItem:
        """Delete an owned item, unequipping it first if needed."""
        ...

    def equip(self, owner_id: str, inventory_id: str, slot: str) -> InventoryItem | None:
        """Put an item in ``slot`` and return the item it displaced, if any."""
        ...

    def unequip(self, owner_id: str, slot: str) -> InventoryItem | None:
        """Empty ``slot``; a no-op when it is already empty."""
        ...

    def equipped(self, owner_id: str) -> dict[str, InventoryItem]:
        """Map of slot to equipped item."""
        ...

    def unequipped(self, owner_id: str) -> list[InventoryItem]:
        """Items in the bag."""
        ...

    def combat_stats(self, owner_id: str) -> CombatStats:
        """Stats derived from the equipped items."""
        ...
