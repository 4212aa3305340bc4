"""Equipment Catalog for MarcoLand.

Read-only access to the seeded weapon and armor definitions.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from marcoland.errors import EquipmentNotFound
from marcoland.models import EquipmentDefinition


class EquipmentCatalog:
    """Lookups and price-ordered listings of equipment definitions."""

    def __init__(self, session: Session):
        self.session = session

    def lookup(self, equipment_id: int) -> EquipmentDefinition:
        """Return one definition.

        Raises:
            EquipmentNotFound: If no definition has that id
        """
        definition = self.session.get(EquipmentDefinition, equipment_id)
        if definition is None:
            raise EquipmentNotFound(
                f"Equipment {equipment_id} not found", equipment_id=equipment_id
            )
        return definition

    def list(
        self, slot_type: str | None = None, category: str | None = None
    ) -> list[EquipmentDefinition]:
        """Return definitions cheapest first, optionally filtered.

        Args:
            slot_type: Only definitions equipping into this slot
            category: Only weapons or only armor

        Returns:
            Definitions ordered by ``cost_gold`` then id
        """
        stmt = select(EquipmentDefinition)
        if slot_type is not None:
            stmt = stmt.where(EquipmentDefinition.slot_type == slot_type)
        if category is not None:
            stmt = stmt.where(EquipmentDefinition.category == category)
        stmt = stmt.order_by(EquipmentDefinition.cost_gold, EquipmentDefinition.id)
        return [*self.session.scalars(stmt)]
