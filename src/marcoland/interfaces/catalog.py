"""Equipment Catalog Protocol Interface."""

from typing import Protocol

from marcoland.models import EquipmentDefinition


class IEquipmentCatalog(Protocol):
    """Protocol for read-only access to equipment definitions."""

    def lookup(self, equipment_id: int) -> EquipmentDefinition:
        """Return a definition or raise ``EquipmentNotFound``."""
        ...

    def list(
        self, slot_type: str | None = None, category: str | None = None
    ) -> list[EquipmentDefinition]:
        """Return definitions ordered by ``cost_gold`` ascending."""
        ...
