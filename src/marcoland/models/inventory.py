"""Owned equipment instances and their equip slots."""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampCreatedMixin, new_uuid

if TYPE_CHECKING:
    from .equipment import EquipmentDefinition
    from .player import Player


class InventoryItem(Base, TimestampCreatedMixin):
    """One owned instance of a catalog definition.

    ``equipped_slot`` is NULL while the item sits in the bag. The unique
    constraint on ``(owner_id, equipped_slot)`` is the storage-level guarantee
    that a slot never holds two items; NULLs never collide.
    """

    __tablename__ = "inventory_items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    owner_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("players.id", ondelete="CASCADE"), nullable=False
    )
    equipment_id: Mapped[int] = mapped_column(Integer, ForeignKey("equipment.id"), nullable=False)
    equipped_slot: Mapped[str | None] = mapped_column(String(16), nullable=True)

    owner: Mapped["Player"] = relationship("Player", back_populates="inventory")
    equipment: Mapped["EquipmentDefinition"] = relationship(
        "EquipmentDefinition", lazy="joined", innerjoin=True
    )

    __table_args__ = (
        UniqueConstraint("owner_id", "equipped_slot", name="uq_inventory_owner_slot"),
        Index("ix_inventory_items_owner", "owner_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<InventoryItem(id='{self.id}', owner='{self.owner_id}', "
            f"equipment={self.equipment_id}, slot={self.equipped_slot})>"
        )
