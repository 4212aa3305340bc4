"""Equipment catalog model.

Definitions are reference data seeded by :mod:`seed_data` and never mutated at
runtime.
"""

from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class EquipmentDefinition(Base):
    """A purchasable weapon or armor piece.

    Attributes:
        id: Primary key
        name: Unique item name
        category: Shop category (weapon/armor)
        slot_type: Equip slot the item occupies (weapon/head/body/legs/hands/feet)
        cost_gold: Catalog price in gold
        damage_min: Minimum weapon damage (0 for armor)
        damage_max: Maximum weapon damage (0 for armor)
        protection: Damage absorbed by armor (0 for weapons)
        encumbrance: Load added when equipped
        strength_required: Minimum strength needed to equip
    """

    __tablename__ = "equipment"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    category: Mapped[str] = mapped_column(String(16), nullable=False)
    slot_type: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    cost_gold: Mapped[int] = mapped_column(Integer, nullable=False)

    # Stat modifiers
    damage_min: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    damage_max: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    protection: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    encumbrance: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    strength_required: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("category IN ('weapon', 'armor')", name="ck_equipment_category"),
        CheckConstraint(
            "slot_type IN ('weapon', 'head', 'body', 'legs', 'hands', 'feet')",
            name="ck_equipment_slot_type",
        ),
        CheckConstraint("cost_gold >= 0", name="ck_equipment_cost_nonnegative"),
        CheckConstraint("damage_min <= damage_max", name="ck_equipment_damage_range"),
    )

    def __repr__(self) -> str:
        return f"<EquipmentDefinition(id={self.id}, name='{self.name}', cost={self.cost_gold})>"
