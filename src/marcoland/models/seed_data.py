"""Seed data for the equipment catalog.

The catalog is the base MarcoLand shop inventory: weapons sold by the
blacksmith and armor sold by the armourer.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from .equipment import EquipmentDefinition

# name, damage_min, damage_max, strength_required, cost_gold
BASE_WEAPONS: list[tuple[str, int, int, int, int]] = [
    ("Rusty Dagger", 1, 5, 0, 50),
    ("Short Sword", 3, 8, 5, 200),
    ("Hand Axe", 4, 10, 8, 350),
    ("Mace", 6, 12, 12, 600),
    ("Long Sword", 8, 16, 18, 1200),
    ("War Hammer", 12, 22, 28, 2500),
    ("Battle Axe", 15, 28, 40, 5000),
    ("Claymore", 20, 36, 55, 10000),
]

# name, slot, protection, encumbrance, strength_required, cost_gold
BASE_ARMOR: list[tuple[str, str, int, int, int, int]] = [
    ("Leather Cap", "head", 1, 1, 0, 40),
    ("Iron Helm", "head", 3, 3, 10, 300),
    ("Padded Vest", "body", 2, 2, 0, 80),
    ("Chain Mail", "body", 6, 8, 15, 900),
    ("Plate Armour", "body", 12, 16, 35, 4000),
    ("Cloth Leggings", "legs", 1, 1, 0, 30),
    ("Chain Leggings", "legs", 4, 5, 12, 500),
    ("Leather Gloves", "hands", 1, 1, 0, 25),
    ("Iron Gauntlets", "hands", 3, 3, 10, 350),
    ("Sandals", "feet", 1, 1, 0, 20),
    ("Iron Boots", "feet", 3, 4, 10, 400),
]


def seed_equipment_catalog(session: Session) -> int:
    """Insert the base catalog if the equipment table is empty.

    Args:
        session: SQLAlchemy session to use for database operations

    Returns:
        Number of definitions inserted (0 when the catalog already exists)
    """
    existing = session.execute(select(EquipmentDefinition.id).limit(1))
    if existing.scalar_one_or_none() is not None:
        return 0

    definitions = [
        EquipmentDefinition(
            name=name,
            category="weapon",
            slot_type="weapon",
            cost_gold=cost,
            damage_min=damage_min,
            damage_max=damage_max,
            strength_required=strength,
        )
        for name, damage_min, damage_max, strength, cost in BASE_WEAPONS
    ]
    definitions.extend(
        EquipmentDefinition(
            name=name,
            category="armor",
            slot_type=slot,
            cost_gold=cost,
            protection=protection,
            encumbrance=encumbrance,
            strength_required=strength,
        )
        for name, slot, protection, encumbrance, strength, cost in BASE_ARMOR
    )
    session.add_all(definitions)
    session.commit()
    return len(definitions)
