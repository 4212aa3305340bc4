"""SQLAlchemy models for the MarcoLand economy engine.

This module exports all database models together with the declarative base
and the catalog seeding helper.
"""

from .base import Base, TimestampCreatedMixin, new_uuid, utc_now

# Catalog
from .equipment import EquipmentDefinition

# Inventory
from .inventory import InventoryItem

# Marketplace
from .listing import Listing

# Ledger
from .player import Player

# NPC purchase limits
from .purchase import DailyPurchase

# Seed data functions
from .seed_data import seed_equipment_catalog

__all__ = [
    "Base",
    "DailyPurchase",
    "EquipmentDefinition",
    "InventoryItem",
    "Listing",
    "Player",
    "TimestampCreatedMixin",
    "new_uuid",
    "seed_equipment_catalog",
    "utc_now",
]
