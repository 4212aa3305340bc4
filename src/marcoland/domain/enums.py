"""Enumerations shared by the economy engine."""

from __future__ import annotations

from enum import StrEnum


class Resource(StrEnum):
    """Balances held on a player ledger."""

    GOLD = "gold"
    GEMS = "gems"
    METALS = "metals"
    QUARTZ = "quartz"


class EquipmentCategory(StrEnum):
    """Shop category of a catalog definition."""

    WEAPON = "weapon"
    ARMOR = "armor"


class EquipmentSlot(StrEnum):
    """Named equip positions; each holds at most one item per player."""

    WEAPON = "weapon"
    HEAD = "head"
    BODY = "body"
    LEGS = "legs"
    HANDS = "hands"
    FEET = "feet"


class ListingStatus(StrEnum):
    """Marketplace listing lifecycle. ``sold`` and ``cancelled`` are terminal."""

    ACTIVE = "active"
    SOLD = "sold"
    CANCELLED = "cancelled"


class PurchaseType(StrEnum):
    """Once-a-day or daily-limited actions counted per player and UTC day."""

    GEMS = "gems"
    MANA = "mana"
    VOTE = "vote"
