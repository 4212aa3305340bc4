"""Equipment arithmetic: sell-back pricing, equip checks and combat stats."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass
from typing import Protocol

from .rules_config import DEFAULT_RULES, RulesConfig


class EquipmentStats(Protocol):
    """Anything carrying the stat columns of a catalog definition."""

    slot_type: str
    damage_min: int
    damage_max: int
    protection: int
    encumbrance: int
    strength_required: int


@dataclass(slots=True)
class CombatStats:
    """Combat figures derived from a player's equipped items."""

    total_protection: int = 0
    total_encumbrance: int = 0
    speed_modifier: float = 1.0
    weapon_damage_min: int = 0
    weapon_damage_max: int = 0

    def to_dict(self) -> dict[str, float | int]:
        return asdict(self)


def sell_back_refund(cost_gold: int, rules: RulesConfig = DEFAULT_RULES) -> int:
    """Gold refunded when an item bought for ``cost_gold`` is sold back."""

    if cost_gold < 0:
        raise ValueError("cost_gold cannot be negative")
    return cost_gold * rules.trade.sell_back_numerator // rules.trade.sell_back_denominator


def calculate_speed_modifier(
    speed: int, encumbrance: int, rules: RulesConfig = DEFAULT_RULES
) -> float:
    """Speed multiplier for a player carrying ``encumbrance``.

    No encumbrance gives full speed; encumbrance at or above the player's
    speed floors the modifier at the minimum; in between it falls linearly.
    """
    combat = rules.combat
    if encumbrance <= 0:
        return combat.max_speed_modifier
    if encumbrance >= speed:
        return combat.min_speed_modifier
    span = combat.max_speed_modifier - combat.min_speed_modifier
    return combat.max_speed_modifier - span * (encumbrance / speed)


def can_equip(
    player_strength: int,
    item_strength_required: int = 0,
    current_encumbrance: int = 0,
    item_encumbrance: int = 0,
) -> bool:
    """Return True when the player meets the item's strength and load limits."""

    if player_strength < item_strength_required:
        return False
    return current_encumbrance + item_encumbrance <= player_strength


def build_combat_stats(
    equipped: Iterable[EquipmentStats], speed: int, rules: RulesConfig = DEFAULT_RULES
) -> CombatStats:
    """Aggregate protection, encumbrance and weapon damage of equipped items."""

    stats = CombatStats()
    for item in equipped:
        stats.total_protection += item.protection
        stats.total_encumbrance += item.encumbrance
        if item.slot_type == "weapon":
            stats.weapon_damage_min = item.damage_min
            stats.weapon_damage_max = item.damage_max
    stats.speed_modifier = calculate_speed_modifier(speed, stats.total_encumbrance, rules)
    return stats
