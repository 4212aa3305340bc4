"""Declarative rule configuration for the economy engine."""

from __future__ import annotations

from dataclasses import dataclass, field

from .enums import Resource


@dataclass(frozen=True, slots=True)
class TradeRules:
    """NPC shop constants."""

    sell_back_numerator: int = 1
    sell_back_denominator: int = 2  # items sell back for 50% of catalog cost, floored


@dataclass(frozen=True, slots=True)
class MarketRules:
    """Player marketplace bounds."""

    min_price: int = 1
    max_price: int = 1_000_000
    min_quantity: int = 1
    max_quantity: int = 9999
    tradable_resources: frozenset[Resource] = field(
        default_factory=lambda: frozenset({Resource.GEMS, Resource.METALS, Resource.QUARTZ})
    )


@dataclass(frozen=True, slots=True)
class GemStoreRules:
    """Daily gem purchases from the NPC store."""

    price_per_gem: int = 90
    daily_limit: int = 30


@dataclass(frozen=True, slots=True)
class ManaTreeRules:
    """Max mana bought with gems at the mana tree."""

    gems_per_purchase: int = 100
    mana_per_purchase: int = 1
    daily_limit: int = 1


@dataclass(frozen=True, slots=True)
class VoteRules:
    """Daily vote reward."""

    min_gold: int = 500
    max_gold: int = 1000
    mana_reload_chance: float = 0.05  # refills mana to max


@dataclass(frozen=True, slots=True)
class CombatStatRules:
    """Bounds of the encumbrance speed modifier."""

    min_speed_modifier: float = 0.5
    max_speed_modifier: float = 1.0


@dataclass(frozen=True, slots=True)
class RulesConfig:
    """Top-level container for every economy rule group."""

    trade: TradeRules = field(default_factory=TradeRules)
    market: MarketRules = field(default_factory=MarketRules)
    gem_store: GemStoreRules = field(default_factory=GemStoreRules)
    mana_tree: ManaTreeRules = field(default_factory=ManaTreeRules)
    vote: VoteRules = field(default_factory=VoteRules)
    combat: CombatStatRules = field(default_factory=CombatStatRules)


DEFAULT_RULES = RulesConfig()
