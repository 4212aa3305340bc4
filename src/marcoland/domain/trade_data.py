"""Value objects returned by the trade engine and marketplace.

These are plain dataclasses so results can leave the unit of work without
dragging ORM state along.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime

from .enums import Resource
from .equipment import CombatStats

# ---------------------------------------------------------------------------
# Ledger


@dataclass(frozen=True, slots=True)
class Balance:
    """A snapshot of one player's resource balances."""

    gold: int = 0
    gems: int = 0
    metals: int = 0
    quartz: int = 0

    def get(self, resource: Resource | str) -> int:
        return getattr(self, Resource(resource).value)

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Equipment


@dataclass(slots=True)
class OwnedItem:
    """An inventory item flattened together with its catalog definition."""

    inventory_id: str
    equipment_id: int
    name: str
    category: str
    slot_type: str
    equipped_slot: str | None
    cost_gold: int
    damage_min: int
    damage_max: int
    protection: int
    encumbrance: int
    strength_required: int


@dataclass(slots=True)
class PurchaseResult:
    inventory_id: str
    equipment_id: int
    item_name: str
    item_cost: int
    balance: Balance


@dataclass(slots=True)
class SaleResult:
    inventory_id: str
    item_name: str
    original_cost: int
    refund_gold: int
    balance: Balance


@dataclass(slots=True)
class SlotChange:
    """Outcome of an equip or unequip on one slot."""

    slot: str
    action: str  # "equipped" or "unequipped"
    item_id: str | None
    displaced_item_id: str | None
    equipped: dict[str, OwnedItem]
    combat_stats: CombatStats


@dataclass(slots=True)
class InventorySnapshot:
    equipped: dict[str, OwnedItem]
    unequipped: list[OwnedItem]
    combat_stats: CombatStats


@dataclass(slots=True)
class ShopEntry:
    equipment_id: int
    name: str
    category: str
    slot_type: str
    cost_gold: int
    damage_min: int
    damage_max: int
    protection: int
    encumbrance: int
    strength_required: int
    affordable: bool
    can_use: bool


@dataclass(slots=True)
class ShopSnapshot:
    equipment: list[ShopEntry]
    player_gold: int
    player_strength: int
    player_speed: int


@dataclass(slots=True)
class GemPurchaseResult:
    quantity: int
    total_cost: int
    balance: Balance
    purchased_today: int
    remaining_today: int


@dataclass(slots=True)
class GemStoreStatus:
    purchased_today: int
    remaining_today: int
    daily_limit: int
    price_per_gem: int
    balance: Balance

    @property
    def can_purchase(self) -> bool:
        return self.remaining_today > 0 and self.balance.gold >= self.price_per_gem


@dataclass(slots=True)
class ManaTreeStatus:
    purchased_today: int
    daily_limit: int
    gems_required: int
    current_max_mana: int
    balance: Balance

    @property
    def player_gems(self) -> int:
        return self.balance.gems

    @property
    def can_purchase(self) -> bool:
        return (
            self.purchased_today < self.daily_limit
            and self.balance.gems >= self.gems_required
        )


@dataclass(slots=True)
class ManaPurchaseResult:
    gems_spent: int
    max_mana_increased: int
    max_mana: int
    purchased_today: int
    balance: Balance


@dataclass(slots=True)
class VoteStatus:
    voted_today: bool
    gold_earned_today: int
    min_gold: int
    max_gold: int
    balance: Balance

    @property
    def can_vote(self) -> bool:
        return not self.voted_today


@dataclass(slots=True)
class VoteResult:
    """Gold granted by today's vote and whether it also refilled mana."""

    gold_awarded: int
    mana_reload: bool
    mana: int
    max_mana: int
    balance: Balance


# ---------------------------------------------------------------------------
# Marketplace


@dataclass(slots=True)
class ListingView:
    listing_id: int
    seller_id: str
    item_type: str
    quantity: int
    unit_price: int
    status: str
    created_at: datetime
    buyer_id: str | None = None
    closed_at: datetime | None = None

    @property
    def total_price(self) -> int:
        return self.quantity * self.unit_price


@dataclass(slots=True)
class PurchaseReceipt:
    """What changed hands when a listing was bought."""

    listing: ListingView
    total_price: int
    buyer_balance: Balance
    seller_balance: Balance

    @property
    def transferred(self) -> dict[str, int]:
        return {self.listing.item_type: self.listing.quantity}


@dataclass(slots=True)
class CancelReceipt:
    listing: ListingView
    refunded: dict[str, int] = field(default_factory=dict)
    seller_balance: Balance = field(default_factory=Balance)
