from .balance import BalanceRead, HealthRead
from .equipment import (
    CombatStatsRead,
    EquipmentPurchaseRead,
    EquipmentPurchaseRequest,
    EquipmentSellRead,
    EquipmentSellRequest,
    InventoryRead,
    OwnedItemRead,
    ShopItemRead,
    ShopRead,
    SlotRead,
    SlotRequest,
)
from .gems import GemPurchaseRead, GemPurchaseRequest, GemStoreRead
from .market import ListingCancelRead, ListingCreateRequest, ListingPurchaseRead, ListingRead
from .resources import ManaPurchaseRead, ManaTreeRead, VoteRead, VoteStatusRead

__all__ = [
    "BalanceRead",
    "CombatStatsRead",
    "EquipmentPurchaseRead",
    "EquipmentPurchaseRequest",
    "EquipmentSellRead",
    "EquipmentSellRequest",
    "GemPurchaseRead",
    "GemPurchaseRequest",
    "GemStoreRead",
    "HealthRead",
    "InventoryRead",
    "ListingCancelRead",
    "ListingCreateRequest",
    "ListingPurchaseRead",
    "ListingRead",
    "ManaPurchaseRead",
    "ManaTreeRead",
    "OwnedItemRead",
    "ShopItemRead",
    "ShopRead",
    "SlotRead",
    "SlotRequest",
    "VoteRead",
    "VoteStatusRead",
]
