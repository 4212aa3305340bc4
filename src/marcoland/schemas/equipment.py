from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

from .balance import BalanceRead


class EquipmentPurchaseRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    equipment_id: StrictInt = Field(..., description="Catalog definition to buy")
    type: StrictStr | None = Field(
        None, description='Expected category of the item, "weapon" or "armor"'
    )


class EquipmentSellRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    inventory_id: StrictStr = Field(..., min_length=1, description="Owned item to sell")


class SlotRequest(BaseModel):
    """Equip ``item_id`` in the slot; omit it or send null to unequip."""

    model_config = ConfigDict(extra="forbid")

    item_id: StrictStr | None = Field(None, description="Owned item to equip")


class ShopItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

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


class ShopRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    equipment: list[ShopItemRead]
    player_gold: int
    player_strength: int
    player_speed: int


class OwnedItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

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


class CombatStatsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_protection: int
    total_encumbrance: int
    speed_modifier: float
    weapon_damage_min: int
    weapon_damage_max: int


class InventoryRead(BaseModel):
    equipped: dict[str, OwnedItemRead]
    inventory: list[OwnedItemRead] = Field(..., description="Unequipped items")
    combat_stats: CombatStatsRead


class EquipmentPurchaseRead(BaseModel):
    inventory_id: str
    equipment_id: int
    item_name: str
    item_cost: int
    remaining_gold: int
    balance: BalanceRead


class EquipmentSellRead(BaseModel):
    item_name: str
    original_cost: int
    gold_earned: int
    new_gold_balance: int
    balance: BalanceRead


class SlotRead(BaseModel):
    slot: str
    action: str
    item_id: str | None
    displaced_item_id: str | None
    equipped: dict[str, OwnedItemRead]
    combat_stats: CombatStatsRead
