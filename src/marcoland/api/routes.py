"""HTTP routes for the MarcoLand economy API.

The caller is identified by the ``X-Player-Id`` header set by the upstream
session layer. Store work is blocking, so every economy call runs in a worker
thread.
"""

from __future__ import annotations

import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends, Header, Query, Request, status

from marcoland import __version__
from marcoland.api.runtime import ApiState
from marcoland.domain.enums import EquipmentSlot
from marcoland.errors import InvalidRequest, Unauthenticated
from marcoland.schemas import (
    BalanceRead,
    EquipmentPurchaseRead,
    EquipmentPurchaseRequest,
    EquipmentSellRead,
    EquipmentSellRequest,
    GemPurchaseRead,
    GemPurchaseRequest,
    GemStoreRead,
    HealthRead,
    InventoryRead,
    ListingCancelRead,
    ListingCreateRequest,
    ListingPurchaseRead,
    ListingRead,
    ManaPurchaseRead,
    ManaTreeRead,
    ShopRead,
    SlotRead,
    SlotRequest,
    VoteRead,
    VoteStatusRead,
)

router = APIRouter()

_CATEGORY_ALIASES = {
    "weapon": "weapon",
    "weapons": "weapon",
    "armor": "armor",
    "armour": "armor",
}


def get_state(request: Request) -> ApiState:
    state = getattr(request.app.state, "api_state", None)
    if state is None:  # pragma: no cover - FastAPI should always initialise state
        raise RuntimeError("API state not initialised")
    return state


def get_player_id(
    x_player_id: Annotated[str | None, Header()] = None,
) -> str:
    if x_player_id is None or not x_player_id.strip():
        raise Unauthenticated()
    return x_player_id.strip()


ApiStateDep = Annotated[ApiState, Depends(get_state)]
PlayerIdDep = Annotated[str, Depends(get_player_id)]


def _shop_filter(value: str | None) -> dict[str, str]:
    """Turn the shop's ``type`` query into catalog filters."""
    if value is None:
        return {}
    normalized = value.strip().lower()
    if normalized in ("", "all"):
        return {}
    if normalized in _CATEGORY_ALIASES:
        return {"category": _CATEGORY_ALIASES[normalized]}
    if normalized in {slot.value for slot in EquipmentSlot}:
        return {"slot_type": normalized}
    raise InvalidRequest(
        "Invalid type. Use all, weapon, armor or a slot name", type=value
    )


@router.get("/health", response_model=HealthRead)
async def health(state: ApiStateDep) -> HealthRead:
    healthy = await asyncio.to_thread(state.database.check_health)
    return HealthRead(
        status="ok" if healthy else "degraded",
        database="ok" if healthy else "unavailable",
        version=__version__,
    )


@router.get("/players/me/balance", response_model=BalanceRead)
async def get_balance(state: ApiStateDep, player_id: PlayerIdDep) -> BalanceRead:
    balance = await asyncio.to_thread(state.trades.balance, player_id)
    return BalanceRead.model_validate(balance, from_attributes=True)


# ---------------------------------------------------------------------------
# Equipment


@router.get("/equipment/shop", response_model=ShopRead)
async def browse_shop(
    state: ApiStateDep,
    player_id: PlayerIdDep,
    type: Annotated[str | None, Query(description="all, weapon(s), armor or a slot")] = None,
) -> ShopRead:
    filters = _shop_filter(type)
    snapshot = await asyncio.to_thread(state.trades.shop, player_id, **filters)
    return ShopRead.model_validate(snapshot, from_attributes=True)


@router.post("/equipment/purchase", response_model=EquipmentPurchaseRead)
async def purchase_equipment(
    request: EquipmentPurchaseRequest, state: ApiStateDep, player_id: PlayerIdDep
) -> EquipmentPurchaseRead:
    result = await asyncio.to_thread(
        state.trades.purchase, player_id, request.equipment_id, request.type
    )
    return EquipmentPurchaseRead(
        inventory_id=result.inventory_id,
        equipment_id=result.equipment_id,
        item_name=result.item_name,
        item_cost=result.item_cost,
        remaining_gold=result.balance.gold,
        balance=BalanceRead.model_validate(result.balance, from_attributes=True),
    )


@router.post("/equipment/sell", response_model=EquipmentSellRead)
async def sell_equipment(
    request: EquipmentSellRequest, state: ApiStateDep, player_id: PlayerIdDep
) -> EquipmentSellRead:
    result = await asyncio.to_thread(state.trades.sell, player_id, request.inventory_id)
    return EquipmentSellRead(
        item_name=result.item_name,
        original_cost=result.original_cost,
        gold_earned=result.refund_gold,
        new_gold_balance=result.balance.gold,
        balance=BalanceRead.model_validate(result.balance, from_attributes=True),
    )


@router.get("/equipment/inventory", response_model=InventoryRead)
async def get_inventory(state: ApiStateDep, player_id: PlayerIdDep) -> InventoryRead:
    snapshot = await asyncio.to_thread(state.trades.inventory, player_id)
    return InventoryRead.model_validate(
        {
            "equipped": snapshot.equipped,
            "inventory": snapshot.unequipped,
            "combat_stats": snapshot.combat_stats,
        },
        from_attributes=True,
    )


@router.post("/equipment/slot/{slot}", response_model=SlotRead)
async def change_slot(
    slot: str, request: SlotRequest, state: ApiStateDep, player_id: PlayerIdDep
) -> SlotRead:
    if request.item_id is None:
        change = await asyncio.to_thread(state.trades.unequip, player_id, slot)
    else:
        change = await asyncio.to_thread(
            state.trades.equip_or_swap, player_id, request.item_id, slot
        )
    return SlotRead.model_validate(change, from_attributes=True)


# ---------------------------------------------------------------------------
# Gem store


@router.get("/gems-store", response_model=GemStoreRead)
async def gem_store(state: ApiStateDep, player_id: PlayerIdDep) -> GemStoreRead:
    store = await asyncio.to_thread(state.trades.gem_store_status, player_id)
    return GemStoreRead.model_validate(store, from_attributes=True)


@router.post("/gems-store/purchase", response_model=GemPurchaseRead)
async def purchase_gems(
    request: GemPurchaseRequest, state: ApiStateDep, player_id: PlayerIdDep
) -> GemPurchaseRead:
    result = await asyncio.to_thread(state.trades.purchase_gems, player_id, request.quantity)
    return GemPurchaseRead.model_validate(result, from_attributes=True)


# ---------------------------------------------------------------------------
# Daily resources


@router.get("/resources/vote", response_model=VoteStatusRead)
async def vote_status(state: ApiStateDep, player_id: PlayerIdDep) -> VoteStatusRead:
    votes = await asyncio.to_thread(state.trades.vote_status, player_id)
    return VoteStatusRead.model_validate(votes, from_attributes=True)


@router.post("/resources/vote", response_model=VoteRead)
async def vote(state: ApiStateDep, player_id: PlayerIdDep) -> VoteRead:
    result = await asyncio.to_thread(state.trades.vote, player_id)
    return VoteRead.model_validate(result, from_attributes=True)


@router.get("/resources/mana-tree", response_model=ManaTreeRead)
async def mana_tree(state: ApiStateDep, player_id: PlayerIdDep) -> ManaTreeRead:
    tree = await asyncio.to_thread(state.trades.mana_tree_status, player_id)
    return ManaTreeRead.model_validate(tree, from_attributes=True)


@router.post("/resources/mana-tree/purchase", response_model=ManaPurchaseRead)
async def purchase_max_mana(state: ApiStateDep, player_id: PlayerIdDep) -> ManaPurchaseRead:
    result = await asyncio.to_thread(state.trades.purchase_max_mana, player_id)
    return ManaPurchaseRead.model_validate(result, from_attributes=True)


# ---------------------------------------------------------------------------
# Marketplace


@router.get("/market", response_model=list[ListingRead])
async def browse_market(
    state: ApiStateDep,
    player_id: PlayerIdDep,  # noqa: ARG001
    type: Annotated[str | None, Query(description="all, gems, metals or quartz")] = None,
) -> list[ListingRead]:
    listings = await asyncio.to_thread(state.market.browse, type)
    return [ListingRead.model_validate(listing, from_attributes=True) for listing in listings]


@router.get("/market/listings/mine", response_model=list[ListingRead])
async def my_listings(state: ApiStateDep, player_id: PlayerIdDep) -> list[ListingRead]:
    listings = await asyncio.to_thread(state.market.my_listings, player_id)
    return [ListingRead.model_validate(listing, from_attributes=True) for listing in listings]


@router.post(
    "/market/listings",
    response_model=ListingRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_listing(
    request: ListingCreateRequest, state: ApiStateDep, player_id: PlayerIdDep
) -> ListingRead:
    listing = await asyncio.to_thread(
        state.market.create_listing,
        player_id,
        request.item_type,
        request.quantity,
        request.unit_price,
    )
    return ListingRead.model_validate(listing, from_attributes=True)


@router.delete("/market/listings/{listing_id}", response_model=ListingCancelRead)
async def cancel_listing(
    listing_id: int, state: ApiStateDep, player_id: PlayerIdDep
) -> ListingCancelRead:
    receipt = await asyncio.to_thread(state.market.cancel_listing, player_id, listing_id)
    return ListingCancelRead.model_validate(receipt, from_attributes=True)


@router.post("/market/listings/{listing_id}/buy", response_model=ListingPurchaseRead)
async def buy_listing(
    listing_id: int, state: ApiStateDep, player_id: PlayerIdDep
) -> ListingPurchaseRead:
    receipt = await asyncio.to_thread(state.market.buy, player_id, listing_id)
    return ListingPurchaseRead.model_validate(receipt, from_attributes=True)
