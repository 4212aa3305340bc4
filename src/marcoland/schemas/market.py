from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

from .balance import BalanceRead


class ListingCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    item_type: StrictStr = Field(..., description="Resource to sell: gems, metals or quartz")
    quantity: StrictInt = Field(..., description="Units to reserve and sell as one lot")
    unit_price: StrictInt = Field(..., description="Gold per unit")


class ListingRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    listing_id: int
    seller_id: str
    item_type: str
    quantity: int
    unit_price: int
    total_price: int
    status: str
    created_at: datetime
    buyer_id: str | None = None
    closed_at: datetime | None = None


class ListingPurchaseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    listing: ListingRead
    total_price: int
    transferred: dict[str, int]
    buyer_balance: BalanceRead
    seller_balance: BalanceRead


class ListingCancelRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    listing: ListingRead
    refunded: dict[str, int]
    seller_balance: BalanceRead
