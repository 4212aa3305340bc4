from pydantic import BaseModel, ConfigDict, Field, StrictInt

from .balance import BalanceRead


class GemPurchaseRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    quantity: StrictInt = Field(..., description="Gems to buy; must be positive")


class GemStoreRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    purchased_today: int
    remaining_today: int
    daily_limit: int
    price_per_gem: int
    can_purchase: bool
    balance: BalanceRead


class GemPurchaseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    quantity: int
    total_cost: int
    purchased_today: int
    remaining_today: int
    balance: BalanceRead
