from pydantic import BaseModel, ConfigDict

from .balance import BalanceRead


class ManaTreeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    purchased_today: int
    daily_limit: int
    gems_required: int
    player_gems: int
    current_max_mana: int
    can_purchase: bool
    balance: BalanceRead


class ManaPurchaseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    gems_spent: int
    max_mana_increased: int
    max_mana: int
    purchased_today: int
    balance: BalanceRead


class VoteStatusRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    voted_today: bool
    can_vote: bool
    gold_earned_today: int
    min_gold: int
    max_gold: int
    balance: BalanceRead


class VoteRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    gold_awarded: int
    mana_reload: bool
    mana: int
    max_mana: int
    balance: BalanceRead
