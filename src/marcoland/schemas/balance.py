from pydantic import BaseModel, ConfigDict, Field


class BalanceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    gold: int = Field(..., ge=0, description="Gold on the ledger")
    gems: int = Field(..., ge=0, description="Gems on the ledger")
    metals: int = Field(..., ge=0, description="Metals on the ledger")
    quartz: int = Field(..., ge=0, description="Quartz on the ledger")


class HealthRead(BaseModel):
    status: str
    database: str
    version: str
