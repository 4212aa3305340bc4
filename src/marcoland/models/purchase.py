"""Per-day counters for daily-limited actions."""

from datetime import date

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Date,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, BigIntegerKey


class DailyPurchase(Base):
    """How often a player used a daily-limited action on one UTC day."""

    __tablename__ = "daily_purchases"

    id: Mapped[int] = mapped_column(BigIntegerKey, primary_key=True, autoincrement=True)
    player_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("players.id", ondelete="CASCADE"), nullable=False
    )
    purchase_type: Mapped[str] = mapped_column(String(16), nullable=False)
    purchase_date: Mapped[date] = mapped_column(Date, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Signed gold change: negative when paid (gems), positive when earned (vote)
    gold_delta: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0, server_default="0"
    )

    __table_args__ = (
        UniqueConstraint(
            "player_id", "purchase_type", "purchase_date", name="uq_daily_purchases_day"
        ),
        CheckConstraint("quantity >= 0", name="ck_daily_purchases_quantity_nonnegative"),
    )

    def __repr__(self) -> str:
        return (
            f"<DailyPurchase(player='{self.player_id}', type='{self.purchase_type}', "
            f"date={self.purchase_date}, quantity={self.quantity})>"
        )
