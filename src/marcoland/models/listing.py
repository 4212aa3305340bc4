"""Marketplace listings."""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import BigInteger, CheckConstraint, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, BigIntegerKey, TimestampCreatedMixin

if TYPE_CHECKING:
    from .player import Player


class Listing(Base, TimestampCreatedMixin):
    """A seller's standing offer of a fixed quantity of one resource.

    The listed quantity is debited from the seller when the listing is
    created and held here until it is sold or cancelled.

    Attributes:
        id: Primary key
        seller_id: Player who created the listing
        item_type: Resource offered (gems/metals/quartz)
        quantity: Units reserved by the listing
        unit_price: Gold per unit
        status: active/sold/cancelled
        buyer_id: Player who bought the listing, once sold
        closed_at: When the listing left the active state
    """

    __tablename__ = "market_listings"

    id: Mapped[int] = mapped_column(BigIntegerKey, primary_key=True, autoincrement=True)
    seller_id: Mapped[str] = mapped_column(String(36), ForeignKey("players.id"), nullable=False)
    item_type: Mapped[str] = mapped_column(String(16), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[int] = mapped_column(BigInteger, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="active")
    buyer_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("players.id"), nullable=True
    )
    closed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    seller: Mapped["Player"] = relationship(
        "Player", back_populates="listings", foreign_keys=[seller_id]
    )
    buyer: Mapped[Optional["Player"]] = relationship("Player", foreign_keys=[buyer_id])

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_market_listings_quantity_positive"),
        CheckConstraint("unit_price > 0", name="ck_market_listings_price_positive"),
        CheckConstraint(
            "status IN ('active', 'sold', 'cancelled')", name="ck_market_listings_status"
        ),
        CheckConstraint(
            "item_type IN ('gems', 'metals', 'quartz')", name="ck_market_listings_item_type"
        ),
        Index("ix_market_listings_status_price", "status", "unit_price"),
        Index("ix_market_listings_seller", "seller_id"),
    )

    @property
    def total_price(self) -> int:
        return self.quantity * self.unit_price

    def __repr__(self) -> str:
        return (
            f"<Listing(id={self.id}, seller='{self.seller_id}', {self.quantity} "
            f"{self.item_type} @ {self.unit_price}, status='{self.status}')>"
        )
