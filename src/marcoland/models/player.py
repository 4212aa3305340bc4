"""Player ledger model.

One row per player holding the spendable balances of every resource. The row
doubles as the per-player lock: every economy operation selects it ``FOR
UPDATE`` before reading anything it will decide on.
"""

from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampCreatedMixin, new_uuid

if TYPE_CHECKING:
    from .inventory import InventoryItem
    from .listing import Listing


class Player(Base, TimestampCreatedMixin):
    """A player's ledger of resources plus the stats that gate equipment.

    Attributes:
        id: Primary key (UUID string issued by the session layer)
        username: Unique display name
        gold: Spendable gold
        gems: Spendable gems
        metals: Spendable metals
        quartz: Spendable quartz
        strength: Caps equipped encumbrance and gates item requirements
        speed: Drives the encumbrance speed modifier
        mana: Current mana, refilled by a lucky daily vote
        max_mana: Mana cap, raised at the mana tree
    """

    __tablename__ = "players"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    username: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)

    # Ledger balances; BIGINT so a full listing total (9999 x 1,000,000) fits
    gold: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    gems: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    metals: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    quartz: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    # Stats
    strength: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    speed: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    mana: Mapped[int] = mapped_column(Integer, nullable=False, default=50, server_default="50")
    max_mana: Mapped[int] = mapped_column(
        Integer, nullable=False, default=50, server_default="50"
    )

    # Relationships
    inventory: Mapped[list["InventoryItem"]] = relationship(
        "InventoryItem", back_populates="owner", cascade="all, delete-orphan"
    )
    listings: Mapped[list["Listing"]] = relationship(
        "Listing", back_populates="seller", foreign_keys="Listing.seller_id"
    )

    __table_args__ = (
        CheckConstraint("gold >= 0", name="ck_players_gold_nonnegative"),
        CheckConstraint("gems >= 0", name="ck_players_gems_nonnegative"),
        CheckConstraint("metals >= 0", name="ck_players_metals_nonnegative"),
        CheckConstraint("quartz >= 0", name="ck_players_quartz_nonnegative"),
        CheckConstraint("strength >= 0 AND speed >= 0", name="ck_players_stats_nonnegative"),
    )

    def __repr__(self) -> str:
        return f"<Player(id='{self.id}', username='{self.username}', gold={self.gold})>"
