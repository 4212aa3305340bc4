"""Player-to-player marketplace for MarcoLand.

Sellers list a fixed quantity of one tradable resource at a gold unit price.
Creating a listing reserves the quantity on the seller's ledger; the listing
holds it until a buyer takes the whole lot or the seller cancels.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy import select
from sqlalchemy.orm import Session

from marcoland.database import Database
from marcoland.domain.enums import ListingStatus, Resource
from marcoland.domain.rules_config import DEFAULT_RULES, RulesConfig
from marcoland.domain.trade_data import CancelReceipt, ListingView, PurchaseReceipt
from marcoland.errors import (
    InvalidRange,
    ListingNotActive,
    ListingNotFound,
    NotOwner,
    SelfTrade,
)
from marcoland.interfaces import ILedgerStore
from marcoland.models import Listing, utc_now
from marcoland.services.ledger_service import LedgerStore

logger = logging.getLogger(__name__)

LedgerFactory = Callable[[Session], ILedgerStore]


def to_listing_view(listing: Listing) -> ListingView:
    return ListingView(
        listing_id=listing.id,
        seller_id=listing.seller_id,
        item_type=listing.item_type,
        quantity=listing.quantity,
        unit_price=listing.unit_price,
        status=listing.status,
        created_at=listing.created_at,
        buyer_id=listing.buyer_id,
        closed_at=listing.closed_at,
    )


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class Marketplace:
    """Listing lifecycle: ``active`` to ``sold`` or ``cancelled``."""

    def __init__(
        self,
        database: Database,
        *,
        rules: RulesConfig = DEFAULT_RULES,
        ledger_factory: LedgerFactory = LedgerStore,
    ):
        self.database = database
        self.rules = rules
        self._ledger_factory = ledger_factory

    def parse_item_type(self, item_type: str) -> Resource:
        """Return the tradable resource named by ``item_type``.

        Raises:
            InvalidRange: If the resource does not exist or cannot be traded
        """
        tradable = self.rules.market.tradable_resources
        try:
            resource = Resource(str(item_type).strip().lower())
        except ValueError:
            resource = None
        if resource is None or resource not in tradable:
            allowed = ", ".join(sorted(r.value for r in tradable))
            raise InvalidRange(f"Item type must be one of: {allowed}", item_type=item_type)
        return resource

    def validate(self, item_type: str, quantity: int, unit_price: int) -> Resource:
        """Check a new listing against the market bounds before touching the store."""
        market = self.rules.market
        resource = self.parse_item_type(item_type)
        if not _is_int(quantity) or not market.min_quantity <= quantity <= market.max_quantity:
            raise InvalidRange(
                f"Quantity must be between {market.min_quantity} and {market.max_quantity}",
                quantity=quantity,
            )
        if not _is_int(unit_price) or not market.min_price <= unit_price <= market.max_price:
            raise InvalidRange(
                f"Unit price must be between {market.min_price} and {market.max_price}",
                unit_price=unit_price,
            )
        return resource

    # ------------------------------------------------------------------
    # Mutations

    def create_listing(
        self, seller_id: str, item_type: str, quantity: int, unit_price: int
    ) -> ListingView:
        """Reserve ``quantity`` of ``item_type`` and open a listing for it.

        Raises:
            InvalidRange: If quantity, price or item type are out of bounds
            InsufficientQuantity: If the seller holds less than ``quantity``
        """
        resource = self.validate(item_type, quantity, unit_price)
        with self.database.unit_of_work() as session:
            ledger = self._ledger_factory(session)
            ledger.lock(seller_id)
            ledger.apply_delta(seller_id, {resource: -quantity}, guard={resource: quantity})
            listing = Listing(
                seller_id=seller_id,
                item_type=resource.value,
                quantity=quantity,
                unit_price=unit_price,
                status=ListingStatus.ACTIVE.value,
            )
            session.add(listing)
            session.flush()
            view = to_listing_view(listing)
        logger.info(
            "listing %d created: %s sells %d %s at %d gold",
            view.listing_id,
            seller_id,
            quantity,
            resource.value,
            unit_price,
        )
        return view

    def cancel_listing(self, seller_id: str, listing_id: int) -> CancelReceipt:
        """Close an active listing and return the reservation to the seller.

        Raises:
            ListingNotFound: If the listing does not exist
            NotOwner: If ``seller_id`` did not create the listing
            ListingNotActive: If the listing was already sold or cancelled
        """
        with self.database.unit_of_work() as session:
            listing = self._get(session, listing_id)
            if listing.seller_id != seller_id:
                raise NotOwner(listing_id=listing_id)

            ledger = self._ledger_factory(session)
            ledger.lock(seller_id)
            listing = self._lock_listing(session, listing_id)
            self._require_active(listing)

            resource = Resource(listing.item_type)
            balance = ledger.apply_delta(seller_id, {resource: listing.quantity})
            listing.status = ListingStatus.CANCELLED.value
            listing.closed_at = utc_now()
            session.flush()
            receipt = CancelReceipt(
                listing=to_listing_view(listing),
                refunded={resource.value: listing.quantity},
                seller_balance=balance,
            )
        logger.info("listing %d cancelled by %s", listing_id, seller_id)
        return receipt

    def buy(self, buyer_id: str, listing_id: int) -> PurchaseReceipt:
        """Buy the whole of an active listing.

        Gold moves from buyer to seller and the reserved resources move to the
        buyer in one unit of work. Both ledgers are locked in ascending id
        order, then the listing row.

        Raises:
            ListingNotFound: If the listing does not exist
            ListingNotActive: If the listing was already sold or cancelled
            SelfTrade: If the buyer is the seller
            InsufficientFunds: If the buyer cannot pay the total price
        """
        with self.database.unit_of_work() as session:
            listing = self._get(session, listing_id)
            self._require_active(listing)
            seller_id = listing.seller_id
            if seller_id == buyer_id:
                raise SelfTrade(listing_id=listing_id)

            ledger = self._ledger_factory(session)
            ledger.lock(buyer_id, seller_id)
            listing = self._lock_listing(session, listing_id)
            self._require_active(listing)

            total = listing.quantity * listing.unit_price
            resource = Resource(listing.item_type)
            ledger.apply_delta(
                buyer_id, {Resource.GOLD: -total}, guard={Resource.GOLD: total}
            )
            seller_balance = ledger.apply_delta(seller_id, {Resource.GOLD: total})
            buyer_balance = ledger.apply_delta(buyer_id, {resource: listing.quantity})

            listing.status = ListingStatus.SOLD.value
            listing.buyer_id = buyer_id
            listing.closed_at = utc_now()
            session.flush()
            receipt = PurchaseReceipt(
                listing=to_listing_view(listing),
                total_price=total,
                buyer_balance=buyer_balance,
                seller_balance=seller_balance,
            )
        logger.info(
            "listing %d sold: %s bought %d %s from %s for %d gold",
            listing_id,
            buyer_id,
            receipt.listing.quantity,
            receipt.listing.item_type,
            seller_id,
            total,
        )
        return receipt

    # ------------------------------------------------------------------
    # Queries

    def browse(self, item_type: str | None = None) -> list[ListingView]:
        """Active listings, cheapest first; ``None`` or ``"all"`` means every type."""
        stmt = select(Listing).where(Listing.status == ListingStatus.ACTIVE.value)
        if item_type is not None and item_type.strip().lower() != "all":
            stmt = stmt.where(Listing.item_type == self.parse_item_type(item_type).value)
        stmt = stmt.order_by(Listing.unit_price, Listing.id)
        with self.database.unit_of_work(read_only=True) as session:
            return [to_listing_view(listing) for listing in session.scalars(stmt)]

    def my_listings(self, seller_id: str) -> list[ListingView]:
        """Every listing the seller created, newest first."""
        stmt = (
            select(Listing)
            .where(Listing.seller_id == seller_id)
            .order_by(Listing.created_at.desc(), Listing.id.desc())
        )
        with self.database.unit_of_work(read_only=True) as session:
            return [to_listing_view(listing) for listing in session.scalars(stmt)]

    def get_listing(self, listing_id: int) -> ListingView:
        with self.database.unit_of_work(read_only=True) as session:
            return to_listing_view(self._get(session, listing_id))

    # ------------------------------------------------------------------
    # Helpers

    @staticmethod
    def _get(session: Session, listing_id: int) -> Listing:
        listing = session.get(Listing, listing_id)
        if listing is None:
            raise ListingNotFound(listing_id=listing_id)
        return listing

    @staticmethod
    def _lock_listing(session: Session, listing_id: int) -> Listing:
        listing = session.execute(
            select(Listing)
            .where(Listing.id == listing_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if listing is None:
            raise ListingNotFound(listing_id=listing_id)
        return listing

    @staticmethod
    def _require_active(listing: Listing) -> None:
        if listing.status != ListingStatus.ACTIVE.value:
            raise ListingNotActive(
                f"Listing {listing.id} is {listing.status}",
                listing_id=listing.id,
                status=listing.status,
            )
