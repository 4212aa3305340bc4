"""Unit tests for the Marketplace."""

import pytest
from sqlalchemy.exc import OperationalError

from marcoland.errors import (
    InsufficientFunds,
    InsufficientQuantity,
    InvalidRange,
    ListingNotActive,
    ListingNotFound,
    NotOwner,
    SelfTrade,
    StoreUnavailable,
)
from marcoland.services.ledger_service import LedgerStore
from marcoland.services.market_service import Marketplace


class FailingCreditLedger(LedgerStore):
    """Ledger whose credits hit a dead store; debits still go through."""

    def apply_delta(self, player_id, deltas, guard=None):
        if any(amount > 0 for amount in deltas.values()):
            raise OperationalError("UPDATE players", {}, Exception("disk I/O error"))
        return super().apply_delta(player_id, deltas, guard)


def _balance(database, player_id):
    with database.unit_of_work() as session:
        return LedgerStore(session).get_balance(player_id)


class TestCreateListing:
    def test_reserves_quantity(self, database, market, make_player):
        seller = make_player(metals=10)

        listing = market.create_listing(seller, "metals", 5, 20)

        assert listing.status == "active"
        assert listing.total_price == 100
        assert _balance(database, seller).metals == 5

    def test_insufficient_quantity(self, database, market, make_player):
        seller = make_player(gems=2)

        with pytest.raises(InsufficientQuantity):
            market.create_listing(seller, "gems", 3, 10)

        assert _balance(database, seller).gems == 2
        assert market.my_listings(seller) == []

    @pytest.mark.parametrize(
        ("item_type", "quantity", "unit_price"),
        [
            ("metals", 0, 10),
            ("metals", 10_000, 10),
            ("metals", 5, 0),
            ("metals", 5, 1_000_001),
            ("gold", 5, 10),
            ("wood", 5, 10),
            ("metals", True, 10),
        ],
    )
    def test_out_of_range(self, market, make_player, item_type, quantity, unit_price):
        seller = make_player(gold=100_000, metals=20_000)

        with pytest.raises(InvalidRange):
            market.create_listing(seller, item_type, quantity, unit_price)

    def test_bounds_are_inclusive(self, market, make_player):
        seller = make_player(quartz=9999)

        listing = market.create_listing(seller, "quartz", 9999, 1_000_000)

        assert listing.total_price == 9_999_000_000


class TestBuy:
    def test_listing_lifecycle(self, database, market, make_player):
        seller = make_player(gold=0, metals=10)
        buyer = make_player(gold=150)
        listing = market.create_listing(seller, "metals", 5, 20)

        receipt = market.buy(buyer, listing.listing_id)

        assert receipt.total_price == 100
        assert receipt.listing.status == "sold"
        assert receipt.listing.buyer_id == buyer
        assert receipt.listing.closed_at is not None
        assert _balance(database, buyer).gold == 50
        assert _balance(database, buyer).metals == 5
        assert _balance(database, seller).gold == 100
        assert _balance(database, seller).metals == 5

        with pytest.raises(ListingNotActive):
            market.buy(make_player(gold=500), listing.listing_id)

    def test_gold_is_conserved(self, database, market, make_player):
        seller = make_player(gold=1234, gems=7)
        buyer = make_player(gold=5000)
        listing = market.create_listing(seller, "gems", 7, 300)
        before = _balance(database, seller).gold + _balance(database, buyer).gold

        market.buy(buyer, listing.listing_id)

        after = _balance(database, seller).gold + _balance(database, buyer).gold
        assert after == before

    def test_insufficient_funds_keeps_listing_active(self, database, market, make_player):
        seller = make_player(metals=10)
        buyer = make_player(gold=99)
        listing = market.create_listing(seller, "metals", 5, 20)

        with pytest.raises(InsufficientFunds):
            market.buy(buyer, listing.listing_id)

        assert market.get_listing(listing.listing_id).status == "active"
        assert _balance(database, buyer).gold == 99
        assert _balance(database, seller).gold == 0

    def test_self_trade(self, market, make_player):
        seller = make_player(gold=1000, metals=10)
        listing = market.create_listing(seller, "metals", 5, 20)

        with pytest.raises(SelfTrade):
            market.buy(seller, listing.listing_id)

    def test_unknown_listing(self, market, make_player):
        with pytest.raises(ListingNotFound):
            market.buy(make_player(gold=10), 424242)

    def test_largest_listing_can_be_bought(self, database, market, make_player):
        seller = make_player(quartz=9999)
        buyer = make_player(gold=9_999_000_000)
        listing = market.create_listing(seller, "quartz", 9999, 1_000_000)

        receipt = market.buy(buyer, listing.listing_id)

        assert receipt.total_price == 9_999_000_000
        assert _balance(database, seller).gold == 9_999_000_000
        assert _balance(database, buyer).gold == 0
        assert _balance(database, buyer).quartz == 9999

    def test_store_failure_mid_buy_changes_nothing(self, database, market, make_player):
        seller = make_player(gold=40, metals=10)
        buyer = make_player(gold=150)
        listing = market.create_listing(seller, "metals", 5, 20)
        broken = Marketplace(database, ledger_factory=FailingCreditLedger)

        with pytest.raises(StoreUnavailable):
            broken.buy(buyer, listing.listing_id)

        assert _balance(database, buyer).gold == 150
        assert _balance(database, buyer).metals == 0
        assert _balance(database, seller).gold == 40
        assert market.get_listing(listing.listing_id).status == "active"
        assert market.buy(buyer, listing.listing_id).listing.status == "sold"


class TestCancel:
    def test_cancel_returns_reservation(self, database, market, make_player):
        seller = make_player(metals=10)
        listing = market.create_listing(seller, "metals", 5, 20)

        receipt = market.cancel_listing(seller, listing.listing_id)

        assert receipt.refunded == {"metals": 5}
        assert receipt.listing.status == "cancelled"
        assert receipt.seller_balance.metals == 10
        assert _balance(database, seller).metals == 10

        with pytest.raises(ListingNotActive):
            market.cancel_listing(seller, listing.listing_id)
        assert _balance(database, seller).metals == 10

    def test_only_seller_can_cancel(self, market, make_player):
        seller = make_player(metals=10)
        other = make_player()
        listing = market.create_listing(seller, "metals", 5, 20)

        with pytest.raises(NotOwner):
            market.cancel_listing(other, listing.listing_id)
        assert market.get_listing(listing.listing_id).status == "active"

    def test_sold_listing_cannot_be_cancelled(self, database, market, make_player):
        seller = make_player(metals=10)
        listing = market.create_listing(seller, "metals", 5, 20)
        market.buy(make_player(gold=100), listing.listing_id)

        with pytest.raises(ListingNotActive):
            market.cancel_listing(seller, listing.listing_id)
        assert _balance(database, seller).metals == 5

    def test_unknown_listing(self, market, make_player):
        with pytest.raises(ListingNotFound):
            market.cancel_listing(make_player(), 31337)

    def test_store_failure_mid_cancel_changes_nothing(self, database, market, make_player):
        seller = make_player(metals=10)
        listing = market.create_listing(seller, "metals", 5, 20)
        broken = Marketplace(database, ledger_factory=FailingCreditLedger)

        with pytest.raises(StoreUnavailable):
            broken.cancel_listing(seller, listing.listing_id)

        assert _balance(database, seller).metals == 5
        assert market.get_listing(listing.listing_id).status == "active"
        assert market.cancel_listing(seller, listing.listing_id).refunded == {"metals": 5}


class TestQueries:
    def test_browse_orders_by_price_then_id(self, market, make_player):
        seller = make_player(gems=10, metals=10, quartz=10)
        expensive = market.create_listing(seller, "gems", 1, 50)
        cheap_first = market.create_listing(seller, "metals", 1, 10)
        cheap_second = market.create_listing(seller, "quartz", 1, 10)

        listings = market.browse()

        assert [item.listing_id for item in listings] == [
            cheap_first.listing_id,
            cheap_second.listing_id,
            expensive.listing_id,
        ]
        assert [item.listing_id for item in market.browse("all")] == [
            item.listing_id for item in listings
        ]

    def test_browse_filters_type_and_hides_closed(self, market, make_player):
        seller = make_player(gems=10, metals=10)
        gems = market.create_listing(seller, "gems", 2, 10)
        market.create_listing(seller, "metals", 2, 10)
        cancelled = market.create_listing(seller, "gems", 1, 5)
        market.cancel_listing(seller, cancelled.listing_id)

        assert [item.listing_id for item in market.browse("gems")] == [gems.listing_id]

    def test_browse_rejects_unknown_type(self, market):
        with pytest.raises(InvalidRange):
            market.browse("wood")

    def test_my_listings_newest_first_any_status(self, market, make_player):
        seller = make_player(metals=10)
        other = make_player(metals=10)
        first = market.create_listing(seller, "metals", 1, 10)
        second = market.create_listing(seller, "metals", 1, 10)
        market.create_listing(other, "metals", 1, 10)
        market.cancel_listing(seller, first.listing_id)

        mine = market.my_listings(seller)

        assert [item.listing_id for item in mine] == [second.listing_id, first.listing_id]
        assert [item.status for item in mine] == ["active", "cancelled"]
