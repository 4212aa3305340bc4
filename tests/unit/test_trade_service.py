"""Unit tests for the Trade Engine.

Covers purchase, sell-back, equip/unequip through the engine, the gem store,
the mana tree, the daily vote and atomicity when the store fails part-way through an operation.
"""

from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

from marcoland.domain.rules_config import GemStoreRules, ManaTreeRules, RulesConfig, VoteRules
from marcoland.errors import (
    DailyLimitExceeded,
    EquipmentNotFound,
    InsufficientFunds,
    InsufficientQuantity,
    InvalidRange,
    InvalidRequest,
    ItemNotFound,
    PlayerNotFound,
    SlotMismatch,
    StoreUnavailable,
)
from marcoland.services.inventory_service import InventoryManager
from marcoland.services.trade_service import TradeEngine, parse_category
from marcoland.utils.rng import generate_seed, random_int


class FailingInventory(InventoryManager):
    """Inventory manager whose writes hit a dead store."""

    def add_item(self, owner_id, equipment_id):
        raise OperationalError("INSERT INTO inventory_items", {}, Exception("disk I/O error"))


class TestPurchase:
    def test_purchase_debits_and_creates_item(self, trades, make_player, equipment_ids):
        player_id = make_player(gold=500)

        result = trades.purchase(player_id, equipment_ids["Short Sword"])

        assert result.balance.gold == 300
        assert result.item_cost == 200
        assert result.item_name == "Short Sword"
        snapshot = trades.inventory(player_id)
        assert snapshot.equipped == {}
        assert [item.inventory_id for item in snapshot.unequipped] == [result.inventory_id]

    def test_insufficient_funds_leaves_no_trace(self, trades, make_player, equipment_ids):
        player_id = make_player(gold=50)

        with pytest.raises(InsufficientFunds):
            trades.purchase(player_id, equipment_ids["Short Sword"])

        assert trades.balance(player_id).gold == 50
        assert trades.inventory(player_id).unequipped == []

    def test_exact_funds(self, trades, make_player, equipment_ids):
        player_id = make_player(gold=200)

        assert trades.purchase(player_id, equipment_ids["Short Sword"]).balance.gold == 0

    def test_unknown_equipment(self, trades, make_player):
        player_id = make_player(gold=500)

        with pytest.raises(EquipmentNotFound):
            trades.purchase(player_id, 987654)

    def test_category_must_match(self, trades, make_player, equipment_ids):
        player_id = make_player(gold=500)

        with pytest.raises(InvalidRequest):
            trades.purchase(player_id, equipment_ids["Short Sword"], category="armor")
        assert trades.balance(player_id).gold == 500

        result = trades.purchase(player_id, equipment_ids["Short Sword"], category="weapons")
        assert result.balance.gold == 300

    def test_unknown_player(self, trades, equipment_ids):
        with pytest.raises(PlayerNotFound):
            trades.purchase("nobody", equipment_ids["Sandals"])

    def test_store_failure_rolls_back_debit(self, database, make_player, equipment_ids):
        player_id = make_player(gold=500)
        engine = TradeEngine(database, inventory_factory=FailingInventory)

        with pytest.raises(StoreUnavailable):
            engine.purchase(player_id, equipment_ids["Short Sword"])

        trades = TradeEngine(database)
        assert trades.balance(player_id).gold == 500
        assert trades.inventory(player_id).unequipped == []


class TestSell:
    def test_sell_refunds_half(self, trades, make_player, equipment_ids):
        player_id = make_player(gold=500)
        bought = trades.purchase(player_id, equipment_ids["Short Sword"])

        sale = trades.sell(player_id, bought.inventory_id)

        assert sale.refund_gold == 100
        assert sale.original_cost == 200
        assert sale.balance.gold == 400
        assert trades.inventory(player_id).unequipped == []

    def test_sell_equipped_item_clears_slot(self, trades, make_player, equipment_ids):
        player_id = make_player(gold=100)
        bought = trades.purchase(player_id, equipment_ids["Leather Cap"])
        trades.equip_or_swap(player_id, bought.inventory_id, "head")

        sale = trades.sell(player_id, bought.inventory_id)

        assert sale.refund_gold == 20
        assert trades.inventory(player_id).equipped == {}

    def test_sell_missing_item(self, trades, make_player):
        player_id = make_player(gold=10)

        with pytest.raises(ItemNotFound, match="Item not found in inventory"):
            trades.sell(player_id, "not-an-item")
        assert trades.balance(player_id).gold == 10

    def test_cannot_sell_someone_elses_item(self, trades, make_player, equipment_ids):
        owner = make_player(gold=100)
        thief = make_player(gold=0)
        bought = trades.purchase(owner, equipment_ids["Sandals"])

        with pytest.raises(ItemNotFound):
            trades.sell(thief, bought.inventory_id)
        assert trades.balance(thief).gold == 0
        assert len(trades.inventory(owner).unequipped) == 1


class TestSlots:
    def test_equip_then_swap(self, trades, make_player, equipment_ids):
        player_id = make_player(gold=1000)
        dagger = trades.purchase(player_id, equipment_ids["Rusty Dagger"]).inventory_id
        sword = trades.purchase(player_id, equipment_ids["Short Sword"]).inventory_id

        first = trades.equip_or_swap(player_id, dagger, "weapon")
        second = trades.equip_or_swap(player_id, sword, "weapon")

        assert first.action == "equipped"
        assert first.combat_stats.weapon_damage_max == 5
        assert second.displaced_item_id == dagger
        assert second.equipped["weapon"].inventory_id == sword
        assert second.combat_stats.weapon_damage_max == 8
        assert [i.inventory_id for i in trades.inventory(player_id).unequipped] == [dagger]

    def test_unequip(self, trades, make_player, equipment_ids):
        player_id = make_player(gold=100)
        cap = trades.purchase(player_id, equipment_ids["Leather Cap"]).inventory_id
        trades.equip_or_swap(player_id, cap, "head")

        change = trades.unequip(player_id, "head")

        assert change.action == "unequipped"
        assert change.item_id == cap
        assert change.equipped == {}
        assert change.combat_stats.total_protection == 0

    def test_unequip_empty_slot(self, trades, make_player):
        player_id = make_player()

        change = trades.unequip(player_id, "hands")

        assert change.item_id is None
        assert change.equipped == {}

    def test_slot_changes_do_not_touch_gold(self, trades, make_player, equipment_ids):
        player_id = make_player(gold=100)
        cap = trades.purchase(player_id, equipment_ids["Leather Cap"]).inventory_id

        with pytest.raises(SlotMismatch):
            trades.equip_or_swap(player_id, cap, "feet")
        trades.equip_or_swap(player_id, cap, "head")

        assert trades.balance(player_id).gold == 60


class TestShop:
    def test_flags_affordable_and_usable(self, trades, make_player):
        player_id = make_player(gold=300, strength=10)

        shop = trades.shop(player_id, category="weapon")

        flags = {entry.name: (entry.affordable, entry.can_use) for entry in shop.equipment}
        assert flags["Short Sword"] == (True, True)
        assert flags["Hand Axe"] == (False, True)
        assert flags["Long Sword"] == (False, False)
        assert shop.player_gold == 300

    def test_slot_filter(self, trades, make_player):
        player_id = make_player()

        shop = trades.shop(player_id, slot_type="feet")

        assert [entry.name for entry in shop.equipment] == ["Sandals", "Iron Boots"]

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("weapon", "weapon"), ("Weapons", "weapon"), ("armour", "armor"), (None, None)],
    )
    def test_parse_category(self, raw, expected):
        parsed = parse_category(raw)
        assert (parsed.value if parsed else None) == expected

    def test_parse_category_rejects_unknown(self):
        with pytest.raises(InvalidRequest):
            parse_category("shield")


class TestGemStore:
    def test_purchase_within_limit(self, trades, make_player):
        player_id = make_player(gold=1000)

        result = trades.purchase_gems(player_id, 10)

        assert result.total_cost == 900
        assert result.balance.gold == 100
        assert result.balance.gems == 10
        assert (result.purchased_today, result.remaining_today) == (10, 20)

    def test_daily_limit(self, trades, make_player):
        player_id = make_player(gold=10_000)
        trades.purchase_gems(player_id, 20)

        with pytest.raises(DailyLimitExceeded):
            trades.purchase_gems(player_id, 11)

        status = trades.gem_store_status(player_id)
        assert status.purchased_today == 20
        assert status.remaining_today == 10
        assert status.balance.gems == 20
        assert trades.purchase_gems(player_id, 10).remaining_today == 0
        assert not trades.gem_store_status(player_id).can_purchase

    def test_limit_resets_next_day(self, database, make_player):
        player_id = make_player(gold=10_000)
        day = {"today": date(2025, 3, 1)}
        engine = TradeEngine(database, today=lambda: day["today"])
        engine.purchase_gems(player_id, 30)

        day["today"] = date(2025, 3, 2)

        assert engine.purchase_gems(player_id, 30).purchased_today == 30

    def test_insufficient_gold_does_not_count(self, trades, make_player):
        player_id = make_player(gold=100)

        with pytest.raises(InsufficientFunds):
            trades.purchase_gems(player_id, 2)

        assert trades.gem_store_status(player_id).purchased_today == 0
        assert trades.balance(player_id).gold == 100

    @pytest.mark.parametrize("quantity", [0, -3, True, 2.5])
    def test_quantity_must_be_positive_integer(self, trades, make_player, quantity):
        player_id = make_player(gold=1000)

        with pytest.raises(InvalidRange):
            trades.purchase_gems(player_id, quantity)

    def test_custom_rules(self, database, make_player):
        player_id = make_player(gold=100)
        rules = RulesConfig(gem_store=GemStoreRules(price_per_gem=10, daily_limit=5))
        engine = TradeEngine(database, rules=rules)

        assert engine.purchase_gems(player_id, 5).balance.gold == 50
        with pytest.raises(DailyLimitExceeded):
            engine.purchase_gems(player_id, 1)

    def test_day_is_read_once_per_purchase(self, database, make_player):
        player_id = make_player(gold=10_000)
        calls = []

        def clock():
            calls.append(None)
            return date(2025, 3, 1) if len(calls) == 1 else date(2025, 3, 2)

        TradeEngine(database, today=clock).purchase_gems(player_id, 30)

        assert len(calls) == 1
        same_day = TradeEngine(database, today=lambda: date(2025, 3, 1))
        assert same_day.gem_store_status(player_id).purchased_today == 30
        with pytest.raises(DailyLimitExceeded):
            same_day.purchase_gems(player_id, 1)


class TestManaTree:
    def test_purchase_raises_max_mana(self, trades, make_player):
        player_id = make_player(gems=150, max_mana=60)

        result = trades.purchase_max_mana(player_id)

        assert result.gems_spent == 100
        assert result.max_mana == 61
        assert result.balance.gems == 50
        status = trades.mana_tree_status(player_id)
        assert status.current_max_mana == 61
        assert status.purchased_today == 1
        assert not status.can_purchase

    def test_once_per_day(self, database, make_player):
        player_id = make_player(gems=500)
        day = {"today": date(2025, 3, 1)}
        engine = TradeEngine(database, today=lambda: day["today"])
        engine.purchase_max_mana(player_id)

        with pytest.raises(DailyLimitExceeded):
            engine.purchase_max_mana(player_id)
        assert engine.balance(player_id).gems == 400

        day["today"] = date(2025, 3, 2)
        assert engine.purchase_max_mana(player_id).max_mana == 52

    def test_not_enough_gems(self, trades, make_player):
        player_id = make_player(gems=99)

        assert not trades.mana_tree_status(player_id).can_purchase
        with pytest.raises(InsufficientQuantity):
            trades.purchase_max_mana(player_id)

        status = trades.mana_tree_status(player_id)
        assert status.purchased_today == 0
        assert status.current_max_mana == 50
        assert status.player_gems == 99

    def test_custom_rules(self, database, make_player):
        player_id = make_player(gems=30)
        rules = RulesConfig(
            mana_tree=ManaTreeRules(gems_per_purchase=10, mana_per_purchase=5, daily_limit=2)
        )
        engine = TradeEngine(database, rules=rules)

        engine.purchase_max_mana(player_id)
        assert engine.purchase_max_mana(player_id).max_mana == 60
        with pytest.raises(DailyLimitExceeded):
            engine.purchase_max_mana(player_id)


class TestVote:
    def test_vote_awards_seeded_gold(self, database, make_player):
        player_id = make_player(gold=10)
        day = date(2025, 3, 1)
        engine = TradeEngine(database, today=lambda: day)
        expected = random_int(generate_seed(player_id, day, "vote_gold"), 500, 1000)["value"]

        result = engine.vote(player_id)

        assert 500 <= result.gold_awarded <= 1000
        assert result.gold_awarded == expected
        assert result.balance.gold == 10 + expected
        status = engine.vote_status(player_id)
        assert status.voted_today
        assert not status.can_vote
        assert status.gold_earned_today == expected

    def test_once_per_day(self, database, make_player):
        player_id = make_player()
        day = {"today": date(2025, 3, 1)}
        engine = TradeEngine(database, today=lambda: day["today"])
        first = engine.vote(player_id)

        with pytest.raises(DailyLimitExceeded):
            engine.vote(player_id)
        assert engine.balance(player_id).gold == first.gold_awarded

        day["today"] = date(2025, 3, 2)
        assert engine.vote_status(player_id).can_vote
        second = engine.vote(player_id)
        assert engine.balance(player_id).gold == first.gold_awarded + second.gold_awarded

    @pytest.mark.parametrize(("chance", "reloaded"), [(1.0, True), (0.0, False)])
    def test_mana_reload(self, database, make_player, chance, reloaded):
        player_id = make_player(mana=10, max_mana=80)
        rules = RulesConfig(vote=VoteRules(mana_reload_chance=chance))

        result = TradeEngine(database, rules=rules).vote(player_id)

        assert result.mana_reload is reloaded
        assert result.mana == (80 if reloaded else 10)
        assert result.max_mana == 80

    def test_unknown_player(self, trades):
        with pytest.raises(PlayerNotFound):
            trades.vote("nobody")
