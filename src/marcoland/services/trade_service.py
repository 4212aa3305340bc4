"""Trade Engine for MarcoLand.

Atomic purchase and sale of catalog equipment, equip and unequip, and the
daily-limited NPC actions: the gem store, the mana tree and the daily vote.
Each mutating method is one unit of work that starts by locking the acting
player's ledger row, so operations on the same player run one after another
while operations on different players do not wait on each other. Read models
run in read-only units.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from marcoland.database import Database
from marcoland.domain.enums import EquipmentCategory, PurchaseType, Resource
from marcoland.domain.equipment import can_equip, sell_back_refund
from marcoland.domain.rules_config import DEFAULT_RULES, RulesConfig
from marcoland.domain.trade_data import (
    Balance,
    GemPurchaseResult,
    GemStoreStatus,
    InventorySnapshot,
    ManaPurchaseResult,
    ManaTreeStatus,
    OwnedItem,
    PurchaseResult,
    SaleResult,
    ShopEntry,
    ShopSnapshot,
    SlotChange,
    VoteResult,
    VoteStatus,
)
from marcoland.errors import DailyLimitExceeded, InvalidRange, InvalidRequest
from marcoland.interfaces import IEquipmentCatalog, IInventoryManager, ILedgerStore
from marcoland.models import DailyPurchase, InventoryItem, Player
from marcoland.services.catalog_service import EquipmentCatalog
from marcoland.services.inventory_service import InventoryManager, parse_slot
from marcoland.services.ledger_service import LedgerStore
from marcoland.utils.rng import check_chance, generate_seed, random_int

logger = logging.getLogger(__name__)

LedgerFactory = Callable[[Session], ILedgerStore]
CatalogFactory = Callable[[Session], IEquipmentCatalog]
InventoryFactory = Callable[[Session, IEquipmentCatalog], IInventoryManager]


def utc_today() -> date:
    return datetime.now(UTC).date()


def to_owned_item(item: InventoryItem) -> OwnedItem:
    """Flatten an inventory row and its definition into a value object."""
    definition = item.equipment
    return OwnedItem(
        inventory_id=item.id,
        equipment_id=definition.id,
        name=definition.name,
        category=definition.category,
        slot_type=definition.slot_type,
        equipped_slot=item.equipped_slot,
        cost_gold=definition.cost_gold,
        damage_min=definition.damage_min,
        damage_max=definition.damage_max,
        protection=definition.protection,
        encumbrance=definition.encumbrance,
        strength_required=definition.strength_required,
    )


def parse_category(value: str | None) -> EquipmentCategory | None:
    """Accept ``weapon``/``weapons``/``armor``/``armour``; None passes through."""
    if value is None:
        return None
    normalized = value.strip().lower().rstrip("s").replace("armour", "armor")
    try:
        return EquipmentCategory(normalized)
    except ValueError as exc:
        raise InvalidRequest(
            'Invalid equipment type. Must be "weapon" or "armor"', type=value
        ) from exc


@dataclass(slots=True)
class _Components:
    ledger: ILedgerStore
    catalog: IEquipmentCatalog
    inventory: IInventoryManager


class TradeEngine:
    """Single-player economy operations against the shared ledger."""

    def __init__(
        self,
        database: Database,
        *,
        rules: RulesConfig = DEFAULT_RULES,
        ledger_factory: LedgerFactory = LedgerStore,
        catalog_factory: CatalogFactory = EquipmentCatalog,
        inventory_factory: InventoryFactory = InventoryManager,
        today: Callable[[], date] = utc_today,
    ):
        self.database = database
        self.rules = rules
        self._ledger_factory = ledger_factory
        self._catalog_factory = catalog_factory
        self._inventory_factory = inventory_factory
        self._today = today

    def _components(self, session: Session) -> _Components:
        catalog = self._catalog_factory(session)
        return _Components(
            ledger=self._ledger_factory(session),
            catalog=catalog,
            inventory=self._inventory_factory(session, catalog),
        )

    # ------------------------------------------------------------------
    # Equipment purchase and sale

    def purchase(
        self, player_id: str, equipment_id: int, category: str | None = None
    ) -> PurchaseResult:
        """Buy one catalog item.

        Debit and item creation commit together or not at all.

        Args:
            player_id: Buyer
            equipment_id: Catalog definition to buy
            category: Optional weapon/armor the caller expects the item to be

        Raises:
            EquipmentNotFound: If the definition does not exist
            InvalidRequest: If ``category`` does not match the definition
            InsufficientFunds: If the buyer cannot pay ``cost_gold``
        """
        expected = parse_category(category)
        with self.database.unit_of_work() as session:
            parts = self._components(session)
            parts.ledger.lock(player_id)
            definition = parts.catalog.lookup(equipment_id)
            if expected is not None and definition.category != expected.value:
                raise InvalidRequest(
                    f"Equipment {equipment_id} is not a {expected.value}",
                    equipment_id=equipment_id,
                    type=expected.value,
                )
            cost = definition.cost_gold
            balance = parts.ledger.apply_delta(
                player_id, {Resource.GOLD: -cost}, guard={Resource.GOLD: cost}
            )
            inventory_id = parts.inventory.add_item(player_id, equipment_id)
            result = PurchaseResult(
                inventory_id=inventory_id,
                equipment_id=definition.id,
                item_name=definition.name,
                item_cost=cost,
                balance=balance,
            )
        logger.info(
            "player %s bought %s for %d gold (item %s)",
            player_id,
            result.item_name,
            cost,
            inventory_id,
        )
        return result

    def sell(self, player_id: str, inventory_id: str) -> SaleResult:
        """Sell an owned item back for half its catalog cost, rounded down.

        Raises:
            ItemNotFound: If the item does not exist or is not owned by the player
        """
        with self.database.unit_of_work() as session:
            parts = self._components(session)
            parts.ledger.lock(player_id)
            item = parts.inventory.remove_item(player_id, inventory_id)
            definition = item.equipment
            refund = sell_back_refund(definition.cost_gold, self.rules)
            balance = parts.ledger.apply_delta(player_id, {Resource.GOLD: refund})
            result = SaleResult(
                inventory_id=inventory_id,
                item_name=definition.name,
                original_cost=definition.cost_gold,
                refund_gold=refund,
                balance=balance,
            )
        logger.info(
            "player %s sold %s for %d gold", player_id, result.item_name, result.refund_gold
        )
        return result

    # ------------------------------------------------------------------
    # Slots

    def equip_or_swap(self, player_id: str, inventory_id: str, slot: str) -> SlotChange:
        """Equip an item; whatever was in the slot goes back to the bag."""
        with self.database.unit_of_work() as session:
            parts = self._components(session)
            parts.ledger.lock(player_id)
            displaced = parts.inventory.equip(player_id, inventory_id, slot)
            return self._slot_change(
                parts,
                player_id,
                slot=slot,
                action="equipped",
                item_id=inventory_id,
                displaced=displaced,
            )

    def unequip(self, player_id: str, slot: str) -> SlotChange:
        """Empty a slot; an already empty slot is not an error."""
        with self.database.unit_of_work() as session:
            parts = self._components(session)
            parts.ledger.lock(player_id)
            removed = parts.inventory.unequip(player_id, slot)
            return self._slot_change(
                parts,
                player_id,
                slot=slot,
                action="unequipped",
                item_id=removed.id if removed is not None else None,
                displaced=removed,
            )

    def _slot_change(
        self,
        parts: _Components,
        player_id: str,
        *,
        slot: str,
        action: str,
        item_id: str | None,
        displaced: InventoryItem | None,
    ) -> SlotChange:
        equipped = parts.inventory.equipped(player_id)
        return SlotChange(
            slot=parse_slot(slot).value,
            action=action,
            item_id=item_id,
            displaced_item_id=displaced.id if displaced is not None else None,
            equipped={name: to_owned_item(item) for name, item in equipped.items()},
            combat_stats=parts.inventory.combat_stats(player_id),
        )

    # ------------------------------------------------------------------
    # Read models

    def balance(self, player_id: str) -> Balance:
        with self.database.unit_of_work(read_only=True) as session:
            return self._ledger_factory(session).get_balance(player_id)

    def inventory(self, player_id: str) -> InventorySnapshot:
        """Equipped items, bag contents and derived combat stats."""
        with self.database.unit_of_work(read_only=True) as session:
            parts = self._components(session)
            parts.ledger.get_balance(player_id)
            equipped = parts.inventory.equipped(player_id)
            return InventorySnapshot(
                equipped={slot: to_owned_item(item) for slot, item in equipped.items()},
                unequipped=[to_owned_item(item) for item in parts.inventory.unequipped(player_id)],
                combat_stats=parts.inventory.combat_stats(player_id),
            )

    def shop(
        self,
        player_id: str,
        *,
        slot_type: str | None = None,
        category: str | None = None,
    ) -> ShopSnapshot:
        """Catalog annotated with what the player can afford and use."""
        expected = parse_category(category)
        if slot_type is not None:
            slot_type = parse_slot(slot_type).value
        with self.database.unit_of_work() as session:
            parts = self._components(session)
            player = parts.ledger.lock(player_id)[player_id]
            definitions = parts.catalog.list(
                slot_type=slot_type,
                category=expected.value if expected is not None else None,
            )
            entries = [
                ShopEntry(
                    equipment_id=d.id,
                    name=d.name,
                    category=d.category,
                    slot_type=d.slot_type,
                    cost_gold=d.cost_gold,
                    damage_min=d.damage_min,
                    damage_max=d.damage_max,
                    protection=d.protection,
                    encumbrance=d.encumbrance,
                    strength_required=d.strength_required,
                    affordable=player.gold >= d.cost_gold,
                    can_use=can_equip(player.strength, d.strength_required),
                )
                for d in definitions
            ]
            return ShopSnapshot(
                equipment=entries,
                player_gold=player.gold,
                player_strength=player.strength,
                player_speed=player.speed,
            )

    # ------------------------------------------------------------------
    # Gem store

    def gem_store_status(self, player_id: str) -> GemStoreStatus:
        rules = self.rules.gem_store
        day = self._today()
        with self.database.unit_of_work(read_only=True) as session:
            balance = self._ledger_factory(session).get_balance(player_id)
            row = self._daily_row(session, player_id, PurchaseType.GEMS, day)
            purchased = row.quantity if row is not None else 0
        return GemStoreStatus(
            purchased_today=purchased,
            remaining_today=max(0, rules.daily_limit - purchased),
            daily_limit=rules.daily_limit,
            price_per_gem=rules.price_per_gem,
            balance=balance,
        )

    def purchase_gems(self, player_id: str, quantity: int) -> GemPurchaseResult:
        """Buy gems from the NPC store within the player's daily allowance.

        Raises:
            InvalidRange: If quantity is not a positive integer
            DailyLimitExceeded: If today's purchases would pass the limit
            InsufficientFunds: If the player cannot pay
        """
        rules = self.rules.gem_store
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidRange("Quantity must be a positive integer", quantity=quantity)

        day = self._today()
        with self.database.unit_of_work() as session:
            ledger = self._ledger_factory(session)
            ledger.lock(player_id)
            row = self._daily_row(session, player_id, PurchaseType.GEMS, day)
            purchased = row.quantity if row is not None else 0
            if purchased + quantity > rules.daily_limit:
                raise DailyLimitExceeded(
                    f"Daily purchase limit exceeded: {purchased} of {rules.daily_limit} "
                    "gems already bought today",
                    purchased_today=purchased,
                    remaining_today=max(0, rules.daily_limit - purchased),
                )
            total_cost = quantity * rules.price_per_gem
            balance = ledger.apply_delta(
                player_id,
                {Resource.GOLD: -total_cost, Resource.GEMS: quantity},
                guard={Resource.GOLD: total_cost},
            )
            row = self._record_daily(
                session,
                row,
                player_id,
                PurchaseType.GEMS,
                day,
                quantity=quantity,
                gold_delta=-total_cost,
            )
            purchased_today = row.quantity

        logger.info("player %s bought %d gems for %d gold", player_id, quantity, total_cost)
        return GemPurchaseResult(
            quantity=quantity,
            total_cost=total_cost,
            balance=balance,
            purchased_today=purchased_today,
            remaining_today=max(0, rules.daily_limit - purchased_today),
        )

    # ------------------------------------------------------------------
    # Mana tree

    def mana_tree_status(self, player_id: str) -> ManaTreeStatus:
        rules = self.rules.mana_tree
        day = self._today()
        with self.database.unit_of_work(read_only=True) as session:
            balance = self._ledger_factory(session).get_balance(player_id)
            max_mana = session.scalar(select(Player.max_mana).where(Player.id == player_id))
            row = self._daily_row(session, player_id, PurchaseType.MANA, day)
            purchased = row.quantity if row is not None else 0
        return ManaTreeStatus(
            purchased_today=purchased,
            daily_limit=rules.daily_limit,
            gems_required=rules.gems_per_purchase,
            current_max_mana=max_mana,
            balance=balance,
        )

    def purchase_max_mana(self, player_id: str) -> ManaPurchaseResult:
        """Trade gems for a permanent max mana increase, once per day.

        Raises:
            DailyLimitExceeded: If the player already bought mana today
            InsufficientQuantity: If the player holds too few gems
        """
        rules = self.rules.mana_tree
        day = self._today()
        with self.database.unit_of_work() as session:
            ledger = self._ledger_factory(session)
            player = ledger.lock(player_id)[player_id]
            row = self._daily_row(session, player_id, PurchaseType.MANA, day)
            purchased = row.quantity if row is not None else 0
            if purchased >= rules.daily_limit:
                raise DailyLimitExceeded(
                    "Already purchased mana today",
                    purchased_today=purchased,
                    daily_limit=rules.daily_limit,
                )
            cost = rules.gems_per_purchase
            balance = ledger.apply_delta(
                player_id, {Resource.GEMS: -cost}, guard={Resource.GEMS: cost}
            )
            player.max_mana += rules.mana_per_purchase
            row = self._record_daily(
                session, row, player_id, PurchaseType.MANA, day, quantity=1, gold_delta=0
            )
            result = ManaPurchaseResult(
                gems_spent=cost,
                max_mana_increased=rules.mana_per_purchase,
                max_mana=player.max_mana,
                purchased_today=row.quantity,
                balance=balance,
            )

        logger.info(
            "player %s spent %d gems on max mana (now %d)", player_id, cost, result.max_mana
        )
        return result

    # ------------------------------------------------------------------
    # Daily vote

    def vote_status(self, player_id: str) -> VoteStatus:
        rules = self.rules.vote
        day = self._today()
        with self.database.unit_of_work(read_only=True) as session:
            balance = self._ledger_factory(session).get_balance(player_id)
            row = self._daily_row(session, player_id, PurchaseType.VOTE, day)
        return VoteStatus(
            voted_today=row is not None,
            gold_earned_today=row.gold_delta if row is not None else 0,
            min_gold=rules.min_gold,
            max_gold=rules.max_gold,
            balance=balance,
        )

    def vote(self, player_id: str) -> VoteResult:
        """Collect the daily vote reward.

        The gold amount and the mana reload are rolled from a seed built from
        the player and the day, so the reward for a given day is fixed.

        Raises:
            DailyLimitExceeded: If the player already voted today
        """
        rules = self.rules.vote
        day = self._today()
        with self.database.unit_of_work() as session:
            ledger = self._ledger_factory(session)
            player = ledger.lock(player_id)[player_id]
            row = self._daily_row(session, player_id, PurchaseType.VOTE, day)
            if row is not None:
                raise DailyLimitExceeded(
                    f"Already voted today - earned {row.gold_delta} gold",
                    gold_earned_today=row.gold_delta,
                )
            reward = random_int(
                generate_seed(player_id, day, "vote_gold"), rules.min_gold, rules.max_gold
            )["value"]
            reload = check_chance(
                generate_seed(player_id, day, "vote_mana_reload"), rules.mana_reload_chance
            )["success"]
            balance = ledger.apply_delta(player_id, {Resource.GOLD: reward})
            if reload:
                player.mana = player.max_mana
            self._record_daily(
                session, None, player_id, PurchaseType.VOTE, day, quantity=1, gold_delta=reward
            )
            result = VoteResult(
                gold_awarded=reward,
                mana_reload=reload,
                mana=player.mana,
                max_mana=player.max_mana,
                balance=balance,
            )

        logger.info(
            "player %s voted for %d gold (mana reload: %s)", player_id, reward, reload
        )
        return result

    # ------------------------------------------------------------------
    # Daily counters

    @staticmethod
    def _daily_row(
        session: Session, player_id: str, purchase_type: PurchaseType, day: date
    ) -> DailyPurchase | None:
        return session.scalars(
            select(DailyPurchase).where(
                DailyPurchase.player_id == player_id,
                DailyPurchase.purchase_type == purchase_type.value,
                DailyPurchase.purchase_date == day,
            )
        ).one_or_none()

    @staticmethod
    def _record_daily(
        session: Session,
        row: DailyPurchase | None,
        player_id: str,
        purchase_type: PurchaseType,
        day: date,
        *,
        quantity: int,
        gold_delta: int,
    ) -> DailyPurchase:
        if row is None:
            row = DailyPurchase(
                player_id=player_id,
                purchase_type=purchase_type.value,
                purchase_date=day,
                quantity=0,
                gold_delta=0,
            )
            session.add(row)
        row.quantity += quantity
        row.gold_delta += gold_delta
        session.flush()
        return row
