"""Service layer for the MarcoLand economy.

Session-scoped components work inside a caller's transaction and never commit:

- LedgerStore: player balances, row locks and guarded deltas
- EquipmentCatalog: read-only equipment definitions
- InventoryManager: owned items and equip slots

Operation services own the unit of work and compose the components above
through protocol interfaces:

- TradeEngine: NPC shop purchases and sales, equip/unequip, gem store
- Marketplace: player listings of gems, metals and quartz

Production Usage:
    from marcoland.factory import create_trade_engine
    trades = create_trade_engine(database)
    result = trades.purchase(player_id, equipment_id=2)

Testing Usage:
    from marcoland.services.trade_service import TradeEngine

    class BrokenInventory(InventoryManager):
        def add_item(self, owner_id, equipment_id):
            raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    trades = TradeEngine(database, inventory_factory=BrokenInventory)
"""

from marcoland.services.catalog_service import EquipmentCatalog
from marcoland.services.inventory_service import InventoryManager
from marcoland.services.ledger_service import LedgerStore
from marcoland.services.market_service import Marketplace
from marcoland.services.trade_service import TradeEngine

__all__ = [
    "EquipmentCatalog",
    "InventoryManager",
    "LedgerStore",
    "Marketplace",
    "TradeEngine",
]
