"""Service Factory for MarcoLand.

Factory functions that wire the economy components with their production
dependencies. Use them in application code; tests construct the services
directly and inject fakes through the protocol interfaces.

Example:
    # Production usage
    from marcoland.factory import create_marketplace
    market = create_marketplace(database)

    # Testing usage
    from marcoland.services.trade_service import TradeEngine

    trades = TradeEngine(database, inventory_factory=FailingInventory)
"""

from sqlalchemy.orm import Session

from marcoland.database import Database
from marcoland.domain.rules_config import DEFAULT_RULES, RulesConfig
from marcoland.interfaces import IEquipmentCatalog
from marcoland.services.catalog_service import EquipmentCatalog
from marcoland.services.inventory_service import InventoryManager
from marcoland.services.ledger_service import LedgerStore
from marcoland.services.market_service import Marketplace
from marcoland.services.trade_service import TradeEngine


def create_ledger_store(session: Session) -> LedgerStore:
    return LedgerStore(session)


def create_catalog(session: Session) -> EquipmentCatalog:
    return EquipmentCatalog(session)


def create_inventory_manager(
    session: Session, catalog: IEquipmentCatalog | None = None
) -> InventoryManager:
    """Create an InventoryManager.

    Args:
        session: Database session
        catalog: Catalog to validate equipment ids against; a new one is
            created on ``session`` when omitted

    Returns:
        Fully initialized InventoryManager
    """
    return InventoryManager(session, catalog or create_catalog(session))


def create_trade_engine(database: Database, rules: RulesConfig = DEFAULT_RULES) -> TradeEngine:
    """Create a TradeEngine bound to ``database``.

    Args:
        database: Store handle shared by the process
        rules: Economy constants

    Returns:
        TradeEngine using the SQLAlchemy ledger, catalog and inventory
    """
    return TradeEngine(
        database,
        rules=rules,
        ledger_factory=create_ledger_store,
        catalog_factory=create_catalog,
        inventory_factory=lambda session, catalog: InventoryManager(session, catalog, rules),
    )


def create_marketplace(database: Database, rules: RulesConfig = DEFAULT_RULES) -> Marketplace:
    return Marketplace(database, rules=rules, ledger_factory=create_ledger_store)
