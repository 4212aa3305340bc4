"""Protocol-based interfaces for the session-scoped economy components.

The trade engine and marketplace depend on these protocols, not on the
concrete SQLAlchemy implementations, so tests can inject fakes (for example a
failing inventory manager to exercise rollback).
"""

from marcoland.interfaces.catalog import IEquipmentCatalog
from marcoland.interfaces.inventory import IInventoryManager
from marcoland.interfaces.ledger import ILedgerStore

__all__ = [
    "IEquipmentCatalog",
    "IInventoryManager",
    "ILedgerStore",
]
