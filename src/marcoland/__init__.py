"""Player economy engine for MarcoLand.

Atomic purchase, sale, equip and marketplace operations over a shared
relational ledger of player resources and equipment.
"""

__version__ = "0.3.0"
