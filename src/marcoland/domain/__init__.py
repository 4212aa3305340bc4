"""Pure economy rules.

Nothing in this package touches the database. It holds the enumerations of
resources, slots and listing states, the rule constants
(:mod:`rules_config`), the equipment arithmetic used to price sell-backs and
derive combat stats (:mod:`equipment`), and the value objects handed back to
callers (:mod:`trade_data`).
"""

from . import enums, equipment, rules_config, trade_data

__all__ = ["enums", "equipment", "rules_config", "trade_data"]
