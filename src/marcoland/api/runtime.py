"""Runtime primitives backing the MarcoLand HTTP API."""

from __future__ import annotations

import logging

from marcoland.config import Settings, get_settings
from marcoland.database import Database
from marcoland.domain.rules_config import DEFAULT_RULES, RulesConfig
from marcoland.factory import create_marketplace, create_trade_engine

logger = logging.getLogger(__name__)


class ApiState:
    """Aggregated services shared by the FastAPI layer."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        database: Database | None = None,
        rules: RulesConfig = DEFAULT_RULES,
    ) -> None:
        self.settings = settings or get_settings()
        self.database = database or Database.from_settings(self.settings)
        self.rules = rules
        self.trades = create_trade_engine(self.database, rules)
        self.market = create_marketplace(self.database, rules)

    def prepare(self) -> None:
        """Create missing tables and, if configured, seed the catalog."""
        self.database.create_schema()
        if self.settings.seed_catalog_on_startup:
            self.database.seed_catalog()

    async def shutdown(self) -> None:
        self.database.dispose()


def build_state() -> ApiState:
    """Factory used by the API to initialize state."""

    state = ApiState()
    state.prepare()
    logger.info("economy store ready at %s", state.database.engine.url.render_as_string())
    return state
