"""Pytest configuration and shared fixtures.

This adds the `src/` directory to `sys.path` so tests can import the
`marcoland` package (e.g., `from marcoland.api.app import create_app`)
without requiring an editable install in CI.

Every test gets its own SQLite file under ``tmp_path`` with the schema
created and the equipment catalog seeded.
"""

import sys
from pathlib import Path

import pytest
from sqlalchemy import select

SRC_PATH = Path(__file__).resolve().parents[1] / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from marcoland.config import Settings  # noqa: E402
from marcoland.database import Database  # noqa: E402
from marcoland.models import EquipmentDefinition, Player  # noqa: E402
from marcoland.services import Marketplace, TradeEngine  # noqa: E402


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a throwaway SQLite database."""
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'economy.db'}",
        DATABASE_BUSY_TIMEOUT=30.0,
        seed_catalog_on_startup=True,
    )


@pytest.fixture
def database(settings):
    db = Database.from_settings(settings)
    db.create_schema()
    db.seed_catalog()
    yield db
    db.dispose()


@pytest.fixture
def make_player(database):
    """Create a player with the given balances and return its id."""
    counter = {"n": 0}

    def _make(
        gold: int = 0,
        gems: int = 0,
        metals: int = 0,
        quartz: int = 0,
        strength: int = 10,
        speed: int = 10,
        mana: int = 50,
        max_mana: int = 50,
        player_id: str | None = None,
    ) -> str:
        counter["n"] += 1
        with database.unit_of_work() as session:
            player = Player(
                username=f"player{counter['n']}",
                gold=gold,
                gems=gems,
                metals=metals,
                quartz=quartz,
                strength=strength,
                speed=speed,
                mana=mana,
                max_mana=max_mana,
            )
            if player_id is not None:
                player.id = player_id
            session.add(player)
            session.flush()
            return player.id

    return _make


@pytest.fixture
def equipment_ids(database):
    """Catalog ids keyed by item name."""
    with database.unit_of_work() as session:
        rows = session.execute(select(EquipmentDefinition.name, EquipmentDefinition.id))
        return {name: equipment_id for name, equipment_id in rows}


@pytest.fixture
def trades(database):
    return TradeEngine(database)


@pytest.fixture
def market(database):
    return Marketplace(database)
