from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from app.database import Base

SCRIPT_LOCATION = Path(__file__).resolve().parent.parent / "alembic"


@pytest.fixture
def migration_engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'migrations.db'}")
    yield engine
    engine.dispose()


def _run(engine, fn, revision):
    config = Config()
    config.set_main_option("script_location", str(SCRIPT_LOCATION))
    with engine.begin() as connection:
        config.attributes["connection"] = connection
        fn(config, revision)


def test_upgrade_creates_every_model_table(migration_engine):
    _run(migration_engine, command.upgrade, "head")
    tables = set(inspect(migration_engine).get_table_names())
    assert set(Base.metadata.tables) <= tables
    assert "alembic_version" in tables


def test_downgrade_to_base_drops_tables(migration_engine):
    _run(migration_engine, command.upgrade, "head")
    _run(migration_engine, command.downgrade, "base")
    tables = set(inspect(migration_engine).get_table_names())
    assert tables.isdisjoint(Base.metadata.tables)
