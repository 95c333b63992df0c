"""Alembic environment. The database URL always comes from app settings, never from alembic.ini."""
from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool
from alembic import context

import app.models  # noqa: F401 - register every table on Base.metadata
from app.config import get_settings
from app.database import Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

DATABASE_URL = get_settings().database_url


def _migration_options(dialect_name: str) -> dict:
    # SQLite cannot ALTER most constraints in place
    return {
        "target_metadata": Base.metadata,
        "compare_type": True,
        "render_as_batch": dialect_name == "sqlite",
    }


def run_offline(url: str) -> None:
    """Emit SQL for the revisions instead of executing it."""
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_migration_options(url.split(":", 1)[0].split("+", 1)[0]),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_online(url: str) -> None:
    # Callers (e.g. tests) may hand in an open connection
    connection = config.attributes.get("connection")
    if connection is not None:
        _run_with(connection)
        return
    engine = engine_from_config({"sqlalchemy.url": url}, prefix="sqlalchemy.", poolclass=pool.NullPool)
    with engine.connect() as connection:
        _run_with(connection)


def _run_with(connection) -> None:
    context.configure(connection=connection, **_migration_options(connection.dialect.name))
    with context.begin_transaction():
        context.run_migrations()


if context.is_offline_mode():
    run_offline(DATABASE_URL)
else:
    run_online(DATABASE_URL)
