"""Alembic environment: migrations run through the async engine.

The URL is resolved like the application does (``SOCIALGRAPH_DATABASE_URL``
or settings); ``alembic.ini`` carries no URL.
"""

from __future__ import annotations

import asyncio
from logging.config import fileConfig

from sqlalchemy.engine import Connection

from alembic import context
from socialgraph.database.connection import create_engine_for_url, get_database_url
from socialgraph.dbmodels import target_metadata

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

COMMON_OPTIONS = {"target_metadata": target_metadata, "compare_type": True}


def run_offline(url: str) -> None:
    """Emit SQL to stdout without a database connection."""
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **COMMON_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()


def _migrate(connection: Connection) -> None:
    # SQLite cannot ALTER most constraints in place
    context.configure(
        connection=connection,
        render_as_batch=connection.dialect.name == "sqlite",
        **COMMON_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_online(url: str) -> None:
    engine = create_engine_for_url(url)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate)
    finally:
        await engine.dispose()


database_url = get_database_url()
if context.is_offline_mode():
    run_offline(database_url)
else:
    asyncio.run(run_online(database_url))
