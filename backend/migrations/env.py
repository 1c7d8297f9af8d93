"""Alembic environment for SRM Ops migrations.

Runs over the same asyncpg URL as the application.
"""

import asyncio

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from srmops.config import get_settings
from srmops.db import Base
from srmops.records import models  # noqa: F401

config = context.config
config.set_main_option(
    "sqlalchemy.url", get_settings().sqlalchemy_url.replace("%", "%%")
)

target_metadata = Base.metadata


def include_object(obj, name, type_, reflected, compare_to):
    # The identity tables are owned by the authentication service
    if type_ == "table" and name not in ("interventions", "reclamations"):
        return False
    return True


def run_migrations_offline() -> None:
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        include_object=include_object,
        literal_binds=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        include_object=include_object,
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
