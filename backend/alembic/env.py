"""
Alembic Migration Environment
===============================

What:  Applies the CRM schema revisions (clients, transactions).
How:   Online runs reuse the application's async engine from app.database,
       so migrations connect exactly like the API does. Offline runs
       (`alembic upgrade head --sql`) render SQL for settings.database_url.

compare_type is on: column widths back the request validation limits
(e.g. String(100) ↔ firstName max_length=100), so autogenerate must
notice when one of them changes.
"""

import asyncio
from logging.config import fileConfig

from alembic import context

from app.config import settings
from app.database import Base, engine

# Registers the tables on Base.metadata
from app.models.client import Client  # noqa: F401
from app.models.transaction import Transaction  # noqa: F401

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)


def _configure(**kwargs) -> None:
    context.configure(target_metadata=Base.metadata, compare_type=True, **kwargs)


def _migrate(connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def _migrate_online() -> None:
    async with engine.connect() as connection:
        await connection.run_sync(_migrate)
    await engine.dispose()


if context.is_offline_mode():
    _configure(
        url=settings.database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()
else:
    asyncio.run(_migrate_online())
