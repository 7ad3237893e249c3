"""
Alembic Migration Environment
===============================

What:  Runs the MedCamp schema migrations (camps, registrations, payments,
       users, feedbacks) with the application's async engine settings.
Why:   SQLDocumentStore expects these tables to exist; create_all() at
       startup is only a convenience for local and test databases.
How:   The database URL comes from medcamp.config (not alembic.ini); the
       target metadata is medcamp.database.Base with every model imported.
Who:   The `alembic` CLI (upgrade, downgrade, revision --autogenerate).
When:  Before starting the API against a new or upgraded SQL database.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import async_engine_from_config
from alembic import context

from medcamp.config import settings
from medcamp.database import Base
# Autogenerate only sees tables registered on Base.metadata
import medcamp.models  # noqa: F401

# Values from alembic.ini
config = context.config

# Logger setup from alembic.ini
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Compared against the live schema by --autogenerate
target_metadata = Base.metadata

# DATABASE_URL from settings wins over alembic.ini so the app and its
# migrations always point at the same database
config.set_main_option("sqlalchemy.url", settings.database_url)


def run_migrations_offline() -> None:
    """
    Run migrations in 'offline' mode.

    What:  Renders the migration SQL to stdout instead of executing it.
    When:  Reviewing DDL before a deployment, or the database is unreachable.
    How:   Configures the context from the URL alone; no engine is created.
    """
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection):
    """
    Apply pending revisions on an already open connection.

    Runs inside connection.run_sync(), so Alembic sees a plain sync
    connection. All steps of one upgrade share a single transaction.
    """
    context.configure(connection=connection, target_metadata=target_metadata)

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """
    Run migrations in 'online' mode against the async engine.

    What:  Connects with the same async driver the API uses (asyncpg or
           aiosqlite) and applies pending revisions.
    How:   Builds a throwaway engine with NullPool, hands the connection to
           do_run_migrations() through run_sync(), then disposes it.
    """
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,  # one-shot process, no pooling
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    """Entry point for online mode: drives the async migration on a new event loop."""
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
