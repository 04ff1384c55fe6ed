"""Migration environment for the lodging tables.

The application talks to the database through async drivers; migrations use
the matching synchronous driver on the same database.
"""

from __future__ import annotations

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool
from sqlalchemy.engine import URL, make_url

from lodging_admin.core.config import get_settings
from lodging_admin.db.base import Base
import lodging_admin.models  # noqa: F401

_SYNC_DRIVERS = {
    "postgresql": "postgresql+psycopg",
    "postgresql+asyncpg": "postgresql+psycopg",
    "sqlite+aiosqlite": "sqlite",
}

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def migration_url() -> URL:
    """``SYNC_DATABASE_URL`` when set, else ``DATABASE_URL`` on its sync driver."""
    settings = get_settings()
    url = make_url(settings.sync_database_url or settings.database_url)
    return url.set(drivername=_SYNC_DRIVERS.get(url.drivername, url.drivername))


def run_offline(url: URL) -> None:
    context.configure(
        url=url.render_as_string(hide_password=False),
        target_metadata=Base.metadata,
        literal_binds=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_online(url: URL) -> None:
    engine = create_engine(url, poolclass=pool.NullPool)
    try:
        with engine.connect() as connection:
            context.configure(connection=connection, target_metadata=Base.metadata)
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_offline(migration_url())
else:
    run_online(migration_url())
