from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool
from sqlmodel import SQLModel

import booking_backend.models  # noqa: F401 - register tables
from booking_backend.core.config import settings

_ASYNC_DRIVERS = ("+asyncpg", "+aiosqlite")


def sync_url(database_url: str) -> str:
    """Migrations run on the sync drivers (psycopg2, sqlite3)."""
    for driver in _ASYNC_DRIVERS:
        database_url = database_url.replace(driver, "")
    return database_url


config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# configparser treats % as interpolation
config.set_main_option("sqlalchemy.url", sync_url(settings.database_url).replace("%", "%%"))
target_metadata = SQLModel.metadata


def migrate_offline() -> None:
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def migrate_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata, compare_type=True)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    migrate_offline()
else:
    migrate_online()
