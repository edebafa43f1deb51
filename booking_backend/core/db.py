from collections.abc import AsyncGenerator
from typing import Any
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from booking_backend.core.config import settings


def to_async_url(database_url: str) -> str:
    """Use asyncpg for postgresql:// URLs. asyncpg does not accept psycopg params
    like sslmode/channel_binding, so those are stripped; SSL goes via connect_args."""
    parsed = urlparse(database_url)
    if parsed.scheme not in ("postgresql", "postgres"):
        return database_url
    query = parse_qs(parsed.query, keep_blank_values=True)
    query.pop("sslmode", None)
    query.pop("channel_binding", None)
    new_query = urlencode(query, doseq=True)
    return urlunparse(
        ("postgresql+asyncpg", parsed.netloc, parsed.path, parsed.params, new_query, parsed.fragment)
    )


def engine_options(async_url: str) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": settings.env == "development" and settings.log_level == "DEBUG"}
    if async_url.startswith("postgresql+asyncpg"):
        options.update(
            pool_pre_ping=True,
            pool_size=5,
            max_overflow=10,
            connect_args={"ssl": settings.is_production},
        )
    return options


async_database_url = to_async_url(settings.database_url)

engine = create_async_engine(async_database_url, **engine_options(async_database_url))

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create tables if using create_all; prefer Alembic in production."""
    # Register every table on the metadata before create_all
    import booking_backend.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
