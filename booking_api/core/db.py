from collections.abc import AsyncGenerator
from typing import Any
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from booking_api.core.config import settings


def _engine_options(database_url: str) -> tuple[str, dict[str, Any]]:
    """Return (async url, engine kwargs) for the configured database.

    asyncpg does not accept psycopg params like sslmode/channel_binding, so for
    postgresql:// the scheme is converted and those params are stripped; SSL is
    enabled via connect_args. Other URLs (sqlite+aiosqlite in tests) are used as-is.
    """
    parsed = urlparse(database_url)
    if parsed.scheme not in ("postgresql", "postgres"):
        return database_url, {}
    query = parse_qs(parsed.query, keep_blank_values=True)
    ssl_required = query.pop("sslmode", ["require"])[0] not in ("disable", "allow", "prefer")
    query.pop("channel_binding", None)
    new_query = urlencode(query, doseq=True)
    url = urlunparse(("postgresql+asyncpg", parsed.netloc, parsed.path, parsed.params, new_query, parsed.fragment))
    options: dict[str, Any] = {
        "pool_pre_ping": True,
        "pool_size": 5,
        "max_overflow": 10,
    }
    if ssl_required:
        options["connect_args"] = {"ssl": True}
    return url, options


async_database_url, _options = _engine_options(settings.database_url)

engine = create_async_engine(
    async_database_url,
    echo=settings.env == "development",
    **_options,
)

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
