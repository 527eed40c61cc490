"""Database engine, declarative base and request-scoped sessions."""

import ssl
from collections.abc import AsyncGenerator
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from evalpulse.config import settings

_SSL_QUERY_KEYS = ("sslmode", "ssl")


def _permissive_ssl_context() -> ssl.SSLContext:
    """TLS without chain verification; the Supabase pooler cert is not in the default store."""
    ctx = ssl.create_default_context()
    ctx.check_hostname = False
    ctx.verify_mode = ssl.CERT_NONE
    return ctx


def split_ssl_options(url: str) -> tuple[str, dict]:
    """
    asyncpg rejects libpq-style ``sslmode``/``ssl`` query params, so drop them
    from the URL and pass TLS through connect_args instead.
    """
    if not any(f"{key}=" in url for key in _SSL_QUERY_KEYS):
        return url, {}
    parsed = urlparse(url)
    query = parse_qs(parsed.query)
    for key in _SSL_QUERY_KEYS:
        query.pop(key, None)
    cleaned = urlunparse(parsed._replace(query=urlencode(query, doseq=True)))
    connect_args = {}
    if "supabase" in url:
        connect_args["ssl"] = _permissive_ssl_context()
    return cleaned, connect_args


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""


_db_url, _connect_args = split_ssl_options(settings.database_url)

engine = create_async_engine(
    _db_url,
    echo=settings.log_level == "DEBUG",
    connect_args=_connect_args,
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for database sessions; commits on success, rolls back on error."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
