from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from typing import AsyncGenerator, Optional

from academy.core.config import DATABASE_URL, DB_ECHO, MAX_CONNECTIONS_COUNT, MIN_CONNECTIONS_COUNT
from academy.core.errors import PersistenceError


def to_async_url(url: str) -> str:
    """Hosted Postgres providers hand out postgres:// URLs; SQLAlchemy wants a driver."""
    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return "postgresql+asyncpg://" + url[len(prefix):]
    return url


def build_engine(url: str) -> Optional[AsyncEngine]:
    if not url:
        return None
    return create_async_engine(
        to_async_url(url),
        echo=DB_ECHO,
        pool_size=MIN_CONNECTIONS_COUNT,
        max_overflow=max(MAX_CONNECTIONS_COUNT - MIN_CONNECTIONS_COUNT, 0),
        pool_pre_ping=True,
    )


engine = build_engine(DATABASE_URL)

AsyncSessionLocal = (
    sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    if engine is not None
    else None
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    if AsyncSessionLocal is None:
        raise PersistenceError("Database is not configured: DATABASE_URL is empty")
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
