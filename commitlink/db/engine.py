"""Async database engine and session factory initialization."""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

engine: AsyncEngine | None = None
async_session_factory: async_sessionmaker[AsyncSession] | None = None


async def init_engine(database_url: str, *, pool_size: int = 5, max_overflow: int = 2) -> None:
    """Create the async engine and session factory.

    Args:
        database_url: PostgreSQL connection string using the asyncpg driver.
        pool_size: Number of connections kept open in the pool.
        max_overflow: Extra connections allowed above ``pool_size`` under load.
    """
    global engine, async_session_factory  # noqa: PLW0603

    engine = create_async_engine(
        database_url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,
    )
    async_session_factory = async_sessionmaker(bind=engine, expire_on_commit=False)


async def dispose_engine() -> None:
    """Dispose the async engine and forget the session factory."""
    global engine, async_session_factory  # noqa: PLW0603

    if engine is None:
        return
    await engine.dispose()
    engine = None
    async_session_factory = None
