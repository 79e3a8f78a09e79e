"""Database session dependency for FastAPI routes."""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from commitlink.db import engine as _engine


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield one async session per request.

    The whole push is committed as a unit once the route returns; any
    exception escaping the route rolls it back.

    Raises:
        RuntimeError: If ``init_engine()`` has not run yet.
    """
    if _engine.async_session_factory is None:
        msg = "Database session factory not initialized. Call init_engine() first."
        raise RuntimeError(msg)

    async with _engine.async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
