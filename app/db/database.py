from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from app.core.config import settings


def _engine_url(url: str) -> str:
    return url.replace("postgresql://", "postgresql+asyncpg://").replace("postgres://", "postgresql+asyncpg://")


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # aiosqlite connections are bound to the event loop that opened them
        return {"poolclass": NullPool}
    return {"pool_size": 5, "max_overflow": 5}


engine = create_async_engine(
    _engine_url(settings.DATABASE_URL),
    **_engine_kwargs(settings.DATABASE_URL),
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db():
    """FastAPI dependency that provides a database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db():
    """Create all tables. Called at app startup."""
    from app.db.db_models import Base
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db():
    """Dispose engine. Called at app shutdown."""
    await engine.dispose()
