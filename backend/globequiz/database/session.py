from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from ..config import Settings

Base = declarative_base()


def make_session_factory(settings: Settings) -> async_sessionmaker:
    """Engine and session factory for settings.DATABASE_URL."""
    engine = create_async_engine(settings.DATABASE_URL, echo=False)
    return async_sessionmaker(
        autocommit=False,
        class_=AsyncSession,
        autoflush=True,
        expire_on_commit=False,
        bind=engine,
    )


async def init_db(engine: AsyncEngine):
    """Create tables if they do not exist."""
    from . import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
