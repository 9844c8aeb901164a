"""Async SQLAlchemy engine, declarative base and session factory."""
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from eventfeed.config import settings


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""
    pass


engine = create_async_engine(settings.DATABASE_URL)
SessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_all(bind: Optional[AsyncEngine] = None) -> None:
    """Create tables directly (SQLite dev mode; production uses Alembic)."""
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
