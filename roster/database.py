from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from .models import Base


def _engine_options(database_url: str) -> dict[str, Any]:
    # An in-memory SQLite database lives inside one connection, so every
    # session must share it.
    if database_url.startswith("sqlite") and ":memory:" in database_url:
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    return {"pool_pre_ping": True}


def build_engine(database_url: str, *, echo: bool = False) -> AsyncEngine:
    return create_async_engine(database_url, echo=echo, **_engine_options(database_url))


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False keeps committed objects readable by the caller.
    return async_sessionmaker(bind=bind, class_=AsyncSession, expire_on_commit=False)


def shares_connection(bind: AsyncEngine) -> bool:
    """True when every session runs on one connection, and so one transaction."""
    return isinstance(bind.sync_engine.pool, StaticPool)


async def init_models(bind: AsyncEngine) -> None:
    """Create every roster table that does not exist yet."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
