from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from delivery_tracker.config import settings


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async SQLite engine with FK enforcement and immediate transactions.

    Transactions start with BEGIN IMMEDIATE so a request that reads a price
    and then writes an entry holds the write lock for the whole span.
    Engines derived with ``execution_options(begin_immediate=False)`` use a
    deferred BEGIN and never wait on writers.
    """
    new_engine = create_async_engine(
        url,
        echo=echo,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(new_engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # Let the "begin" hook below emit BEGIN instead of the driver.
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(new_engine.sync_engine, "begin")
    def _on_begin(conn):
        if conn.get_execution_options().get("begin_immediate", True):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")

    return new_engine


def build_session_factory(
    bind: AsyncEngine,
    immediate: bool = True,
) -> async_sessionmaker[AsyncSession]:
    if not immediate:
        bind = bind.execution_options(begin_immediate=False)
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
    )


engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

async_session_factory = build_session_factory(engine)

read_session_factory = build_session_factory(engine, immediate=False)

# Requests that only read get a deferred transaction
READ_ONLY_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that yields an async database session.

    The whole request runs in one transaction: committed when the endpoint
    returns, rolled back on any exception.
    """
    if request.method in READ_ONLY_METHODS:
        factory = read_session_factory
    else:
        factory = async_session_factory

    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db(bind: AsyncEngine | None = None) -> None:
    """Create all tables."""
    from delivery_tracker.models import (  # noqa: F401 - ensure models are registered
        Car,
        Entry,
        Expense,
        ExpenseType,
        Product,
        Route,
        RouteProductPricing,
        User,
    )
    from delivery_tracker.models.base import Base

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
