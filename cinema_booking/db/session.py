import logging
from typing import AsyncGenerator
from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from cinema_booking.core.config import get_settings
from cinema_booking.db.base import Base
from cinema_booking.models import Booking, Seat  # noqa: F401


settings = get_settings()


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create the async engine for the booking store.

    PostgreSQL gets a pooled engine; seat rows are locked with
    SELECT ... FOR UPDATE inside each booking transaction.
    SQLite ignores FOR UPDATE, so every transaction is opened with
    BEGIN IMMEDIATE instead, which holds the write lock from the first
    statement until commit/rollback.
    """
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_async_engine(
            url,
            echo=echo,
            pool_size=10,
            max_overflow=20,
            pool_timeout=30,
            pool_recycle=3600,
            pool_pre_ping=True
        )

    engine = create_async_engine(url, echo=echo, connect_args={"timeout": 30})

    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        # stop the driver from emitting its own deferred BEGIN
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=bind,
        autoflush=False,
        expire_on_commit=False
    )


engine = build_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)

async_session = build_session_factory(engine)


async def getDB_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides an async DB session
    and ensures it's closed after the request.
    """
    async with async_session() as session:
        yield session


async def init_db(bind: AsyncEngine = engine) -> None:
    """
    Create the seats and bookings tables if they don't exist.
    """
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logging.info("Database tables ready")


async def close_db(bind: AsyncEngine = engine) -> None:
    await bind.dispose()
    logging.info("Database connections closed")
