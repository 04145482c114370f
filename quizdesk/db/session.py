from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from typing import AsyncGenerator, Any, Dict
from quizdesk.core.config import settings
from quizdesk.core.logging import get_logger
from quizdesk.db.base import Base

logger = get_logger(__name__)


def _engine_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {"echo": settings.DEBUG, "pool_pre_ping": True}
    # SQLite uses a single-connection pool without size tuning
    if not settings.DATABASE_URL.startswith("sqlite"):
        options.update(
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
            pool_recycle=3600,
        )
    return options


def enable_sqlite_foreign_keys(async_engine: AsyncEngine) -> None:
    """SQLite leaves foreign key enforcement off unless asked per connection."""

    @event.listens_for(async_engine.sync_engine, "connect")
    def _set_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_async_engine(settings.DATABASE_URL, **_engine_options())
if settings.DATABASE_URL.startswith("sqlite"):
    enable_sqlite_foreign_keys(engine)

AsyncSessionLocal = async_sessionmaker(
    engine,
    expire_on_commit=False,
    class_=AsyncSession,
    autoflush=False,
    autocommit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One unit of work per request: commit on success, rollback on any error."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except BaseException as e:
            await session.rollback()
            logger.warning(f"Rolled back unit of work: {e!r}")
            raise


async def init_db() -> None:
    # Registers every model on Base.metadata
    import quizdesk.models  # noqa: F401

    async with engine.begin() as conn:
        if settings.ENVIRONMENT == "test":
            await conn.run_sync(Base.metadata.drop_all)

        await conn.run_sync(Base.metadata.create_all)
        logger.info("Database initialized successfully")
