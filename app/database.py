from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from app.config import settings, get_database_url
from app.utils.logger import get_logger

logger = get_logger(__name__)

# Database connection pooling configuration
POOL_SIZE = 5          # Base connections per container
MAX_OVERFLOW = 10      # Additional connections when needed
POOL_TIMEOUT = 30      # Seconds to wait for connection
POOL_RECYCLE = 1800    # Recycle connections every 30 minutes
POOL_PRE_PING = True   # Validate connections before use

# Global variables for lazy initialization
_engine = None
_session_factory = None

Base = declarative_base()


def get_engine():
    """Get async database engine with lazy initialization for worker compatibility."""
    global _engine
    if _engine is None:
        url = get_database_url()
        if url.startswith("sqlite"):
            # Each aggregation sub-query opens its own session, so SQLite
            # needs a lock timeout rather than a large pool
            _engine = create_async_engine(
                url,
                echo=settings.DEBUG,
                connect_args={"timeout": 30},
            )
        else:
            _engine = create_async_engine(
                url,
                pool_size=POOL_SIZE,
                max_overflow=MAX_OVERFLOW,
                pool_timeout=POOL_TIMEOUT,
                pool_recycle=POOL_RECYCLE,
                pool_pre_ping=POOL_PRE_PING,
                echo=settings.DEBUG,
            )
            logger.info(f"Database pool configured: size={POOL_SIZE}, max_overflow={MAX_OVERFLOW}, timeout={POOL_TIMEOUT}s")
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the session factory with lazy initialization."""
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(get_engine(), class_=AsyncSession, expire_on_commit=False)
    return _session_factory


async def get_db():
    """
    Database dependency for FastAPI.
    Provides an async session with rollback on error and automatic cleanup.
    """
    session_factory = get_session_factory()
    async with session_factory() as db:
        try:
            yield db
        except Exception as e:
            logger.error(f"Database session error: {e}")
            await db.rollback()
            raise


async def init_db():
    """Create tables that do not exist yet (migrations handle schema changes)."""
    import app.models  # noqa: F401  registers models on Base.metadata

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured")


async def close_db():
    """Dispose of the engine and reset the lazy globals."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
