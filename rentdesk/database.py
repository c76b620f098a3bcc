"""
Engine and session factory

Startup helpers here log and return False instead of raising, so the API can
come up in degraded mode while the database is away.
"""
import logging

from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker

from rentdesk.core.config import settings

logger = logging.getLogger(__name__)

DATABASE_URL = settings.DATABASE_URL


def _engine_options() -> dict:
    if settings.is_sqlite:
        # One file or in-memory database shared across request threads
        return {"connect_args": {"check_same_thread": False}}
    return {
        "connect_args": {"connect_timeout": settings.DATABASE_CONNECT_TIMEOUT},
        "pool_pre_ping": True,
        "pool_size": settings.DATABASE_POOL_SIZE,
        "max_overflow": settings.DATABASE_MAX_OVERFLOW,
        "pool_recycle": settings.DATABASE_POOL_RECYCLE,
        "pool_timeout": 30,
    }


engine = create_engine(DATABASE_URL, echo=False, **_engine_options())

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def get_db():
    """Request-scoped session; closed once the response is sent"""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def test_connection() -> bool:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning(f"[DB] Connection check failed: {e}")
        return False


def init_db() -> bool:
    """Create any missing tables from the ORM metadata"""
    import rentdesk.models  # noqa: F401  registers every table on Base
    from rentdesk.db.base import Base

    try:
        if not settings.is_sqlite:
            # Property.location is a PostGIS geography column
            with engine.begin() as conn:
                conn.execute(text("CREATE EXTENSION IF NOT EXISTS postgis"))
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        logger.warning(f"[DB] create_all failed: {e}")
        return False
    logger.info("[DB] Tables ready")
    return True


def close_db_connection() -> None:
    try:
        engine.dispose()
    except Exception as e:
        logger.warning(f"[DB] Engine dispose failed: {e}")
        return
    logger.info("[DB] Connection pool disposed")
