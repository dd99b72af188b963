# backend/config/database.py
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool
import sqlite3
from contextlib import contextmanager
import logging
from typing import Any, Dict, Generator
from sqlalchemy.exc import SQLAlchemyError
from config.settings import get_settings
from core.exceptions import DatabaseOperationError

logger = logging.getLogger(__name__)
settings = get_settings()


def build_engine_options(database_url: str, debug: bool = False) -> Dict[str, Any]:
    """Engine keyword arguments for the given database URL."""
    options: Dict[str, Any] = {"echo": debug, "pool_pre_ping": True}
    if database_url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False, "timeout": 30}
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
            # A single shared connection, otherwise every session sees an empty database
            options["poolclass"] = StaticPool
    else:
        options.update({
            "pool_recycle": 300,
            "pool_size": 10,
            "max_overflow": 20,
            "connect_args": {"connect_timeout": 30},
        })
    return options


# Database engine configuration
engine = create_engine(settings.DATABASE_URL, **build_engine_options(settings.DATABASE_URL, settings.DEBUG))

# Session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

# Base class for models
Base = declarative_base()

# Database session dependency
def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.
    Creates a new database session for each request.
    """
    db = SessionLocal()
    try:
        yield db
    except SQLAlchemyError as e:
        logger.error(f"Database session error: {e}")
        db.rollback()
        raise
    finally:
        db.close()

@contextmanager
def transaction(db: Session, operation: str):
    """Commit on success; roll back and raise DatabaseOperationError on store failure."""
    try:
        yield
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"{operation} failed: {e}")
        raise DatabaseOperationError(operation)

# SQLite-specific configuration
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Enable foreign key constraints for SQLite."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

# Database health check
def check_database_health() -> bool:
    """Check if database connection is healthy."""
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False

# Database initialization
def init_database():
    """Initialize database with tables."""
    # Models register themselves on Base.metadata when imported
    import models  # noqa: F401

    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise

# Database cleanup
def cleanup_database():
    """Clean up database connections."""
    try:
        engine.dispose()
        logger.info("Database connections cleaned up")
    except Exception as e:
        logger.error(f"Database cleanup failed: {e}")

# Export commonly used objects
__all__ = [
    "engine",
    "SessionLocal",
    "Base",
    "get_db",
    "transaction",
    "init_database",
    "cleanup_database",
    "check_database_health",
]
