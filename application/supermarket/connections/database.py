"""
SQLAlchemy ORM Database Configuration
Lets SQLAlchemy manage connections internally with built-in pooling.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool
from typing import Any, Dict
from contextlib import contextmanager


# Logger
from supermarket.logging.utils import get_app_logger
logger = get_app_logger("database")

# Settings
from supermarket.config.settings import SupermarketConfigs
configs = SupermarketConfigs()


def normalize_database_url(url: str) -> str:
    """Point plain postgresql:// URLs at the psycopg3 driver."""
    if url and url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


def engine_options(url: str) -> Dict[str, Any]:
    if url.startswith("sqlite"):
        # in-memory sqlite must share one connection across sessions
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
            "echo": configs.DATABASE_ECHO,
        }
    return {
        "poolclass": QueuePool,
        "pool_size": configs.DATABASE_POOL_SIZE,
        "max_overflow": configs.DATABASE_MAX_OVERFLOW,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
        "echo": configs.DATABASE_ECHO,
        "connect_args": {
            "keepalives_idle": 600,
            "keepalives_interval": 30,
            "keepalives_count": 3
        },
    }


DATABASE_URL = normalize_database_url(configs.DATABASE_URL)
DATABASE_READ_URL = normalize_database_url(configs.DATABASE_READ_URL)

# Base class for ORM models
Base = declarative_base()

engine = create_engine(DATABASE_URL, **engine_options(DATABASE_URL))

# Read engine (separate for read replicas, same as write if no replica)
read_engine = create_engine(
    DATABASE_READ_URL, **engine_options(DATABASE_READ_URL)
) if DATABASE_READ_URL != DATABASE_URL else engine

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
ReadSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=read_engine)

logger.info("SQLAlchemy engines initialized with built-in connection pooling")

@contextmanager
def get_db_session(read_only: bool = False):
    """
    Get database session for complex operations with transaction management.
    Use this when you need transaction control or multiple queries.

    Args:
        read_only: Whether to use read-only session

    Yields:
        SQLAlchemy session object
    """
    session_class = ReadSessionLocal if read_only else SessionLocal
    db = session_class()
    try:
        yield db
        if not read_only:
            db.commit()
    except Exception:
        if not read_only:
            db.rollback()
        raise
    finally:
        db.close()

def close_db_pool():
    engine.dispose()
    read_engine.dispose()
