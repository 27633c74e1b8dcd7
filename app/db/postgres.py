"""
SQL Connection Utility

PostgreSQL stores the structured, transactional records:
- users, students, companies, placement_drives, applications

WHY SQL for these?
- The application workflow updates Application, Student and Drive together;
  a single transaction commits all three or none
- Uniqueness (one application per student per drive) is a real constraint
"""
import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from sqlalchemy.pool import StaticPool

from app.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def _engine_kwargs(url: str) -> dict:
    """Pool settings per backend. SQLite (tests) shares one in-memory connection."""
    if url.startswith("sqlite"):
        return {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    # pool_size=5: maintain 5 connections ready
    # max_overflow=10: allow 10 extra connections under load
    return {"pool_size": 5, "max_overflow": 10, "pool_pre_ping": True}


engine = create_engine(
    settings.sqlalchemy_url,
    echo=settings.debug,  # Log SQL queries in debug mode
    **_engine_kwargs(settings.sqlalchemy_url)
)

# Session factory. Objects stay readable after commit so services can return them.
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False
)


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


@contextmanager
def get_db_session():
    """
    Unit of work: everything done inside the block commits together or not at all.
    Usage:
        with get_db_session() as db:
            db.add(application)
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db() -> None:
    """Create tables that don't exist yet."""
    # Import models so they register on Base.metadata
    import app.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("SQL tables created/verified")


def test_postgres_connection() -> bool:
    """
    Test if the SQL database is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        with get_db_session() as db:
            row = db.execute(text("SELECT 1 as test")).fetchone()
            return row[0] == 1
    except Exception as e:
        logger.error("SQL connection failed: %s", e)
        return False
