"""
Database connection management.

The kiosk can run without a database (menu and admin endpoints then answer
503, and orders are accepted without being persisted), so the engine is only
created when DATABASE_URL is set.

Environment variables:
    - DATABASE_URL: SQLAlchemy connection URL (e.g. postgresql://...)
"""

import logging
import os
from typing import Generator, Optional

from fastapi import HTTPException, status
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

logger = logging.getLogger(__name__)

DATABASE_URL = os.environ.get("DATABASE_URL")

engine = None
SessionLocal = None

if DATABASE_URL:
    engine = create_engine(
        DATABASE_URL,
        pool_pre_ping=True,
        echo=False,
    )
    SessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )
else:
    logger.warning("DATABASE_URL not set; running without a database")


def is_database_configured() -> bool:
    return SessionLocal is not None


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a SQLAlchemy Session.

    Raises 503 when no database is configured.
    """
    if SessionLocal is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not configured",
        )
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_optional_db() -> Generator[Optional[Session], None, None]:
    """
    FastAPI dependency that yields a Session, or None without a database.

    Used by the order endpoints, which keep working when persistence is
    unavailable.
    """
    if SessionLocal is None:
        yield None
        return
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
