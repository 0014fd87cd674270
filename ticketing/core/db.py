"""
Database engine, session factory and the transaction boundary
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from ticketing.core.config import settings
from ticketing.core.errors import StoreFailureError

logger = logging.getLogger(__name__)

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autoflush=False, bind=engine)

Base = declarative_base()


def get_db() -> Iterator[Session]:
    """FastAPI dependency yielding a request-scoped session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """Run a block as one unit of work.

    Commits when the block completes, rolls back on any exception. Store
    errors are re-raised as StoreFailureError; domain errors pass through
    unchanged after the rollback.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Transaction aborted by store error")
        raise StoreFailureError(str(exc.__class__.__name__)) from exc
    except BaseException:
        db.rollback()
        raise
