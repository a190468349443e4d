from contextlib import contextmanager
import logging

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, declarative_base
from shared.core.config import PARKING_DATABASE_URL
from shared.core.errors import AppError, InternalError

logger = logging.getLogger(__name__)

Base = declarative_base()

POOL_SIZE = 2
MAX_OVERFLOW = 2


def build_engine(url: str):
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_size=POOL_SIZE,          # max idle connections
        max_overflow=MAX_OVERFLOW,      # max temporary extra connections
        pool_timeout=30       # wait time before failing
    )


parking_engine = build_engine(PARKING_DATABASE_URL)
ParkingSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=parking_engine)


@contextmanager
def atomic(db: Session):
    """Commit the work done in the block, or roll all of it back.

    Domain errors are re-raised untouched; storage failures become
    ``InternalError`` so callers never see a half-applied change.
    """
    try:
        yield db
        db.commit()
    except AppError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Transaction rolled back")
        raise InternalError("Database operation failed") from exc


# Dependency


def get_parking_db():
    db = ParkingSessionLocal()
    try:
        yield db
    finally:
        db.close()
