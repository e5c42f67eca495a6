from config import DATABASE_URL

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool


class Base(DeclarativeBase):
    pass


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # A single shared connection keeps in-memory databases alive across sessions
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
    return {"pool_pre_ping": True, "pool_recycle": 1800}


engine = create_engine(DATABASE_URL, **_engine_options(DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session) -> Generator[Session, None, None]:
    """
    Run a block of writes as one transaction.

    Commits when the block exits normally, rolls back and re-raises otherwise.

    Usage:
        with atomic(db):
            db.add(reservation)
            db.flush()
            db.add(ReservationGuest(...))
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
