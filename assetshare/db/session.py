from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from assetshare.core.config import settings


logger = logging.getLogger(__name__)

CALLER_MANAGED_KEY = "assetshare.caller_managed"


def _engine_options(database_url: str) -> dict[str, Any]:
    if database_url.startswith("sqlite"):
        return {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    return {
        "poolclass": QueuePool,
        "pool_size": 5,
        "max_overflow": 10,
        "pool_timeout": 30,
        "pool_recycle": 1800,
        "pool_pre_ping": True,
    }


def build_engine(database_url: str) -> Engine:
    return create_engine(database_url, echo=False, future=True, **_engine_options(database_url))


def build_sessionmaker(bind: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=bind, expire_on_commit=False, autoflush=False, future=True)


engine = build_engine(settings.database_url)
SessionLocal = build_sessionmaker(engine)


def get_session() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    """Commit the enclosed statements together or roll all of them back.

    Inside :func:`caller_transaction` the unit neither commits nor rolls back;
    the outermost scope owns the transaction.
    """

    if db.info.get(CALLER_MANAGED_KEY):
        yield db
        return
    try:
        yield db
        db.commit()
    except Exception:
        logger.warning("rolling back unit of work", exc_info=True)
        db.rollback()
        raise


@contextmanager
def caller_transaction(db: Session) -> Iterator[Session]:
    """Group several service calls into one transaction owned by the caller."""

    if db.info.get(CALLER_MANAGED_KEY):
        yield db
        return
    db.info[CALLER_MANAGED_KEY] = True
    try:
        yield db
        db.commit()
    except Exception:
        logger.warning("rolling back caller transaction", exc_info=True)
        db.rollback()
        raise
    finally:
        db.info.pop(CALLER_MANAGED_KEY, None)
