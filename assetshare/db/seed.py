from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from assetshare.core.constants import DEFAULT_STATUSES
from assetshare.db.session import SessionLocal, unit_of_work
from assetshare.models.status import Status


logger = logging.getLogger(__name__)


def seed_statuses(db: Session) -> int:
    """Insert the default statuses that are missing; returns how many were added."""

    existing = set(db.scalars(select(Status.name)))
    added = 0
    with unit_of_work(db):
        for name, description in DEFAULT_STATUSES:
            if name in existing:
                continue
            db.add(Status(name=name, description=description))
            added += 1
    if added:
        logger.info("seeded %d statuses", added)
    return added


def seed() -> None:
    with SessionLocal() as db:
        seed_statuses(db)
