from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from assetshare.core.config import settings
from assetshare.core.identifiers import parse_principal
from assetshare.models.common import utcnow
from assetshare.models.storage_location import StorageLocation


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ResolvedLocation:
    id: uuid.UUID
    location: str


def resolve_storage_location(db: Session, raw_location: str | None, owner: Any) -> ResolvedLocation | None:
    """Map a location string or storage location id to a storage location row.

    A known id is reused together with its canonical text. Anything else is
    stored as a new location, even when another row carries the same text.
    Runs on the caller's session and never commits; a blank location resolves
    to ``None``.
    """

    owner_id = parse_principal(owner)
    text = (raw_location or "").strip()
    if not text:
        return None

    try:
        candidate = uuid.UUID(text)
    except ValueError:
        candidate = None
    if candidate is not None:
        existing = db.get(StorageLocation, candidate)
        if existing is not None:
            return ResolvedLocation(id=existing.id, location=existing.location)
        logger.info("storage location %s not found, storing it as a new location", candidate)

    location = StorageLocation(location=text, created_by=owner_id, created_at=utcnow())
    db.add(location)
    db.flush()
    logger.info("created storage location %s", location.id)
    return ResolvedLocation(id=location.id, location=location.location)


def list_storage_locations(db: Session, *, limit: int | None = None) -> list[StorageLocation]:
    stmt = (
        select(StorageLocation)
        .order_by(StorageLocation.location, StorageLocation.created_at)
        .limit(limit or settings.default_list_limit)
    )
    return list(db.scalars(stmt))
