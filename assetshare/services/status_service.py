from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from assetshare.core.errors import StatusNotFoundError
from assetshare.models.status import Status


def list_statuses(db: Session) -> list[Status]:
    return list(db.scalars(select(Status).order_by(Status.name)))


def resolve_status(db: Session, ref: Any) -> Status:
    """Look a status up by id or, failing that, by case-insensitive name."""

    if ref is None:
        raise StatusNotFoundError(ref)
    if isinstance(ref, uuid.UUID):
        status = db.get(Status, ref)
        if status is None:
            raise StatusNotFoundError(ref)
        return status

    text = str(ref).strip()
    if not text:
        raise StatusNotFoundError(ref)
    try:
        status_id = uuid.UUID(text)
    except ValueError:
        status_id = None
    if status_id is not None:
        status = db.get(Status, status_id)
        if status is not None:
            return status

    status = db.scalars(select(Status).where(func.lower(Status.name) == text.lower())).first()
    if status is None:
        raise StatusNotFoundError(ref)
    return status
