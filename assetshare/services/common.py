from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Iterable

from sqlalchemy import Select, delete, select, update
from sqlalchemy.orm import Session, aliased

from assetshare.core.access import visible_to
from assetshare.core.config import settings
from assetshare.core.identifiers import parse_ids, parse_principal
from assetshare.db.session import unit_of_work
from assetshare.db.types import normalize_groups
from assetshare.models.common import utcnow
from assetshare.models.profile import Profile
from assetshare.models.status import Status


logger = logging.getLogger(__name__)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def list_limit(limit: int | None) -> int:
    if limit is None or limit <= 0:
        return settings.default_list_limit
    return min(limit, settings.default_list_limit)


def groups_with(owner: uuid.UUID, groups: Iterable[Any] | None) -> list[uuid.UUID]:
    """``groups`` with ``owner`` first; the owner can never lock itself out."""

    return normalize_groups([owner, *(groups or ())])


def enriched_select(model: Any) -> Select:
    """Select ``model`` with its status and creator/updater profiles left-joined.

    Rows come back as ``(entity, status | None, creator | None, updater | None)``.
    """

    creator = aliased(Profile, name="creator")
    updater = aliased(Profile, name="updater")
    return (
        select(model, Status, creator, updater)
        .outerjoin(Status, Status.id == model.status_id)
        .outerjoin(creator, creator.id == model.created_by)
        .outerjoin(updater, updater.id == model.updated_by)
        .execution_options(populate_existing=True)
    )


def visible_select(model: Any, principal: Any, *, since: datetime | None = None, limit: int | None = None) -> Select:
    stmt = enriched_select(model).where(visible_to(model.sharable_groups, principal))
    if since is not None:
        stmt = stmt.where(model.updated_at >= as_utc(since))
    return stmt.order_by(model.updated_at.desc()).limit(list_limit(limit))


def visible_row_select(model: Any, principal: Any, entity_id: Any) -> Select:
    """Lock the row while the principal can see it; held until the unit of work ends."""

    return (
        select(model)
        .where(model.id == entity_id, visible_to(model.sharable_groups, principal))
        .with_for_update()
        .execution_options(populate_existing=True)
    )


def load_visible(db: Session, model: Any, principal: Any, entity_id: Any) -> Any | None:
    return db.scalars(visible_row_select(model, principal, entity_id)).one_or_none()


def delete_visible(db: Session, model: Any, principal: Any, ids: Iterable[Any]) -> list[Any]:
    """Hard-delete the rows among ``ids`` the principal can see.

    Unknown or forbidden ids are skipped silently; the input is returned as is.
    """

    requested = list(ids)
    principal_id = parse_principal(principal)
    parsed = parse_ids(requested)
    if not parsed:
        return requested
    with unit_of_work(db):
        result = db.execute(
            delete(model)
            .where(model.id.in_(parsed), visible_to(model.sharable_groups, principal_id))
            .execution_options(synchronize_session=False)
        )
    logger.info("deleted %s of %s requested %s rows", result.rowcount, len(parsed), model.__tablename__)
    return requested


def update_image_ref(db: Session, model: Any, principal: Any, entity_id: Any, image_ref: str) -> bool:
    """Point the entity at a new image; raises ``NoResultFound`` if nothing was updated."""

    principal_id = parse_principal(principal)
    with unit_of_work(db):
        db.execute(
            update(model)
            .where(model.id == entity_id, visible_to(model.sharable_groups, principal_id))
            .values(associated_image_url=image_ref, updated_at=utcnow(), updated_by=principal_id)
            .returning(model.id)
            .execution_options(synchronize_session=False)
        ).scalar_one()
    return True
