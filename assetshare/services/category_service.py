from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable

from sqlalchemy import Row
from sqlalchemy.orm import Session

from assetshare.core.access import visible_to
from assetshare.core.identifiers import parse_id, parse_principal
from assetshare.core.storage import ObjectStore
from assetshare.db.session import unit_of_work
from assetshare.models.category import Category
from assetshare.models.common import utcnow
from assetshare.schemas.association import AssociationOut
from assetshare.schemas.category import CategoryCreate, CategoryDraft, CategoryOut, CategoryUpdate
from assetshare.schemas.common import GeoPoint
from assetshare.services.association_service import category_items
from assetshare.services.common import (
    delete_visible,
    enriched_select,
    groups_with,
    load_visible,
    update_image_ref,
    visible_select,
)
from assetshare.services.enrichment import display_name, fetch_image, status_out
from assetshare.services.status_service import resolve_status


logger = logging.getLogger(__name__)


def point_columns(location: GeoPoint | None) -> dict[str, float | None]:
    lon, lat = location.as_columns() if location is not None else (None, None)
    return {"location_lon": lon, "location_lat": lat}


def draft_columns(draft: CategoryDraft) -> dict[str, Any]:
    values = draft.model_dump(exclude={"status", "location", "sharable_groups"})
    values.update(point_columns(draft.location))
    return values


def enrich(out_model: Any, row: Row, store: ObjectStore | None) -> Any:
    entity, status, creator, updater = row
    return out_model.model_validate(entity).model_copy(
        update={
            "location": GeoPoint.from_columns(entity.location_lon, entity.location_lat),
            "status": status_out(status),
            "creator_name": display_name(creator),
            "updater_name": display_name(updater),
            "image": fetch_image(store, entity.id),
        }
    )


def list_categories(
    db: Session,
    principal: Any,
    *,
    since: datetime | None = None,
    limit: int | None = None,
    store: ObjectStore | None = None,
) -> list[CategoryOut]:
    rows = db.execute(visible_select(Category, principal, since=since, limit=limit)).all()
    return [enrich(CategoryOut, row, store) for row in rows]


def get_category(
    db: Session,
    principal: Any,
    category_id: Any,
    *,
    store: ObjectStore | None = None,
) -> CategoryOut | None:
    stmt = enriched_select(Category).where(
        Category.id == parse_id(category_id),
        visible_to(Category.sharable_groups, principal),
    )
    row = db.execute(stmt).one_or_none()
    if row is None:
        return None
    return enrich(CategoryOut, row, store)


def create_category(
    db: Session,
    principal: Any,
    draft: CategoryCreate,
    *,
    store: ObjectStore | None = None,
) -> CategoryOut:
    status = resolve_status(db, draft.status)
    creator_id = parse_principal(principal)
    now = utcnow()
    with unit_of_work(db):
        category = Category(
            **draft_columns(draft),
            status_id=status.id,
            created_by=creator_id,
            created_at=now,
            updated_by=creator_id,
            updated_at=now,
            sharable_groups=groups_with(creator_id, draft.sharable_groups),
        )
        db.add(category)
        db.flush()
        category_id = category.id
    logger.info("created category %s for %s", category_id, creator_id)

    created = get_category(db, creator_id, category_id, store=store)
    if created is None:
        raise LookupError(f"category {category_id} is not readable after create")
    return created


def update_category(
    db: Session,
    principal: Any,
    category_id: Any,
    draft: CategoryUpdate,
    *,
    store: ObjectStore | None = None,
) -> CategoryOut | None:
    status = resolve_status(db, draft.status)
    updater_id = parse_principal(principal)
    with unit_of_work(db):
        category = load_visible(db, Category, updater_id, parse_id(category_id))
        if category is None:
            return None
        values = draft_columns(draft)
        values.update(status_id=status.id, updated_by=updater_id, updated_at=utcnow())
        if draft.sharable_groups is not None:
            values["sharable_groups"] = groups_with(category.created_by, draft.sharable_groups)
        for key, value in values.items():
            setattr(category, key, value)
        db.flush()
    logger.info("updated category %s by %s", category.id, updater_id)
    return get_category(db, updater_id, category.id, store=store)


def delete_categories(db: Session, principal: Any, category_ids: Iterable[Any]) -> list[Any]:
    return delete_visible(db, Category, principal, category_ids)


def update_category_image(db: Session, principal: Any, category_id: Any, image_ref: str) -> bool:
    return update_image_ref(db, Category, principal, parse_id(category_id), image_ref)


def list_category_items(
    db: Session, principal: Any, category_id: Any, *, limit: int | None = None
) -> list[AssociationOut]:
    return category_items.list_items(db, principal, category_id, limit=limit)


def add_category_items(
    db: Session,
    principal: Any,
    category_id: Any,
    item_ids: Iterable[Any],
    collaborators: Iterable[Any] | None = None,
) -> list[AssociationOut]:
    return category_items.add_items(db, category_id, item_ids, principal, collaborators)


def remove_category_items(db: Session, category_id: Any, association_ids: Iterable[Any]) -> None:
    category_items.remove_items(db, category_id, association_ids)
