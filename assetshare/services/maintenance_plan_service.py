from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable

from sqlalchemy.orm import Session

from assetshare.core.access import visible_to
from assetshare.core.identifiers import parse_id, parse_principal
from assetshare.core.storage import ObjectStore
from assetshare.db.session import unit_of_work
from assetshare.models.common import utcnow
from assetshare.models.maintenance_plan import MaintenancePlan
from assetshare.schemas.association import AssociationOut
from assetshare.schemas.maintenance_plan import MaintenancePlanCreate, MaintenancePlanOut, MaintenancePlanUpdate
from assetshare.services.association_service import maintenance_items
from assetshare.services.category_service import draft_columns, enrich
from assetshare.services.common import (
    as_utc,
    delete_visible,
    enriched_select,
    groups_with,
    load_visible,
    update_image_ref,
    visible_select,
)
from assetshare.services.status_service import resolve_status


logger = logging.getLogger(__name__)


def _plan_columns(draft: MaintenancePlanCreate | MaintenancePlanUpdate) -> dict[str, Any]:
    values = draft_columns(draft)
    if draft.plan_due is not None:
        values["plan_due"] = as_utc(draft.plan_due)
    return values


def list_maintenance_plans(
    db: Session,
    principal: Any,
    *,
    since: datetime | None = None,
    limit: int | None = None,
    store: ObjectStore | None = None,
) -> list[MaintenancePlanOut]:
    rows = db.execute(visible_select(MaintenancePlan, principal, since=since, limit=limit)).all()
    return [enrich(MaintenancePlanOut, row, store) for row in rows]


def get_maintenance_plan(
    db: Session,
    principal: Any,
    plan_id: Any,
    *,
    store: ObjectStore | None = None,
) -> MaintenancePlanOut | None:
    stmt = enriched_select(MaintenancePlan).where(
        MaintenancePlan.id == parse_id(plan_id),
        visible_to(MaintenancePlan.sharable_groups, principal),
    )
    row = db.execute(stmt).one_or_none()
    if row is None:
        return None
    return enrich(MaintenancePlanOut, row, store)


def create_maintenance_plan(
    db: Session,
    principal: Any,
    draft: MaintenancePlanCreate,
    *,
    store: ObjectStore | None = None,
) -> MaintenancePlanOut:
    status = resolve_status(db, draft.status)
    creator_id = parse_principal(principal)
    now = utcnow()
    with unit_of_work(db):
        plan = MaintenancePlan(
            **_plan_columns(draft),
            status_id=status.id,
            created_by=creator_id,
            created_at=now,
            updated_by=creator_id,
            updated_at=now,
            sharable_groups=groups_with(creator_id, draft.sharable_groups),
        )
        db.add(plan)
        db.flush()
        plan_id = plan.id
    logger.info("created maintenance plan %s for %s", plan_id, creator_id)

    created = get_maintenance_plan(db, creator_id, plan_id, store=store)
    if created is None:
        raise LookupError(f"maintenance plan {plan_id} is not readable after create")
    return created


def update_maintenance_plan(
    db: Session,
    principal: Any,
    plan_id: Any,
    draft: MaintenancePlanUpdate,
    *,
    store: ObjectStore | None = None,
) -> MaintenancePlanOut | None:
    status = resolve_status(db, draft.status)
    updater_id = parse_principal(principal)
    with unit_of_work(db):
        plan = load_visible(db, MaintenancePlan, updater_id, parse_id(plan_id))
        if plan is None:
            return None
        values = _plan_columns(draft)
        values.update(status_id=status.id, updated_by=updater_id, updated_at=utcnow())
        if draft.sharable_groups is not None:
            values["sharable_groups"] = groups_with(plan.created_by, draft.sharable_groups)
        for key, value in values.items():
            setattr(plan, key, value)
        db.flush()
    logger.info("updated maintenance plan %s by %s", plan.id, updater_id)
    return get_maintenance_plan(db, updater_id, plan.id, store=store)


def delete_maintenance_plans(db: Session, principal: Any, plan_ids: Iterable[Any]) -> list[Any]:
    return delete_visible(db, MaintenancePlan, principal, plan_ids)


def update_maintenance_plan_image(db: Session, principal: Any, plan_id: Any, image_ref: str) -> bool:
    return update_image_ref(db, MaintenancePlan, principal, parse_id(plan_id), image_ref)


def list_maintenance_items(
    db: Session, principal: Any, plan_id: Any, *, limit: int | None = None
) -> list[AssociationOut]:
    return maintenance_items.list_items(db, principal, plan_id, limit=limit)


def add_maintenance_items(
    db: Session,
    principal: Any,
    plan_id: Any,
    item_ids: Iterable[Any],
    collaborators: Iterable[Any] | None = None,
) -> list[AssociationOut]:
    return maintenance_items.add_items(db, plan_id, item_ids, principal, collaborators)


def remove_maintenance_items(db: Session, plan_id: Any, association_ids: Iterable[Any]) -> None:
    maintenance_items.remove_items(db, plan_id, association_ids)
