from __future__ import annotations

import logging
import uuid
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Sequence

from sqlalchemy import Row, update
from sqlalchemy.orm import Session

from assetshare.core.access import visible_to
from assetshare.core.errors import InvalidColumnError, InvalidDraftError
from assetshare.core.identifiers import parse_id, parse_principal
from assetshare.core.storage import ObjectStore
from assetshare.db.session import unit_of_work
from assetshare.models.common import utcnow
from assetshare.models.inventory import UPDATABLE_COLUMNS, Inventory, UpdatableColumn
from assetshare.schemas.inventory import InventoryCreate, InventoryDraft, InventoryOut, InventoryUpdate
from assetshare.services.common import (
    as_utc,
    delete_visible,
    enriched_select,
    groups_with,
    list_limit,
    load_visible,
    update_image_ref,
    visible_select,
)
from assetshare.services.enrichment import display_name, fetch_image, status_out
from assetshare.services.location_service import ResolvedLocation, resolve_storage_location
from assetshare.services.status_service import resolve_status


logger = logging.getLogger(__name__)


def _to_out(row: Row, store: ObjectStore | None) -> InventoryOut:
    inventory, status, creator, updater = row
    return InventoryOut.model_validate(inventory).model_copy(
        update={
            "status": status_out(status),
            "creator_name": display_name(creator),
            "updater_name": display_name(updater),
            "image": fetch_image(store, inventory.id),
        }
    )


def _status_id(db: Session, ref: str | None) -> uuid.UUID | None:
    if ref is None:
        return None
    return resolve_status(db, ref).id


def _column_values(draft: InventoryDraft, resolved: ResolvedLocation | None) -> dict[str, Any]:
    values = draft.model_dump(exclude={"status", "location", "sharable_groups"})
    values["location"] = resolved.location if resolved else None
    values["storage_location_id"] = resolved.id if resolved else None
    return values


def _insert(
    db: Session,
    creator_id: uuid.UUID,
    draft: InventoryCreate,
    status_id: uuid.UUID | None,
    now: datetime,
) -> Inventory:
    resolved = resolve_storage_location(db, draft.location, creator_id)
    inventory = Inventory(
        **_column_values(draft, resolved),
        status_id=status_id,
        created_by=creator_id,
        created_at=now,
        updated_by=creator_id,
        updated_at=now,
        sharable_groups=groups_with(creator_id, draft.sharable_groups),
    )
    db.add(inventory)
    return inventory


def list_inventories(
    db: Session,
    principal: Any,
    *,
    since: datetime | None = None,
    limit: int | None = None,
    store: ObjectStore | None = None,
) -> list[InventoryOut]:
    """Inventory shared with ``principal``, most recently updated first."""

    rows = db.execute(visible_select(Inventory, principal, since=since, limit=limit)).all()
    return [_to_out(row, store) for row in rows]


def list_own_inventories(
    db: Session,
    principal: Any,
    *,
    since: datetime | None = None,
    limit: int | None = None,
    store: ObjectStore | None = None,
) -> list[InventoryOut]:
    """Inventory created by ``principal``, most recently updated first."""

    creator_id = parse_principal(principal)
    stmt = enriched_select(Inventory).where(Inventory.created_by == creator_id)
    if since is not None:
        stmt = stmt.where(Inventory.updated_at >= as_utc(since))
    stmt = stmt.order_by(Inventory.updated_at.desc()).limit(list_limit(limit))
    rows = db.execute(stmt).all()
    if not rows:
        logger.info("no assets found for %s", creator_id)
    return [_to_out(row, store) for row in rows]


def get_inventory(
    db: Session,
    principal: Any,
    inventory_id: Any,
    *,
    store: ObjectStore | None = None,
) -> InventoryOut | None:
    stmt = enriched_select(Inventory).where(
        Inventory.id == parse_id(inventory_id),
        visible_to(Inventory.sharable_groups, principal),
    )
    row = db.execute(stmt).one_or_none()
    if row is None:
        return None
    return _to_out(row, store)


def create_inventory(
    db: Session,
    principal: Any,
    draft: InventoryCreate,
    *,
    store: ObjectStore | None = None,
) -> InventoryOut:
    creator_id = parse_principal(principal)
    status_id = _status_id(db, draft.status)
    with unit_of_work(db):
        inventory = _insert(db, creator_id, draft, status_id, utcnow())
        db.flush()
        inventory_id = inventory.id
    logger.info("created inventory %s for %s", inventory_id, creator_id)

    created = get_inventory(db, creator_id, inventory_id, store=store)
    if created is None:
        raise LookupError(f"inventory {inventory_id} is not readable after create")
    return created


def create_inventories(
    db: Session,
    principal: Any,
    drafts: Sequence[InventoryCreate],
    *,
    store: ObjectStore | None = None,
) -> list[InventoryOut]:
    """Insert every draft or none of them.

    The result is the creator's own inventory list read inside the same
    transaction, so it is a snapshot that includes the new rows.
    """

    creator_id = parse_principal(principal)
    status_ids = [_status_id(db, draft.status) for draft in drafts]
    now = utcnow()
    with unit_of_work(db):
        for draft, status_id in zip(drafts, status_ids):
            _insert(db, creator_id, draft, status_id, now)
        db.flush()
        result = list_own_inventories(db, creator_id, store=store)
    logger.info("created %d inventories for %s", len(drafts), creator_id)
    return result


def update_inventory(
    db: Session,
    principal: Any,
    inventory_id: Any,
    draft: InventoryUpdate,
    *,
    store: ObjectStore | None = None,
) -> InventoryOut | None:
    updater_id = parse_principal(principal)
    status_id = _status_id(db, draft.status)
    with unit_of_work(db):
        inventory = load_visible(db, Inventory, updater_id, parse_id(inventory_id))
        if inventory is None:
            return None
        resolved = resolve_storage_location(db, draft.location, updater_id)
        values = _column_values(draft, resolved)
        values.update(status_id=status_id, updated_by=updater_id, updated_at=utcnow())
        if draft.sharable_groups is not None:
            values["sharable_groups"] = groups_with(inventory.created_by, draft.sharable_groups)
        for key, value in values.items():
            setattr(inventory, key, value)
        db.flush()
    logger.info("updated inventory %s by %s", inventory.id, updater_id)
    return get_inventory(db, updater_id, inventory.id, store=store)


def _coerce_column(column: Any) -> UpdatableColumn:
    if isinstance(column, UpdatableColumn):
        return column
    try:
        return UpdatableColumn(str(column).strip().lower())
    except ValueError as exc:
        raise InvalidColumnError(column) from exc


def _coerce_value(column: UpdatableColumn, value: Any) -> Decimal | int:
    if column is UpdatableColumn.PRICE:
        try:
            price = Decimal(str(value))
        except (InvalidOperation, ValueError) as exc:
            raise InvalidDraftError("price must be a valid number") from exc
        if not price.is_finite() or price < 0:
            raise InvalidDraftError("price must be a non-negative number")
        return price.quantize(Decimal("0.01"))

    if isinstance(value, bool):
        raise InvalidDraftError("quantity must be a non-negative integer")
    try:
        quantity = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidDraftError("quantity must be a non-negative integer") from exc
    if not quantity.is_finite() or quantity != quantity.to_integral_value() or quantity < 0:
        raise InvalidDraftError("quantity must be a non-negative integer")
    return int(quantity)


def update_inventory_column(
    db: Session,
    principal: Any,
    asset_id: Any,
    column: UpdatableColumn | str,
    value: Any,
    *,
    store: ObjectStore | None = None,
) -> InventoryOut | None:
    """Change only the price or the quantity of one asset."""

    selected = _coerce_column(column)
    coerced = _coerce_value(selected, value)
    updater_id = parse_principal(principal)
    target_id = parse_id(asset_id)
    with unit_of_work(db):
        updated_id = db.execute(
            update(Inventory)
            .where(Inventory.id == target_id, visible_to(Inventory.sharable_groups, updater_id))
            .values({UPDATABLE_COLUMNS[selected]: coerced, Inventory.updated_by: updater_id, Inventory.updated_at: utcnow()})
            .returning(Inventory.id)
            .execution_options(synchronize_session=False)
        ).scalar_one_or_none()
    if updated_id is None:
        return None
    logger.info("updated %s of inventory %s by %s", selected.value, updated_id, updater_id)
    return get_inventory(db, updater_id, updated_id, store=store)


def update_inventory_image(db: Session, principal: Any, inventory_id: Any, image_ref: str) -> bool:
    return update_image_ref(db, Inventory, principal, parse_id(inventory_id), image_ref)


def delete_inventories(db: Session, principal: Any, inventory_ids: Iterable[Any]) -> list[Any]:
    return delete_visible(db, Inventory, principal, inventory_ids)
