from __future__ import annotations

import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session

from assetshare.api.v1.common import image_response, require_found, save_image
from assetshare.core.deps import get_current_principal, get_db, get_object_store
from assetshare.core.storage import ObjectStore
from assetshare.schemas.inventory import (
    InventoryBulkCreate,
    InventoryColumnUpdate,
    InventoryCreate,
    InventoryDeleteRequest,
    InventoryOut,
    InventoryUpdate,
)
from assetshare.services import inventory_service

router = APIRouter(prefix="/inventories", tags=["inventories"])


@router.get("", response_model=list[InventoryOut])
def list_inventories(
    since: datetime | None = None,
    limit: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
    store: ObjectStore = Depends(get_object_store),
):
    return inventory_service.list_inventories(db, principal, since=since, limit=limit, store=store)


@router.get("/mine", response_model=list[InventoryOut])
def list_own_inventories(
    since: datetime | None = None,
    limit: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
    store: ObjectStore = Depends(get_object_store),
):
    return inventory_service.list_own_inventories(db, principal, since=since, limit=limit, store=store)


@router.post("", response_model=InventoryOut, status_code=status.HTTP_201_CREATED)
def create_inventory(
    payload: InventoryCreate,
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
    store: ObjectStore = Depends(get_object_store),
):
    return inventory_service.create_inventory(db, principal, payload, store=store)


@router.post("/bulk", response_model=list[InventoryOut], status_code=status.HTTP_201_CREATED)
def create_inventories(
    payload: InventoryBulkCreate,
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
    store: ObjectStore = Depends(get_object_store),
):
    return inventory_service.create_inventories(db, principal, payload.inventory_list, store=store)


@router.patch("/column", response_model=InventoryOut)
def update_inventory_column(
    payload: InventoryColumnUpdate,
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
    store: ObjectStore = Depends(get_object_store),
):
    updated = inventory_service.update_inventory_column(
        db, principal, payload.asset_id, payload.column_name, payload.input_column, store=store
    )
    return require_found(updated, "Inventory not found")


@router.delete("", response_model=list[uuid.UUID])
def delete_inventories(
    payload: InventoryDeleteRequest,
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
):
    return inventory_service.delete_inventories(db, principal, payload.ids)


@router.get("/{inventory_id}", response_model=InventoryOut)
def get_inventory(
    inventory_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
    store: ObjectStore = Depends(get_object_store),
):
    return require_found(inventory_service.get_inventory(db, principal, inventory_id, store=store), "Inventory not found")


@router.put("/{inventory_id}", response_model=InventoryOut)
def update_inventory(
    inventory_id: uuid.UUID,
    payload: InventoryUpdate,
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
    store: ObjectStore = Depends(get_object_store),
):
    updated = inventory_service.update_inventory(db, principal, inventory_id, payload, store=store)
    return require_found(updated, "Inventory not found")


@router.post("/{inventory_id}/image", status_code=status.HTTP_201_CREATED)
def upload_inventory_image(
    inventory_id: uuid.UUID,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
    store: ObjectStore = Depends(get_object_store),
):
    key = save_image(
        store,
        inventory_id,
        file,
        lambda ref: inventory_service.update_inventory_image(db, principal, inventory_id, ref),
    )
    return {"id": inventory_id, "associated_image_url": key}


@router.get("/{inventory_id}/image")
def download_inventory_image(
    inventory_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
    store: ObjectStore = Depends(get_object_store),
):
    require_found(inventory_service.get_inventory(db, principal, inventory_id), "Inventory not found")
    return image_response(store, inventory_id)
