from __future__ import annotations

import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session

from assetshare.api.v1.common import image_response, require_found, save_image
from assetshare.core.deps import get_current_principal, get_db, get_object_store
from assetshare.core.storage import ObjectStore
from assetshare.schemas.association import AssociationOut, AssociationRequest
from assetshare.schemas.common import IdList
from assetshare.schemas.maintenance_plan import MaintenancePlanCreate, MaintenancePlanOut, MaintenancePlanUpdate
from assetshare.services import maintenance_plan_service

router = APIRouter(prefix="/maintenance-plans", tags=["maintenance-plans"])


def _visible_plan(db: Session, principal: uuid.UUID, plan_id: uuid.UUID) -> MaintenancePlanOut:
    plan = maintenance_plan_service.get_maintenance_plan(db, principal, plan_id)
    return require_found(plan, "Maintenance plan not found")


@router.get("", response_model=list[MaintenancePlanOut])
def list_maintenance_plans(
    since: datetime | None = None,
    limit: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
    store: ObjectStore = Depends(get_object_store),
):
    return maintenance_plan_service.list_maintenance_plans(db, principal, since=since, limit=limit, store=store)


@router.post("", response_model=MaintenancePlanOut, status_code=status.HTTP_201_CREATED)
def create_maintenance_plan(
    payload: MaintenancePlanCreate,
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
    store: ObjectStore = Depends(get_object_store),
):
    return maintenance_plan_service.create_maintenance_plan(db, principal, payload, store=store)


@router.delete("", response_model=list[uuid.UUID])
def delete_maintenance_plans(
    payload: IdList,
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
):
    return maintenance_plan_service.delete_maintenance_plans(db, principal, payload.ids)


@router.get("/{plan_id}", response_model=MaintenancePlanOut)
def get_maintenance_plan(
    plan_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
    store: ObjectStore = Depends(get_object_store),
):
    plan = maintenance_plan_service.get_maintenance_plan(db, principal, plan_id, store=store)
    return require_found(plan, "Maintenance plan not found")


@router.put("/{plan_id}", response_model=MaintenancePlanOut)
def update_maintenance_plan(
    plan_id: uuid.UUID,
    payload: MaintenancePlanUpdate,
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
    store: ObjectStore = Depends(get_object_store),
):
    updated = maintenance_plan_service.update_maintenance_plan(db, principal, plan_id, payload, store=store)
    return require_found(updated, "Maintenance plan not found")


@router.get("/{plan_id}/items", response_model=list[AssociationOut])
def list_maintenance_items(
    plan_id: uuid.UUID,
    limit: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
):
    _visible_plan(db, principal, plan_id)
    return maintenance_plan_service.list_maintenance_items(db, principal, plan_id, limit=limit)


@router.post("/{plan_id}/items", response_model=list[AssociationOut], status_code=status.HTTP_201_CREATED)
def add_maintenance_items(
    plan_id: uuid.UUID,
    payload: AssociationRequest,
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
):
    _visible_plan(db, principal, plan_id)
    return maintenance_plan_service.add_maintenance_items(db, principal, plan_id, payload.ids, payload.collaborators)


@router.delete("/{plan_id}/items", status_code=status.HTTP_204_NO_CONTENT)
def remove_maintenance_items(
    plan_id: uuid.UUID,
    payload: IdList,
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
):
    _visible_plan(db, principal, plan_id)
    maintenance_plan_service.remove_maintenance_items(db, plan_id, payload.ids)


@router.post("/{plan_id}/image", status_code=status.HTTP_201_CREATED)
def upload_maintenance_plan_image(
    plan_id: uuid.UUID,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
    store: ObjectStore = Depends(get_object_store),
):
    key = save_image(
        store,
        plan_id,
        file,
        lambda ref: maintenance_plan_service.update_maintenance_plan_image(db, principal, plan_id, ref),
    )
    return {"id": plan_id, "associated_image_url": key}


@router.get("/{plan_id}/image")
def download_maintenance_plan_image(
    plan_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
    store: ObjectStore = Depends(get_object_store),
):
    _visible_plan(db, principal, plan_id)
    return image_response(store, plan_id)
