from __future__ import annotations

import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session

from assetshare.api.v1.common import image_response, require_found, save_image
from assetshare.core.deps import get_current_principal, get_db, get_object_store
from assetshare.core.storage import ObjectStore
from assetshare.schemas.association import AssociationOut, AssociationRequest
from assetshare.schemas.category import CategoryCreate, CategoryOut, CategoryUpdate
from assetshare.schemas.common import IdList
from assetshare.services import category_service

router = APIRouter(prefix="/categories", tags=["categories"])


def _visible_category(db: Session, principal: uuid.UUID, category_id: uuid.UUID) -> CategoryOut:
    return require_found(category_service.get_category(db, principal, category_id), "Category not found")


@router.get("", response_model=list[CategoryOut])
def list_categories(
    since: datetime | None = None,
    limit: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
    store: ObjectStore = Depends(get_object_store),
):
    return category_service.list_categories(db, principal, since=since, limit=limit, store=store)


@router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreate,
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
    store: ObjectStore = Depends(get_object_store),
):
    return category_service.create_category(db, principal, payload, store=store)


@router.delete("", response_model=list[uuid.UUID])
def delete_categories(
    payload: IdList,
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
):
    return category_service.delete_categories(db, principal, payload.ids)


@router.get("/{category_id}", response_model=CategoryOut)
def get_category(
    category_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
    store: ObjectStore = Depends(get_object_store),
):
    return require_found(category_service.get_category(db, principal, category_id, store=store), "Category not found")


@router.put("/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: uuid.UUID,
    payload: CategoryUpdate,
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
    store: ObjectStore = Depends(get_object_store),
):
    updated = category_service.update_category(db, principal, category_id, payload, store=store)
    return require_found(updated, "Category not found")


@router.get("/{category_id}/items", response_model=list[AssociationOut])
def list_category_items(
    category_id: uuid.UUID,
    limit: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
):
    _visible_category(db, principal, category_id)
    return category_service.list_category_items(db, principal, category_id, limit=limit)


@router.post("/{category_id}/items", response_model=list[AssociationOut], status_code=status.HTTP_201_CREATED)
def add_category_items(
    category_id: uuid.UUID,
    payload: AssociationRequest,
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
):
    _visible_category(db, principal, category_id)
    return category_service.add_category_items(db, principal, category_id, payload.ids, payload.collaborators)


@router.delete("/{category_id}/items", status_code=status.HTTP_204_NO_CONTENT)
def remove_category_items(
    category_id: uuid.UUID,
    payload: IdList,
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
):
    _visible_category(db, principal, category_id)
    category_service.remove_category_items(db, category_id, payload.ids)


@router.post("/{category_id}/image", status_code=status.HTTP_201_CREATED)
def upload_category_image(
    category_id: uuid.UUID,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
    store: ObjectStore = Depends(get_object_store),
):
    key = save_image(
        store,
        category_id,
        file,
        lambda ref: category_service.update_category_image(db, principal, category_id, ref),
    )
    return {"id": category_id, "associated_image_url": key}


@router.get("/{category_id}/image")
def download_category_image(
    category_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
    store: ObjectStore = Depends(get_object_store),
):
    _visible_category(db, principal, category_id)
    return image_response(store, category_id)
