from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from assetshare.core.deps import get_current_principal, get_db
from assetshare.schemas.common import StatusOut
from assetshare.schemas.storage_location import StorageLocationOut
from assetshare.services import location_service, status_service

router = APIRouter(tags=["lookups"])


@router.get("/statuses", response_model=list[StatusOut])
def list_statuses(db: Session = Depends(get_db), principal: uuid.UUID = Depends(get_current_principal)):
    return status_service.list_statuses(db)


@router.get("/storage-locations", response_model=list[StorageLocationOut])
def list_storage_locations(
    limit: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
):
    return location_service.list_storage_locations(db, limit=limit)
