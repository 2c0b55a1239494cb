from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session

from assetshare.api.v1.common import image_response, require_found, save_image
from assetshare.core.deps import get_current_principal, get_db, get_object_store
from assetshare.core.storage import ObjectStore
from assetshare.schemas.profile import FavouriteCreate, FavouriteOut, ProfileOut, ProfileUpdate
from assetshare.services import profile_service

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("", response_model=list[ProfileOut])
def list_profiles(db: Session = Depends(get_db), principal: uuid.UUID = Depends(get_current_principal)):
    return profile_service.list_profiles(db)


@router.get("/me", response_model=ProfileOut)
def get_own_profile(db: Session = Depends(get_db), principal: uuid.UUID = Depends(get_current_principal)):
    return require_found(profile_service.get_profile(db, principal), "Profile not found")


@router.put("/me", response_model=ProfileOut)
def update_own_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
):
    return require_found(profile_service.update_profile(db, principal, payload), "Profile not found")


@router.post("/me/avatar", status_code=status.HTTP_201_CREATED)
def upload_own_avatar(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
    store: ObjectStore = Depends(get_object_store),
):
    key = save_image(store, principal, file, lambda ref: profile_service.update_profile_avatar(db, principal, ref))
    return {"id": principal, "avatar_url": key}


@router.get("/me/avatar")
def download_own_avatar(
    principal: uuid.UUID = Depends(get_current_principal),
    store: ObjectStore = Depends(get_object_store),
):
    return image_response(store, principal)


@router.get("/me/favourites", response_model=list[FavouriteOut])
def list_favourites(
    limit: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
):
    return profile_service.list_favourites(db, principal, limit=limit)


@router.post("/me/favourites", response_model=list[FavouriteOut], status_code=status.HTTP_201_CREATED)
def save_favourite(
    payload: FavouriteCreate,
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
):
    return require_found(profile_service.save_favourite(db, principal, payload), "Favourite target not found")


@router.delete("/me/favourites/{favourite_id}", response_model=uuid.UUID)
def remove_favourite(
    favourite_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
):
    return profile_service.remove_favourite(db, principal, favourite_id)


@router.get("/{profile_id}", response_model=ProfileOut)
def get_profile(
    profile_id: uuid.UUID,
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
):
    return require_found(profile_service.get_profile(db, profile_id), "Profile not found")
