from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from assetshare.schemas.common import GeoPoint, ImageOut, StatusOut


class CategoryDraft(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    color: Optional[str] = None
    status: str
    location: Optional[GeoPoint] = None
    sharable_groups: Optional[list[uuid.UUID]] = None

    @field_validator("status", mode="before")
    @classmethod
    def _strip_status(cls, value):
        return str(value).strip() if value is not None else value


class CategoryCreate(CategoryDraft):
    pass


class CategoryUpdate(CategoryDraft):
    pass


class CategoryOut(BaseModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    status_id: Optional[uuid.UUID] = None
    status: Optional[StatusOut] = None
    location: Optional[GeoPoint] = None
    associated_image_url: Optional[str] = None
    created_by: uuid.UUID
    creator_name: Optional[str] = None
    created_at: datetime
    updated_by: uuid.UUID
    updater_name: Optional[str] = None
    updated_at: datetime
    sharable_groups: list[uuid.UUID] = Field(default_factory=list)
    image: Optional[ImageOut] = None

    model_config = ConfigDict(from_attributes=True)
