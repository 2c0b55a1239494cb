from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator


class ProfileUpdate(BaseModel):
    username: Optional[str] = None
    full_name: Optional[str] = None
    email_address: Optional[str] = None
    phone_number: Optional[str] = None
    about_me: Optional[str] = None
    online_status: Optional[bool] = None
    appearance: Optional[bool] = None
    grid_view: Optional[bool] = None


class ProfileOut(BaseModel):
    id: uuid.UUID
    username: Optional[str] = None
    full_name: Optional[str] = None
    email_address: Optional[str] = None
    avatar_url: Optional[str] = None
    phone_number: Optional[str] = None
    about_me: Optional[str] = None
    online_status: bool = False
    appearance: bool = False
    grid_view: bool = False
    role: Optional[str] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class FavouriteCreate(BaseModel):
    category_id: Optional[uuid.UUID] = None
    maintenance_plan_id: Optional[uuid.UUID] = None

    @model_validator(mode="after")
    def _require_target(self) -> "FavouriteCreate":
        if self.category_id is None and self.maintenance_plan_id is None:
            raise ValueError("A favourite must reference a category or a maintenance plan")
        return self


class FavouriteOut(BaseModel):
    id: uuid.UUID
    category_id: Optional[uuid.UUID] = None
    category_name: Optional[str] = None
    category_status: Optional[str] = None
    maintenance_plan_id: Optional[uuid.UUID] = None
    maintenance_plan_name: Optional[str] = None
    maintenance_plan_status: Optional[str] = None
