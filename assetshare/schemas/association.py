from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from assetshare.schemas.common import deduplicate_ids


class AssociationRequest(BaseModel):
    """Item ids to link to a category or maintenance plan, or link ids to remove."""

    ids: list[uuid.UUID] = Field(min_length=1)
    collaborators: list[uuid.UUID] = Field(default_factory=list)

    @field_validator("ids", mode="after")
    @classmethod
    def _deduplicate_ids(cls, value: list[uuid.UUID]) -> list[uuid.UUID]:
        return deduplicate_ids(value)


class AssociationOut(BaseModel):
    id: uuid.UUID
    parent_id: uuid.UUID
    item_id: uuid.UUID
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = None
    quantity: Optional[int] = None
    location: Optional[str] = None
    created_by: uuid.UUID
    creator_name: str
    created_at: datetime
    updated_by: uuid.UUID
    updater_name: str
    updated_at: datetime
    sharable_groups: list[uuid.UUID] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)
