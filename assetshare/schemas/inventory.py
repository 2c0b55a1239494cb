from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from assetshare.schemas.common import ImageOut, StatusOut, deduplicate_ids


class InventoryFields(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    price: Decimal = Field(default=Decimal("0"), ge=0)
    barcode: Optional[str] = None
    sku: Optional[str] = None
    color: Optional[str] = None
    quantity: int = Field(default=1, ge=0)
    bought_at: Optional[str] = None
    is_returnable: bool = False
    return_location: Optional[str] = None
    return_datetime: Optional[datetime] = None
    return_notes: Optional[str] = None
    max_weight: Optional[int] = Field(default=None, ge=0)
    min_weight: Optional[int] = Field(default=None, ge=0)
    max_height: Optional[int] = Field(default=None, ge=0)
    min_height: Optional[int] = Field(default=None, ge=0)


class InventoryDraft(InventoryFields):
    """Writable fields of an inventory item, shared by create and update."""

    status: Optional[str] = None
    location: Optional[str] = None
    sharable_groups: Optional[list[uuid.UUID]] = None

    @field_validator("status", "location", mode="before")
    @classmethod
    def _strip_text(cls, value):
        return (str(value).strip() or None) if value is not None else None

    @model_validator(mode="after")
    def _check_bounds(self) -> "InventoryDraft":
        if self.min_weight is not None and self.max_weight is not None and self.min_weight > self.max_weight:
            raise ValueError("min_weight must not exceed max_weight")
        if self.min_height is not None and self.max_height is not None and self.min_height > self.max_height:
            raise ValueError("min_height must not exceed max_height")
        return self

    @model_validator(mode="after")
    def _clear_return_details(self) -> "InventoryDraft":
        if not self.is_returnable:
            self.return_location = None
            self.return_datetime = None
            self.return_notes = None
        return self


class InventoryCreate(InventoryDraft):
    pass


class InventoryUpdate(InventoryDraft):
    pass


class InventoryBulkCreate(BaseModel):
    inventory_list: list[InventoryCreate] = Field(min_length=1)


class InventoryColumnUpdate(BaseModel):
    asset_id: uuid.UUID
    column_name: str
    input_column: Union[Decimal, int, str]


class InventoryOut(InventoryFields):
    id: uuid.UUID
    status_id: Optional[uuid.UUID] = None
    status: Optional[StatusOut] = None
    location: Optional[str] = None
    storage_location_id: Optional[uuid.UUID] = None
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


class InventoryDeleteRequest(BaseModel):
    ids: list[uuid.UUID]

    @field_validator("ids", mode="after")
    @classmethod
    def _deduplicate_ids(cls, value: list[uuid.UUID]) -> list[uuid.UUID]:
        return deduplicate_ids(value)
