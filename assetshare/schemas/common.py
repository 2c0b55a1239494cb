from __future__ import annotations

import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class StatusOut(BaseModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class GeoPoint(BaseModel):
    lon: Optional[float] = None
    lat: Optional[float] = None

    @property
    def is_complete(self) -> bool:
        return self.lon is not None and self.lat is not None

    def as_columns(self) -> tuple[Optional[float], Optional[float]]:
        """``(lon, lat)`` when both coordinates are set, otherwise ``(None, None)``."""
        if not self.is_complete:
            return None, None
        return self.lon, self.lat

    @classmethod
    def from_columns(cls, lon: Optional[float], lat: Optional[float]) -> Optional["GeoPoint"]:
        if lon is None or lat is None:
            return None
        return cls(lon=lon, lat=lat)


class ImageOut(BaseModel):
    content: bytes
    content_type: str
    filename: str

    model_config = ConfigDict(ser_json_bytes="base64")


def deduplicate_ids(value: list[uuid.UUID]) -> list[uuid.UUID]:
    seen: set[uuid.UUID] = set()
    result: list[uuid.UUID] = []
    for item_id in value:
        if item_id in seen:
            continue
        seen.add(item_id)
        result.append(item_id)
    return result


class IdList(BaseModel):
    ids: list[uuid.UUID]

    @field_validator("ids", mode="after")
    @classmethod
    def _deduplicate_ids(cls, value: list[uuid.UUID]) -> list[uuid.UUID]:
        return deduplicate_ids(value)
