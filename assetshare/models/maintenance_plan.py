from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from assetshare.db.base import Base
from assetshare.db.types import GroupArray
from assetshare.models.common import utcnow


class MaintenancePlan(Base):
    __tablename__ = "maintenance_plan"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    color: Mapped[str | None] = mapped_column(String(40), nullable=True)
    status_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), ForeignKey("statuses.id"), nullable=False)
    plan_type: Mapped[str | None] = mapped_column(String(60), nullable=True)
    plan_due: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    location_lon: Mapped[float | None] = mapped_column(Float, nullable=True)
    location_lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    associated_image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_by: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_by: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    sharable_groups: Mapped[list[uuid.UUID]] = mapped_column(GroupArray(), nullable=False, default=list)


class MaintenanceItem(Base):
    __tablename__ = "maintenance_item"
    __table_args__ = (
        Index("maintenance_item_plan_id_idx", "maintenance_plan_id"),
        Index("maintenance_item_item_id_idx", "item_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    maintenance_plan_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("maintenance_plan.id", ondelete="CASCADE"), nullable=False
    )
    item_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("inventory.id", ondelete="CASCADE"), nullable=False
    )
    created_by: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_by: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    sharable_groups: Mapped[list[uuid.UUID]] = mapped_column(GroupArray(), nullable=False, default=list)
