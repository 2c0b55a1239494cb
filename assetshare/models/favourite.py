from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from assetshare.db.base import Base
from assetshare.db.types import GroupArray
from assetshare.models.common import utcnow


class FavouriteItem(Base):
    __tablename__ = "favourite_items"
    __table_args__ = (
        CheckConstraint(
            "category_id IS NOT NULL OR maintenance_plan_id IS NOT NULL",
            name="ck_favourite_items_target",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    category_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("category.id", ondelete="CASCADE"), nullable=True
    )
    maintenance_plan_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("maintenance_plan.id", ondelete="CASCADE"), nullable=True
    )
    created_by: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_by: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    sharable_groups: Mapped[list[uuid.UUID]] = mapped_column(GroupArray(), nullable=False, default=list)
