from __future__ import annotations

import enum
import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from assetshare.db.base import Base
from assetshare.db.types import GroupArray
from assetshare.models.common import utcnow


class UpdatableColumn(str, enum.Enum):
    """Columns that may be changed through the single column update path."""

    PRICE = "price"
    QUANTITY = "quantity"


class Inventory(Base):
    __tablename__ = "inventory"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_inventory_price_non_negative"),
        CheckConstraint("quantity >= 0", name="ck_inventory_quantity_non_negative"),
        Index("inventory_created_by_idx", "created_by"),
        Index("inventory_updated_at_idx", "updated_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    status_id: Mapped[uuid.UUID | None] = mapped_column(Uuid(as_uuid=True), ForeignKey("statuses.id"), nullable=True)
    barcode: Mapped[str | None] = mapped_column(String(120), nullable=True)
    sku: Mapped[str | None] = mapped_column(String(120), nullable=True)
    color: Mapped[str | None] = mapped_column(String(40), nullable=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    bought_at: Mapped[str | None] = mapped_column(String(200), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    storage_location_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("storage_locations.id", ondelete="SET NULL"), nullable=True
    )
    is_returnable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    return_location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    return_datetime: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    return_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    max_weight: Mapped[int | None] = mapped_column(Integer, nullable=True)
    min_weight: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_height: Mapped[int | None] = mapped_column(Integer, nullable=True)
    min_height: Mapped[int | None] = mapped_column(Integer, nullable=True)
    associated_image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_by: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_by: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), ForeignKey("profiles.id"), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    sharable_groups: Mapped[list[uuid.UUID]] = mapped_column(GroupArray(), nullable=False, default=list)


UPDATABLE_COLUMNS = {
    UpdatableColumn.PRICE: Inventory.price,
    UpdatableColumn.QUANTITY: Inventory.quantity,
}
