from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class ReportOut(BaseModel):
    selected_time_range: datetime
    item_valuation: Decimal = Decimal("0")
    total_category_items_cost: Decimal = Decimal("0")
