from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import case, exists, func, or_, select
from sqlalchemy.orm import Session

from assetshare.core.access import visible_to
from assetshare.core.identifiers import parse_principal
from assetshare.models.category import CategoryItem
from assetshare.models.inventory import Inventory
from assetshare.schemas.report import ReportOut
from assetshare.services.common import as_utc


logger = logging.getLogger(__name__)

_CENTS = Decimal("0.01")


def _money(value: Any) -> Decimal:
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(_CENTS)


def compute_report(db: Session, principal: Any, since: datetime, include_overdue: bool = False) -> ReportOut:
    """Valuation of the visible inventory touched since ``since``.

    ``item_valuation`` sums every matching price; ``total_category_items_cost``
    only those items linked to at least one category. With ``include_overdue``
    items due back at or after ``since`` are counted as well.
    """

    principal_id = parse_principal(principal)
    since_utc = as_utc(since)

    window = Inventory.updated_at >= since_utc
    if include_overdue:
        window = or_(window, Inventory.return_datetime >= since_utc)

    categorized = exists().where(CategoryItem.item_id == Inventory.id)
    stmt = select(
        func.coalesce(func.sum(Inventory.price), 0),
        func.coalesce(func.sum(case((categorized, Inventory.price), else_=0)), 0),
    ).where(window, visible_to(Inventory.sharable_groups, principal_id))

    item_valuation, category_cost = db.execute(stmt).one()
    logger.debug("report for %s since %s: %s / %s", principal_id, since_utc, item_valuation, category_cost)
    return ReportOut(
        selected_time_range=since,
        item_valuation=_money(item_valuation),
        total_category_items_cost=_money(category_cost),
    )
