from __future__ import annotations

import uuid
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from assetshare.core.deps import get_current_principal, get_db
from assetshare.schemas.report import ReportOut
from assetshare.services import report_service

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("", response_model=ReportOut)
def get_report(
    since: datetime,
    include_overdue: bool = False,
    db: Session = Depends(get_db),
    principal: uuid.UUID = Depends(get_current_principal),
):
    return report_service.compute_report(db, principal, since, include_overdue=include_overdue)
