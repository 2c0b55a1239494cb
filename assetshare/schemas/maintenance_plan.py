from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field

from assetshare.schemas.category import CategoryDraft, CategoryOut


class MaintenancePlanDraft(CategoryDraft):
    plan_type: Optional[str] = None
    plan_due: Optional[datetime] = None


class MaintenancePlanCreate(MaintenancePlanDraft):
    pass


class MaintenancePlanUpdate(MaintenancePlanDraft):
    pass


class MaintenancePlanOut(CategoryOut):
    plan_type: Optional[str] = None
    plan_due: Optional[datetime] = None
