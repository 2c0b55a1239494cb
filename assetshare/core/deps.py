from __future__ import annotations

import uuid
from collections.abc import Iterable

from fastapi import HTTPException, Request, status
from sqlalchemy.orm import Session

from assetshare.core.config import settings
from assetshare.core.errors import InvalidPrincipalError
from assetshare.core.identifiers import parse_principal
from assetshare.core.storage import LocalObjectStore, ObjectStore
from assetshare.db.session import get_session


def get_db() -> Iterable[Session]:
    yield from get_session()


def get_current_principal(request: Request) -> uuid.UUID:
    """Principal id stored in the signed session cookie; no login flow lives here."""

    user_id = request.session.get("user_id")
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    try:
        return parse_principal(user_id)
    except InvalidPrincipalError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid session") from exc


def get_object_store() -> ObjectStore:
    return LocalObjectStore(settings.object_store_path)
