from __future__ import annotations

import logging
import uuid
from typing import Callable, TypeVar

from fastapi import HTTPException, Response, UploadFile, status

from assetshare.core.storage import ObjectStore
from assetshare.services.enrichment import fetch_image


logger = logging.getLogger(__name__)

T = TypeVar("T")


def require_found(value: T | None, detail: str) -> T:
    if value is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)
    return value


def save_image(
    store: ObjectStore,
    entity_id: uuid.UUID,
    upload: UploadFile,
    point_to_image: Callable[[str], bool],
) -> str:
    """Point the entity at its image key, then write the uploaded bytes under that key.

    ``point_to_image`` is gated by visibility, so nothing is written for an
    entity the caller cannot see.
    """

    content = upload.file.read()
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Empty upload")
    key = str(entity_id)
    point_to_image(key)
    store.store(key, content, content_type=upload.content_type, filename=upload.filename)
    logger.info("uploaded image for %s", entity_id)
    return key


def image_response(store: ObjectStore, entity_id: uuid.UUID) -> Response:
    image = require_found(fetch_image(store, entity_id), "Image not found")
    return Response(
        content=image.content,
        media_type=image.content_type,
        headers={"Content-Disposition": f'inline; filename="{image.filename}"'},
    )
