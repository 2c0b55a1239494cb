from __future__ import annotations

import logging
import uuid

from assetshare.core.storage import ObjectNotFoundError, ObjectStore
from assetshare.models.profile import Profile
from assetshare.models.status import Status
from assetshare.schemas.common import ImageOut, StatusOut


logger = logging.getLogger(__name__)


def display_name(profile: Profile | None) -> str | None:
    """First non-empty of username, full name and email address."""

    if profile is None:
        return None
    for value in (profile.username, profile.full_name, profile.email_address):
        if value:
            return value
    return None


def status_out(status: Status | None) -> StatusOut | None:
    if status is None:
        return None
    return StatusOut.model_validate(status)


def fetch_image(store: ObjectStore | None, entity_id: uuid.UUID) -> ImageOut | None:
    """Best-effort image lookup; a missing object means the entity has no image."""

    if store is None:
        return None
    try:
        stored = store.fetch(str(entity_id))
    except ObjectNotFoundError:
        logger.debug("no image stored for %s", entity_id)
        return None
    return ImageOut(content=stored.content, content_type=stored.content_type, filename=stored.filename)
