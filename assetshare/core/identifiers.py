from __future__ import annotations

import uuid
from typing import Any, Iterable

from assetshare.core.errors import InvalidDraftError, InvalidPrincipalError


def parse_principal(value: Any) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value).strip())
    except (TypeError, ValueError, AttributeError) as exc:
        raise InvalidPrincipalError(value) from exc


def parse_id(value: Any) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value).strip())
    except (TypeError, ValueError, AttributeError) as exc:
        raise InvalidDraftError(f"invalid identifier: {value!r}") from exc


def parse_ids(values: Iterable[Any]) -> list[uuid.UUID]:
    seen: set[uuid.UUID] = set()
    result: list[uuid.UUID] = []
    for value in values:
        parsed = parse_id(value)
        if parsed in seen:
            continue
        seen.add(parsed)
        result.append(parsed)
    return result
