from __future__ import annotations

import uuid
from typing import Any, Iterable

from sqlalchemy import JSON
from sqlalchemy.dialects import postgresql
from sqlalchemy.engine import Dialect
from sqlalchemy.types import TypeDecorator, TypeEngine


def normalize_groups(values: Iterable[Any] | None) -> list[uuid.UUID]:
    """Return ``values`` as unique UUIDs, keeping their first-seen order."""

    seen: set[uuid.UUID] = set()
    result: list[uuid.UUID] = []
    for value in values or ():
        if value is None or value == "":
            continue
        normalized = value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
        if normalized in seen:
            continue
        seen.add(normalized)
        result.append(normalized)
    return result


class GroupArray(TypeDecorator):
    """Set of principal ids: ``UUID[]`` on PostgreSQL, a JSON list elsewhere."""

    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect: Dialect) -> TypeEngine[Any]:
        if dialect.name == "postgresql":
            return dialect.type_descriptor(postgresql.ARRAY(postgresql.UUID(as_uuid=True)))
        return dialect.type_descriptor(JSON())

    def process_bind_param(self, value: Any, dialect: Dialect) -> Any:
        if value is None:
            return []
        groups = normalize_groups(value)
        if dialect.name == "postgresql":
            return groups
        return [str(group) for group in groups]

    def process_result_value(self, value: Any, dialect: Dialect) -> list[uuid.UUID]:
        return normalize_groups(value)
