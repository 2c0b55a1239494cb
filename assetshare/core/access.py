from __future__ import annotations

from typing import Any

from sqlalchemy import Boolean, String, cast, literal
from sqlalchemy.dialects import postgresql
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.compiler import SQLCompiler
from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.sql.functions import FunctionElement

from assetshare.core.errors import InvalidPrincipalError
from assetshare.core.identifiers import parse_principal


class group_contains(FunctionElement):
    """``principal`` is a member of the ``groups`` array column."""

    name = "group_contains"
    inherit_cache = True
    type = Boolean()


@compiles(group_contains, "postgresql")
def _compile_group_contains_pg(element: group_contains, compiler: SQLCompiler, **kw: Any) -> str:
    groups, principal = list(element.clauses)
    return "%s = ANY (%s)" % (
        compiler.process(cast(principal, postgresql.UUID(as_uuid=False)), **kw),
        compiler.process(groups, **kw),
    )


@compiles(group_contains)
def _compile_group_contains_json(element: group_contains, compiler: SQLCompiler, **kw: Any) -> str:
    groups, principal = list(element.clauses)
    return "EXISTS (SELECT 1 FROM json_each(%s) WHERE json_each.value = %s)" % (
        compiler.process(groups, **kw),
        compiler.process(principal, **kw),
    )


def visible_to(groups_column: Any, principal: Any) -> ColumnElement[bool]:
    """SQL condition: ``principal`` may see or mutate the row owning ``groups_column``."""

    principal_id = parse_principal(principal)
    return group_contains(groups_column, literal(str(principal_id), String()))


def is_visible(principal: Any, entity: Any) -> bool:
    """Evaluate the same rule against an already loaded entity."""

    try:
        principal_id = parse_principal(principal)
    except InvalidPrincipalError:
        return False
    return principal_id in (getattr(entity, "sharable_groups", None) or ())
