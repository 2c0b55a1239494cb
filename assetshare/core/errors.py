from __future__ import annotations


class AssetShareError(Exception):
    """Base class for errors raised by the entity management core."""


class ValidationError(AssetShareError, ValueError):
    """Input rejected before any statement was executed."""


class InvalidColumnError(ValidationError):
    def __init__(self, column: object) -> None:
        super().__init__(f"invalid column name: {column!r}")
        self.column = column


class InvalidPrincipalError(ValidationError):
    def __init__(self, value: object) -> None:
        super().__init__(f"invalid principal identifier: {value!r}")
        self.value = value


class InvalidDraftError(ValidationError):
    pass


class StatusNotFoundError(AssetShareError, LookupError):
    def __init__(self, ref: object) -> None:
        super().__init__(f"unable to find selected status: {ref!r}")
        self.ref = ref


class DependencyError(AssetShareError):
    """A collaborator (object store, connection provisioner) failed."""
