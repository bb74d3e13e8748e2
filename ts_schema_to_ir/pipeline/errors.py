"""
Errors raised during schema extraction.

Every error is fatal for the current run: the first one raised stops
extraction and no partial schema document is returned.
"""

from __future__ import annotations

from typing import Any


class SchemaExtractionError(Exception):
    """Base class for all extraction failures."""

    pass


class UnsupportedTypeShape(SchemaExtractionError):
    """Raised when a type expression falls outside the supported closed set.

    This covers intersections, generic references, conditional and mapped
    types, tuples, `any`/`unknown`/`null`, and similar constructs.
    """

    def __init__(self, location: str, description: str):
        self.location = location
        self.description = description
        super().__init__(f"{location}: unsupported type shape: {description}")


class DuplicateEnumValue(SchemaExtractionError):
    """Raised when two keys of a constant set map to the same literal value."""

    def __init__(self, enum_name: str, value: Any):
        self.enum_name = enum_name
        self.value = value
        super().__init__(f"{enum_name}: duplicate enum value {value!r}")


class MixedLiteralKinds(SchemaExtractionError):
    """Raised when a literal union mixes incompatible primitive kinds."""

    def __init__(self, location: str, kinds: list[str] | None = None):
        self.location = location
        self.kinds = kinds or []
        detail = f" ({', '.join(self.kinds)})" if self.kinds else ""
        super().__init__(f"{location}: literal union mixes incompatible kinds{detail}")


class UnknownReference(SchemaExtractionError):
    """Raised when a type name is used but never declared."""

    def __init__(self, use_site: str, name: str):
        self.use_site = use_site
        self.name = name
        super().__init__(f"{use_site}: unknown reference {name!r}")


class KindMismatch(SchemaExtractionError):
    """Raised when a reference resolves to a declaration of the wrong kind."""

    def __init__(self, use_site: str, expected_kind: str, actual_kind: str):
        self.use_site = use_site
        self.expected_kind = expected_kind
        self.actual_kind = actual_kind
        super().__init__(f"{use_site}: expected {expected_kind}, got {actual_kind}")


class DuplicateName(SchemaExtractionError):
    """Raised when a name is declared twice in one scope.

    Scopes are: top-level declarations, the keys of a constant set, and
    the fields of one object type.
    """

    def __init__(self, location: str, name: str):
        self.location = location
        self.name = name
        super().__init__(f"{location}: duplicate name {name!r}")


class InvalidDefault(SchemaExtractionError):
    """Raised when a documented `@default` does not fit the field's type."""

    def __init__(self, location: str, value: Any, reason: str):
        self.location = location
        self.value = value
        self.reason = reason
        super().__init__(f"{location}: invalid default {value!r}: {reason}")
