"""TypeScript Schema to IR

A Python package for extracting a canonical, language-neutral schema from
TypeScript event declarations (`as const` enums, interfaces, type aliases
and literal types), ready for marshalling-code generators.
"""

__version__ = "0.1.0"
__author__ = "François Lagunas"

from .pipeline import (
    DuplicateEnumValue,
    DuplicateName,
    ExtractorConfig,
    InvalidDefault,
    KindMismatch,
    MixedLiteralKinds,
    SchemaExtractionError,
    SchemaExtractor,
    UnknownReference,
    UnsupportedTypeShape,
)

__all__ = [
    "SchemaExtractor",
    "ExtractorConfig",
    "SchemaExtractionError",
    "UnsupportedTypeShape",
    "DuplicateEnumValue",
    "MixedLiteralKinds",
    "UnknownReference",
    "KindMismatch",
    "DuplicateName",
    "InvalidDefault",
]
