"""
Pipeline - TypeScript event declarations to canonical schema.

This module provides a multi-phase architecture for extracting a
language-neutral schema from TypeScript type declarations:

1. Phase 1 (Reader): Read a typescript-estree JSON dump into the source AST
2. Phase 2 (Analyzer): Register names and build enums from `as const` objects
3. Phase 3 (Analyzer): Resolve type expressions into canonical types
4. Phase 4 (Analyzer): Classify events, link references, analyze cycles
5. Phase 5 (Output): Ordered SchemaDocument, serializable with to_dict()
"""

from __future__ import annotations

from .config import ExtractorConfig
from .errors import (
    DuplicateEnumValue,
    DuplicateName,
    InvalidDefault,
    KindMismatch,
    MixedLiteralKinds,
    SchemaExtractionError,
    UnknownReference,
    UnsupportedTypeShape,
)
from .extractor import SchemaExtractor

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
