"""
Analyzer module.

Contains the declaration table, type resolution, enum and literal
normalization, and schema assembly.
"""

from __future__ import annotations

from .assembler import SchemaAssembler
from .declaration_table import DeclarationTable
from .enum_normalizer import EnumNormalizer
from .ir_nodes import (
    ArrayOf,
    CanonicalType,
    Declaration,
    DeclarationKind,
    Enum,
    EnumDeclaration,
    EnumVariant,
    EventDeclaration,
    Field,
    LiteralSet,
    LiteralValue,
    ObjectShape,
    Primitive,
    PrimitiveKind,
    Reference,
    SchemaDocument,
    TypeAliasDeclaration,
    TypeKind,
    Union,
)
from .literal_collapser import LiteralCollapser
from .type_resolver import ReferenceSite, TypeResolver

__all__ = [
    "CanonicalType",
    "TypeKind",
    "PrimitiveKind",
    "Primitive",
    "LiteralValue",
    "LiteralSet",
    "Enum",
    "EnumVariant",
    "Union",
    "Field",
    "ObjectShape",
    "ArrayOf",
    "Reference",
    "Declaration",
    "DeclarationKind",
    "EnumDeclaration",
    "TypeAliasDeclaration",
    "EventDeclaration",
    "SchemaDocument",
    "DeclarationTable",
    "LiteralCollapser",
    "EnumNormalizer",
    "TypeResolver",
    "ReferenceSite",
    "SchemaAssembler",
]
