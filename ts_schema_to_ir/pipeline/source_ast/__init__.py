"""
Source AST module.

Contains the TypeScript declaration node definitions and the reader for
typescript-estree JSON dumps.
"""

from __future__ import annotations

from .nodes import (
    ArrayTypeNode,
    ConstMember,
    ConstObjectDeclaration,
    DeclarationNode,
    IndexedAccessTypeNode,
    InterfaceDeclaration,
    IntersectionTypeNode,
    KeywordTypeNode,
    LiteralTypeNode,
    PropertySignature,
    SourceFile,
    SourceNode,
    TypeAliasDeclaration,
    TypeLiteralNode,
    TypeOperatorNode,
    TypeQueryNode,
    TypeReferenceNode,
    UnionTypeNode,
    UnsupportedTypeNode,
)
from .parser import SourceReader

__all__ = [
    "SourceNode",
    "KeywordTypeNode",
    "LiteralTypeNode",
    "UnionTypeNode",
    "IntersectionTypeNode",
    "TypeReferenceNode",
    "ArrayTypeNode",
    "PropertySignature",
    "TypeLiteralNode",
    "TypeQueryNode",
    "TypeOperatorNode",
    "IndexedAccessTypeNode",
    "UnsupportedTypeNode",
    "ConstMember",
    "DeclarationNode",
    "ConstObjectDeclaration",
    "InterfaceDeclaration",
    "TypeAliasDeclaration",
    "SourceFile",
    "SourceReader",
]
