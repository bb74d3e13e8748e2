"""
Enum normalizer.

TypeScript has two common spellings for one enumeration:

    export const Status = { OPEN: "open", CLOSED: "closed" } as const;
    export type Status = typeof Status[keyof typeof Status];

Both declarations describe the same closed set, so they are folded into a
single Enum whose variants follow the constant's key order.
"""

from __future__ import annotations

import logging
from typing import Any

from ..errors import DuplicateEnumValue, DuplicateName, UnsupportedTypeShape
from ..source_ast.nodes import (
    ConstObjectDeclaration,
    IndexedAccessTypeNode,
    LiteralTypeNode,
    SourceNode,
    TypeOperatorNode,
    TypeQueryNode,
    UnionTypeNode,
)
from .ir_nodes import Enum, EnumVariant, literal_fits
from .literal_collapser import LiteralCollapser

logger = logging.getLogger(__name__)


def where(path: str, node: SourceNode | None) -> str:
    """Format a field path with the node's source position, if known."""
    if node is not None and node.location:
        return f"{path} ({node.location})"
    return path


class EnumNormalizer:
    """Detects constant-set enums and the union aliases derived from them."""

    def __init__(self, collapser: LiteralCollapser | None = None):
        self.collapser = collapser or LiteralCollapser()

    @staticmethod
    def derived_enum_name(node: SourceNode | None) -> str | None:
        """
        Return X if the node spells `typeof X[keyof typeof X]`, else None.
        """
        if not isinstance(node, IndexedAccessTypeNode):
            return None
        obj, index = node.object_type, node.index_type
        if not isinstance(obj, TypeQueryNode):
            return None
        if not (isinstance(index, TypeOperatorNode) and index.operator == "keyof"):
            return None
        if not isinstance(index.type_node, TypeQueryNode):
            return None
        if index.type_node.name != obj.name:
            return None
        return obj.name

    def from_constant(self, decl: ConstObjectDeclaration) -> Enum:
        """
        Build an Enum from an `as const` object declaration.

        Args:
            decl: The constant object; every value must be a literal

        Returns:
            Enum with variants in key order
        """
        labels: set[str] = set()
        variants: list[EnumVariant] = []

        for member in decl.members:
            path = f"{decl.name}.{member.key}"
            if member.key in labels:
                raise DuplicateName(where(path, member), member.key)
            labels.add(member.key)

            if not isinstance(member.value, LiteralTypeNode):
                construct = type(member.value).__name__ if member.value is not None else "missing value"
                raise UnsupportedTypeShape(where(path, member), f"non-literal constant value ({construct})")

            variants.append(EnumVariant(label=member.key, value=member.value.value))

        value_kind = self.collapser.infer_kind([v.value for v in variants], where(decl.name, decl))

        seen: list[Any] = []
        for variant in variants:
            if variant.value in seen:
                raise DuplicateEnumValue(decl.name, variant.value)
            seen.append(variant.value)

        return Enum(name=decl.name, variants=variants, value_kind=value_kind)

    def matches_alias(self, enum: Enum, type_node: SourceNode | None, location: str) -> bool:
        """
        Check whether an alias type is the derived union of an enum's values.

        Accepts the `typeof X[keyof typeof X]` spelling as well as a literal
        union listing exactly the enum's values, in any order.
        """
        if self.derived_enum_name(type_node) == enum.name:
            return True

        literals = self._literal_members(type_node)
        if literals is None:
            return False

        literal_set = self.collapser.collapse(literals, location)
        if not all(literal_fits(v, enum.value_kind) for v in literal_set.values):
            return False
        if len(literal_set.values) != len(enum.variants):
            return False
        matched = all(v in literal_set.values for v in enum.values)
        if matched:
            logger.debug("Alias %s matches the values of constant %s", location, enum.name)
        return matched

    @staticmethod
    def _literal_members(node: SourceNode | None) -> list[Any] | None:
        """Literal values of a union made only of literals, or None."""
        if isinstance(node, LiteralTypeNode):
            return [node.value]
        if not isinstance(node, UnionTypeNode):
            return None

        values = []
        pending = list(node.types)
        while pending:
            member = pending.pop(0)
            if isinstance(member, UnionTypeNode):
                pending[0:0] = member.types
                continue
            if not isinstance(member, LiteralTypeNode):
                return None
            values.append(member.value)
        return values
