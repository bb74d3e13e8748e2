"""
Reader for typescript-estree JSON dumps.

Phase 1 of the pipeline: turn the `Program` produced by an external
TypeScript parser (`@typescript-eslint/typescript-estree`, serialized to
JSON with `loc` and `comment` enabled) into the source AST, without
resolving references or normalizing anything.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from ..errors import UnsupportedTypeShape
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

logger = logging.getLogger(__name__)


class SourceReader:
    """Reads an estree `Program` dictionary into a SourceFile."""

    # estree node types with no counterpart in the supported closed set
    UNSUPPORTED_TYPES = {
        "TSConditionalType": "conditional type",
        "TSMappedType": "mapped type",
        "TSTupleType": "tuple type",
        "TSFunctionType": "function type",
        "TSConstructorType": "constructor type",
        "TSTemplateLiteralType": "template literal type",
        "TSInferType": "infer type",
        "TSImportType": "import type",
        "TSTypePredicate": "type predicate",
        "TSThisType": "this type",
    }

    def __init__(self):
        self._docs: dict[int, str] = {}

    def read(self, program: dict[str, Any], path: str = "") -> SourceFile:
        """
        Read a Program into a SourceFile.

        Args:
            program: The estree Program as loaded from JSON
            path: Source file path, kept for diagnostics

        Returns:
            SourceFile with top-level declarations in source order
        """
        if program.get("type") != "Program":
            raise ValueError(f"Expected an estree Program, got {program.get('type')!r}")

        self._docs = self._index_doc_comments(program.get("comments") or [])

        source = SourceFile(path=path)
        for statement in program.get("body", []):
            source.declarations.extend(self._read_statement(statement))
        return source

    def _index_doc_comments(self, comments: list[dict[str, Any]]) -> dict[int, str]:
        """Map the end line of every JSDoc block (`/** ... */`) to its text."""
        docs = {}
        for comment in comments:
            if comment.get("type") != "Block" or not comment.get("value", "").startswith("*"):
                continue
            end = comment.get("loc", {}).get("end", {}).get("line")
            if end is not None:
                docs[end] = comment["value"]
        return docs

    def _doc_for(self, node: dict[str, Any]) -> tuple[str | None, Any, bool]:
        """
        Return (description, default, has_default) of the JSDoc block
        directly above a node.
        """
        line = node.get("loc", {}).get("start", {}).get("line")
        raw = self._docs.get(line - 1) if line is not None else None
        if raw is None:
            return None, None, False

        text_lines = []
        default = None
        has_default = False
        for line_text in raw.splitlines():
            line_text = line_text.strip().lstrip("*").strip()
            if line_text.startswith("@default"):
                default = self._parse_default(line_text[len("@default") :].strip())
                has_default = True
            elif line_text.startswith("@"):
                continue
            elif line_text:
                text_lines.append(line_text)

        return (" ".join(text_lines) or None), default, has_default

    @staticmethod
    def _parse_default(text: str) -> Any:
        try:
            return json.loads(text)
        except ValueError:
            # Bare words such as `@default open`
            return text

    @staticmethod
    def _location(node: dict[str, Any]) -> str:
        start = node.get("loc", {}).get("start")
        if not start:
            return ""
        return f"{start['line']}:{start['column'] + 1}"

    def _read_statement(self, statement: dict[str, Any]) -> list[DeclarationNode]:
        stmt_type = statement.get("type")
        exported = False
        outer = statement

        if stmt_type == "ExportNamedDeclaration":
            if statement.get("declaration") is None:
                return []
            exported = True
            statement = statement["declaration"]
            stmt_type = statement.get("type")

        if stmt_type == "TSInterfaceDeclaration":
            decls: list[DeclarationNode] = [self._read_interface(statement)]
        elif stmt_type == "TSTypeAliasDeclaration":
            decls = [self._read_type_alias(statement)]
        elif stmt_type == "VariableDeclaration" and statement.get("kind") == "const":
            decls = [d for d in (self._read_const(v) for v in statement.get("declarations", [])) if d is not None]
        else:
            logger.debug("Skipping %s at %s", stmt_type, self._location(statement) or "?")
            return []

        description, _, _ = self._doc_for(outer)
        for decl in decls:
            decl.exported = exported
            decl.description = description
        return decls

    def _read_interface(self, node: dict[str, Any]) -> InterfaceDeclaration:
        return InterfaceDeclaration(
            name=node["id"]["name"],
            location=self._location(node),
            members=[self._read_member(m) for m in node.get("body", {}).get("body", [])],
            type_params=self._type_param_names(node),
            extends=[self._entity_name(h.get("expression") or h.get("typeName")) for h in node.get("extends") or []],
        )

    def _read_type_alias(self, node: dict[str, Any]) -> TypeAliasDeclaration:
        return TypeAliasDeclaration(
            name=node["id"]["name"],
            location=self._location(node),
            type_node=self._read_type(node["typeAnnotation"]),
            type_params=self._type_param_names(node),
        )

    def _type_param_names(self, node: dict[str, Any]) -> list[str]:
        params = (node.get("typeParameters") or {}).get("params", [])
        names = []
        for param in params:
            name = param.get("name")
            names.append(name["name"] if isinstance(name, dict) else name)
        return names

    def _read_const(self, declarator: dict[str, Any]) -> ConstObjectDeclaration | None:
        """Read `const X = {...}`, `{...} as const` or `Object.freeze({...})`."""
        init = declarator.get("init")
        name = declarator["id"].get("name", "")
        asserted = False

        if init is not None and init.get("type") == "TSSatisfiesExpression":
            init = init["expression"]
        if init is not None and init.get("type") == "TSAsExpression":
            annotation = init.get("typeAnnotation", {})
            asserted = annotation.get("type") == "TSTypeReference" and self._entity_name(annotation.get("typeName")) == "const"
            init = init["expression"]
        elif init is not None and self._is_object_freeze(init):
            asserted = True
            init = init["arguments"][0]

        if init is None or init.get("type") != "ObjectExpression":
            logger.debug("Skipping non-object constant %s", name)
            return None

        return ConstObjectDeclaration(
            name=name,
            location=self._location(declarator),
            members=[self._read_const_member(name, p) for p in init.get("properties", [])],
            is_const_asserted=asserted,
        )

    def _is_object_freeze(self, node: dict[str, Any]) -> bool:
        if node.get("type") != "CallExpression" or len(node.get("arguments", [])) != 1:
            return False
        callee = node.get("callee", {})
        return (
            callee.get("type") == "MemberExpression"
            and callee.get("object", {}).get("name") == "Object"
            and callee.get("property", {}).get("name") == "freeze"
        )

    def _read_const_member(self, const_name: str, prop: dict[str, Any]) -> ConstMember:
        location = self._location(prop)
        if prop.get("type") != "Property" or prop.get("computed"):
            where = f"{const_name} ({location})" if location else const_name
            raise UnsupportedTypeShape(where, f"constant member {prop.get('type')}")

        return ConstMember(
            key=self._property_key(prop["key"]),
            value=self._read_value(prop["value"]),
            location=location,
        )

    def _read_value(self, node: dict[str, Any]) -> SourceNode:
        """Read a constant member value; only literals are meaningful."""
        location = self._location(node)
        node_type = node.get("type")

        if node_type == "Literal":
            return self._literal(node, location)
        if node_type == "UnaryExpression" and node.get("operator") == "-" and node["argument"].get("type") == "Literal":
            literal = self._literal(node["argument"], location)
            if isinstance(literal, LiteralTypeNode) and isinstance(literal.value, (int, float)) and not isinstance(literal.value, bool):
                literal.value = -literal.value
                return literal
        if node_type == "TemplateLiteral" and not node.get("expressions"):
            return LiteralTypeNode(value=node["quasis"][0]["value"]["cooked"], location=location)
        return UnsupportedTypeNode(construct=f"{node_type} value", location=location)

    @staticmethod
    def _literal(node: dict[str, Any], location: str) -> SourceNode:
        if node.get("bigint") is not None:
            return LiteralTypeNode(value=int(node["bigint"]), location=location)
        value = node.get("value")
        if value is None:
            return KeywordTypeNode(keyword="null", location=location)
        if isinstance(value, dict):
            # RegExp literals serialize to an object
            return UnsupportedTypeNode(construct="regular expression", location=location)
        return LiteralTypeNode(value=value, location=location)

    def _read_member(self, node: dict[str, Any]) -> PropertySignature:
        location = self._location(node)
        if node.get("type") != "TSPropertySignature" or node.get("computed"):
            construct = {
                "TSIndexSignature": "index signature",
                "TSMethodSignature": "method signature",
                "TSCallSignatureDeclaration": "call signature",
                "TSConstructSignatureDeclaration": "construct signature",
            }.get(node.get("type"), "computed property")
            return PropertySignature(
                name=f"[{construct}]",
                type_node=UnsupportedTypeNode(construct=construct, location=location),
                location=location,
            )

        description, default, has_default = self._doc_for(node)
        annotation = node.get("typeAnnotation")
        return PropertySignature(
            name=self._property_key(node["key"]),
            type_node=self._read_type(annotation["typeAnnotation"]) if annotation else None,
            optional=bool(node.get("optional")),
            readonly=bool(node.get("readonly")),
            description=description,
            default_value=default,
            has_default=has_default,
            location=location,
        )

    @staticmethod
    def _property_key(key: dict[str, Any]) -> str:
        if key.get("type") == "Identifier":
            return key["name"]
        return str(key.get("value"))

    def _entity_name(self, node: dict[str, Any] | None) -> str:
        """Name of an Identifier or a dotted TSQualifiedName."""
        if node is None:
            return ""
        if node.get("type") == "TSQualifiedName":
            return f"{self._entity_name(node['left'])}.{self._entity_name(node['right'])}"
        return node.get("name", "")

    def _read_type(self, node: dict[str, Any]) -> SourceNode:
        """
        Read a type expression.

        Args:
            node: estree type node

        Returns:
            The matching source AST node
        """
        location = self._location(node)
        node_type = node.get("type", "")

        if node_type == "TSParenthesizedType":
            return self._read_type(node["typeAnnotation"])

        if node_type.startswith("TS") and node_type.endswith("Keyword"):
            return KeywordTypeNode(keyword=node_type[2 : -len("Keyword")].lower(), location=location)

        if node_type == "TSLiteralType":
            return self._read_value(node["literal"])

        if node_type == "TSUnionType":
            return UnionTypeNode(types=[self._read_type(t) for t in node["types"]], location=location)

        if node_type == "TSIntersectionType":
            return IntersectionTypeNode(types=[self._read_type(t) for t in node["types"]], location=location)

        if node_type == "TSTypeReference":
            args = node.get("typeArguments") or node.get("typeParameters") or {}
            return TypeReferenceNode(
                name=self._entity_name(node["typeName"]),
                type_args=[self._read_type(t) for t in args.get("params", [])],
                location=location,
            )

        if node_type == "TSArrayType":
            return ArrayTypeNode(element=self._read_type(node["elementType"]), location=location)

        if node_type == "TSTypeLiteral":
            return TypeLiteralNode(members=[self._read_member(m) for m in node.get("members", [])], location=location)

        if node_type == "TSTypeQuery":
            return TypeQueryNode(name=self._entity_name(node["exprName"]), location=location)

        if node_type == "TSTypeOperator":
            return TypeOperatorNode(
                operator=node["operator"],
                type_node=self._read_type(node["typeAnnotation"]),
                location=location,
            )

        if node_type == "TSIndexedAccessType":
            return IndexedAccessTypeNode(
                object_type=self._read_type(node["objectType"]),
                index_type=self._read_type(node["indexType"]),
                location=location,
            )

        return UnsupportedTypeNode(construct=self.UNSUPPORTED_TYPES.get(node_type, node_type), location=location)
