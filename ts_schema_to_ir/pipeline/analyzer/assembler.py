"""
Schema assembler that turns a source file into a canonical schema document.

Runs the extraction passes in order: register names, build enums, resolve
bodies, classify events, link references, analyze cycles, check defaults
and emit. The first error stops the run; no partial document is returned.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from ..config import ExtractorConfig
from ..errors import DuplicateName, InvalidDefault, KindMismatch, UnknownReference, UnsupportedTypeShape
from ..source_ast.nodes import (
    ConstObjectDeclaration,
    DeclarationNode,
    InterfaceDeclaration,
    SourceFile,
    TypeLiteralNode,
)
from .declaration_table import DeclarationTable
from .enum_normalizer import EnumNormalizer, where
from .ir_nodes import (
    ArrayOf,
    CanonicalType,
    Declaration,
    DeclarationKind,
    Enum,
    EnumDeclaration,
    EventDeclaration,
    LiteralSet,
    LiteralValue,
    ObjectShape,
    Primitive,
    PrimitiveKind,
    Reference,
    SchemaDocument,
    TypeAliasDeclaration,
    Union,
    literal_fits,
)
from .literal_collapser import LiteralCollapser
from .type_resolver import ENUM_POSITION_KINDS, TypeResolver

logger = logging.getLogger(__name__)


class SchemaAssembler:
    """Orchestrates one extraction run over a source file."""

    def __init__(self, config: ExtractorConfig | None = None):
        self.config = config or ExtractorConfig()
        self.collapser = LiteralCollapser()
        self.normalizer = EnumNormalizer(self.collapser)

        # Per-run state, reset by assemble()
        self.table: DeclarationTable | None = None
        self.resolver: TypeResolver | None = None
        self._groups: dict[str, list[DeclarationNode]] = {}
        self._hidden: set[str] = set()

    def assemble(self, source: SourceFile) -> SchemaDocument:
        """
        Extract the canonical schema of a source file.

        Args:
            source: Top-level declarations in source order

        Returns:
            SchemaDocument with ordered declarations and the populated table
        """
        self.table = DeclarationTable()
        self.resolver = TypeResolver(self.table, self.collapser, self.normalizer)
        self._groups = {}
        self._hidden = set()

        logger.debug("Assembling %s (%d declarations)", source.path or "<source>", len(source.declarations))

        self._register(source)
        self._build_enums()
        bodies = self._resolve_bodies()
        self._classify(bodies)
        self._link()
        self._analyze_cycles()
        self._check_defaults()
        declarations = self._emit()

        self.table.freeze()
        return SchemaDocument(source_path=source.path, declarations=declarations, table=self.table)

    # Pass 1: names

    def _register(self, source: SourceFile) -> None:
        """Register every declared name and its kind."""
        for decl in source.declarations:
            self._groups.setdefault(decl.name, []).append(decl)

        for name, decls in self._groups.items():
            const, type_decl = self._split_group(name, decls)

            if const is not None and const.is_const_asserted:
                if isinstance(type_decl, InterfaceDeclaration):
                    raise DuplicateName(where(name, type_decl), name)
                self.table.register(name, DeclarationKind.ENUM, const.location)
            elif type_decl is not None:
                if const is not None:
                    logger.debug("Constant %s widens; the type declaration of the same name wins", name)
                self.table.register(name, DeclarationKind.TYPE_ALIAS, type_decl.location)
            else:
                logger.debug("Constant %s is not `as const`; registered as a value only", name)
                self.table.register(name, DeclarationKind.VALUE, const.location)

    @staticmethod
    def _split_group(
        name: str, decls: list[DeclarationNode]
    ) -> tuple[ConstObjectDeclaration | None, DeclarationNode | None]:
        """Split same-named declarations into at most one constant and one type."""
        consts = [d for d in decls if isinstance(d, ConstObjectDeclaration)]
        types = [d for d in decls if not isinstance(d, ConstObjectDeclaration)]
        if len(consts) > 1:
            raise DuplicateName(where(name, consts[1]), name)
        if len(types) > 1:
            raise DuplicateName(where(name, types[1]), name)
        return (consts[0] if consts else None, types[0] if types else None)

    # Pass 2: enums

    def _build_enums(self) -> None:
        """Build enums from `as const` objects and fold their derived aliases in."""
        for name, decls in self._groups.items():
            if self.table.kind_of(name) != DeclarationKind.ENUM:
                continue
            const, alias = self._split_group(name, decls)
            enum = self.normalizer.from_constant(const)

            description = const.description
            if alias is not None:
                self._check_type_params(alias)
                if not self.normalizer.matches_alias(enum, alias.type_node, where(name, alias)):
                    raise DuplicateName(where(name, alias), name)
                description = description or alias.description
                logger.debug("Merged constant %s and its union alias into one enum", name)
            elif not self.config.emit_unaliased_enums:
                self._hidden.add(name)

            self.table.define(EnumDeclaration(name=name, description=description, location=const.location, enum=enum))

    # Pass 3: bodies

    def _resolve_bodies(self) -> dict[str, tuple[DeclarationNode, CanonicalType]]:
        """Resolve the body of every interface and non-enum type alias."""
        bodies: dict[str, tuple[DeclarationNode, CanonicalType]] = {}
        for name, decls in self._groups.items():
            if self.table.kind_of(name) != DeclarationKind.TYPE_ALIAS:
                continue
            _, type_decl = self._split_group(name, decls)
            self._check_type_params(type_decl)

            if isinstance(type_decl, InterfaceDeclaration):
                if type_decl.extends:
                    raise UnsupportedTypeShape(where(name, type_decl), f"interface inheritance (extends {', '.join(type_decl.extends)})")
                body = self.resolver.resolve_members(type_decl.members, name)
            else:
                body = self.resolver.resolve(type_decl.type_node, name)
            bodies[name] = (type_decl, body)
        return bodies

    @staticmethod
    def _check_type_params(decl: DeclarationNode) -> None:
        type_params = getattr(decl, "type_params", None)
        if type_params:
            raise UnsupportedTypeShape(where(decl.name, decl), f"generic declaration <{', '.join(type_params)}>")

    # Pass 4: events

    def _classify(self, bodies: dict[str, tuple[DeclarationNode, CanonicalType]]) -> None:
        """Define every resolved body as an event or a type alias."""
        for name, (decl, body) in bodies.items():
            is_object_decl = isinstance(decl, InterfaceDeclaration) or isinstance(getattr(decl, "type_node", None), TypeLiteralNode)
            sections = self._event_sections(body, bodies) if is_object_decl else None

            if sections:
                declaration: Declaration = EventDeclaration(
                    name=name,
                    description=decl.description,
                    location=decl.location,
                    shape=body,
                    name_field=self.config.event_name_field,
                    sections=sections,
                )
                logger.debug("Classified %s as an event with sections %s", name, sections)
            else:
                declaration = TypeAliasDeclaration(name=name, description=decl.description, location=decl.location, target=body)
            self.table.define(declaration)

    def _event_sections(self, body: CanonicalType, bodies: dict[str, tuple[DeclarationNode, CanonicalType]]) -> list[str] | None:
        """Payload section names if the shape is an event envelope, else None."""
        if not isinstance(body, ObjectShape):
            return None

        name_field = body.get(self.config.event_name_field)
        if name_field is None or name_field.optional:
            return None
        name_type = name_field.type_ref
        is_string_name = (
            (isinstance(name_type, Primitive) and name_type.kind == PrimitiveKind.STRING)
            or (isinstance(name_type, (LiteralValue, LiteralSet)) and name_type.primitive_kind == PrimitiveKind.STRING)
        )
        if not is_string_name:
            return None

        sections = []
        for f in body.fields:
            if f.name == name_field.name:
                continue
            target = f.type_ref
            if isinstance(target, Reference) and target.name in bodies:
                target = bodies[target.name][1]
            if isinstance(target, ObjectShape):
                sections.append(f.name)
        return sections or None

    # Pass 5: references

    def _link(self) -> None:
        """Check that every referenced name exists and has a compatible kind."""
        type_kinds = {DeclarationKind.ENUM, DeclarationKind.TYPE_ALIAS}
        if self.config.allow_event_references:
            type_kinds.add(DeclarationKind.EVENT)

        for site in self.resolver.reference_sites:
            actual = self.table.kind_of(site.name)
            if actual is None:
                raise UnknownReference(site.use_site, site.name)

            if site.expected_kinds == ENUM_POSITION_KINDS:
                allowed = {DeclarationKind.ENUM}
            else:
                allowed = type_kinds & set(site.expected_kinds)

            if actual not in allowed:
                expected = " or ".join(k.value for k in DeclarationKind if k in allowed)
                raise KindMismatch(site.use_site, expected, actual.value)

        logger.debug("Linked %d references", len(self.resolver.reference_sites))

    # Pass 6: cycles

    def _analyze_cycles(self) -> None:
        """
        Reject alias cycles and mark recursive declarations.

        A cycle is legal when at least one of its edges passes through an
        object field or an array element. Cycles made only of alias and union
        edges (`type A = B | string; type B = A | number`) are rejected even
        though they only pass through unions: they describe no finite type,
        and TypeScript rejects them as circular aliases too.
        """
        edges: dict[str, list[tuple[str, bool]]] = {}
        for declaration in self.table.declarations():
            edges[declaration.name] = list(_references(declaration.body, guarded=False))

        unguarded = {name: [target for target, guarded in out if not guarded] for name, out in edges.items()}
        for name in edges:
            cycle = _find_cycle(name, unguarded)
            if cycle:
                raise UnsupportedTypeShape(where(name, self.table[name]), f"alias cycle {' -> '.join(cycle)}")

        for declaration in self.table.declarations():
            if _reaches(declaration.name, declaration.name, edges):
                declaration.recursive = True
                logger.debug("Declaration %s is recursive", declaration.name)

    # Pass 7: defaults

    def _check_defaults(self) -> None:
        for declaration in self.table.declarations():
            for path, field in _walk_fields(declaration.body, declaration.name):
                if field.has_default and not self._default_fits(field.type_ref, field.default, path):
                    raise InvalidDefault(path, field.default, f"not assignable to {field.type_ref.tag.value}")

    def _default_fits(self, type_ref: CanonicalType, value: Any, path: str) -> bool:
        if isinstance(type_ref, Reference):
            type_ref = self.table.expand(type_ref, path)

        if isinstance(type_ref, Primitive):
            return literal_fits(value, type_ref.kind)
        if isinstance(type_ref, LiteralValue):
            return literal_fits(value, type_ref.primitive_kind) and value == type_ref.value
        if isinstance(type_ref, LiteralSet):
            return literal_fits(value, type_ref.primitive_kind) and value in type_ref.values
        if isinstance(type_ref, Enum):
            return literal_fits(value, type_ref.value_kind) and value in type_ref.values
        if isinstance(type_ref, Union):
            return any(self._default_fits(m, value, path) for m in type_ref.members)
        if isinstance(type_ref, ArrayOf):
            return isinstance(value, list) and all(self._default_fits(type_ref.element, v, path) for v in value)
        if isinstance(type_ref, ObjectShape):
            if not isinstance(value, dict):
                return False
            known = {f.name for f in type_ref.fields}
            return all(k in known for k in value)
        return False

    # Pass 8: output

    def _emit(self) -> list[Declaration]:
        """Emitted declarations: configured order first, then source order."""
        names = [
            name
            for name in self._groups
            if self.table.kind_of(name) != DeclarationKind.VALUE
            and name not in self._hidden
            and name not in self.config.ignore_declarations
        ]

        ordered = [name for name in self.config.order_declarations if name in names]
        ordered.extend(name for name in names if name not in ordered)
        return [self.table[name] for name in ordered]


def _references(node: CanonicalType | None, guarded: bool) -> Iterator[tuple[str, bool]]:
    """Yield (name, guarded) for each reference inside a type, without crossing it."""
    if isinstance(node, Reference):
        yield node.name, guarded
    elif isinstance(node, Union):
        for member in node.members:
            yield from _references(member, guarded)
    elif isinstance(node, ArrayOf):
        yield from _references(node.element, True)
    elif isinstance(node, ObjectShape):
        for f in node.fields:
            yield from _references(f.type_ref, True)


def _walk_fields(node: CanonicalType | None, path: str) -> Iterator[tuple[str, Any]]:
    """Yield (path, field) for every field of every inline object shape."""
    if isinstance(node, ObjectShape):
        for f in node.fields:
            field_path = f"{path}.{f.name}"
            yield field_path, f
            yield from _walk_fields(f.type_ref, field_path)
    elif isinstance(node, ArrayOf):
        yield from _walk_fields(node.element, f"{path}[]")
    elif isinstance(node, Union):
        for member in node.members:
            yield from _walk_fields(member, path)


def _find_cycle(start: str, graph: dict[str, list[str]]) -> list[str] | None:
    """Return a cycle through `start` as a list of names, or None."""
    stack: list[tuple[str, list[str]]] = [(start, [start])]
    visited: set[str] = set()
    while stack:
        current, trail = stack.pop()
        for target in graph.get(current, []):
            if target == start:
                return trail + [start]
            if target not in visited:
                visited.add(target)
                stack.append((target, trail + [target]))
    return None


def _reaches(start: str, goal: str, edges: dict[str, list[tuple[str, bool]]]) -> bool:
    pending = [target for target, _ in edges.get(start, [])]
    visited: set[str] = set()
    while pending:
        current = pending.pop()
        if current == goal:
            return True
        if current in visited:
            continue
        visited.add(current)
        pending.extend(target for target, _ in edges.get(current, []))
    return False
