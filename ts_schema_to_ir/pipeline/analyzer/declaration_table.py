"""
Declaration table.

Maps declared names to their kind and resolved declaration for one
extraction run. Names are registered before any body is resolved, so
references may point forward as well as backward.
"""

from __future__ import annotations

from ..errors import DuplicateName, KindMismatch, UnknownReference, UnsupportedTypeShape
from .ir_nodes import CanonicalType, Declaration, DeclarationKind, Reference, TypeAliasDeclaration


class DeclarationTable:
    """Owns every declaration of one extraction run."""

    def __init__(self):
        self._kinds: dict[str, DeclarationKind] = {}
        self._locations: dict[str, str] = {}
        self._declarations: dict[str, Declaration] = {}
        self._expanded: dict[str, CanonicalType] = {}
        self._frozen = False

    def register(self, name: str, kind: DeclarationKind, location: str = "") -> None:
        """Register a name before its body is resolved."""
        self._check_writable()
        if name in self._kinds:
            raise DuplicateName(location or name, name)
        self._kinds[name] = kind
        self._locations[name] = location

    def define(self, declaration: Declaration) -> None:
        """Store the resolved declaration for an already registered name."""
        self._check_writable()
        if declaration.name not in self._kinds:
            raise KeyError(f"Declaration {declaration.name!r} was never registered")
        self._kinds[declaration.name] = declaration.kind
        self._declarations[declaration.name] = declaration

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_writable(self) -> None:
        if self._frozen:
            raise RuntimeError("Declaration table is frozen")

    def kind_of(self, name: str) -> DeclarationKind | None:
        return self._kinds.get(name)

    def location_of(self, name: str) -> str:
        return self._locations.get(name, "")

    def get(self, name: str) -> Declaration | None:
        return self._declarations.get(name)

    def __getitem__(self, name: str) -> Declaration:
        return self._declarations[name]

    def __contains__(self, name: object) -> bool:
        return name in self._kinds

    def __len__(self) -> int:
        return len(self._declarations)

    def names(self) -> list[str]:
        """Registered names, in registration order."""
        return list(self._kinds)

    def declarations(self) -> list[Declaration]:
        return list(self._declarations.values())

    def expand(self, ref: Reference | str, use_site: str = "") -> CanonicalType:
        """
        Return the canonical node a reference stands for.

        Aliases of aliases are followed until a non-reference node is found.
        The result is memoized, so every use of a name gets the same node.

        Args:
            ref: A Reference or a declared name
            use_site: Where the reference is used (for error messages)

        Returns:
            The shared canonical type of the target declaration
        """
        name = ref.name if isinstance(ref, Reference) else ref
        if name in self._expanded:
            return self._expanded[name]

        seen: list[str] = []
        current = name
        while True:
            if current in seen:
                chain = " -> ".join(seen + [current])
                raise UnsupportedTypeShape(use_site or name, f"alias cycle {chain}")
            seen.append(current)

            kind = self._kinds.get(current)
            if kind is None:
                raise UnknownReference(use_site or name, current)
            if kind == DeclarationKind.VALUE:
                raise KindMismatch(use_site or name, "type", kind.value)

            declaration = self._declarations.get(current)
            if declaration is None:
                raise UnknownReference(use_site or name, current)

            body = declaration.body
            if isinstance(declaration, TypeAliasDeclaration) and isinstance(body, Reference):
                current = body.name
                continue
            break

        self._expanded[name] = body
        return body
