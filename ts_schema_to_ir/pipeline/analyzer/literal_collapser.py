"""
Literal collapser.

Folds an anonymous union of literal types into a single LiteralSet.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from ..errors import MixedLiteralKinds
from .ir_nodes import LiteralSet, PrimitiveKind, literal_kind_of

_NUMERIC = (PrimitiveKind.INTEGER, PrimitiveKind.FLOAT)


class LiteralCollapser:
    """Builds LiteralSets out of closed unions of literal values."""

    @staticmethod
    def infer_kind(values: Iterable[Any], location: str) -> PrimitiveKind:
        """
        Infer the one primitive kind shared by a group of literal values.

        Integers and floats combine into float; any other mix is rejected.

        Args:
            values: Literal values (str, int, float or bool)
            location: Where the values come from (for error messages)

        Returns:
            The common PrimitiveKind
        """
        kinds: list[PrimitiveKind] = []
        for value in values:
            kind = literal_kind_of(value)
            if kind is None:
                raise MixedLiteralKinds(location, [type(value).__name__])
            if kind not in kinds:
                kinds.append(kind)

        if not kinds:
            raise MixedLiteralKinds(location)
        if len(kinds) == 1:
            return kinds[0]
        if all(k in _NUMERIC for k in kinds):
            return PrimitiveKind.FLOAT
        raise MixedLiteralKinds(location, [k.value for k in kinds])

    def collapse(self, values: list[Any], location: str) -> LiteralSet:
        """
        Collapse literal values into a LiteralSet.

        Args:
            values: Literal values in declaration order
            location: Where the union appears (for error messages)

        Returns:
            LiteralSet with distinct values in first-seen order
        """
        kind = self.infer_kind(values, location)

        distinct: list[Any] = []
        for value in values:
            if kind == PrimitiveKind.INTEGER and isinstance(value, float):
                value = int(value)
            # 1 and 1.0 are the same numeric literal; kinds are already uniform here
            if value not in distinct:
                distinct.append(value)

        return LiteralSet(primitive_kind=kind, values=distinct)
