"""
Configuration for the schema extraction pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ExtractorConfig:
    """Configuration options for schema extraction."""

    # Declarations to leave out of the emitted document (still resolvable)
    ignore_declarations: list[str] = field(default_factory=list)

    # Order in which to emit declarations (empty = source order)
    order_declarations: list[str] = field(default_factory=list)

    # Reserved top-level field carrying the event name
    event_name_field: str = "name"

    # Emit constant sets that have no derived union alias as enums
    emit_unaliased_enums: bool = True

    # Whether fields may be typed by an event declaration
    allow_event_references: bool = True

    @staticmethod
    def from_dict(d: dict) -> ExtractorConfig:
        """Create a config from a dictionary."""
        config = ExtractorConfig()
        for k, v in d.items():
            if hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "ignore_declarations": self.ignore_declarations,
            "order_declarations": self.order_declarations,
            "event_name_field": self.event_name_field,
            "emit_unaliased_enums": self.emit_unaliased_enums,
            "allow_event_references": self.allow_event_references,
        }
