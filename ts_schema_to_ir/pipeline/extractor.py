"""
Schema extractor: the pipeline entry point.

Phase 1 (Reader): estree JSON into the source AST (optional; callers may
build the source AST directly).
Phase 2 (Assembler): source AST into the canonical schema document.
"""

from __future__ import annotations

import logging
from typing import Any

from .analyzer import SchemaAssembler, SchemaDocument
from .config import ExtractorConfig
from .source_ast import SourceFile, SourceReader

logger = logging.getLogger(__name__)


class SchemaExtractor:
    """Extracts canonical schemas from TypeScript event declarations."""

    def __init__(self, config: ExtractorConfig | None = None):
        """
        Initialize the extractor.

        Args:
            config: Extraction configuration
        """
        self.config = config or ExtractorConfig()

    def extract(self, source: SourceFile) -> SchemaDocument:
        """
        Extract the canonical schema from a source AST.

        Each call uses a fresh assembler and declaration table, so one
        extractor may serve several inputs, in parallel if needed.
        """
        document = SchemaAssembler(self.config).assemble(source)
        logger.debug("Extracted %d declarations from %s", len(document.declarations), source.path or "<source>")
        return document

    def extract_estree(self, program: dict[str, Any], path: str = "") -> SchemaDocument:
        """Extract the canonical schema from a typescript-estree Program dict."""
        return self.extract(SourceReader().read(program, path))
