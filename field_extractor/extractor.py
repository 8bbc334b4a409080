"""Main extraction orchestrator"""
import logging
from typing import Any, Dict, Optional

from .blocks import BlockGraph
from .config import TRACE_EXTRACTION
from .resolvers import resolve_field
from .schema import SchemaRegistry

logger = logging.getLogger(__name__)


class ExtractionError(Exception):
    """Base class for document-level extraction failures"""


class SchemaNotFound(ExtractionError):
    """No schema is registered for the requested document type"""

    def __init__(self, document_type: str):
        super().__init__(f"Schema not found for document type '{document_type}'")
        self.document_type = document_type


class NothingExtracted(ExtractionError):
    """Every field of the schema resolved to nothing.

    Carries the graph so callers can return or inspect the raw blocks.
    """

    def __init__(self, document_type: str, graph: BlockGraph):
        super().__init__(f"No information could be extracted from the '{document_type}' document")
        self.document_type = document_type
        self.graph = graph


class FieldExtractor:
    """Runs every field of a document type's schema against one block graph"""

    def __init__(self, registry: SchemaRegistry, trace: Optional[bool] = None):
        self.registry = registry
        self.trace = TRACE_EXTRACTION if trace is None else trace

    def extract(self, document_type: str, graph: BlockGraph) -> Dict[str, str]:
        """
        Extract the fields declared for a document type

        Args:
            document_type: Key of the schema to apply
            graph: Block graph of one document

        Returns:
            Dictionary mapping field names to extracted values; fields that
            could not be resolved are absent

        Raises:
            SchemaNotFound: if the document type has no schema
            NothingExtracted: if not a single field could be resolved
        """
        schema = self.registry.get(document_type)
        if schema is None:
            raise SchemaNotFound(document_type)

        if self.trace:
            logger.debug("Parsing %s document: %d fields, %d blocks",
                         document_type, len(schema.fields), len(graph))

        extracted_info = {}
        for field_name, field_strategy in schema.fields.items():
            value = resolve_field(graph, field_strategy)
            if value:
                extracted_info[field_name] = value
            if self.trace:
                logger.debug("Field %s (key=%r, strategy=%s): %s",
                             field_name, field_strategy.key, field_strategy.strategy,
                             repr(value) if value else "not found")

        if not extracted_info:
            if self.trace:
                for block_type, text in graph.dump_lines():
                    logger.debug("BlockType: %s, Text: %s", block_type, text)
            raise NothingExtracted(document_type, graph)

        logger.debug("Extracted %d/%d fields for %s",
                     len(extracted_info), len(schema.fields), document_type)
        return extracted_info

    def extract_response(self, document_type: str, payload: Any) -> Dict[str, str]:
        """Decode an analysis response (dict, block list or JSON text) and extract"""
        if isinstance(payload, (str, bytes)):
            graph = BlockGraph.from_json(payload)
        else:
            graph = BlockGraph.from_response(payload)
        return self.extract(document_type, graph)
