"""Schema-driven field extraction over document analysis block graphs"""
from .blocks import BlockGraph
from .schema import DocumentSchema, FieldStrategy, SchemaRegistry, Strategy
from .extractor import (
    ExtractionError,
    FieldExtractor,
    NothingExtracted,
    SchemaNotFound,
)

__all__ = [
    "BlockGraph",
    "DocumentSchema",
    "FieldStrategy",
    "SchemaRegistry",
    "Strategy",
    "ExtractionError",
    "FieldExtractor",
    "NothingExtracted",
    "SchemaNotFound",
]
