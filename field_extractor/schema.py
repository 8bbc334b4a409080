"""Document schemas: which fields a document type has and how to locate each"""
import json
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping as MappingType, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class Strategy(str, Enum):
    """Lookup strategies, by their name in the schema file"""
    KEY_VALUE_SET = "keyValueSet"
    NEXT_LINE = "nextLine"
    SAME_LINE = "sameLine"
    TABLE = "table"


class SchemaLoadError(Exception):
    """Schema configuration could not be read or does not match the schema shape"""


class FieldStrategy(BaseModel):
    """Anchor key plus the name of the strategy that resolves it.

    The strategy is kept as the raw configured string; a name that is not a
    known Strategy simply resolves to nothing.
    """
    model_config = ConfigDict(frozen=True)

    key: str
    strategy: str = ""

    @property
    def known_strategy(self) -> Optional[Strategy]:
        try:
            return Strategy(self.strategy)
        except ValueError:
            return None


class DocumentSchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str = ""
    fields: MappingType[str, FieldStrategy] = Field(default_factory=dict, validate_default=True)

    @field_validator("fields", mode="after")
    @classmethod
    def _freeze_fields(cls, value):
        return MappingProxyType(dict(value))


class SchemaRegistry(Mapping):
    """Read-only mapping of document type to DocumentSchema.

    Built once at startup and shared by every extraction pass.
    """

    def __init__(self, schemas: Optional[Mapping[str, DocumentSchema]] = None):
        self._schemas = MappingProxyType(dict(schemas or {}))

    def __getitem__(self, document_type: str) -> DocumentSchema:
        return self._schemas[document_type]

    def __iter__(self) -> Iterator[str]:
        return iter(self._schemas)

    def __len__(self) -> int:
        return len(self._schemas)

    def __repr__(self):
        return f"SchemaRegistry(types={sorted(self._schemas)})"

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "SchemaRegistry":
        """
        Build a registry from decoded schema JSON

        Args:
            raw: {documentType: {"type": ..., "fields": {name: {"key", "strategy"}}}}

        Returns:
            SchemaRegistry keyed by document type

        Raises:
            SchemaLoadError: if the data does not match the schema shape
        """
        if not isinstance(raw, dict):
            raise SchemaLoadError(f"Schema configuration must be a JSON object, got {type(raw).__name__}")

        schemas = {}
        for document_type, body in raw.items():
            try:
                schema = DocumentSchema.model_validate(body)
            except ValidationError as e:
                raise SchemaLoadError(f"Invalid schema for document type '{document_type}': {e}") from e
            if not schema.type:
                schema = schema.model_copy(update={"type": document_type})
            schemas[document_type] = schema
        return cls(schemas)


def load_schemas(schema_path) -> SchemaRegistry:
    """Load the schema registry from a JSON file"""
    try:
        with open(schema_path, 'r', encoding='utf-8') as f:
            raw = json.load(f)
    except OSError as e:
        raise SchemaLoadError(f"Cannot read schema file {schema_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise SchemaLoadError(f"Schema file {schema_path} is not valid JSON: {e}") from e
    return SchemaRegistry.from_dict(raw)
