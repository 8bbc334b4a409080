"""Block graph: decoded document analysis output plus lookup indices"""
import json
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


# Block types the resolvers inspect; any other type is accepted and ignored
LINE = "LINE"
KEY_VALUE_SET = "KEY_VALUE_SET"
CELL = "CELL"

# Entity types and relationship types for KEY_VALUE_SET blocks
ENTITY_KEY = "KEY"
ENTITY_VALUE = "VALUE"
RELATIONSHIP_VALUE = "VALUE"


class _WireModel(BaseModel):
    """Immutable model decoded from the analysis service's PascalCase JSON"""
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # JSON null means absent; let the field default apply
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class BoundingBox(_WireModel):
    width: float = Field(0.0, alias="Width")
    height: float = Field(0.0, alias="Height")
    left: float = Field(0.0, alias="Left")
    top: float = Field(0.0, alias="Top")


class Point(_WireModel):
    x: float = Field(0.0, alias="X")
    y: float = Field(0.0, alias="Y")


class Geometry(_WireModel):
    bounding_box: Optional[BoundingBox] = Field(None, alias="BoundingBox")
    polygon: Tuple[Point, ...] = Field((), alias="Polygon")


class Relationship(_WireModel):
    type: str = Field("", alias="Type")
    ids: Tuple[str, ...] = Field((), alias="Ids")


class Block(_WireModel):
    """One recognized unit of layout (line, key/value half, table cell, ...)"""
    block_type: str = Field("", alias="BlockType")
    id: Optional[str] = Field(None, alias="Id")
    text: Optional[str] = Field(None, alias="Text")
    entity_types: Tuple[str, ...] = Field((), alias="EntityTypes")
    relationships: Tuple[Relationship, ...] = Field((), alias="Relationships")
    row_index: Optional[int] = Field(None, alias="RowIndex")
    column_index: Optional[int] = Field(None, alias="ColumnIndex")

    # Passthrough only, never read by the resolvers
    confidence: Optional[float] = Field(None, alias="Confidence")
    geometry: Optional[Geometry] = Field(None, alias="Geometry")
    row_span: Optional[int] = Field(None, alias="RowSpan")
    column_span: Optional[int] = Field(None, alias="ColumnSpan")
    selection_status: Optional[str] = Field(None, alias="SelectionStatus")
    page: Optional[int] = Field(None, alias="Page")

    @property
    def is_key(self) -> bool:
        """True for a KEY_VALUE_SET block tagged as the key half"""
        return (self.block_type == KEY_VALUE_SET
                and len(self.entity_types) > 0
                and self.entity_types[0] == ENTITY_KEY)

    def related_ids(self, relationship_type: str) -> List[str]:
        """Target ids of every relationship of the given type, in order"""
        ids = []
        for relationship in self.relationships:
            if relationship.type == relationship_type:
                ids.extend(relationship.ids)
        return ids


class DocumentMetadata(_WireModel):
    pages: Optional[int] = Field(None, alias="Pages")


class AnalysisResponse(_WireModel):
    """Top-level analysis result: metadata plus the ordered block list"""
    document_metadata: Optional[DocumentMetadata] = Field(None, alias="DocumentMetadata")
    blocks: Tuple[Block, ...] = Field((), alias="Blocks")


class BlockGraph:
    """Read-only view over the ordered blocks of one document.

    Block order is the analysis service's output order. Resolvers that use
    positional adjacency (the next block in the sequence) assume this order
    approximates reading order; the service does not guarantee it.
    """

    def __init__(self, blocks=(), document_pages: Optional[int] = None):
        self._blocks: Tuple[Block, ...] = tuple(blocks)
        self.document_pages = document_pages
        self._positions: Dict[str, int] = {}
        for position, block in enumerate(self._blocks):
            # first occurrence wins, same as a linear scan
            if block.id is not None and block.id not in self._positions:
                self._positions[block.id] = position

    @classmethod
    def from_response(cls, payload: Union[Dict[str, Any], List[Any], AnalysisResponse]) -> "BlockGraph":
        """
        Build a graph from a decoded analysis response

        Args:
            payload: Response object ({"DocumentMetadata": ..., "Blocks": [...]}),
                a bare list of blocks, or an AnalysisResponse

        Returns:
            BlockGraph over the response's blocks
        """
        if isinstance(payload, list):
            payload = {"Blocks": payload}
        if not isinstance(payload, AnalysisResponse):
            payload = AnalysisResponse.model_validate(payload)
        pages = payload.document_metadata.pages if payload.document_metadata else None
        return cls(payload.blocks, document_pages=pages)

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> "BlockGraph":
        """Build a graph from raw analysis response JSON"""
        return cls.from_response(json.loads(data))

    def __len__(self) -> int:
        return len(self._blocks)

    def __iter__(self) -> Iterator[Block]:
        return iter(self._blocks)

    def __getitem__(self, position: int) -> Block:
        return self._blocks[position]

    def __repr__(self):
        return f"BlockGraph(blocks={len(self._blocks)}, pages={self.document_pages})"

    @property
    def blocks(self) -> Tuple[Block, ...]:
        return self._blocks

    def find_by_id(self, block_id: str) -> Optional[Block]:
        """Block with the given id, or None for unknown/dangling ids"""
        position = self._positions.get(block_id)
        if position is None:
            return None
        return self._blocks[position]

    def blocks_of_type(self, block_type: str) -> List[Block]:
        """Blocks of one type, in original order"""
        return [block for block in self._blocks if block.block_type == block_type]

    def next_block(self, position: int) -> Optional[Block]:
        """Block immediately after `position` in input order, if any"""
        if 0 <= position + 1 < len(self._blocks):
            return self._blocks[position + 1]
        return None

    def dump_lines(self) -> List[Tuple[str, str]]:
        """(block_type, text) for every block carrying text, for diagnostics"""
        return [(block.block_type, block.text) for block in self._blocks if block.text is not None]
