"""Shared fixtures: block factories, a sample analysis response and schemas."""

import json

import pytest

from field_extractor.blocks import Block, BlockGraph, Relationship
from field_extractor.schema import SchemaRegistry


@pytest.fixture
def make_block():
    """Factory for Block instances using Python field names."""

    def _make(block_type, text=None, block_id=None, **extra):
        return Block(block_type=block_type, text=text, id=block_id, **extra)

    return _make


@pytest.fixture
def make_key():
    """Factory for KEY_VALUE_SET key blocks linked to value ids."""

    def _make(text, value_ids=(), block_id=None):
        relationships = ()
        if value_ids:
            relationships = (Relationship(type="VALUE", ids=tuple(value_ids)),)
        return Block(
            block_type="KEY_VALUE_SET",
            text=text,
            id=block_id,
            entity_types=("KEY",),
            relationships=relationships,
        )

    return _make


@pytest.fixture
def invoice_response():
    """Analysis response in the service's wire format."""
    return {
        "DocumentMetadata": {"Pages": 1},
        "Blocks": [
            {"BlockType": "PAGE", "Id": "p1", "Confidence": 99.9,
             "Geometry": {"BoundingBox": {"Width": 1.0, "Height": 1.0, "Left": 0.0, "Top": 0.0},
                          "Polygon": [{"X": 0.0, "Y": 0.0}, {"X": 1.0, "Y": 0.0}]},
             "Relationships": [{"Type": "CHILD", "Ids": ["l1", "l2", "l3"]}]},
            {"BlockType": "LINE", "Id": "l1", "Text": "Invoice Number", "Confidence": 99.1},
            {"BlockType": "LINE", "Id": "l2", "Text": "INV-1001", "Confidence": 98.7},
            {"BlockType": "LINE", "Id": "l3", "Text": "Customer: Jane Doe"},
            {"BlockType": "KEY_VALUE_SET", "Id": "k1", "Text": "Total", "EntityTypes": ["KEY"],
             "Relationships": [{"Type": "CHILD", "Ids": ["w1"]}, {"Type": "VALUE", "Ids": ["v1"]}]},
            {"BlockType": "KEY_VALUE_SET", "Id": "v1", "Text": "42.00", "EntityTypes": ["VALUE"]},
            {"BlockType": "TABLE", "Id": "t1"},
            {"BlockType": "CELL", "Id": "c1", "Text": "Qty", "RowIndex": 1, "ColumnIndex": 1,
             "RowSpan": 1, "ColumnSpan": 1},
            {"BlockType": "CELL", "Id": "c2", "Text": "3", "RowIndex": 1, "ColumnIndex": 2},
        ],
    }


@pytest.fixture
def invoice_graph(invoice_response):
    return BlockGraph.from_response(invoice_response)


@pytest.fixture
def raw_schemas():
    return {
        "invoice": {
            "type": "invoice",
            "fields": {
                "invoice_number": {"key": "Invoice Number", "strategy": "nextLine"},
                "customer": {"key": "Customer", "strategy": "sameLine"},
                "total": {"key": "Total", "strategy": "keyValueSet"},
                "quantity": {"key": "Qty", "strategy": "table"},
            },
        },
        "receipt": {
            "type": "receipt",
            "fields": {
                "amount": {"key": "TUTAR", "strategy": "nextLine"},
            },
        },
    }


@pytest.fixture
def registry(raw_schemas):
    return SchemaRegistry.from_dict(raw_schemas)


@pytest.fixture
def schema_file(tmp_path, raw_schemas):
    path = tmp_path / "schema.json"
    path.write_text(json.dumps(raw_schemas), encoding="utf-8")
    return path
