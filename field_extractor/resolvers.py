"""Strategy resolvers: turn an anchor key into a field value inside a block graph.

Every resolver is a pure function ``(graph, anchor_key) -> Optional[str]`` and
returns None when nothing matches.
"""
from typing import Callable, Dict, Optional

from .blocks import CELL, LINE, RELATIONSHIP_VALUE, Block, BlockGraph
from .schema import FieldStrategy, Strategy


Resolver = Callable[[BlockGraph, str], Optional[str]]


def _line_text(block: Optional[Block]) -> Optional[str]:
    """Text of a LINE block, None for anything else"""
    if block is not None and block.block_type == LINE and block.text is not None:
        return block.text
    return None


def resolve_key_value_set(graph: BlockGraph, anchor_key: str) -> Optional[str]:
    """
    Value linked to the first KEY block whose text equals the anchor

    Follows the key's VALUE relationships in order and returns the first
    referenced block that has text. Dangling ids are skipped. When no
    relationship yields a value, falls back to the next block in input order
    if it is a LINE with text (positional fallback for layouts that do not
    encode the key/value link).
    """
    for position, block in enumerate(graph):
        if not block.is_key or block.text != anchor_key:
            continue

        for value_id in block.related_ids(RELATIONSHIP_VALUE):
            value_block = graph.find_by_id(value_id)
            if value_block is not None and value_block.text is not None:
                return value_block.text

        # first key match only
        return _line_text(graph.next_block(position))
    return None


def resolve_next_line(graph: BlockGraph, anchor_key: str) -> Optional[str]:
    """
    Text of the line immediately after the first line equal to the anchor

    Only the first matching line is considered: if the block after it is not
    a LINE with text, the result is None even when the anchor recurs later
    with a usable follower.
    """
    for position, block in enumerate(graph):
        if block.block_type == LINE and block.text == anchor_key:
            return _line_text(graph.next_block(position))
    return None


def resolve_same_line(graph: BlockGraph, anchor_key: str) -> Optional[str]:
    """Part after the first colon of the first line containing the anchor"""
    for block in graph.blocks_of_type(LINE):
        if block.text is None or anchor_key not in block.text:
            continue
        parts = block.text.split(":", 1)
        if len(parts) == 2:
            return parts[1].strip()
        return None
    return None


def resolve_table(graph: BlockGraph, anchor_key: str) -> Optional[str]:
    """
    Text of the cell right of the first cell containing the anchor

    Only same-row, next-column adjacency is supported. Containing cells
    without grid coordinates are skipped.
    """
    cells = graph.blocks_of_type(CELL)
    for block in cells:
        if block.text is None or anchor_key not in block.text:
            continue
        if block.row_index is None or block.column_index is None:
            continue
        return _cell_text(cells, block.row_index, block.column_index + 1)
    return None


def _cell_text(cells, row_index: int, column_index: int) -> Optional[str]:
    for cell in cells:
        if (cell.row_index == row_index
                and cell.column_index == column_index
                and cell.text is not None):
            return cell.text
    return None


RESOLVERS: Dict[Strategy, Resolver] = {
    Strategy.KEY_VALUE_SET: resolve_key_value_set,
    Strategy.NEXT_LINE: resolve_next_line,
    Strategy.SAME_LINE: resolve_same_line,
    Strategy.TABLE: resolve_table,
}


def resolve_field(graph: BlockGraph, field_strategy: FieldStrategy) -> Optional[str]:
    """Run the resolver named by the field's strategy; unknown names give None"""
    strategy = field_strategy.known_strategy
    if strategy is None:
        return None
    return RESOLVERS[strategy](graph, field_strategy.key)
