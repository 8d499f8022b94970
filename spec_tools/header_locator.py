"""
Header & Column Locator

Finds the header row of a bid-item table and works out which column holds
each field. Headers vary ("ITEM NO.", "PAY ITEM", "DESC.", "QTY") so
matching is by substring on lower-cased text.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .row_clusterer import Row

logger = logging.getLogger(__name__)

UNKNOWN_COLUMN = -1

ITEM_TOKENS = ("item",)
DESCRIPTION_TOKENS = ("description", "desc")
QUANTITY_TOKENS = ("quantity", "qty")
UNIT_TOKENS = ("unit",)


@dataclass
class ColumnMap:
    """Zero-based column index per field; UNKNOWN_COLUMN when unresolved."""
    item_number: int = UNKNOWN_COLUMN
    description: int = UNKNOWN_COLUMN
    quantity: int = UNKNOWN_COLUMN
    unit: int = UNKNOWN_COLUMN

    def resolve(self, defaults: "ColumnMap") -> "ColumnMap":
        """Fill unresolved fields from positional defaults."""
        def pick(mapped: int, default: int) -> int:
            return mapped if mapped != UNKNOWN_COLUMN else default

        return ColumnMap(
            item_number=pick(self.item_number, defaults.item_number),
            description=pick(self.description, defaults.description),
            quantity=pick(self.quantity, defaults.quantity),
            unit=pick(self.unit, defaults.unit),
        )

    @property
    def is_partial(self) -> bool:
        return UNKNOWN_COLUMN in (self.item_number, self.description, self.quantity, self.unit)


@dataclass
class HeaderMatch:
    """The header row found on a page."""
    row_index: int
    columns: ColumnMap


def row_text(row: Row) -> str:
    """Row text for header tests: trimmed, lower-cased, single-space joined."""
    return " ".join(frag.text.strip().lower() for frag in row)


def _contains_any(text: str, tokens: Sequence[str]) -> bool:
    return any(token in text for token in tokens)


def is_header_row(row: Row, require_unit: bool = False) -> bool:
    """
    Check if a row looks like a bid-item table header.

    Needs an item token, a description token and a quantity token. The unit
    column is optional unless require_unit is set.
    """
    text = row_text(row)
    if not (_contains_any(text, ITEM_TOKENS)
            and _contains_any(text, DESCRIPTION_TOKENS)
            and _contains_any(text, QUANTITY_TOKENS)):
        return False
    if require_unit and not _contains_any(text, UNIT_TOKENS):
        return False
    return True


def map_columns(row: Row) -> ColumnMap:
    """Assign each field to the first header cell that mentions it."""
    columns = ColumnMap()

    for index, frag in enumerate(row):
        cell = frag.text.strip().lower()
        if columns.item_number == UNKNOWN_COLUMN and "item" in cell:
            columns.item_number = index
        if columns.description == UNKNOWN_COLUMN and "desc" in cell:
            columns.description = index
        if columns.quantity == UNKNOWN_COLUMN and ("quant" in cell or "qty" in cell):
            columns.quantity = index
        if columns.unit == UNKNOWN_COLUMN and "unit" in cell:
            columns.unit = index

    return columns


def locate_header(rows: List[Row], require_unit: bool = False) -> Optional[HeaderMatch]:
    """
    Find the first header row on a page.

    Args:
        rows: Clustered rows, top-to-bottom
        require_unit: Also require a unit column in the header

    Returns:
        HeaderMatch for the first qualifying row, or None
    """
    for index, row in enumerate(rows):
        if is_header_row(row, require_unit=require_unit):
            columns = map_columns(row)
            logger.debug(f"Header at row {index}: {row_text(row)!r} -> {columns}")
            return HeaderMatch(row_index=index, columns=columns)

    return None
