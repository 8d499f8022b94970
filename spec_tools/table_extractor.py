"""
Row-to-Item Extractor

Walks a page's rows and emits candidate bid items. The page is scanned for
a header first; rows after it are read through the header's column map. A
page with no header at all is re-scanned treating columns positionally.
Rows whose item-number cell fails validation are skipped, never raised.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from .header_locator import ColumnMap, locate_header
from .row_clusterer import Row, RowClusterConfig, cluster_rows
from .text_layout import TextFragment

logger = logging.getLogger(__name__)

# Rows shorter than this cannot hold an item number and a description
MIN_ROW_FRAGMENTS = 2

# Positional layout used for unresolved header fields and for pages
# without a header: item, description, unit, quantity
DEFAULT_COLUMNS = ColumnMap(item_number=0, description=1, unit=2, quantity=3)


class ExtractionState(Enum):
    """Per-page extractor states."""
    SEEKING_HEADER = "seeking_header"
    HEADER_FOUND = "header_found"
    NO_HEADER_FALLBACK = "no_header_fallback"


@dataclass
class CandidateItem:
    """An item as read from a table row, before standardization."""
    item_number: str
    description: str = ""
    quantity: str = ""
    unit: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "itemNumber": self.item_number,
            "description": self.description,
            "quantity": self.quantity,
            "unit": self.unit,
        }


def _cell(cells: Sequence[str], index: int) -> str:
    """Cell text, or "" when the row is shorter than the column index."""
    if 0 <= index < len(cells):
        return cells[index]
    return ""


class TableExtractor:
    """
    Extracts candidate items from clustered rows of one page at a time.

    Usage:
        extractor = TableExtractor(spec_set.validator())
        items = extractor.extract_page(fragments)
    """

    def __init__(
        self,
        validator: Callable[[str], bool],
        require_unit: bool = False,
        default_columns: Optional[ColumnMap] = None,
        cluster_config: Optional[RowClusterConfig] = None
    ):
        self.validator = validator
        self.require_unit = require_unit
        self.default_columns = default_columns or DEFAULT_COLUMNS
        self.cluster_config = cluster_config
        self.state = ExtractionState.SEEKING_HEADER

    def extract_page(self, fragments: Sequence[TextFragment]) -> List[CandidateItem]:
        """Cluster a page's fragments into rows and extract items."""
        rows = cluster_rows(fragments, config=self.cluster_config)
        return self.extract_rows(rows)

    def extract_rows(self, rows: List[Row]) -> List[CandidateItem]:
        """
        Extract candidate items from a page's rows, in row order.

        Args:
            rows: Clustered rows, top-to-bottom

        Returns:
            CandidateItems for every row whose item number validates
        """
        self.state = ExtractionState.SEEKING_HEADER

        header = locate_header(rows, require_unit=self.require_unit)
        if header is not None:
            self.state = ExtractionState.HEADER_FOUND
            columns = header.columns.resolve(self.default_columns)
            if header.columns.is_partial:
                logger.debug(f"Partial header mapping {header.columns}, using {columns}")
            data_rows = rows[header.row_index + 1:]
        else:
            self.state = ExtractionState.NO_HEADER_FALLBACK
            columns = self.default_columns
            data_rows = rows
            logger.debug("No header row found, using positional columns")

        items = []
        for row in data_rows:
            item = self._read_row(row, columns)
            if item is not None:
                items.append(item)

        logger.debug(f"Extracted {len(items)} items ({self.state.value})")
        return items

    def _read_row(self, row: Row, columns: ColumnMap) -> Optional[CandidateItem]:
        if len(row) < MIN_ROW_FRAGMENTS:
            return None

        cells = [frag.text.strip() for frag in row]
        item_number = _cell(cells, columns.item_number)

        if not self.validator(item_number):
            logger.debug(f"Skipping row, not an item number: {item_number!r}")
            return None

        return CandidateItem(
            item_number=item_number,
            description=_cell(cells, columns.description),
            quantity=_cell(cells, columns.quantity),
            unit=_cell(cells, columns.unit),
        )
