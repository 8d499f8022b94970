"""
Flat Table Input

Reads bid items from CSV and Excel files. Column names vary between
sources, so each field is found by trying a list of candidate names against
the normalized headers.
"""

import csv
import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from openpyxl import load_workbook

from .errors import FileReadError, FlatTableError
from .items import Item, clean_value, standardize_items

logger = logging.getLogger(__name__)

CSV_SUFFIXES = {'.csv'}
EXCEL_SUFFIXES = {'.xlsx', '.xlsm'}

# Candidate header names per field, most specific first
ITEM_NUMBER_FIELDS = ['itemnumber', 'item number', 'item_number', 'item', 'number', 'id']
DESCRIPTION_FIELDS = ['description', 'desc', 'item description', 'name']
QUANTITY_FIELDS = ['quantity', 'qty', 'amount', 'count']
UNIT_FIELDS = ['unit', 'units', 'unitofmeasure', 'unit of measure', 'uom']


# =============================================================================
# Header Handling
# =============================================================================

def normalize_header(name: Optional[str], index: int) -> str:
    """Trimmed, lower-cased header; blank headers become column<i>."""
    if name is None or not str(name).strip():
        return f"column{index}"
    return str(name).strip().lower()


def _normalize_name(name: str) -> str:
    # "Item_Number", "item  number" and "ITEM NUMBER" all become "item number"
    return re.sub(r'[\s_]+', ' ', name.strip().lower())


def determine_field(fields: Sequence[str], candidates: Sequence[str]) -> Optional[str]:
    """
    Pick the field that best matches a list of candidate names.

    Candidates are tried in order. For each, a field equal to it (ignoring
    case, spacing and underscores) wins over one that merely contains it.

    Args:
        fields: Available field names
        candidates: Candidate names, most specific first

    Returns:
        The matching field name as given, or None
    """
    normalized = [(field, _normalize_name(field)) for field in fields]

    for candidate in candidates:
        wanted = _normalize_name(candidate)
        compact = wanted.replace(' ', '')

        for field, name in normalized:
            if name == wanted or name.replace(' ', '') == compact:
                return field

        for field, name in normalized:
            if wanted in name:
                return field

    return None


def _cell_text(value) -> str:
    # Spreadsheet numbers come back as floats; show 12.0 as "12"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return clean_value(value)


# =============================================================================
# Readers
# =============================================================================

def read_csv_rows(csv_path: Union[str, Path]) -> List[Dict[str, str]]:
    """Read a CSV file into row dicts keyed by normalized header."""
    try:
        with open(csv_path, 'r', encoding='utf-8-sig', newline='') as f:
            reader = csv.reader(f)
            header = next(reader, None)
            if header is None:
                return []
            keys = [normalize_header(name, i) for i, name in enumerate(header)]

            rows = []
            for record in reader:
                # Skip empty lines
                if not any(cell.strip() for cell in record):
                    continue
                rows.append({key: record[i] if i < len(record) else "" for i, key in enumerate(keys)})
            return rows

    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise FileReadError(f"CSV parsing error: {e}") from e


def read_excel_rows(excel_path: Union[str, Path]) -> List[Dict[str, str]]:
    """
    Read the first worksheet of a workbook into row dicts.

    Row 1 is the header row.

    Raises:
        FlatTableError: fewer than two rows (header plus data)
        FileReadError: workbook cannot be opened
    """
    try:
        wb = load_workbook(str(excel_path), read_only=True, data_only=True)
    except Exception as e:
        raise FileReadError(f"Excel parsing error: {e}") from e

    try:
        ws = wb.worksheets[0]
        values = [list(row) for row in ws.iter_rows(values_only=True)]
    finally:
        wb.close()

    # Trailing blank rows are common in read-only mode
    while values and not any(v is not None and str(v).strip() for v in values[-1]):
        values.pop()

    if len(values) < 2:
        raise FlatTableError("Excel file contains insufficient data")

    keys = [normalize_header(name, i) for i, name in enumerate(values[0])]

    rows = []
    for record in values[1:]:
        rows.append({key: _cell_text(record[i]) if i < len(record) else "" for i, key in enumerate(keys)})
    return rows


# =============================================================================
# Standardization
# =============================================================================

def standardize_rows(rows: List[Dict[str, str]]) -> List[Item]:
    """
    Map raw rows to standardized items.

    Rows without an item number get a generated "Unknown-<n>" number
    (n is the 1-based data row).

    Raises:
        FlatTableError: no rows, or no column identifiable as the item number
    """
    if not rows:
        raise FlatTableError("No data found in the file")

    fields = list(rows[0].keys())
    item_field = determine_field(fields, ITEM_NUMBER_FIELDS)
    description_field = determine_field(fields, DESCRIPTION_FIELDS)
    quantity_field = determine_field(fields, QUANTITY_FIELDS)
    unit_field = determine_field(fields, UNIT_FIELDS)

    if not item_field:
        raise FlatTableError("Could not identify item number field in the data")

    logger.debug(f"Fields: item={item_field!r} description={description_field!r} "
                 f"quantity={quantity_field!r} unit={unit_field!r}")

    def value(row: Dict[str, str], field: Optional[str]) -> str:
        return clean_value(row.get(field)) if field else ""

    items = []
    for index, row in enumerate(rows):
        items.append(Item(
            item_number=value(row, item_field) or f"Unknown-{index + 1}",
            description=value(row, description_field),
            quantity=value(row, quantity_field),
            unit=value(row, unit_field),
        ))

    return standardize_items(items)


def parse_flat_file(file_path: Union[str, Path]) -> List[Item]:
    """
    Read standardized items from a CSV or Excel file.

    Raises:
        FileReadError: unsupported file type or unreadable file
        FlatTableError: table cannot be standardized
    """
    path = Path(file_path)
    if not path.exists():
        raise FileReadError(f"File not found: {path}")

    suffix = path.suffix.lower()
    if suffix in CSV_SUFFIXES:
        rows = read_csv_rows(path)
    elif suffix in EXCEL_SUFFIXES:
        rows = read_excel_rows(path)
    else:
        raise FileReadError(f"Unsupported file type: {path.suffix}")

    items = standardize_rows(rows)
    logger.info(f"Read {len(items)} items from {path.name}")
    return items
