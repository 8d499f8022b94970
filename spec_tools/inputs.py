"""
Input dispatch: reads standardized items from any supported file type.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from .config import ExtractionConfig
from .errors import FileReadError
from .flat_table import CSV_SUFFIXES, EXCEL_SUFFIXES, parse_flat_file
from .items import Item
from .pdf_extractor import parse_pdf
from .spec_sets import SpecificationSet

logger = logging.getLogger(__name__)

PDF_SUFFIXES = {'.pdf'}
SUPPORTED_SUFFIXES = PDF_SUFFIXES | CSV_SUFFIXES | EXCEL_SUFFIXES


def is_supported_file(path: Union[str, Path]) -> bool:
    return Path(path).suffix.lower() in SUPPORTED_SUFFIXES


def load_items(
    file_path: Union[str, Path],
    spec_set: SpecificationSet,
    extraction: Optional[ExtractionConfig] = None
) -> List[Item]:
    """
    Read standardized items from a PDF, CSV or Excel file.

    Args:
        file_path: Input file
        spec_set: Active specification set (PDF item-number grammar)
        extraction: PDF extraction settings

    Returns:
        Standardized items (possibly empty for PDFs)

    Raises:
        FileReadError, PdfExtractionError, FlatTableError
    """
    path = Path(file_path)
    if not path.exists():
        raise FileReadError(f"File not found: {path}")

    suffix = path.suffix.lower()
    if suffix in PDF_SUFFIXES:
        extraction = extraction or ExtractionConfig()
        return parse_pdf(
            path,
            spec_set,
            require_unit=extraction.require_unit_header,
            cluster_config=extraction.cluster_config(),
            default_columns=extraction.column_map(),
        )

    if suffix in CSV_SUFFIXES | EXCEL_SUFFIXES:
        return parse_flat_file(path)

    raise FileReadError(f"Unsupported file type: {path.suffix}")
