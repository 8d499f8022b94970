"""
PDF Item Extraction

Drives table extraction across every page of a document and standardizes
the result. One bad page never fails the document: its error is logged and
the remaining pages are still processed. Finding no items is a valid
result; reporting it is left to the caller.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from .items import Item, standardize_items
from .row_clusterer import RowClusterConfig
from .spec_sets import SpecificationSet
from .table_extractor import CandidateItem, TableExtractor
from .text_layout import PdfTextDocument

logger = logging.getLogger(__name__)


def extract_items_from_document(document, extractor: TableExtractor) -> List[CandidateItem]:
    """
    Extract candidate items from every page, in page order.

    Args:
        document: Anything with `page_count` and `get_page_fragments(page_num)`
        extractor: Row-to-item extractor for the active specification set

    Returns:
        Candidate items from all pages, page order then row order
    """
    all_items: List[CandidateItem] = []
    logger.info(f"Extracting tables from {document.page_count} pages")

    for page_num in range(1, document.page_count + 1):
        try:
            fragments = document.get_page_fragments(page_num)
            page_items = extractor.extract_page(fragments)
        except Exception as e:
            logger.warning(f"Error extracting content from page {page_num}: {e}")
            continue

        logger.debug(f"Page {page_num}: {len(fragments)} fragments, {len(page_items)} items")
        all_items.extend(page_items)

    logger.info(f"Total extracted items from all pages: {len(all_items)}")
    return all_items


def parse_pdf(
    pdf_path: Union[str, Path],
    spec_set: SpecificationSet,
    require_unit: bool = False,
    cluster_config: Optional[RowClusterConfig] = None,
    default_columns=None
) -> List[Item]:
    """
    Extract standardized items from a PDF bid tabulation.

    Args:
        pdf_path: Path to the PDF
        spec_set: Specification set whose item-number grammar applies
        require_unit: Header must also name a unit column
        cluster_config: Row clustering tunables
        default_columns: Positional ColumnMap for unresolved columns

    Returns:
        Standardized items

    Raises:
        PdfExtractionError: PDF missing, undecodable, or without pages
    """
    extractor = TableExtractor(
        spec_set.validator(),
        require_unit=require_unit,
        default_columns=default_columns,
        cluster_config=cluster_config,
    )

    with PdfTextDocument.open(pdf_path) as document:
        candidates = extract_items_from_document(document, extractor)

    items = standardize_items(candidates)
    logger.info(f"Standardized {len(items)} items from {Path(pdf_path).name}")
    return items
