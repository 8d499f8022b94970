"""
Node 1: Item Reading
Reads standardized bid items from the current PDF, CSV or Excel file.
"""

import logging
from pathlib import Path
from typing import Dict, Any

from spec_tools.config import ExtractionConfig
from spec_tools.errors import SpecToolsError
from spec_tools.inputs import load_items
from spec_tools.spec_matcher import SpecificationContext

from ..state import SpecState

logger = logging.getLogger(__name__)


def read_items_node(
    state: SpecState,
    context: SpecificationContext,
    extraction: ExtractionConfig
) -> Dict[str, Any]:
    """
    Read items from the current file.

    PDF tables are validated against the active specification set's
    item-number grammar. Finding no items is not an error.

    Args:
        state: Current workflow state
        context: Run's specification context (active set)
        extraction: PDF extraction settings

    Returns:
        State updates with items and status_message, or last_error
    """
    current_file = state.get("current_file")

    if not current_file:
        return {"last_error": "No file specified for reading", "items": None}

    file_path = Path(current_file)
    logger.info(f"Reading items from: {file_path.name}")

    try:
        items = load_items(file_path, context.spec_set, extraction)

    except SpecToolsError as e:
        logger.error(f"Reading {file_path.name} failed: {e}")
        return {
            "last_error": str(e),
            "status_message": f"Error: {e}",
            "items": None
        }
    except Exception as e:
        logger.exception(f"Unexpected error reading {file_path.name}: {e}")
        return {
            "last_error": f"Processing failed: {str(e)}",
            "status_message": f"Error: Processing failed: {e}",
            "items": None
        }

    if not items:
        logger.warning(f"No items found in {file_path.name}")

    return {
        "items": [item.to_dict() for item in items],
        "status_message": f"File processed successfully. Found {len(items)} items.",
        "last_error": None
    }
