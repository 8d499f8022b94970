"""
Node 2: Specification Matching
Matches items to the active specification set and compiles the matched
specification text.
"""

import logging
from typing import Dict, Any

from spec_tools.errors import SpecToolsError
from spec_tools.items import Item
from spec_tools.spec_matcher import SpecificationContext

from ..state import SpecState

logger = logging.getLogger(__name__)


def match_specs_node(state: SpecState, context: SpecificationContext) -> Dict[str, Any]:
    """
    Match items to specifications.

    Steps:
    1. Rebuild items from state
    2. Match each item number (loads the catalog on first use)
    3. Compile unique main and supplemental specifications

    Args:
        state: Current workflow state
        context: Run's specification context

    Returns:
        State updates with matches and compiled_specs, or last_error
    """
    items = [Item.from_dict(d) for d in state.get("items") or []]

    if not items:
        logger.info("No items to match")

    try:
        matches = context.match_items(items)
        compiled = context.compile(matches)

    except SpecToolsError as e:
        logger.error(f"Specification matching failed: {e}")
        return {
            "last_error": str(e),
            "status_message": f"Error: {e}",
            "matches": None,
            "compiled_specs": None
        }
    except Exception as e:
        logger.exception(f"Unexpected error matching specifications: {e}")
        return {
            "last_error": f"Matching failed: {str(e)}",
            "status_message": f"Error: Matching failed: {e}",
            "matches": None,
            "compiled_specs": None
        }

    logger.info(f"Compiled {len(compiled.main_specs)} specifications, "
                f"{len(compiled.supplemental_specs)} supplementals")

    return {
        "matches": [m.to_dict() for m in matches],
        "compiled_specs": compiled.to_dict(),
        "last_error": None
    }
