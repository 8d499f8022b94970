"""
START Node: Input Scanning
Builds the list of bid-item files (PDF, CSV, Excel) to process.
"""

import logging
from pathlib import Path
from typing import Dict, Any

from spec_tools.inputs import SUPPORTED_SUFFIXES, is_supported_file

from ..state import SpecState

logger = logging.getLogger(__name__)


def scan_inputs_node(state: SpecState) -> Dict[str, Any]:
    """
    Scan input path and identify all supported files to process.

    Args:
        state: Current workflow state

    Returns:
        State updates with files_pending and current_file, or last_error
    """
    input_path = state.get("input_path", "")

    if not input_path:
        return {
            "last_error": "No input path specified",
            "files_pending": []
        }

    path = Path(input_path)

    # Single file
    if path.is_file():
        if is_supported_file(path):
            logger.info(f"Single file mode: {path.name}")
            return {
                "files_pending": [str(path)],
                "current_file": str(path),
                "last_error": None
            }
        return {
            "last_error": f"Unsupported file type: {path.name} (expected {', '.join(sorted(SUPPORTED_SUFFIXES))})",
            "files_pending": []
        }

    # Directory - scan for supported files
    if path.is_dir():
        input_files = [p for p in path.iterdir() if p.is_file() and is_supported_file(p)]

        if not input_files:
            return {
                "last_error": f"No PDF, CSV or Excel files found in: {path}",
                "files_pending": []
            }

        # Sort by name for consistent ordering
        input_files.sort(key=lambda p: p.name.lower())
        file_paths = [str(f) for f in input_files]

        logger.info(f"Found {len(file_paths)} input files in {path}")

        return {
            "files_pending": file_paths,
            "current_file": file_paths[0],
            "last_error": None
        }

    return {
        "last_error": f"Path does not exist: {input_path}",
        "files_pending": []
    }
