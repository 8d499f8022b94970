"""
Error Handling Edges
Conditional routing logic for per-file failures and file transitions.
"""

import logging
from typing import Literal
from pathlib import Path

from ..state import SpecState, cleared_file_state

logger = logging.getLogger(__name__)


def route_after_scan(state: SpecState) -> Literal["read", "summary"]:
    """
    Route after input scanning.

    Returns:
        "read" when there is a file to process, otherwise "summary"
    """
    if state.get("current_file"):
        return "read"

    logger.error(f"Nothing to process: {state.get('last_error')}")
    return "summary"


def route_after_read(state: SpecState) -> Literal["match", "skip"]:
    """
    Route after item reading based on success/failure.

    Decision logic:
    - If reading produced an item list (possibly empty): continue to matching
    - If reading failed: skip to next file

    Args:
        state: Current workflow state

    Returns:
        Next node: "match" or "skip"
    """
    if state.get("items") is not None and not state.get("last_error"):
        logger.debug("Reading successful, routing to match")
        return "match"

    logger.error(f"Reading failed, skipping file: {state.get('last_error')}")
    return "skip"


def route_after_match(state: SpecState) -> Literal["report", "skip"]:
    """
    Route after specification matching.

    A catalog that cannot be loaded fails the current file only.
    """
    if state.get("compiled_specs") is not None and not state.get("last_error"):
        return "report"

    logger.error(f"Matching failed, skipping file: {state.get('last_error')}")
    return "skip"


def route_after_report(state: SpecState) -> Literal["next_file", "summary", "skip"]:
    """
    Route after report generation to next file or batch summary.

    Decision logic:
    - If the report failed: mark the file failed
    - If more files pending: process next file
    - If no more files: generate batch summary

    Args:
        state: Current workflow state

    Returns:
        Next node: "next_file", "summary" or "skip"
    """
    if state.get("last_error"):
        logger.error(f"Report failed, skipping file: {state.get('last_error')}")
        return "skip"

    files_pending = state.get("files_pending", [])

    if len(files_pending) > 1:
        # More files to process (current file is still in list)
        logger.info(f"{len(files_pending) - 1} files remaining")
        return "next_file"

    logger.info("All files processed, generating summary")
    return "summary"


def route_after_failure(state: SpecState) -> Literal["next_file", "summary"]:
    """After marking a file failed, continue with the next one if any."""
    return "next_file" if state.get("current_file") else "summary"


def mark_file_failed(state: SpecState) -> dict:
    """
    Mark current file as failed and prepare for next file.

    Args:
        state: Current workflow state

    Returns:
        State updates with file added to failed list
    """
    current_file = state.get("current_file", "")
    last_error = state.get("last_error") or "Unknown error"
    files_pending = state.get("files_pending", [])
    files_failed = state.get("files_failed", [])

    # Record failure
    failed_result = {
        "filename": Path(current_file).name if current_file else "Unknown",
        "filepath": current_file,
        "success": False,
        "status": state.get("status_message") or f"Error: {last_error}",
        "items_count": len(state.get("items") or []),
        "matched_items_count": 0,
        "main_specs_count": 0,
        "supplemental_specs_count": 0,
        "report_path": None,
        "csv_path": None,
        "json_path": None,
        "errors": [last_error]
    }

    new_pending = [f for f in files_pending if f != current_file]

    logger.warning(f"File failed: {current_file} - {last_error}")

    updates = {
        "files_failed": files_failed + [failed_result],
        "files_pending": new_pending,
        "current_file": new_pending[0] if new_pending else None,
    }
    updates.update(cleared_file_state())
    return updates


def advance_to_next_file(state: SpecState) -> dict:
    """
    Move to the next file in the pending list.

    Called after successfully processing a file.
    Note: Totals and files_completed are already updated by generate_report_node.

    Args:
        state: Current workflow state

    Returns:
        State updates with next file as current
    """
    current_file = state.get("current_file", "")
    files_pending = state.get("files_pending", [])

    new_pending = [f for f in files_pending if f != current_file]

    logger.info(f"File completed: {current_file}")

    updates = {
        "files_pending": new_pending,
        "current_file": new_pending[0] if new_pending else None,
    }
    # Reset per-file state
    updates.update(cleared_file_state())
    return updates
