"""
Workflow State Schema for the Specification Agent
Defines the state that flows through the LangGraph workflow.
"""

from typing import TypedDict, List, Optional, Dict, Any
from datetime import datetime

from spec_tools.spec_sets import DEFAULT_SPEC_SET


class FileResult(TypedDict):
    """Result from processing a single input file."""
    filename: str
    filepath: str
    success: bool
    status: str
    items_count: int
    matched_items_count: int
    main_specs_count: int
    supplemental_specs_count: int
    report_path: Optional[str]
    csv_path: Optional[str]
    json_path: Optional[str]
    errors: List[str]


class SpecState(TypedDict):
    """
    State schema for the specification workflow.

    This state is passed between nodes in the LangGraph workflow.
    Each node can read from and write to this state.
    """

    # ========================
    # Input Configuration
    # ========================
    input_path: str                    # Input file or folder path
    output_path: str                   # Output directory for reports
    spec_set: str                      # Active specification set id
    catalog_root: Optional[str]        # Catalog folder or URL in use

    # ========================
    # Progress Tracking
    # ========================
    current_file: Optional[str]        # Current input being processed
    files_pending: List[str]           # Inputs not yet processed
    files_completed: List[FileResult]  # Successfully processed files
    files_failed: List[FileResult]     # Failed files with error info

    # ========================
    # Per-File Intermediate Data
    # ========================
    # These are cleared between files
    items: Optional[List[Dict]]        # Standardized items from read_items
    matches: Optional[List[Dict]]      # From match_specs
    compiled_specs: Optional[Dict]     # {mainSpecs, supplementalSpecs}
    report_path: Optional[str]         # Generated PDF report
    csv_path: Optional[str]            # Generated items CSV
    json_path: Optional[str]           # Generated matches JSON
    status_message: Optional[str]      # User-facing status for the current file

    # ========================
    # Error Handling
    # ========================
    last_error: Optional[str]          # Most recent error message

    # ========================
    # Batch Summary
    # ========================
    total_items: int                   # Items across all files
    total_matched_items: int           # Matched items across all files
    master_summary: Optional[Dict]     # Final batch summary data

    # ========================
    # Timing
    # ========================
    start_time: Optional[str]          # ISO timestamp when run started
    end_time: Optional[str]            # ISO timestamp when run completed


def create_initial_state(
    input_path: str,
    output_path: str,
    spec_set: str = DEFAULT_SPEC_SET,
    catalog_root: str = None
) -> SpecState:
    """
    Create initial state for a new workflow run.

    Args:
        input_path: PDF/CSV/Excel file or folder to process
        output_path: Directory for output reports
        spec_set: Specification set id
        catalog_root: Catalog folder or URL in use (recorded in the summary)

    Returns:
        Initialized SpecState
    """
    return SpecState(
        # Input
        input_path=input_path,
        output_path=output_path,
        spec_set=spec_set,
        catalog_root=catalog_root,

        # Progress
        current_file=None,
        files_pending=[],
        files_completed=[],
        files_failed=[],

        # Per-file data
        items=None,
        matches=None,
        compiled_specs=None,
        report_path=None,
        csv_path=None,
        json_path=None,
        status_message=None,

        # Error handling
        last_error=None,

        # Batch summary
        total_items=0,
        total_matched_items=0,
        master_summary=None,

        # Timing
        start_time=datetime.now().isoformat(),
        end_time=None,
    )


def cleared_file_state() -> Dict[str, Any]:
    """State updates that reset per-file data before the next file."""
    return {
        "items": None,
        "matches": None,
        "compiled_specs": None,
        "report_path": None,
        "csv_path": None,
        "json_path": None,
        "status_message": None,
        "last_error": None,
    }

