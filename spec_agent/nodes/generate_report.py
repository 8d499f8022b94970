"""
Node 3: Report Generation
Writes the specification PDF plus CSV and JSON exports for the current file.
"""

import logging
from pathlib import Path
from typing import Dict, Any

from spec_tools.config import ReportConfig
from spec_tools.items import Item
from spec_tools.report import generate_specifications_pdf, write_items_csv, write_matches_json
from spec_tools.spec_matcher import CompiledSpecifications, SpecificationContext, SpecificationMatch

from ..state import SpecState

logger = logging.getLogger(__name__)


def generate_report_node(
    state: SpecState,
    context: SpecificationContext,
    report: ReportConfig
) -> Dict[str, Any]:
    """
    Generate the specification report for the current file.

    Outputs go to <output_path>/<file stem>/ so files in a batch never
    overwrite each other's reports. A file with no items gets its exports
    but no PDF.

    Args:
        state: Current workflow state
        context: Run's specification context (display name)
        report: Report settings

    Returns:
        State updates with report paths, updated totals, or last_error
    """
    current_file = state.get("current_file", "")
    output_path = state.get("output_path", "")

    # Step 1: Validate inputs
    if not output_path:
        logger.error("No output path specified")
        return {"last_error": "No output path specified"}

    if not current_file:
        logger.error("No current file in state")
        return {"last_error": "No current file specified"}

    items = [Item.from_dict(d) for d in state.get("items") or []]
    matches = [SpecificationMatch.from_dict(d) for d in state.get("matches") or []]
    compiled = CompiledSpecifications.from_dict(state.get("compiled_specs") or {})
    matched_count = sum(1 for m in matches if m.matched)

    filename_stem = Path(current_file).stem
    output_dir = Path(output_path) / filename_stem

    logger.info(f"Generating report: {len(items)} items, {matched_count} matched")

    try:
        output_dir.mkdir(parents=True, exist_ok=True)

        # Step 2: PDF report
        report_path = None
        if items:
            report_path = generate_specifications_pdf(
                items,
                compiled,
                context.spec_set.display_name,
                output_dir,
                max_table_rows=report.max_table_rows
            )
        else:
            logger.info("No items, skipping PDF report")

        # Step 3: Exports
        csv_path = None
        if report.write_csv:
            csv_path = write_items_csv(items, matches, output_dir / f"{filename_stem}_items.csv")
            logger.info(f"CSV export saved: {csv_path}")

        json_path = None
        if report.write_json:
            json_path = write_matches_json(
                items, matches, compiled, context.current_spec_set,
                output_dir / f"{filename_stem}_matches.json",
                source_file=Path(current_file).name
            )
            logger.info(f"JSON export saved: {json_path}")

    except Exception as e:
        logger.error(f"Report generation failed: {e}")
        return {"last_error": f"Report generation failed: {str(e)}"}

    # Step 4: Record the file result and batch totals
    files_completed = state.get("files_completed", [])
    file_result = {
        "filename": Path(current_file).name,
        "filepath": current_file,
        "success": True,
        "status": state.get("status_message") or "",
        "items_count": len(items),
        "matched_items_count": matched_count,
        "main_specs_count": len(compiled.main_specs),
        "supplemental_specs_count": len(compiled.supplemental_specs),
        "report_path": report_path,
        "csv_path": csv_path,
        "json_path": json_path,
        "errors": []
    }

    return {
        "report_path": report_path,
        "csv_path": csv_path,
        "json_path": json_path,
        "last_error": None,
        "total_items": state.get("total_items", 0) + len(items),
        "total_matched_items": state.get("total_matched_items", 0) + matched_count,
        "files_completed": files_completed + [file_result],
    }
