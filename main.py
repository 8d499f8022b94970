#!/usr/bin/env python3
"""
Specification Agent - CLI Entry Point

A LangGraph-based agent that reads bid items from PDF bid tabulations,
CSV or Excel files, matches them to LA DOTD or TxDOT standard
specifications and writes a specification report per file.

Usage:
    # Single file
    python main.py ./bids/project.pdf ./output

    # Batch folder
    python main.py ./bids/ ./output

    # TxDOT 2024 specifications
    python main.py ./bids/ ./output --spec-set txdot-2024

    # Show workflow visualization
    python main.py --show-graph
"""

import argparse
import logging
import sys
from pathlib import Path
from datetime import datetime

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from version import __version__, APP_NAME
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)


def main():
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description=f"{APP_NAME} - Match bid items to DOT standard specifications",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s ./bids/project.pdf ./output
  %(prog)s ./bids/items.xlsx ./output --spec-set txdot-2024
  %(prog)s ./bids/ ./output --catalog-root https://example.com/specs
  %(prog)s --list-spec-sets
  %(prog)s --show-graph
        """
    )

    parser.add_argument(
        "input_path",
        nargs="?",
        help="PDF, CSV or Excel file, or folder containing them"
    )

    parser.add_argument(
        "output_path",
        nargs="?",
        help="Directory for output reports"
    )

    parser.add_argument(
        "--spec-set", "-s",
        default=None,
        help="Specification set id, e.g. ladotd-2016 or txdot-2024 (default: from config)"
    )

    parser.add_argument(
        "--catalog-root",
        default=None,
        help="Folder or base URL holding <spec-set>/specifications.json (default: bundled references/specs)"
    )

    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML config (default: config/spec_agent.yaml)"
    )

    parser.add_argument(
        "--max-rows",
        type=int,
        default=None,
        help="Items listed in the report's summary table (default: 15)"
    )

    parser.add_argument(
        "--require-unit",
        action="store_true",
        default=None,
        help="Only accept PDF table headers that also have a Unit column"
    )

    parser.add_argument(
        "--list-spec-sets",
        action="store_true",
        help="List available specification sets and exit"
    )

    parser.add_argument(
        "--no-checkpoints",
        action="store_true",
        help="Disable state checkpointing"
    )

    parser.add_argument(
        "--show-graph",
        action="store_true",
        help="Show workflow graph visualization and exit"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose/debug logging"
    )

    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    args = parser.parse_args()

    # Set logging level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.show_graph:
        from spec_agent import get_workflow_visualization
        print(get_workflow_visualization())
        return 0

    if args.list_spec_sets:
        from spec_tools import available_spec_sets
        for spec_set in available_spec_sets():
            print(f"  {spec_set['id']:<14} {spec_set['name']}")
        return 0

    # Validate required arguments
    if not args.input_path or not args.output_path:
        parser.error("input_path and output_path are required (unless using --show-graph or --list-spec-sets)")

    if args.max_rows is not None and args.max_rows < 1:
        parser.error(f"max-rows must be at least 1, got {args.max_rows}")

    from spec_tools import SPEC_SETS
    if args.spec_set and args.spec_set not in SPEC_SETS:
        parser.error(f'Specification set "{args.spec_set}" not found (choose from {", ".join(SPEC_SETS)})')

    # Resolve paths
    input_path = Path(args.input_path).resolve()
    output_path = Path(args.output_path).resolve()

    # Validate input
    if not input_path.exists():
        logger.error(f"Input path does not exist: {input_path}")
        return 1

    output_path.mkdir(parents=True, exist_ok=True)

    # Print banner
    print("\n" + "=" * 60)
    print(f"  {APP_NAME} {__version__}")
    print("  LangGraph Workflow for DOT Specification Matching")
    print("=" * 60)
    print(f"  Input:    {input_path}")
    print(f"  Output:   {output_path}")
    print(f"  Spec Set: {args.spec_set or '(from config)'}")
    if args.catalog_root:
        print(f"  Catalog:  {args.catalog_root}")
    print("=" * 60 + "\n")

    # Run the workflow
    try:
        from spec_agent import run_spec_workflow

        start_time = datetime.now()

        result = run_spec_workflow(
            input_path=str(input_path),
            output_path=str(output_path),
            spec_set=args.spec_set,
            catalog_root=args.catalog_root,
            config_path=args.config,
            max_table_rows=args.max_rows,
            require_unit=args.require_unit,
            enable_checkpoints=not args.no_checkpoints
        )

        duration = (datetime.now() - start_time).total_seconds()

        files_completed = result.get("files_completed", [])
        files_failed = result.get("files_failed", [])

        for f in files_completed:
            print(f"  {f.get('filename')}: {f.get('status')}")
            if f.get("report_path"):
                print(f"    Report: {f['report_path']}")

        # Print summary
        print("\n" + "=" * 60)
        print("  PROCESSING COMPLETE")
        print("=" * 60)
        print(f"  Spec Set:        {result.get('spec_set')}")
        print(f"  Files Processed: {len(files_completed) + len(files_failed)}")
        print(f"  Successful:      {len(files_completed)}")
        print(f"  Failed:          {len(files_failed)}")
        print(f"  Items:           {result.get('total_items', 0)}")
        print(f"  Matched Items:   {result.get('total_matched_items', 0)}")
        print(f"  Duration:        {duration:.1f} seconds")
        print("=" * 60)
        print(f"\n  Reports saved to: {output_path}")

        if files_failed:
            print("\n  Failed files:")
            for f in files_failed:
                print(f"    - {f.get('filename', 'Unknown')}: {f.get('errors', ['Unknown error'])[0]}")

        if not files_completed and not files_failed and result.get("last_error"):
            print(f"\n  Error: {result['last_error']}")
            print()
            return 1

        print()
        return 0 if files_completed or not files_failed else 1

    except FileNotFoundError as e:
        logger.error(str(e))
        return 1
    except Exception as e:
        logger.exception(f"Workflow failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
