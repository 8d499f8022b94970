"""
LangGraph Workflow Definition
Wires together nodes and edges for the specification agent.
"""

import logging
from typing import Dict, Any, Optional, Iterator, Tuple

from langgraph.graph import StateGraph, END
from langgraph.checkpoint.memory import MemorySaver

from spec_tools.config import SpecAgentConfig, load_config
from spec_tools.spec_matcher import SpecificationContext

from .state import SpecState, create_initial_state
from .nodes import (
    scan_inputs_node,
    read_items_node,
    match_specs_node,
    generate_report_node,
    batch_summary_node,
)
from .edges import (
    route_after_scan,
    route_after_read,
    route_after_match,
    route_after_report,
    route_after_failure,
    mark_file_failed,
    advance_to_next_file,
)

logger = logging.getLogger(__name__)

# Each file takes 4-5 node steps, so this covers batches of ~100 files
RECURSION_LIMIT = 500


def create_spec_graph(
    context: SpecificationContext,
    settings: SpecAgentConfig,
    checkpointer: Optional[MemorySaver] = None
) -> StateGraph:
    """
    Create the LangGraph workflow for specification matching.

    Graph structure:
    ```
    START (scan_inputs)
        │
        ▼
    read_items ◄──────────┐
        │ match     skip  │
        ▼            ▼    │
    match_specs ──► mark_failed
        │ report          │
        ▼                 │
    generate_report       │
        │                 │
        ▼                 │
    [route_after_report]  │
        │ next_file       │
        ▼                 │
    advance_file ─────────┘
        │ summary
        ▼
    batch_summary
        │
        ▼
       END
    ```

    The context and settings are bound into the nodes rather than carried
    in the state, which only holds plain data.

    Args:
        context: Specification context shared by every file of the run
        settings: Loaded configuration
        checkpointer: Optional checkpointer for state persistence

    Returns:
        Compiled StateGraph
    """
    workflow = StateGraph(SpecState)

    # ========================
    # Add Nodes
    # ========================

    workflow.add_node("scan_inputs", scan_inputs_node)
    workflow.add_node("read_items", lambda state: read_items_node(state, context, settings.extraction))
    workflow.add_node("match_specs", lambda state: match_specs_node(state, context))
    workflow.add_node("generate_report", lambda state: generate_report_node(state, context, settings.report))
    workflow.add_node("mark_failed", mark_file_failed)
    workflow.add_node("advance_file", advance_to_next_file)
    workflow.add_node("batch_summary", batch_summary_node)

    # ========================
    # Add Edges
    # ========================

    workflow.set_entry_point("scan_inputs")

    workflow.add_conditional_edges(
        "scan_inputs",
        route_after_scan,
        {
            "read": "read_items",
            "summary": "batch_summary"
        }
    )

    workflow.add_conditional_edges(
        "read_items",
        route_after_read,
        {
            "match": "match_specs",
            "skip": "mark_failed"
        }
    )

    workflow.add_conditional_edges(
        "match_specs",
        route_after_match,
        {
            "report": "generate_report",
            "skip": "mark_failed"
        }
    )

    workflow.add_conditional_edges(
        "generate_report",
        route_after_report,
        {
            "next_file": "advance_file",
            "summary": "batch_summary",
            "skip": "mark_failed"
        }
    )

    workflow.add_conditional_edges(
        "mark_failed",
        route_after_failure,
        {
            "next_file": "read_items",
            "summary": "batch_summary"
        }
    )

    workflow.add_edge("advance_file", "read_items")
    workflow.add_edge("batch_summary", END)

    if checkpointer:
        return workflow.compile(checkpointer=checkpointer)
    return workflow.compile()


def _prepare_run(
    input_path: str,
    output_path: str,
    spec_set: Optional[str],
    catalog_root: Optional[str],
    config_path: Optional[str],
    max_table_rows: Optional[int],
    require_unit: Optional[bool]
) -> Tuple[SpecificationContext, SpecAgentConfig, SpecState]:
    """Load configuration, apply overrides and build the context and initial state."""
    settings = load_config(config_path)

    # Explicit arguments win over the config file
    if spec_set:
        settings.matching.spec_set = spec_set
    if catalog_root:
        settings.matching.catalog_root = catalog_root
    if max_table_rows is not None:
        settings.report.max_table_rows = max_table_rows
    if require_unit is not None:
        settings.extraction.require_unit_header = require_unit

    context = SpecificationContext(
        settings.matching.spec_set,
        catalog_root=settings.matching.catalog_root,
        timeout=settings.matching.request_timeout
    )

    initial_state = create_initial_state(
        input_path=input_path,
        output_path=output_path,
        spec_set=context.current_spec_set,
        catalog_root=context.catalog_root
    )
    return context, settings, initial_state


def run_spec_workflow(
    input_path: str,
    output_path: str,
    spec_set: Optional[str] = None,
    catalog_root: Optional[str] = None,
    config_path: Optional[str] = None,
    max_table_rows: Optional[int] = None,
    require_unit: Optional[bool] = None,
    enable_checkpoints: bool = True
) -> Dict[str, Any]:
    """
    Run the complete specification workflow.

    Args:
        input_path: PDF/CSV/Excel file or folder path
        output_path: Directory for output reports
        spec_set: Specification set id (overrides config)
        catalog_root: Catalog folder or base URL (overrides config)
        config_path: YAML config file; default locations when None
        max_table_rows: Items shown in the report's summary table
        require_unit: Require a Unit column when detecting PDF table headers
        enable_checkpoints: Enable state persistence

    Returns:
        Final workflow state with results

    Raises:
        UnknownSpecSetError: spec_set is not registered
    """
    context, settings, initial_state = _prepare_run(
        input_path, output_path, spec_set, catalog_root,
        config_path, max_table_rows, require_unit
    )

    checkpointer = MemorySaver() if enable_checkpoints else None
    graph = create_spec_graph(context, settings, checkpointer)

    logger.info(f"Starting specification workflow ({context.spec_set.name}): {input_path} -> {output_path}")

    if enable_checkpoints:
        config = {
            "configurable": {"thread_id": "spec-1"},
            "recursion_limit": RECURSION_LIMIT
        }
    else:
        config = {"recursion_limit": RECURSION_LIMIT}

    try:
        final_state = graph.invoke(initial_state, config)
        logger.info("Workflow completed successfully")
        return final_state
    except Exception as e:
        logger.error(f"Workflow failed: {e}")
        raise


def stream_spec_workflow(
    input_path: str,
    output_path: str,
    spec_set: Optional[str] = None,
    catalog_root: Optional[str] = None,
    config_path: Optional[str] = None,
    max_table_rows: Optional[int] = None,
    require_unit: Optional[bool] = None,
    enable_checkpoints: bool = True
) -> Iterator[Tuple[str, Dict[str, Any]]]:
    """
    Stream the specification workflow, yielding progress updates after each node.

    Same arguments as run_spec_workflow.

    Yields:
        Tuple of (node_name, state_update_dict) after each node executes
    """
    context, settings, initial_state = _prepare_run(
        input_path, output_path, spec_set, catalog_root,
        config_path, max_table_rows, require_unit
    )

    checkpointer = MemorySaver() if enable_checkpoints else None
    graph = create_spec_graph(context, settings, checkpointer)

    logger.info(f"Starting specification workflow (streaming): {input_path} -> {output_path}")

    if enable_checkpoints:
        config = {
            "configurable": {"thread_id": "spec-stream-1"},
            "recursion_limit": RECURSION_LIMIT
        }
    else:
        config = {"recursion_limit": RECURSION_LIMIT}

    try:
        # "updates" mode yields {node_name: state_update} after each node
        for update in graph.stream(initial_state, config, stream_mode="updates"):
            if update:
                node_name = list(update.keys())[0]
                yield (node_name, update[node_name])

        logger.info("Workflow streaming completed successfully")

    except Exception as e:
        logger.error(f"Workflow streaming failed: {e}")
        raise


def get_workflow_visualization() -> str:
    """
    Get ASCII visualization of the workflow graph.

    Returns:
        ASCII art representation of the graph
    """
    return """
    Specification Matching Workflow
    ===============================

                 ┌──────────────┐
                 │ scan_inputs  │
                 │   (START)    │
                 └──────┬───────┘
                        │
           ┌────────────▼────────────┐
           │       read_items        │◄──────────────┐
           │ (PDF table, CSV, Excel) │               │
           └────────────┬────────────┘               │
                 ┌──────┴──────┐                     │
              match          skip                    │
                 │             │                     │
                 ▼             ▼                     │
          ┌────────────┐ ┌────────────┐              │
          │match_specs │─►│mark_failed │─────────────┤
          │ (catalog)  │ └────────────┘              │
          └─────┬──────┘        ▲                    │
                │               │ skip               │
                ▼               │                    │
          ┌──────────────┐──────┘                    │
          │generate_report│                          │
          │ (PDF/CSV/JSON)│                          │
          └──────┬───────┘                           │
          ┌──────┴──────┐                            │
      next_file     summary                          │
          │             │                            │
          ▼             │                            │
    ┌────────────┐      │                            │
    │advance_file│──────┼────────────────────────────┘
    └────────────┘      │
                        ▼
               ┌──────────────┐
               │    batch     │
               │   summary    │
               └──────┬───────┘
                      │
                      ▼
                   ┌─────┐
                   │ END │
                   └─────┘
    """
