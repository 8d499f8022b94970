# Specification Agent
from .graph import create_spec_graph, run_spec_workflow, stream_spec_workflow, get_workflow_visualization
from .state import SpecState, create_initial_state

__all__ = [
    "create_spec_graph",
    "run_spec_workflow",
    "stream_spec_workflow",
    "get_workflow_visualization",
    "SpecState",
    "create_initial_state",
]
