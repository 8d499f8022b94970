# Workflow nodes
from .scan_inputs import scan_inputs_node
from .read_items import read_items_node
from .match_specs import match_specs_node
from .generate_report import generate_report_node
from .batch_summary import batch_summary_node

__all__ = [
    "scan_inputs_node",
    "read_items_node",
    "match_specs_node",
    "generate_report_node",
    "batch_summary_node",
]
