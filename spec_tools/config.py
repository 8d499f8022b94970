"""Configuration loader for the specification agent."""

import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass, field, asdict

from .header_locator import ColumnMap
from .row_clusterer import RowClusterConfig
from .spec_catalog import DEFAULT_TIMEOUT
from .spec_sets import DEFAULT_SPEC_SET
from .table_extractor import DEFAULT_COLUMNS

ENV_SPEC_SET = "SPEC_AGENT_SPEC_SET"
ENV_CATALOG_ROOT = "SPEC_AGENT_CATALOG_ROOT"


@dataclass
class MatchingConfig:
    spec_set: str = DEFAULT_SPEC_SET
    catalog_root: Optional[str] = None     # Directory or base URL; None = bundled references/specs
    request_timeout: float = DEFAULT_TIMEOUT


@dataclass
class ExtractionConfig:
    require_unit_header: bool = False
    default_columns: Dict[str, int] = field(default_factory=lambda: asdict(DEFAULT_COLUMNS))
    row_clustering: Dict[str, float] = field(default_factory=dict)

    def column_map(self) -> ColumnMap:
        return ColumnMap(**{**asdict(DEFAULT_COLUMNS), **self.default_columns})

    def cluster_config(self) -> RowClusterConfig:
        return RowClusterConfig(**self.row_clustering)


@dataclass
class ReportConfig:
    max_table_rows: int = 15
    write_csv: bool = True
    write_json: bool = True


@dataclass
class SpecAgentConfig:
    matching: MatchingConfig = field(default_factory=MatchingConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    report: ReportConfig = field(default_factory=ReportConfig)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def default_search_paths():
    return [
        Path.cwd() / 'config' / 'spec_agent.yaml',
        Path(__file__).parent.parent / 'config' / 'spec_agent.yaml',
        Path.home() / '.spec_agent' / 'config.yaml',
    ]


def load_config(config_path: Optional[str] = None) -> SpecAgentConfig:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, looks in default locations
            and falls back to built-in defaults when none exists.

    Returns:
        SpecAgentConfig object

    Raises:
        FileNotFoundError: config_path given but missing
    """
    raw: Dict[str, Any] = {}

    if config_path is not None:
        if not Path(config_path).exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        for path in default_search_paths():
            if path.exists():
                config_path = str(path)
                break

    if config_path is not None:
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}

    config = SpecAgentConfig(
        matching=MatchingConfig(**(raw.get('matching') or {})),
        extraction=ExtractionConfig(**(raw.get('extraction') or {})),
        report=ReportConfig(**(raw.get('report') or {})),
    )

    # Environment wins over the file
    if os.getenv(ENV_SPEC_SET):
        config.matching.spec_set = os.environ[ENV_SPEC_SET]
    if os.getenv(ENV_CATALOG_ROOT):
        config.matching.catalog_root = os.environ[ENV_CATALOG_ROOT]

    return config
