"""
Row Clusterer

Rebuilds table rows from a page's positioned text. PDFs have no table
semantics, so rows are recovered from geometry: fragments whose baselines
sit within a tolerance of each other share a row. The tolerance adapts to
the page by estimating the typical line pitch from the gaps between
baselines, so tightly and loosely spaced tables both cluster correctly.
"""

import logging
import math
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .text_layout import TextFragment

logger = logging.getLogger(__name__)

Row = List[TextFragment]


# =============================================================================
# CONFIGURABLE THRESHOLDS
# =============================================================================

@dataclass
class RowClusterConfig:
    """Tunables for row-pitch estimation."""
    epsilon: float = 0.1            # Baseline gaps at or below this are the same line
    bucket_size: float = 0.5        # Gaps are rounded to the nearest bucket before counting
    outlier_ceiling: float = 20.0   # Gaps at or above this are section breaks, not line pitch
    slack_factor: float = 1.2       # Tolerance = pitch * slack
    default_tolerance: float = 3.0  # Used when no usable gaps exist
    min_tolerance: float = 2.0      # Floor for the estimated tolerance


DEFAULT_CLUSTER_CONFIG = RowClusterConfig()


# =============================================================================
# Pitch Estimation
# =============================================================================

def _bucket(diff: float, bucket_size: float) -> float:
    # Half-up, not banker's rounding
    return math.floor(diff / bucket_size + 0.5) * bucket_size


def estimate_row_tolerance(
    y_values: Iterable[float],
    config: Optional[RowClusterConfig] = None
) -> float:
    """
    Estimate the same-row tolerance for a set of baselines.

    The most common gap between consecutive (sorted) baselines is taken as
    the line pitch; the tolerance is that pitch times the slack factor.

    Args:
        y_values: Baseline y coordinates of every fragment on the page
        config: Tunables (defaults used when omitted)

    Returns:
        Row tolerance in page units
    """
    config = config or DEFAULT_CLUSTER_CONFIG
    sorted_y = sorted(y_values)

    diffs = []
    for prev, curr in zip(sorted_y, sorted_y[1:]):
        diff = abs(curr - prev)
        if diff > config.epsilon:
            diffs.append(diff)

    if not diffs:
        return config.default_tolerance

    # Counter keeps first-seen order, so ties go to the smaller gap
    counts = Counter(_bucket(d, config.bucket_size) for d in sorted(diffs))
    candidates = [(bucket, n) for bucket, n in counts.items() if bucket < config.outlier_ceiling]
    # All gaps are section breaks: the default stands in for the pitch
    pitch = max(candidates, key=lambda c: c[1])[0] if candidates else config.default_tolerance
    tolerance = max(pitch * config.slack_factor, config.min_tolerance)

    logger.debug(f"Row pitch {pitch} from {len(diffs)} gaps -> tolerance {tolerance:.2f}")
    return tolerance


# =============================================================================
# Clustering
# =============================================================================

def cluster_rows(
    fragments: Sequence[TextFragment],
    config: Optional[RowClusterConfig] = None,
    tolerance: Optional[float] = None
) -> List[Row]:
    """
    Group a page's fragments into rows.

    Fragments are walked from the top of the page down; a new row starts
    whenever the baseline drops more than `tolerance` below the previous
    fragment. Each row is then ordered left to right.

    Args:
        fragments: All fragments of one page, in any order
        config: Tunables for the tolerance estimate
        tolerance: Explicit tolerance, skips the estimate

    Returns:
        Rows top-to-bottom; every fragment appears in exactly one row
    """
    if not fragments:
        return []

    if tolerance is None:
        tolerance = estimate_row_tolerance((f.y for f in fragments), config)

    # Top of page first
    ordered = sorted(fragments, key=lambda f: (-f.y, f.x))

    rows: List[Row] = []
    current: Row = [ordered[0]]
    for prev, frag in zip(ordered, ordered[1:]):
        if prev.y - frag.y > tolerance:
            rows.append(current)
            current = [frag]
        else:
            current.append(frag)
    rows.append(current)

    for row in rows:
        row.sort(key=lambda f: f.x)

    logger.debug(f"Clustered {len(fragments)} fragments into {len(rows)} rows (tolerance {tolerance:.2f})")
    return rows
