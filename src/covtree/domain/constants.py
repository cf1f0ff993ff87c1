from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Provides centralized access to application-wide constants: versioning,
historical comparison periods, presentation thresholds and routing.
"""

from typing import Dict, Tuple

APP_NAME = "CovTree"
CURRENT_CONFIG_VERSION = "1.0.0"

# -----------------------------------------------------------------------------
# HISTORICAL COMPARISON
# -----------------------------------------------------------------------------

DAY_MS = 24 * 60 * 60 * 1000

# Period key -> (offset in days, search window in days on each side)
HISTORICAL_PERIODS: Dict[str, Tuple[int, int]] = {
    "1w": (7, 3),
    "1m": (30, 7),
    "1y": (365, 30),
}

# -----------------------------------------------------------------------------
# PRESENTATION
# -----------------------------------------------------------------------------

DEFAULT_EXPAND_DEPTH = 2

SUCCESS_THRESHOLD = 80.0
WARNING_THRESHOLD = 50.0

FILE_DETAIL_ROUTE = "/coverage/"
