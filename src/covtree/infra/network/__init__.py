from __future__ import annotations

"""
Network Communication Infrastructure.

Facade over the HTTP clients used to pull coverage reports and run history
from remote CI artifacts.
"""

from covtree.infra.network.common import DEFAULT_TIMEOUT, USER_AGENT
from covtree.infra.network.coverage_client import (
    fetch_coverage_records,
    fetch_coverage_runs,
)

__all__ = [
    "fetch_coverage_records",
    "fetch_coverage_runs",
    "USER_AGENT",
    "DEFAULT_TIMEOUT",
]
