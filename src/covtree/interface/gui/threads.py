from __future__ import annotations

"""
Background Worker Threads for GUI Operations.

Coverage documents may live behind slow CI artifact URLs, so loading runs on
daemon threads. Results are handed to the CoverageRefresher, which applies
only the newest request and drops results that arrive out of order.
"""

import logging
import threading
from typing import Any, Dict

from covtree.core.pipeline.engine import load_sources
from covtree.core.pipeline.stages.validator import validate_config
from covtree.core.services.loader import CoverageDataError
from covtree.core.services.refresh import CoverageRefresher

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# COVERAGE LOADING WORKERS
# -----------------------------------------------------------------------------

def load_coverage_task(config: Dict[str, Any], token: int, refresher: CoverageRefresher) -> None:
    """
    Load sources for one refresh request and publish the result.

    Args:
        config: Session configuration snapshot.
        token: Request token from refresher.begin_request().
        refresher: Coordinator that builds and publishes the tree.
    """
    try:
        clean, _ = validate_config(config, strict=False)
        sources = load_sources(clean)
        refresher.complete(
            token,
            sources.records,
            sources.historical,
            include_tests=clean["include_tests"],
            exclude_patterns=clean["exclude_patterns"],
        )
    except CoverageDataError as e:
        logger.warning(f"Load Task: request #{token} failed: {e}")
        refresher.fail(token, e)
    except Exception as e:
        logger.critical(f"Load Task: Critical failure in request #{token}: {e}", exc_info=True)
        refresher.fail(token, e)


def _snapshot(config: Dict[str, Any]) -> Dict[str, Any]:
    """Copy the config so the worker never reads containers the Tk thread owns."""
    snapshot = dict(config)
    for key, value in snapshot.items():
        if isinstance(value, list):
            snapshot[key] = list(value)
    return snapshot


def start_load_thread(config: Dict[str, Any], token: int, refresher: CoverageRefresher) -> threading.Thread:
    """Spawn a daemon thread running load_coverage_task."""
    thread = threading.Thread(
        target=load_coverage_task,
        args=(_snapshot(config), token, refresher),
        name=f"CoverageLoad-{token}",
        daemon=True,
    )
    thread.start()
    return thread
