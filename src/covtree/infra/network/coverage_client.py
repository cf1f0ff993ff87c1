from __future__ import annotations

import logging
from typing import Any, List, Optional

import requests

from covtree.core.services.loader import CoverageDataError, parse_records, parse_runs
from covtree.domain.coverage_models import CoverageRun, FileCoverageRecord
from covtree.infra.network.common import DEFAULT_TIMEOUT, default_headers

logger = logging.getLogger(__name__)


def fetch_coverage_records(url: str) -> Optional[List[FileCoverageRecord]]:
    """Download a coverage document and parse it into records."""
    data = _fetch_json(url, "coverage report")
    if data is None:
        return None

    try:
        records = parse_records(data)
    except CoverageDataError as e:
        logger.warning(f"Network: Received malformed coverage report ({e}).")
        return None

    logger.info(f"Network: Coverage report synchronized ({len(records)} files).")
    return records


def fetch_coverage_runs(url: str) -> Optional[List[CoverageRun]]:
    """Download a history document and parse it into runs."""
    data = _fetch_json(url, "coverage history")
    if data is None:
        return None

    try:
        runs = parse_runs(data)
    except CoverageDataError as e:
        logger.warning(f"Network: Received malformed coverage history ({e}).")
        return None

    logger.info(f"Network: Coverage history synchronized ({len(runs)} runs).")
    return runs


def _fetch_json(url: str, label: str) -> Optional[Any]:
    """GET a JSON document, returning None on any transport or decode failure."""
    logger.debug(f"Requesting {label} from: {url}")

    try:
        response = requests.get(url, headers=default_headers(), timeout=DEFAULT_TIMEOUT)
        response.raise_for_status()
        data = response.json()
    except requests.exceptions.Timeout:
        logger.warning(f"Network: Request for {label} timed out after {DEFAULT_TIMEOUT}s.")
        return None
    except requests.exceptions.RequestException as e:
        logger.error(f"Network: Communication error while fetching {label}: {e}")
        return None
    except ValueError as e:
        logger.error(f"Network: {label.capitalize()} is not valid JSON: {e}")
        return None

    if not isinstance(data, (list, dict)):
        logger.warning(f"Network: Received malformed {label} (root is {type(data).__name__}).")
        return None

    size_kb = len(response.content) / 1024
    logger.debug(f"Network: Received {label} ({size_kb:.1f} KB).")
    return data
