from __future__ import annotations

"""
Coverage Document Loader.

Parses coverage documents into FileCoverageRecord objects. Two shapes are
accepted: a flat JSON array of per-file objects, and the reporter ingest
object ({"files": {path: {...}}, "summary": {...}}). Malformed entries are
skipped with a warning; only an unusable top-level document is an error.
"""

import json
import logging
import math
from typing import Any, Dict, Iterable, List, Optional, Tuple

from covtree.domain.coverage_models import CoverageRun, FileCoverageRecord

logger = logging.getLogger(__name__)

# JSON key -> record attribute for every counter
_COUNTER_KEYS: Dict[str, str] = {
    "linesCovered": "lines_covered",
    "linesTotal": "lines_total",
    "statementsCovered": "statements_covered",
    "statementsTotal": "statements_total",
    "branchesCovered": "branches_covered",
    "branchesTotal": "branches_total",
    "functionsCovered": "functions_covered",
    "functionsTotal": "functions_total",
}

_REQUIRED_COUNTERS = ("linesCovered", "linesTotal")


class CoverageDataError(ValueError):
    """Raised when a coverage document cannot be read or has no known shape."""

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def parse_records(data: Any) -> List[FileCoverageRecord]:
    """
    Convert a decoded coverage document into records.

    Args:
        data: Decoded JSON (list of entries or ingest object).

    Returns:
        List[FileCoverageRecord]: Valid records in document order.

    Raises:
        CoverageDataError: If the document is neither a list nor an ingest object.
    """
    entries: List[Tuple[Optional[str], Any]]
    if isinstance(data, list):
        entries = [(None, item) for item in data]
    elif isinstance(data, dict) and isinstance(data.get("files"), dict):
        entries = list(data["files"].items())
    else:
        raise CoverageDataError(
            f"Unsupported coverage document: expected a list or an object with 'files', "
            f"received {type(data).__name__}."
        )

    records: List[FileCoverageRecord] = []
    for path_key, entry in entries:
        record = _parse_entry(entry, path_key)
        if record is not None:
            records.append(record)

    dropped = len(entries) - len(records)
    if dropped:
        logger.warning(f"Coverage loader: skipped {dropped} malformed entries.")
    logger.debug(f"Coverage loader: parsed {len(records)} records.")
    return records


def load_records(path: str) -> List[FileCoverageRecord]:
    """
    Read a UTF-8 JSON coverage document from disk.

    Args:
        path: Filesystem path of the document.

    Returns:
        List[FileCoverageRecord]: Parsed records.

    Raises:
        CoverageDataError: If the file cannot be read, decoded or parsed.
    """
    return parse_records(_read_json(path))


def parse_runs(data: Any) -> List[CoverageRun]:
    """
    Convert a decoded history document into runs sorted by start time.

    Each entry must provide a numeric 'startedAt' (epoch ms) and a 'files'
    member in any shape accepted by parse_records.

    Args:
        data: Decoded JSON list of run objects.

    Returns:
        List[CoverageRun]: Runs in ascending start order.

    Raises:
        CoverageDataError: If the document is not a list.
    """
    if not isinstance(data, list):
        raise CoverageDataError(
            f"Unsupported history document: expected a list, received {type(data).__name__}."
        )

    runs: List[CoverageRun] = []
    for entry in data:
        if not isinstance(entry, dict):
            logger.warning("History loader: skipping non-object run entry.")
            continue
        started_at = _as_count(entry.get("startedAt"))
        if started_at is None:
            logger.warning("History loader: skipping run without a valid 'startedAt'.")
            continue
        files = entry.get("files", [])
        try:
            records = parse_records(files if isinstance(files, list) else {"files": files})
        except CoverageDataError as e:
            logger.warning(f"History loader: skipping run {started_at}: {e}")
            continue
        runs.append(CoverageRun(started_at=started_at, records=tuple(records)))

    runs.sort(key=lambda run: run.started_at)
    return runs


def load_runs(path: str) -> List[CoverageRun]:
    """Read a history document from disk. Raises CoverageDataError on failure."""
    return parse_runs(_read_json(path))


def records_to_json(records: Iterable[FileCoverageRecord]) -> List[Dict[str, Any]]:
    """Serialize records back to the flat list shape of the input contract."""
    out: List[Dict[str, Any]] = []
    for record in records:
        item: Dict[str, Any] = {"file": record.path}
        for key, attr in _COUNTER_KEYS.items():
            value = getattr(record, attr)
            if value is not None:
                item[key] = value
        out.append(item)
    return out

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _read_json(path: str) -> Any:
    """Load a JSON document, wrapping I/O and decoding errors."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise CoverageDataError(f"Cannot read coverage file '{path}': {e}") from e
    except json.JSONDecodeError as e:
        raise CoverageDataError(f"Invalid JSON in coverage file '{path}': {e}") from e


def _parse_entry(entry: Any, path_key: Optional[str]) -> Optional[FileCoverageRecord]:
    """Validate a single entry; return None when it cannot form a record."""
    if not isinstance(entry, dict):
        return None

    path = path_key if path_key is not None else entry.get("file", entry.get("path"))
    if not isinstance(path, str):
        return None

    values: Dict[str, Optional[int]] = {}
    for key, attr in _COUNTER_KEYS.items():
        raw = entry.get(key)
        if raw is None:
            if key in _REQUIRED_COUNTERS:
                return None
            values[attr] = None
            continue
        count = _as_count(raw)
        if count is None:
            logger.warning(f"Coverage loader: invalid '{key}' for '{path}': {raw!r}")
            return None
        values[attr] = count

    return FileCoverageRecord(path=path, **values)


def _as_count(value: Any) -> Optional[int]:
    """Coerce a JSON number to a non-negative integer. Fractional values are rejected."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value) or value < 0:
        return None
    if isinstance(value, float) and not value.is_integer():
        return None
    return int(value)
