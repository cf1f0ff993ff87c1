from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

1. Puts the 'src' directory on sys.path so 'covtree' is importable without
   installation.
2. Provides shared coverage records and configuration dictionaries.
"""

import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from covtree.domain.coverage_models import FileCoverageRecord  # noqa: E402

DAY_MS = 24 * 60 * 60 * 1000


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def sample_records() -> List[FileCoverageRecord]:
    """Small project: nested sources, a root file and one test suite."""
    return [
        FileCoverageRecord("src/components/Button.tsx", 8, 10, 9, 12),
        FileCoverageRecord("src/components/Modal.tsx", 2, 10, 3, 12),
        FileCoverageRecord("src/utils/format.ts", 30, 40),
        FileCoverageRecord("src/index.ts", 5, 5, 5, 5),
        FileCoverageRecord("src/components/Button.test.tsx", 50, 50),
        FileCoverageRecord("setup.js", 0, 4),
    ]


@pytest.fixture
def sample_payload() -> List[Dict[str, Any]]:
    """The flat JSON input contract."""
    return [
        {"file": "src/file1.ts", "linesCovered": 10, "linesTotal": 20},
        {"file": "src/file2.ts", "linesCovered": 15, "linesTotal": 25,
         "statementsCovered": 14, "statementsTotal": 30},
        {"file": "src/file1.test.ts", "linesCovered": 3, "linesTotal": 3},
    ]


@pytest.fixture
def history_payload() -> List[Dict[str, Any]]:
    """Three runs: now, ~1 week ago and ~1 month ago (epoch ms)."""
    now = 400 * DAY_MS
    return [
        {"startedAt": now - 30 * DAY_MS, "files": [
            {"file": "src/file1.ts", "linesCovered": 2, "linesTotal": 20},
        ]},
        {"startedAt": now, "files": [
            {"file": "src/file1.ts", "linesCovered": 10, "linesTotal": 20},
            {"file": "src/file2.ts", "linesCovered": 15, "linesTotal": 25},
        ]},
        {"startedAt": now - 8 * DAY_MS, "files": {
            "src/file1.ts": {"linesCovered": 5, "linesTotal": 20},
            "src/file2.ts": {"linesCovered": 20, "linesTotal": 25},
        }},
    ]


@pytest.fixture
def write_json(tmp_path: Path):
    """Write a JSON document under tmp_path and return its path as str."""
    def _write(name: str, data: Any) -> str:
        target = tmp_path / name
        target.write_text(json.dumps(data), encoding="utf-8")
        return str(target)
    return _write


@pytest.fixture
def mock_config_dict() -> Dict[str, Any]:
    """A complete, valid session configuration."""
    return {
        "input_path": "",
        "history_path": "",
        "compare_period": "",
        "coverage_kind": "lines",
        "include_tests": False,
        "exclude_patterns": [],
        "expand_depth": 2,
        "show_counts": True,
        "save_path": "",
    }
