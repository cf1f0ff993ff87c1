from __future__ import annotations

"""
Configuration Validation Service.

Gatekeeper between untrusted inputs (CLI arguments, GUI widgets, the
persisted config.json) and the coverage tree pipeline. Fills missing keys
with defaults, coerces types, and normalizes paths and enumerations.
"""

import logging
import re
from typing import Any, Dict, List, Sequence, Tuple

from covtree.core.pipeline.components.filters import default_exclude_patterns
from covtree.domain.config import COMPARE_PERIODS, VIEW_COVERAGE_KINDS, get_default_config
from covtree.infra.fs import normalize_path

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize a session configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raise on invalid values instead of falling back.

    Returns:
        Tuple[Dict[str, Any], List[str]]: The normalized configuration and
                                          the warnings produced.

    Raises:
        TypeError: In strict mode, on a value of the wrong type.
        ValueError: In strict mode, on an out-of-range value.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    for field in ("input_path", "history_path", "save_path"):
        raw = _as_str(merged.get(field), defaults[field], field, warnings, strict)
        merged[field] = normalize_path(raw)

    for field in ("include_tests", "show_counts"):
        merged[field] = _as_bool(merged.get(field), defaults[field], field, warnings, strict)

    merged["compare_period"] = _as_choice(
        merged.get("compare_period"), COMPARE_PERIODS, defaults["compare_period"],
        "compare_period", warnings, strict,
    )
    merged["coverage_kind"] = _as_choice(
        merged.get("coverage_kind"), VIEW_COVERAGE_KINDS, defaults["coverage_kind"],
        "coverage_kind", warnings, strict,
    )
    merged["expand_depth"] = _as_non_negative_int(
        merged.get("expand_depth"), defaults["expand_depth"], "expand_depth", warnings, strict
    )

    patterns = _as_list_str(
        merged.get("exclude_patterns"), default_exclude_patterns(), "exclude_patterns", warnings, strict
    )
    merged["exclude_patterns"] = _check_patterns(patterns, warnings, strict)

    for w in warnings:
        logger.debug(f"Config validation: {w}")
    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and strip string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        return value.strip()

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce common boolean spellings into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_non_negative_int(value: Any, fallback: int, field: str, warnings: List[str], strict: bool) -> int:
    """Accept ints (and integral strings outside strict mode) >= 0."""
    if value is None:
        return fallback

    if isinstance(value, str) and not strict:
        try:
            converted = int(value.strip())
        except ValueError:
            converted = None
        if converted is not None:
            warnings.append(f"Field '{field}' converted from '{value}' to {converted}.")
            value = converted

    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"Invalid field '{field}': expected int, received {type(value).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback

    if value < 0:
        msg = f"Invalid field '{field}': {value} is negative."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback
    return value


def _as_choice(
        value: Any,
        choices: Sequence[str],
        fallback: str,
        field: str,
        warnings: List[str],
        strict: bool,
) -> str:
    """Restrict a string field to a closed set of (case-insensitive) values."""
    if value is None:
        return fallback
    if not isinstance(value, str):
        msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback

    v = value.strip().lower()
    if v in choices:
        return v

    msg = f"Invalid field '{field}': '{value}' is not one of {list(choices)}."
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_list_str(value: Any, fallback: List[str], field: str, warnings: List[str], strict: bool) -> List[str]:
    """Ensure input is a list of non-empty strings, supporting CSV parsing."""
    if value is None:
        return list(fallback)

    if isinstance(value, str) and not strict:
        items = [x.strip() for x in value.split(",") if x.strip()]
        if items:
            warnings.append(f"Field '{field}' converted from CSV string to list.")
        return items or list(fallback)

    if isinstance(value, (list, tuple)):
        out: List[str] = []
        for i, item in enumerate(value):
            if isinstance(item, str):
                s = item.strip()
                if s:
                    out.append(s)
            else:
                msg = f"Invalid item in '{field}[{i}]': expected str."
                if strict:
                    raise TypeError(msg)
                warnings.append(f"{msg} Item discarded.")
        return out

    msg = f"Invalid field '{field}': expected list[str], received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return list(fallback)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: DOMAIN NORMALIZATION
# -----------------------------------------------------------------------------

def _check_patterns(patterns: List[str], warnings: List[str], strict: bool) -> List[str]:
    """Drop exclusion patterns that are not valid regular expressions."""
    out: List[str] = []
    for pattern in patterns:
        try:
            re.compile(pattern)
        except re.error as e:
            msg = f"Invalid exclude pattern '{pattern}': {e}."
            if strict:
                raise ValueError(msg) from e
            warnings.append(f"{msg} Pattern discarded.")
            continue
        out.append(pattern)
    return out
