from __future__ import annotations

"""
Configuration Domain Management.

Persists the application state (global settings plus the last coverage
session) as JSON in the user data directory. Missing or unreadable files
fall back to defaults; newly introduced keys are merged in on load.
"""

import json
import logging
import os
from typing import Any, Dict

from covtree.domain.constants import CURRENT_CONFIG_VERSION, DEFAULT_EXPAND_DEPTH
from covtree.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILE = os.path.join(get_user_data_dir(), "config.json")

COMPARE_PERIODS = ("", "1w", "1m", "1y")
VIEW_COVERAGE_KINDS = ("lines", "statements")


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default session configuration.

    Returns:
        Dict[str, Any]: Default values driving a coverage tree build.
    """
    return {
        # Sources
        "input_path": "",
        "history_path": "",
        "compare_period": "",

        # Rollup
        "coverage_kind": "lines",
        "include_tests": False,
        "exclude_patterns": [],

        # Presentation
        "expand_depth": DEFAULT_EXPAND_DEPTH,
        "show_counts": True,
        "save_path": "",
    }


def get_default_app_state() -> Dict[str, Any]:
    """Full default structure of config.json."""
    return {
        "version": CURRENT_CONFIG_VERSION,
        "app_settings": {
            "theme": "System",
            "locale": "en",
        },
        "last_session": get_default_config(),
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_app_state() -> Dict[str, Any]:
    """
    Load application state from disk, merged over the defaults.

    Returns:
        Dict[str, Any]: The loaded state or the default structure on failure.
    """
    state = get_default_app_state()

    if not os.path.exists(CONFIG_FILE):
        logger.debug("Config file not found. Returning defaults.")
        return state

    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return state

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return state

    for section in ("app_settings", "last_session"):
        stored = data.get(section)
        if isinstance(stored, dict):
            state[section].update(stored)

    state["version"] = CURRENT_CONFIG_VERSION
    return state


def save_app_state(state: Dict[str, Any]) -> None:
    """
    Persist application state to disk.

    Args:
        state: The state dictionary to save.
    """
    try:
        os.makedirs(os.path.dirname(CONFIG_FILE), exist_ok=True)
        state["version"] = CURRENT_CONFIG_VERSION
        with open(CONFIG_FILE, "w", encoding="utf-8") as f:
            json.dump(state, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {CONFIG_FILE}")
    except (OSError, TypeError) as e:
        logger.error(f"Failed to save configuration: {e}")


# -----------------------------------------------------------------------------
# Facade API
# -----------------------------------------------------------------------------
def load_config() -> Dict[str, Any]:
    """Return the last session merged over the defaults."""
    config = get_default_config()
    config.update(load_app_state().get("last_session", {}))
    return config


def save_config(config: Dict[str, Any]) -> None:
    """Store the given config as the last session."""
    state = load_app_state()
    state["last_session"] = dict(config)
    save_app_state(state)
