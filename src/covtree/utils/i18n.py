from __future__ import annotations

"""
Internationalization (i18n) Utility.

Singleton translation manager shared by the CLI and GUI. Resolves
dot-notation keys against nested JSON locale files and interpolates
keyword arguments into the resolved strings.
"""

import json
import logging
import os
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# SYSTEM DEFAULTS
# -----------------------------------------------------------------------------

DEFAULT_LOCALE = "en"
LOCALES_DIR = os.path.abspath(
    os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "interface", "locales")
)

# -----------------------------------------------------------------------------
# I18N MANAGER SERVICE
# -----------------------------------------------------------------------------

class I18n:
    """
    Resource manager for locale-specific strings.

    Unknown keys, non-string leaves and formatting failures all resolve to
    the key itself so that a missing translation never breaks the UI.
    """

    def __init__(self, locale: str = DEFAULT_LOCALE, locales_dir: str = LOCALES_DIR):
        self._locale = locale
        self._locales_dir = locales_dir
        self._translations: Dict[str, Any] = {}
        self.is_loaded = False

        self.load_locale(locale)

    @property
    def locale(self) -> str:
        return self._locale

    def available_locales(self) -> List[str]:
        """List locale identifiers that have a JSON resource file."""
        try:
            names = os.listdir(self._locales_dir)
        except OSError:
            return []
        return sorted(name[:-5] for name in names if name.endswith(".json"))

    def load_locale(self, locale: str) -> None:
        """
        Load a translation dictionary from the locales directory.

        Args:
            locale: ISO identifier of the language (e.g. 'en').
        """
        file_path = os.path.join(self._locales_dir, f"{locale}.json")

        if not os.path.exists(file_path):
            logger.warning(f"I18n: Locale resource missing at '{file_path}'. Fallback active.")
            self._translations = {}
            self.is_loaded = False
            return

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"I18n: Corruption in locale file {file_path}: {e}")
            self._translations = {}
            self.is_loaded = False
            return

        self._translations = data if isinstance(data, dict) else {}
        self._locale = locale
        self.is_loaded = bool(self._translations)
        logger.debug(f"I18n: Loaded locale dictionary: {locale}")

    def t(self, key: str, **kwargs: Any) -> str:
        """
        Resolve and format a translation string.

        Args:
            key: Dot-separated path (e.g. 'gui.buttons.reload').
            **kwargs: Values interpolated with str.format.

        Returns:
            str: The translated string, or the key when resolution fails.
        """
        current: Any = self._translations
        for part in key.split("."):
            if not isinstance(current, dict):
                return key
            current = current.get(part)

        if not isinstance(current, str):
            return key
        if not kwargs:
            return current

        try:
            return current.format(**kwargs)
        except (KeyError, IndexError, ValueError) as e:
            logger.debug(f"I18n: Formatting error for '{key}': {e}")
            return current

# -----------------------------------------------------------------------------
# SERVICE INITIALIZATION
# -----------------------------------------------------------------------------

i18n = I18n(DEFAULT_LOCALE)
