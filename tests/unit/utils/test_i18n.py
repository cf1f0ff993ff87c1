from __future__ import annotations

"""
Unit tests for the i18n translation manager.
"""

import json

from covtree.utils.i18n import I18n, i18n


def test_singleton_loads_english() -> None:
    assert i18n.is_loaded
    assert i18n.locale == "en"
    assert "en" in i18n.available_locales()


def test_resolves_and_formats_keys() -> None:
    assert i18n.t("gui.compare.off") == "Off"
    assert i18n.t("cli.status.files", count=3) == "Files: 3"
    assert i18n.t("gui.status.loaded", count=12) == "12 files loaded."


def test_unknown_and_partial_keys_return_key() -> None:
    assert i18n.t("does.not.exist") == "does.not.exist"
    assert i18n.t("gui.status") == "gui.status"
    assert i18n.t("gui.compare.off.deeper") == "gui.compare.off.deeper"


def test_missing_format_argument_returns_template() -> None:
    assert i18n.t("cli.status.files", other=1) == "Files: {count}"


def test_missing_locale_falls_back_to_keys(tmp_path) -> None:
    manager = I18n("xx", locales_dir=str(tmp_path))

    assert manager.is_loaded is False
    assert manager.t("gui.compare.off") == "gui.compare.off"
    assert manager.available_locales() == []


def test_corrupted_locale_is_ignored(tmp_path) -> None:
    (tmp_path / "en.json").write_text("{broken", encoding="utf-8")
    manager = I18n("en", locales_dir=str(tmp_path))

    assert manager.is_loaded is False


def test_custom_locale_directory(tmp_path) -> None:
    (tmp_path / "es.json").write_text(json.dumps({"gui": {"compare": {"off": "No"}}}), encoding="utf-8")
    manager = I18n("es", locales_dir=str(tmp_path))

    assert manager.locale == "es"
    assert manager.t("gui.compare.off") == "No"
    assert manager.available_locales() == ["es"]
