from __future__ import annotations

import json
from pathlib import Path

from addressbook_engine.settings_store import AppSettings, load_settings, save_settings


def test_missing_settings_file_gives_defaults(tmp_path: Path) -> None:
    assert load_settings(data_root=tmp_path) == AppSettings.defaults()


def test_settings_roundtrip(tmp_path: Path) -> None:
    settings = AppSettings(book_name="family", log_level="DEBUG", journal_enabled=False)
    save_settings(data_root=tmp_path / "nested", settings=settings)

    assert load_settings(data_root=tmp_path / "nested") == settings


def test_unreadable_settings_give_defaults(tmp_path: Path) -> None:
    (tmp_path / "settings.json").write_text("{not json", encoding="utf-8")
    assert load_settings(data_root=tmp_path) == AppSettings.defaults()


def test_invalid_fields_fall_back_individually(tmp_path: Path) -> None:
    payload = {"book_name": "  work  ", "log_level": "LOUD", "journal_enabled": "yes"}
    (tmp_path / "settings.json").write_text(json.dumps(payload), encoding="utf-8")

    loaded = load_settings(data_root=tmp_path)

    assert loaded.book_name == "work"
    assert loaded.log_level == "INFO"
    assert loaded.journal_enabled is True


def test_log_level_is_normalized_to_upper_case(tmp_path: Path) -> None:
    (tmp_path / "settings.json").write_text(json.dumps({"log_level": "warning"}), encoding="utf-8")
    assert load_settings(data_root=tmp_path).log_level == "WARNING"
