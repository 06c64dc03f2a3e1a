"""
Persisted application settings.

Settings live in ``<data_root>/settings.json``. They only select defaults
(which book to open, how chatty logging is, whether mutations are journaled);
they never hold contact data.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from .paths import default_data_root

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR"}


@dataclass(frozen=True, slots=True)
class AppSettings:
    """
    Persisted application settings.

    Attributes
    ----------
    book_name:
        Address book opened when none is named explicitly.
    log_level:
        Root logger level name.
    journal_enabled:
        Whether committed mutations are appended to the JSONL journal.
    """

    book_name: str
    log_level: str
    journal_enabled: bool

    @staticmethod
    def defaults() -> "AppSettings":
        return AppSettings(book_name="default", log_level="INFO", journal_enabled=True)


def settings_path(data_root: Path | None) -> Path:
    root = default_data_root() if data_root is None else data_root
    return root / "settings.json"


def load_settings(*, data_root: Path | None) -> AppSettings:
    """
    Load settings from disk.

    Parameters
    ----------
    data_root:
        Data root holding settings.json. If None, the default root is used.

    Returns
    -------
    AppSettings
        Loaded settings. Missing or unreadable files give the defaults, and
        each invalid field falls back to its default on its own.
    """
    defaults = AppSettings.defaults()
    path = settings_path(data_root)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return defaults

    if not isinstance(payload, dict):
        return defaults

    book_name = payload.get("book_name")
    if not isinstance(book_name, str) or not book_name.strip():
        book_name = defaults.book_name

    log_level = payload.get("log_level")
    if not isinstance(log_level, str) or log_level.upper() not in LOG_LEVELS:
        log_level = defaults.log_level

    journal_enabled = payload.get("journal_enabled")
    if not isinstance(journal_enabled, bool):
        journal_enabled = defaults.journal_enabled

    return AppSettings(
        book_name=book_name.strip(),
        log_level=log_level.upper(),
        journal_enabled=journal_enabled,
    )


def save_settings(*, data_root: Path | None, settings: AppSettings) -> None:
    """
    Save settings to disk, creating the data root if needed.

    Parameters
    ----------
    data_root:
        Data root holding settings.json. If None, the default root is used.
    settings:
        Settings to persist.
    """
    path = settings_path(data_root)
    path.parent.mkdir(parents=True, exist_ok=True)

    payload = {
        "book_name": settings.book_name,
        "log_level": settings.log_level,
        "journal_enabled": settings.journal_enabled,
    }
    path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
