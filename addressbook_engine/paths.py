"""
Filesystem path policy for the address book.

All runtime data lives under a single data root. Each named address book gets
its own folder holding the SQLite database and its logs:

    <data_root>/
        settings.json
        books/<book_name>/addressbook.sqlite
        books/<book_name>/logs/journal.jsonl

Nothing else in the engine decides where files go.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DATA_ROOT_ENV = "ADDRESSBOOK_DATA_ROOT"


@dataclass(frozen=True, slots=True)
class BookPaths:
    """
    Resolved paths for one address book.

    Attributes
    ----------
    data_root:
        Root directory for all address book runtime data.
    book_root:
        Folder of the named book within `data_root`.
    db_path:
        SQLite database holding the contact records.
    logs_root:
        Diagnostic log files and the mutation journal.
    journal_path:
        Append-only JSONL journal of committed mutations.
    """

    data_root: Path
    book_root: Path
    db_path: Path
    logs_root: Path
    journal_path: Path


class SafetyViolationError(RuntimeError):
    """Raised when a book name or data root would escape the data root."""


def default_data_root() -> Path:
    """
    Resolve the default data root.

    Preference order:
    1) $ADDRESSBOOK_DATA_ROOT
    2) %LOCALAPPDATA%\\addressbook
    3) %APPDATA%\\addressbook
    4) $XDG_DATA_HOME/addressbook
    5) ~/.local/share/addressbook
    """
    explicit = os.environ.get(DATA_ROOT_ENV)
    if explicit:
        return Path(explicit)

    for var in ("LOCALAPPDATA", "APPDATA", "XDG_DATA_HOME"):
        value = os.environ.get(var)
        if value:
            return Path(value) / "addressbook"

    return Path.home() / ".local" / "share" / "addressbook"


def resolve_book_paths(book_name: str, data_root: Path | None = None) -> BookPaths:
    """
    Resolve all filesystem paths for a named address book.

    Parameters
    ----------
    book_name:
        Name of the book. Must be a non-empty, simple folder name.
    data_root:
        Optional override for the data root.

    Returns
    -------
    BookPaths
        Resolved paths. Nothing is created on disk.

    Raises
    ------
    SafetyViolationError
        If book_name is empty, contains path characters, or resolves outside
        the data root.
    """
    book = book_name.strip()
    if not book:
        raise SafetyViolationError("Book name must not be empty.")
    if any(ch in book for ch in r'\/:*?"<>|'):
        raise SafetyViolationError(f"Book name contains invalid characters: {book!r}")
    if book in {".", ".."}:
        raise SafetyViolationError("Book name must not be '.' or '..'.")

    root = (data_root or default_data_root()).resolve()
    book_root = (root / "books" / book).resolve()
    logs_root = book_root / "logs"

    try:
        book_root.relative_to(root)
    except ValueError as exc:
        raise SafetyViolationError(f"Book root escapes data root: {book_root}") from exc

    return BookPaths(
        data_root=root,
        book_root=book_root,
        db_path=book_root / "addressbook.sqlite",
        logs_root=logs_root,
        journal_path=logs_root / "journal.jsonl",
    )


def ensure_book_directories(paths: BookPaths) -> None:
    """Create the book and log folders if they do not exist yet."""
    for directory in (paths.data_root, paths.book_root, paths.logs_root):
        directory.mkdir(parents=True, exist_ok=True)


def book_paths_as_text(paths: BookPaths) -> str:
    """Render resolved paths as aligned ``name: value`` lines."""
    rows = [
        ("data_root", paths.data_root),
        ("book_root", paths.book_root),
        ("db_path", paths.db_path),
        ("logs_root", paths.logs_root),
        ("journal_path", paths.journal_path),
    ]
    width = max(len(name) for name, _ in rows)
    return "\n".join(f"{name.ljust(width)} : {value}" for name, value in rows)
