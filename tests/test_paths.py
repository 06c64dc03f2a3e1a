from __future__ import annotations

from pathlib import Path

import pytest

from addressbook_engine.paths import (
    SafetyViolationError,
    book_paths_as_text,
    default_data_root,
    ensure_book_directories,
    resolve_book_paths,
)

_ROOT_VARS = ("ADDRESSBOOK_DATA_ROOT", "LOCALAPPDATA", "APPDATA", "XDG_DATA_HOME")


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for var in _ROOT_VARS:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


def test_default_data_root_prefers_explicit_override(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    clean_env.setenv("ADDRESSBOOK_DATA_ROOT", str(tmp_path / "explicit"))
    clean_env.setenv("LOCALAPPDATA", str(tmp_path / "Local"))

    assert default_data_root() == tmp_path / "explicit"


def test_default_data_root_prefers_local_appdata(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    clean_env.setenv("LOCALAPPDATA", str(tmp_path / "Local"))
    clean_env.setenv("APPDATA", str(tmp_path / "Roaming"))

    assert default_data_root() == tmp_path / "Local" / "addressbook"


def test_default_data_root_falls_back_to_xdg(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    clean_env.setenv("XDG_DATA_HOME", str(tmp_path / "share"))

    assert default_data_root() == tmp_path / "share" / "addressbook"


def test_default_data_root_falls_back_to_home(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    clean_env.setenv("HOME", str(tmp_path))

    assert default_data_root() == tmp_path / ".local" / "share" / "addressbook"


@pytest.mark.parametrize("name", ["", "   ", "a/b", r"a\b", "..", ".", "c:", "what?"])
def test_resolve_book_paths_rejects_unsafe_names(name: str, tmp_path: Path) -> None:
    with pytest.raises(SafetyViolationError):
        resolve_book_paths(name, data_root=tmp_path)


def test_resolve_and_ensure_book_paths(tmp_path: Path) -> None:
    paths = resolve_book_paths(" work ", data_root=tmp_path)
    ensure_book_directories(paths)

    assert paths.book_root == (tmp_path / "books" / "work").resolve()
    assert paths.db_path.parent == paths.book_root
    assert paths.journal_path.parent == paths.logs_root
    assert paths.book_root.is_dir()
    assert paths.logs_root.is_dir()
    assert not paths.db_path.exists()


def test_book_paths_as_text_lists_every_path(tmp_path: Path) -> None:
    text = book_paths_as_text(resolve_book_paths("work", data_root=tmp_path))
    for key in ("data_root", "book_root", "db_path", "logs_root", "journal_path"):
        assert key in text
