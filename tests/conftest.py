from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest

from addressbook_engine.contacts.sqlite_store import SqliteEntryStore


@pytest.fixture
def store(tmp_path: Path) -> Iterator[SqliteEntryStore]:
    with SqliteEntryStore(tmp_path / "addressbook.sqlite") as s:
        yield s
