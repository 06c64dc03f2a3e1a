"""
SQLite implementation of EntryStore.

This module owns the on-disk persistence format for contact records.

Transactions
------------
Each mutating method runs inside ``with connection:``, which commits when the
block completes and rolls back when anything inside it raises. Parent and
child rows are written in the same block, so a failure on any attached
sub-record discards the whole write.

Threading
---------
One connection is opened per store and kept until ``close()``. It is opened
with ``check_same_thread=False`` so the GUI can create the store on the main
thread and use it from its worker thread; an RLock serializes every call.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from pathlib import Path
from typing import Sequence

from ..errors import NotFoundError, PersistenceError, StoreClosedError, StoreOpenError
from ..journal import StoreJournal
from ..paths import BookPaths, ensure_book_directories, resolve_book_paths
from .api import UNSAVED_IDENTITY, ContactRecord, EntryStore, PostalAddress
from .schema import SCHEMA_V1

logger = logging.getLogger(__name__)


def _write_attached(conn: sqlite3.Connection, identity: int, record: ContactRecord) -> None:
    """Replace all attached sub-records of `identity` with those on `record`."""
    for table in ("addresses", "emails", "phones"):
        conn.execute(f"DELETE FROM {table} WHERE identity = ?", (identity,))

    for position, address in enumerate(record.addresses):
        conn.execute(
            "INSERT INTO addresses(identity, position, line1, line2, city, county) "
            "VALUES(?, ?, ?, ?, ?, ?)",
            (identity, position, address.line1, address.line2, address.city, address.county),
        )
    for position, email in enumerate(record.emails):
        conn.execute(
            "INSERT INTO emails(identity, position, address) VALUES(?, ?, ?)",
            (identity, position, email),
        )
    for position, phone in enumerate(record.phones):
        conn.execute(
            "INSERT INTO phones(identity, position, number) VALUES(?, ?, ?)",
            (identity, position, phone),
        )


def _read_record(conn: sqlite3.Connection, row: sqlite3.Row) -> ContactRecord:
    identity = int(row["identity"])
    addresses = conn.execute(
        "SELECT line1, line2, city, county FROM addresses WHERE identity = ? ORDER BY position",
        (identity,),
    ).fetchall()
    emails = conn.execute(
        "SELECT address FROM emails WHERE identity = ? ORDER BY position", (identity,)
    ).fetchall()
    phones = conn.execute(
        "SELECT number FROM phones WHERE identity = ? ORDER BY position", (identity,)
    ).fetchall()

    return ContactRecord(
        identity=identity,
        first_name=str(row["first_name"]),
        last_name=str(row["last_name"]),
        postal_code=str(row["postal_code"]),
        addresses=[
            PostalAddress(
                line1=str(a["line1"]),
                line2=str(a["line2"]),
                city=str(a["city"]),
                county=str(a["county"]),
            )
            for a in addresses
        ],
        emails=[str(e["address"]) for e in emails],
        phones=[str(p["number"]) for p in phones],
    )


class SqliteEntryStore(EntryStore):
    """
    SQLite-backed EntryStore.

    Parameters
    ----------
    db_path:
        Path to the SQLite database. Created if absent, along with its parent
        folder.
    journal:
        Optional journal receiving one event per committed mutation.

    Raises
    ------
    StoreOpenError
        If the database cannot be opened or its schema cannot be applied.
    """

    def __init__(self, db_path: Path, *, journal: StoreJournal | None = None) -> None:
        self._db_path = db_path
        self._journal = journal
        self._lock = threading.RLock()
        try:
            db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(db_path, check_same_thread=False)
        except (OSError, sqlite3.Error) as exc:
            raise StoreOpenError(f"Cannot open address book database {db_path}: {exc}") from exc

        try:
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys = ON")
            conn.executescript(SCHEMA_V1)
        except sqlite3.Error as exc:
            conn.close()
            raise StoreOpenError(f"Cannot initialize schema in {db_path}: {exc}") from exc

        self._conn: sqlite3.Connection | None = conn
        logger.info("Opened address book database %s", db_path)

    @property
    def db_path(self) -> Path:
        return self._db_path

    @property
    def closed(self) -> bool:
        return self._conn is None

    def __enter__(self) -> "SqliteEntryStore":
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()

    def _require_open(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreClosedError(f"Address book store {self._db_path} is closed")
        return self._conn

    def _record_event(self, event: str, identity: int, last_name: str) -> None:
        # Runs after commit; a journal failure must not turn a committed write into an error.
        if self._journal is None:
            return
        try:
            self._journal.append(event, {"identity": identity, "last_name": last_name})
        except OSError:
            logger.exception("Could not append %s for identity %s to journal", event, identity)

    def insert(self, record: ContactRecord) -> int:
        """See EntryStore.insert."""
        if record.identity != UNSAVED_IDENTITY:
            raise ValueError(f"insert requires a draft; record has identity {record.identity}")

        last_name = record.last_name.strip()

        with self._lock:
            conn = self._require_open()
            try:
                with conn:
                    cur = conn.execute(
                        "INSERT INTO contacts(first_name, last_name, postal_code) VALUES(?, ?, ?)",
                        (record.first_name, last_name, record.postal_code),
                    )
                    identity = int(cur.lastrowid)
                    _write_attached(conn, identity, record)
            except sqlite3.Error as exc:
                logger.warning("Insert of %r rolled back: %s", last_name, exc)
                raise PersistenceError(f"Insertion failed: {exc}") from exc

        logger.debug("Inserted contact %s", identity)
        self._record_event("contact_inserted", identity, last_name)
        return identity

    def update(self, record: ContactRecord) -> None:
        """See EntryStore.update."""
        if record.identity == UNSAVED_IDENTITY:
            raise ValueError("update requires a persisted record; identity is 0")

        last_name = record.last_name.strip()

        with self._lock:
            conn = self._require_open()
            try:
                with conn:
                    cur = conn.execute(
                        "UPDATE contacts SET first_name = ?, last_name = ?, postal_code = ? "
                        "WHERE identity = ?",
                        (record.first_name, last_name, record.postal_code, record.identity),
                    )
                    if cur.rowcount == 0:
                        raise NotFoundError(record.identity)
                    _write_attached(conn, record.identity, record)
            except sqlite3.Error as exc:
                logger.warning("Update of contact %s rolled back: %s", record.identity, exc)
                raise PersistenceError(f"Update failed: {exc}") from exc

        self._record_event("contact_updated", record.identity, last_name)

    def delete(self, identity: int) -> None:
        """See EntryStore.delete."""
        if identity == UNSAVED_IDENTITY:
            raise ValueError("delete requires a persisted identity; got 0")

        with self._lock:
            conn = self._require_open()
            try:
                with conn:
                    row = conn.execute(
                        "SELECT last_name FROM contacts WHERE identity = ?", (identity,)
                    ).fetchone()
                    if row is None:
                        raise NotFoundError(identity)
                    conn.execute("DELETE FROM contacts WHERE identity = ?", (identity,))
            except sqlite3.Error as exc:
                logger.warning("Delete of contact %s rolled back: %s", identity, exc)
                raise PersistenceError(f"Deletion failed: {exc}") from exc

        self._record_event("contact_deleted", identity, str(row["last_name"]))

    def find_by_last_name(self, name: str) -> Sequence[ContactRecord]:
        """
        See EntryStore.find_by_last_name.

        Matching is exact and case-insensitive (SQLite NOCASE, ASCII folding)
        after stripping surrounding whitespace. Stored last names are stripped
        the same way, so a blank query finds contacts saved without one.
        """
        query = name.strip()

        with self._lock:
            conn = self._require_open()
            try:
                rows = conn.execute(
                    "SELECT identity, first_name, last_name, postal_code FROM contacts "
                    "WHERE last_name = ? ORDER BY last_name, first_name, identity",
                    (query,),
                ).fetchall()
                return [_read_record(conn, row) for row in rows]
            except sqlite3.Error as exc:
                raise PersistenceError(f"Search failed: {exc}") from exc

    def get(self, identity: int) -> ContactRecord:
        """See EntryStore.get."""
        with self._lock:
            conn = self._require_open()
            try:
                row = conn.execute(
                    "SELECT identity, first_name, last_name, postal_code FROM contacts "
                    "WHERE identity = ?",
                    (identity,),
                ).fetchone()
                if row is None:
                    raise NotFoundError(identity)
                return _read_record(conn, row)
            except sqlite3.Error as exc:
                raise PersistenceError(f"Read failed: {exc}") from exc

    def count(self) -> int:
        """See EntryStore.count."""
        with self._lock:
            conn = self._require_open()
            try:
                return int(conn.execute("SELECT COUNT(*) FROM contacts").fetchone()[0])
            except sqlite3.Error as exc:
                raise PersistenceError(f"Count failed: {exc}") from exc

    def close(self) -> None:
        """See EntryStore.close."""
        with self._lock:
            if self._conn is None:
                return
            self._conn.close()
            self._conn = None
        logger.info("Closed address book database %s", self._db_path)


def open_entry_store(
    book_name: str,
    data_root: Path | None = None,
    *,
    journal_enabled: bool = True,
) -> SqliteEntryStore:
    """
    Open the store for a named book, creating its folders if needed.

    Parameters
    ----------
    book_name:
        Name of the address book.
    data_root:
        Optional override for the data root.
    journal_enabled:
        Attach a StoreJournal at the book's journal path.

    Returns
    -------
    SqliteEntryStore
        Open store. Use it as a context manager to guarantee close().

    Raises
    ------
    SafetyViolationError
        If book_name is unsafe.
    StoreOpenError
        If the database cannot be opened.
    """
    paths: BookPaths = resolve_book_paths(book_name=book_name, data_root=data_root)
    try:
        ensure_book_directories(paths)
    except OSError as exc:
        raise StoreOpenError(f"Cannot create address book folders under {paths.book_root}: {exc}") from exc

    journal = StoreJournal(paths.journal_path) if journal_enabled else None
    return SqliteEntryStore(paths.db_path, journal=journal)
