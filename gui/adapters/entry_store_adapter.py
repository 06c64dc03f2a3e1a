"""Qt adapter that runs RecordController calls on a worker thread.

Threading model
--------------
- A single worker QObject lives on a dedicated QThread.
- The worker owns the RecordController; the store itself is opened by the
  application on the main thread (so a startup failure is reported before the
  window appears) and closed by the application after the thread stops.
- The GUI communicates with the worker via queued Qt signals, so every store
  operation runs serialized, one at a time.

Edit sessions are passed by reference. The GUI disables a session's window
while its request is in flight, so the worker is the only writer of that
session's record until the result signal arrives.
"""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, Qt, QThread, Signal, Slot

from addressbook_engine.contacts.api import EntryStore
from addressbook_engine.contacts.controller import RecordController
from addressbook_engine.contacts.sessions import EditSession
from addressbook_engine.errors import PersistenceError

logger = logging.getLogger(__name__)


class EntryStoreWorker(QObject):
    """Worker that owns the RecordController and runs in a background thread."""

    saved = Signal(object, object)  # EditSession, SaveResult
    deleted = Signal(object, object)  # EditSession, DeleteResult
    found = Signal(str, object)  # query, list[ContactRecord]
    failed = Signal(object, str)  # EditSession | None, message

    def __init__(self, store: EntryStore) -> None:
        super().__init__()
        self._controller = RecordController(store)

    @Slot(object)
    def save(self, session: object) -> None:
        """Save the session's record and emit the result."""
        if not isinstance(session, EditSession):
            logger.warning("Ignoring save request for %r", session)
            return
        try:
            result = self._controller.save(session.record, session)
        except Exception as e:
            logger.exception("Unexpected failure saving session %s", session.session_id)
            self.failed.emit(session, str(e))
            return
        self.saved.emit(session, result)

    @Slot(object)
    def delete(self, session: object) -> None:
        """Delete the session's record and emit the result."""
        if not isinstance(session, EditSession):
            logger.warning("Ignoring delete request for %r", session)
            return
        try:
            result = self._controller.delete(session.record, session)
        except Exception as e:
            logger.exception("Unexpected failure deleting session %s", session.session_id)
            self.failed.emit(session, str(e))
            return
        self.deleted.emit(session, result)

    @Slot(str)
    def search(self, last_name: str) -> None:
        """Search by last name and emit the matching records."""
        try:
            records = list(self._controller.search(last_name))
        except PersistenceError as e:
            self.failed.emit(None, str(e))
            return
        self.found.emit(last_name, records)


class EntryStoreAdapter(QObject):
    """Qt adapter that marshals RecordController calls onto a worker thread."""

    # Requests (GUI emits these; wired as queued connections to worker slots)
    request_save = Signal(object)
    request_delete = Signal(object)
    request_search = Signal(str)

    # Results (worker emits; adapter forwards)
    saved = Signal(object, object)
    deleted = Signal(object, object)
    found = Signal(str, object)
    failed = Signal(object, str)

    def __init__(self, store: EntryStore) -> None:
        super().__init__()

        self._thread = QThread()
        self._worker = EntryStoreWorker(store)
        self._worker.moveToThread(self._thread)

        self.request_save.connect(self._worker.save, type=Qt.ConnectionType.QueuedConnection)
        self.request_delete.connect(self._worker.delete, type=Qt.ConnectionType.QueuedConnection)
        self.request_search.connect(self._worker.search, type=Qt.ConnectionType.QueuedConnection)

        self._worker.saved.connect(self.saved)
        self._worker.deleted.connect(self.deleted)
        self._worker.found.connect(self.found)
        self._worker.failed.connect(self.failed)

        self._thread.start()

    def shutdown(self) -> None:
        """Stop the worker thread cleanly. Pending requests finish first."""
        if self._thread.isRunning():
            self._thread.quit()
            self._thread.wait()
