"""
Address book GUI app.

A main window with a File menu and toolbar (New, Save, Delete, Search, Exit)
over an MDI desktop. Each entry window is one edit session; Save and Delete
act on the active one and are enabled from SessionTracker state.
"""

from __future__ import annotations

import logging
import signal
import sys
from pathlib import Path

from PySide6.QtCore import QTimer
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import (
    QApplication,
    QInputDialog,
    QMainWindow,
    QMdiArea,
    QMdiSubWindow,
    QMessageBox,
    QToolBar,
)

from addressbook_engine.contacts.api import ContactRecord, EntryStore
from addressbook_engine.contacts.controller import DeleteResult, SaveResult
from addressbook_engine.contacts.sessions import EditSession, SessionTracker
from addressbook_engine.contacts.sqlite_store import open_entry_store
from addressbook_engine.errors import StoreOpenError, ValidationError
from addressbook_engine.logging_config import setup_logging
from addressbook_engine.paths import SafetyViolationError, resolve_book_paths
from addressbook_engine.settings_store import load_settings
from gui.adapters.entry_store_adapter import EntryStoreAdapter
from gui.entry_window import EntryWindow

logger = logging.getLogger(__name__)


class AddressBookWindow(QMainWindow):
    """
    Main window for the address book.

    Responsibilities
    ----------------
    - Host entry windows on an MDI desktop, one per edit session
    - Route Save/Delete/Search through the store adapter
    - Produce every user-visible message for engine results
    - Stop the worker thread on close
    """

    def __init__(self, store: EntryStore, *, book_name: str = "default") -> None:
        super().__init__()
        self.setWindowTitle(f"Address Book ({book_name})")

        self._tracker = SessionTracker()
        self._windows: dict[int, EntryWindow] = {}

        self._store = EntryStoreAdapter(store)
        self._store.saved.connect(self._on_saved)
        self._store.deleted.connect(self._on_deleted)
        self._store.found.connect(self._on_found)
        self._store.failed.connect(self._on_failed)

        self.desktop = QMdiArea()
        self.desktop.subWindowActivated.connect(self._on_sub_window_activated)
        self.setCentralWidget(self.desktop)

        self.new_action = QAction("&New", self)
        self.new_action.setShortcut(QKeySequence.New)
        self.new_action.setStatusTip("Add a new address book entry")
        self.new_action.triggered.connect(self._new_entry)

        self.save_action = QAction("&Save", self)
        self.save_action.setShortcut(QKeySequence.Save)
        self.save_action.setStatusTip("Save an address book entry")
        self.save_action.triggered.connect(self._save_active)

        self.delete_action = QAction("&Delete", self)
        self.delete_action.setStatusTip("Delete an address book entry")
        self.delete_action.triggered.connect(self._delete_active)

        self.search_action = QAction("Sea&rch", self)
        self.search_action.setShortcut(QKeySequence.Find)
        self.search_action.setStatusTip("Search for an address book entry")
        self.search_action.triggered.connect(self._search)

        self.exit_action = QAction("E&xit", self)
        self.exit_action.setStatusTip("Terminate the program")
        self.exit_action.triggered.connect(self.close)

        toolbar = QToolBar("Entries")
        for action in (self.new_action, self.save_action, self.delete_action):
            toolbar.addAction(action)
        toolbar.addSeparator()
        toolbar.addAction(self.search_action)
        self.addToolBar(toolbar)

        file_menu = self.menuBar().addMenu("&File")
        for action in (self.new_action, self.save_action, self.delete_action):
            file_menu.addAction(action)
        file_menu.addSeparator()
        file_menu.addAction(self.search_action)
        file_menu.addSeparator()
        file_menu.addAction(self.exit_action)

        self.statusBar()
        self._sync_actions()

    # ---------- Sessions ----------

    def _open_entry_window(self, record: ContactRecord | None) -> EntryWindow:
        session = self._tracker.open(record)
        window = EntryWindow(session)
        window.closed.connect(self._on_entry_closed)
        self._windows[session.session_id] = window
        self.desktop.addSubWindow(window)
        window.show()
        return window

    def _active_entry_window(self) -> EntryWindow | None:
        sub = self.desktop.activeSubWindow()
        return sub if isinstance(sub, EntryWindow) else None

    def _on_sub_window_activated(self, sub: QMdiSubWindow | None) -> None:
        if isinstance(sub, EntryWindow) and sub.session.session_id in self._windows:
            self._tracker.activate(sub.session)
        elif self._tracker.active is not None:
            self._tracker.deactivate(self._tracker.active)
        self._sync_actions()

    def _on_entry_closed(self, session: object) -> None:
        if not isinstance(session, EditSession):
            logger.warning("Ignoring close notification for %r", session)
            return
        self._windows.pop(session.session_id, None)
        self._tracker.close(session)
        self._sync_actions()

    def _sync_actions(self) -> None:
        self.save_action.setEnabled(self._tracker.can_save)
        self.delete_action.setEnabled(self._tracker.can_delete)

    def _finish(self, session: EditSession) -> EntryWindow | None:
        self._tracker.finish(session)
        window = self._windows.get(session.session_id)
        if window is not None:
            window.set_busy(False)
        self._sync_actions()
        return window

    # ---------- Actions ----------

    def _new_entry(self) -> None:
        self._open_entry_window(None)

    def _save_active(self) -> None:
        window = self._active_entry_window()
        if window is None:
            return

        window.apply_to_record()
        if not self._tracker.try_begin(window.session):
            self.statusBar().showMessage("This entry is already being saved or deleted.", 4000)
            return

        window.set_busy(True)
        self._sync_actions()
        self._store.request_save.emit(window.session)

    def _delete_active(self) -> None:
        window = self._active_entry_window()
        if window is None:
            return

        if not self._tracker.try_begin(window.session):
            self.statusBar().showMessage("This entry is already being saved or deleted.", 4000)
            return

        window.set_busy(True)
        self._sync_actions()
        self._store.request_delete.emit(window.session)

    def _search(self) -> None:
        text, ok = QInputDialog.getText(self, "Search", "Enter last name")
        if not ok:
            return
        self._store.request_search.emit(text)

    # ---------- Results ----------

    def _on_saved(self, session: object, result: object) -> None:
        if not isinstance(session, EditSession) or not isinstance(result, SaveResult):
            logger.warning("Ignoring unexpected save result %r for %r", result, session)
            return
        window = self._finish(session)

        if result.ok:
            QMessageBox.information(self, "Address Book", result.message)
            if window is not None:
                window.close()
            return

        if isinstance(result.error, ValidationError):
            QMessageBox.critical(self, "Wrong format", result.message)
        else:
            QMessageBox.critical(self, "Save failed", result.message)

    def _on_deleted(self, session: object, result: object) -> None:
        if not isinstance(session, EditSession) or not isinstance(result, DeleteResult):
            logger.warning("Ignoring unexpected delete result %r for %r", result, session)
            return
        window = self._finish(session)

        if result.ok:
            QMessageBox.information(self, "Address Book", result.message)
            if window is not None:
                window.close()
            return

        if result.error is None:
            QMessageBox.information(self, "Address Book", result.message)
        else:
            QMessageBox.critical(self, "Deletion failed", result.message)

    def _on_found(self, last_name: str, records: object) -> None:
        if not isinstance(records, list):
            logger.warning("Ignoring unexpected search result %r", records)
            return
        if not records:
            QMessageBox.information(
                self,
                "Search",
                f'Entry with last name "{last_name}" not found in address book',
            )
            return
        for record in records:
            self._open_entry_window(record)

    def _on_failed(self, session: object, message: str) -> None:
        if isinstance(session, EditSession):
            self._finish(session)
        QMessageBox.critical(self, "Address Book Error", message)

    def shutdown(self) -> None:
        """Stop the worker thread. Safe to call more than once."""
        self._store.shutdown()

    def closeEvent(self, event) -> None:  # type: ignore[override]
        """Stop the worker thread; the store itself is closed by main()."""
        try:
            self.shutdown()
        finally:
            super().closeEvent(event)


def _install_termination_handlers(app: QApplication) -> QTimer:
    """
    Quit the event loop on SIGINT/SIGTERM so main() can close the store.

    Python signal handlers only run when the interpreter regains control, so a
    short idle timer is kept ticking while the Qt loop runs.
    """
    for signum in (signal.SIGINT, signal.SIGTERM):
        signal.signal(signum, lambda *_args: app.quit())
    timer = QTimer()
    timer.timeout.connect(lambda: None)
    timer.start(250)
    return timer


def main(book_name: str | None = None, data_root: Path | None = None) -> int:
    """
    Run the address book GUI.

    Parameters
    ----------
    book_name:
        Book to open. Defaults to the book_name setting.
    data_root:
        Optional override for the data root.

    Returns
    -------
    int
        Qt application exit code, or 1 if the store could not be opened.
    """
    settings = load_settings(data_root=data_root)
    book = book_name or settings.book_name
    app = QApplication.instance() or QApplication(sys.argv)

    try:
        paths = resolve_book_paths(book, data_root=data_root)
        setup_logging(settings.log_level, logfile=paths.logs_root / "addressbook.log")
        store = open_entry_store(book, data_root, journal_enabled=settings.journal_enabled)
    except (StoreOpenError, SafetyViolationError, OSError) as exc:
        logger.critical("Cannot open address book %r: %s", book, exc)
        QMessageBox.critical(None, "Address Book", f"Cannot open the address book:\n{exc}")
        return 1

    with store:
        window = AddressBookWindow(store, book_name=book)
        screen = app.primaryScreen()
        if screen is not None:
            window.setGeometry(screen.availableGeometry().adjusted(100, 100, -100, -100))
        _keepalive = _install_termination_handlers(app)
        window.show()
        try:
            return app.exec()
        finally:
            window.shutdown()


if __name__ == "__main__":
    raise SystemExit(main())
