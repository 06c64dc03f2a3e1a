"""
Entry window: one MDI sub-window per edit session.

The window shows the fields of the session's ContactRecord and writes edits
back into that same record object when asked (`apply_to_record`). It never
talks to the store; the main window routes Save/Delete through the adapter.
"""

from __future__ import annotations

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QFormLayout,
    QGroupBox,
    QLineEdit,
    QMdiSubWindow,
    QPlainTextEdit,
    QVBoxLayout,
    QWidget,
)

from addressbook_engine.contacts.api import PostalAddress
from addressbook_engine.contacts.sessions import EditSession


def _lines(edit: QPlainTextEdit) -> list[str]:
    return [line.strip() for line in edit.toPlainText().splitlines() if line.strip()]


class EntryWindow(QMdiSubWindow):
    """
    Internal frame editing one ContactRecord.

    Signals
    -------
    closed(EditSession)
        Emitted once when the window closes, saved or not.
    """

    closed = Signal(object)

    def __init__(self, session: EditSession) -> None:
        super().__init__()
        self.session = session
        self.resize(420, 460)

        body = QWidget()
        root = QVBoxLayout(body)
        root.setContentsMargins(10, 10, 10, 10)

        person = QGroupBox("Person")
        person_form = QFormLayout(person)
        self.first_name_edit = QLineEdit()
        self.last_name_edit = QLineEdit()
        self.postal_code_edit = QLineEdit()
        self.postal_code_edit.setPlaceholderText("Example: A65 F4E2")
        self.postal_code_edit.setMaxLength(8)
        person_form.addRow("First name:", self.first_name_edit)
        person_form.addRow("Last name:", self.last_name_edit)
        person_form.addRow("Postal code:", self.postal_code_edit)
        root.addWidget(person)

        address = QGroupBox("Address")
        address_form = QFormLayout(address)
        self.line1_edit = QLineEdit()
        self.line2_edit = QLineEdit()
        self.city_edit = QLineEdit()
        self.county_edit = QLineEdit()
        address_form.addRow("Address 1:", self.line1_edit)
        address_form.addRow("Address 2:", self.line2_edit)
        address_form.addRow("City:", self.city_edit)
        address_form.addRow("County:", self.county_edit)
        root.addWidget(address)

        contact = QGroupBox("Email and phone (one per line)")
        contact_form = QFormLayout(contact)
        self.emails_edit = QPlainTextEdit()
        self.phones_edit = QPlainTextEdit()
        for edit in (self.emails_edit, self.phones_edit):
            edit.setFixedHeight(56)
        contact_form.addRow("Email:", self.emails_edit)
        contact_form.addRow("Phone:", self.phones_edit)
        root.addWidget(contact)

        self.setWidget(body)
        self.load_from_record()

    def load_from_record(self) -> None:
        """Populate the form from the session's record."""
        record = self.session.record
        self.first_name_edit.setText(record.first_name)
        self.last_name_edit.setText(record.last_name)
        self.postal_code_edit.setText(record.postal_code)

        # The form edits the first address; any further ones are kept as-is.
        first = record.addresses[0] if record.addresses else PostalAddress(line1="")
        self.line1_edit.setText(first.line1)
        self.line2_edit.setText(first.line2)
        self.city_edit.setText(first.city)
        self.county_edit.setText(first.county)

        self.emails_edit.setPlainText("\n".join(record.emails))
        self.phones_edit.setPlainText("\n".join(record.phones))
        self.refresh_title()

    def apply_to_record(self) -> None:
        """Write the form fields into the session's record in place."""
        record = self.session.record
        record.first_name = self.first_name_edit.text().strip()
        record.last_name = self.last_name_edit.text().strip()
        record.postal_code = self.postal_code_edit.text()

        line1 = self.line1_edit.text().strip()
        extra = record.addresses[1:]
        if line1:
            edited = PostalAddress(
                line1=line1,
                line2=self.line2_edit.text().strip(),
                city=self.city_edit.text().strip(),
                county=self.county_edit.text().strip(),
            )
            record.addresses = [edited, *extra]
        else:
            record.addresses = list(extra)

        record.emails = _lines(self.emails_edit)
        record.phones = _lines(self.phones_edit)

    def refresh_title(self) -> None:
        record = self.session.record
        if record.is_persisted:
            self.setWindowTitle(f"{record.display_name()} (#{record.identity})")
        else:
            self.setWindowTitle("New entry")

    def set_busy(self, busy: bool) -> None:
        """Freeze the form while a save or delete for this session is in flight."""
        self.widget().setEnabled(not busy)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        """Report the close so the session can be ended."""
        if self.session.in_flight:
            event.ignore()
            return
        try:
            self.closed.emit(self.session)
        finally:
            super().closeEvent(event)
