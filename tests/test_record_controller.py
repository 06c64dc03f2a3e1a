from __future__ import annotations

from typing import Sequence

import pytest

from addressbook_engine.contacts.api import ContactRecord
from addressbook_engine.contacts.controller import (
    DeleteReason,
    OperationKind,
    RecordController,
)
from addressbook_engine.contacts.sessions import SessionState, SessionTracker
from addressbook_engine.contacts.sqlite_store import SqliteEntryStore
from addressbook_engine.errors import NotFoundError, PersistenceError, ValidationError
from contact_factory import make_record


class RecordingStore:
    """EntryStore double that records calls and can be told to fail."""

    def __init__(self, *, fail_with: Exception | None = None) -> None:
        self.calls: list[tuple[str, object]] = []
        self.fail_with = fail_with
        self.next_identity = 7

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def insert(self, record: ContactRecord) -> int:
        self.calls.append(("insert", record.identity))
        self._maybe_fail()
        return self.next_identity

    def update(self, record: ContactRecord) -> None:
        self.calls.append(("update", record.identity))
        self._maybe_fail()

    def delete(self, identity: int) -> None:
        self.calls.append(("delete", identity))
        self._maybe_fail()

    def find_by_last_name(self, name: str) -> Sequence[ContactRecord]:
        self.calls.append(("find", name))
        return []

    def get(self, identity: int) -> ContactRecord:
        raise NotFoundError(identity)

    def count(self) -> int:
        return 0

    def close(self) -> None:
        self.calls.append(("close", None))


def test_delete_of_draft_is_rejected_without_store_calls() -> None:
    store = RecordingStore()
    result = RecordController(store).delete(ContactRecord(last_name="Draft"))

    assert not result.ok
    assert result.reason is DeleteReason.NOT_YET_PERSISTED
    assert store.calls == []
    assert "saved before they can be deleted" in result.message


def test_invalid_postal_code_short_circuits_without_store_calls() -> None:
    store = RecordingStore()
    draft = make_record(postal_code="A65F4E2")

    result = RecordController(store).save(draft)

    assert not result.ok
    assert result.operation is OperationKind.INSERT
    assert isinstance(result.error, ValidationError)
    assert store.calls == []
    assert draft.identity == 0


def test_postal_code_is_validated_on_every_save() -> None:
    store = RecordingStore()
    controller = RecordController(store)
    tracker = SessionTracker()
    session = tracker.open(make_record())

    assert controller.save(session.record, session).ok
    session.record.postal_code = "bad"
    result = controller.save(session.record, session)

    assert not result.ok
    assert result.operation is OperationKind.UPDATE
    assert isinstance(result.error, ValidationError)
    assert session.save_attempts == 2
    assert store.calls == [("insert", 0)]


def test_save_of_draft_inserts_and_assigns_identity() -> None:
    store = RecordingStore()
    draft = make_record()

    result = RecordController(store).save(draft)

    assert result.ok
    assert result.operation is OperationKind.INSERT
    assert result.message == "Insertion successful"
    assert draft.identity == 7


def test_save_of_persisted_record_updates_without_new_identity() -> None:
    store = RecordingStore()
    record = make_record(identity=12)

    result = RecordController(store).save(record)

    assert result.ok
    assert result.operation is OperationKind.UPDATE
    assert result.message == "Update successful"
    assert record.identity == 12
    assert store.calls == [("update", 12)]


def test_store_failure_on_insert_is_carried_and_draft_stays_unsaved() -> None:
    failure = PersistenceError("disk full")
    store = RecordingStore(fail_with=failure)
    draft = make_record()

    result = RecordController(store).save(draft)

    assert not result.ok
    assert result.error is failure
    assert draft.identity == 0
    assert result.message == "disk full"


def test_not_found_on_update_is_carried() -> None:
    store = RecordingStore(fail_with=NotFoundError(3))
    result = RecordController(store).save(make_record(identity=3))

    assert not result.ok
    assert isinstance(result.error, NotFoundError)


@pytest.mark.parametrize(
    ("failure", "reason"),
    [
        (NotFoundError(4), DeleteReason.NOT_FOUND),
        (PersistenceError("locked"), DeleteReason.STORE_FAILURE),
    ],
)
def test_delete_failures_map_to_reasons(failure: PersistenceError, reason: DeleteReason) -> None:
    store = RecordingStore(fail_with=failure)
    result = RecordController(store).delete(make_record(identity=4))

    assert not result.ok
    assert result.reason is reason
    assert result.error is failure
    assert result.detail == str(failure)


def test_session_walks_draft_persisted_deleted(store: SqliteEntryStore) -> None:
    controller = RecordController(store)
    tracker = SessionTracker()
    session = tracker.open()
    session.record.last_name = "Doyle"

    assert session.state is SessionState.DRAFT
    assert controller.save(session.record, session).ok
    assert session.state is SessionState.PERSISTED
    identity = session.record.identity

    session.record.first_name = "Eoin"
    assert controller.save(session.record, session).ok
    assert session.record.identity == identity
    assert store.get(identity).first_name == "Eoin"

    assert controller.delete(session.record, session).ok
    assert session.state is SessionState.DELETED
    assert store.count() == 0


def test_delete_of_absent_identity_against_real_store(store: SqliteEntryStore) -> None:
    controller = RecordController(store)
    assert controller.save(make_record()).ok
    before = store.count()

    result = controller.delete(make_record(identity=999))

    assert not result.ok
    assert result.reason is DeleteReason.NOT_FOUND
    assert store.count() == before


def test_failed_insert_against_real_store_leaves_search_empty(store: SqliteEntryStore) -> None:
    controller = RecordController(store)
    draft = make_record("Keane", emails=[""])

    result = controller.save(draft)

    assert not result.ok
    assert isinstance(result.error, PersistenceError)
    assert draft.identity == 0
    assert list(controller.search("Keane")) == []


def test_search_delegates_to_store() -> None:
    store = RecordingStore()
    assert list(RecordController(store).search("Ryan")) == []
    assert store.calls == [("find", "Ryan")]


def test_saved_contact_without_last_name_is_searchable(store: SqliteEntryStore) -> None:
    controller = RecordController(store)
    draft = ContactRecord(first_name="Anon")

    assert controller.save(draft).ok
    assert [r.identity for r in controller.search("")] == [draft.identity]
