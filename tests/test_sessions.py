from __future__ import annotations

import pytest

from addressbook_engine.contacts.api import ContactRecord
from addressbook_engine.contacts.sessions import (
    InvalidTransitionError,
    SessionState,
    SessionTracker,
)


def test_new_session_starts_as_draft_and_enables_save_only() -> None:
    tracker = SessionTracker()
    session = tracker.open()
    tracker.activate(session)

    assert session.state is SessionState.DRAFT
    assert tracker.can_save
    assert not tracker.can_delete


def test_session_for_stored_record_starts_persisted_and_enables_delete() -> None:
    tracker = SessionTracker()
    session = tracker.open(ContactRecord(identity=3, last_name="Nolan"))
    tracker.activate(session)

    assert session.state is SessionState.PERSISTED
    assert tracker.can_delete


def test_no_active_session_disables_save_and_delete() -> None:
    tracker = SessionTracker()
    session = tracker.open()
    tracker.activate(session)
    tracker.deactivate(session)

    assert tracker.active is None
    assert not tracker.can_save
    assert not tracker.can_delete


def test_closing_a_draft_discards_it() -> None:
    tracker = SessionTracker()
    session = tracker.open()
    tracker.activate(session)
    tracker.close(session)

    assert session.state is SessionState.DISCARDED
    assert tracker.active is None
    assert tracker.sessions() == []


def test_deleting_a_draft_session_is_not_a_valid_transition() -> None:
    session = SessionTracker().open()
    with pytest.raises(InvalidTransitionError):
        session.mark_deleted()
    assert session.state is SessionState.DRAFT


def test_terminal_session_cannot_be_saved() -> None:
    session = SessionTracker().open(ContactRecord(identity=1))
    session.mark_deleted()
    with pytest.raises(InvalidTransitionError):
        session.mark_saved()


def test_only_one_operation_in_flight_per_identity() -> None:
    tracker = SessionTracker()
    first = tracker.open(ContactRecord(identity=5))
    second = tracker.open(ContactRecord(identity=5))
    other = tracker.open(ContactRecord(identity=6))

    assert tracker.try_begin(first)
    assert not tracker.try_begin(first)
    assert not tracker.try_begin(second)
    assert tracker.try_begin(other)

    tracker.finish(first)
    assert tracker.try_begin(second)


def test_in_flight_session_disables_actions_until_finished() -> None:
    tracker = SessionTracker()
    session = tracker.open(ContactRecord(identity=9))
    tracker.activate(session)

    assert tracker.try_begin(session)
    assert not tracker.can_save
    assert not tracker.can_delete

    tracker.finish(session)
    assert tracker.can_save


def test_draft_guard_survives_identity_assignment_during_insert() -> None:
    tracker = SessionTracker()
    session = tracker.open()

    assert tracker.try_begin(session)
    session.record.assign_identity(11)
    tracker.finish(session)

    assert tracker.try_begin(session)


def test_identity_cannot_be_reassigned() -> None:
    record = ContactRecord()
    record.assign_identity(4)
    record.assign_identity(4)
    with pytest.raises(ValueError):
        record.assign_identity(5)
    with pytest.raises(ValueError):
        ContactRecord().assign_identity(0)


def test_activate_requires_open_session() -> None:
    tracker = SessionTracker()
    session = tracker.open()
    tracker.close(session)
    with pytest.raises(KeyError):
        tracker.activate(session)
