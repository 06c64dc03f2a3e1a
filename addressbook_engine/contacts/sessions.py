"""
Edit sessions and the active-session tracker.

An edit session is the lifetime of one window editing one ContactRecord. The
tracker replaces shared "is a window active" UI flags with explicit state:
the presentation layer asks it whether Save and Delete are currently allowed.

Session state machine
---------------------
    DRAFT     --save ok-->    PERSISTED
    PERSISTED --save ok-->    PERSISTED
    PERSISTED --delete ok-->  DELETED     (terminal)
    DRAFT     --closed-->     DISCARDED   (terminal, no store effect)
    PERSISTED --closed-->     DISCARDED   (terminal, no store effect)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .api import ContactRecord


class SessionState(str, Enum):
    DRAFT = "draft"
    PERSISTED = "persisted"
    DELETED = "deleted"
    DISCARDED = "discarded"


TERMINAL_STATES = frozenset({SessionState.DELETED, SessionState.DISCARDED})


class InvalidTransitionError(RuntimeError):
    """Raised when a session is asked to make a transition its state does not allow."""


@dataclass(eq=False, slots=True)
class EditSession:
    """
    State of one edit window.

    Attributes
    ----------
    session_id:
        Tracker-assigned identifier, unique per process.
    record:
        The draft or persisted record being edited (mutated in place).
    save_attempts:
        Number of save requests made in this session.
    state:
        Current lifecycle state, derived from the record on creation.
    """

    session_id: int
    record: ContactRecord
    save_attempts: int = 0
    state: SessionState = field(init=False)
    in_flight: bool = field(default=False, init=False)
    _flight_identity: int = field(default=0, init=False, repr=False)

    def __post_init__(self) -> None:
        self.state = SessionState.PERSISTED if self.record.is_persisted else SessionState.DRAFT

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def note_save_attempt(self) -> None:
        self.save_attempts += 1

    def mark_saved(self) -> None:
        if self.is_terminal:
            raise InvalidTransitionError(f"Cannot save a session in state {self.state.value}")
        self.state = SessionState.PERSISTED

    def mark_deleted(self) -> None:
        if self.is_terminal or not self.record.is_persisted:
            raise InvalidTransitionError(f"Cannot delete a session in state {self.state.value}")
        self.state = SessionState.DELETED

    def discard(self) -> None:
        """Close the session without touching the store."""
        if not self.is_terminal:
            self.state = SessionState.DISCARDED


class SessionTracker:
    """
    Registry of open edit sessions and the currently active one.

    Also enforces that at most one save or delete is in flight per record
    identity. Drafts (identity 0) are guarded per session only.
    """

    def __init__(self) -> None:
        self._sessions: dict[int, EditSession] = {}
        self._active: EditSession | None = None
        self._busy_identities: set[int] = set()
        self._next_id = 1

    def open(self, record: ContactRecord | None = None) -> EditSession:
        """Start a session for `record` (a fresh draft when None)."""
        session = EditSession(session_id=self._next_id, record=record or ContactRecord())
        self._next_id += 1
        self._sessions[session.session_id] = session
        return session

    def close(self, session: EditSession) -> None:
        """End a session. Unsaved edits are discarded; the store is not touched."""
        session.discard()
        self._sessions.pop(session.session_id, None)
        if self._active is session:
            self._active = None

    def get(self, session_id: int) -> EditSession | None:
        return self._sessions.get(session_id)

    def sessions(self) -> list[EditSession]:
        return list(self._sessions.values())

    def activate(self, session: EditSession) -> None:
        if session.session_id not in self._sessions:
            raise KeyError(f"Session {session.session_id} is not open")
        self._active = session

    def deactivate(self, session: EditSession) -> None:
        if self._active is session:
            self._active = None

    @property
    def active(self) -> EditSession | None:
        return self._active

    @property
    def can_save(self) -> bool:
        session = self._active
        return session is not None and not session.is_terminal and not session.in_flight

    @property
    def can_delete(self) -> bool:
        session = self._active
        return self.can_save and session is not None and session.record.is_persisted

    def try_begin(self, session: EditSession) -> bool:
        """
        Mark a save or delete as in flight for `session`.

        Returns
        -------
        bool
            False if this session, or another session editing the same
            persisted identity, already has an operation in flight.
        """
        if session.in_flight or session.is_terminal:
            return False
        identity = session.record.identity
        if identity and identity in self._busy_identities:
            return False
        if identity:
            self._busy_identities.add(identity)
        session.in_flight = True
        session._flight_identity = identity
        return True

    def finish(self, session: EditSession) -> None:
        """Clear the in-flight mark set by try_begin."""
        self._busy_identities.discard(session._flight_identity)
        session.in_flight = False
        session._flight_identity = 0
