"""
RecordController: mediates between one draft ContactRecord and the store.

The controller is stateless. It decides insert versus update from the draft's
identity, runs postal-code validation before any store access, enforces that
only persisted records can be deleted, and wraps every outcome into a result
object. Store exceptions are carried in the result, never swallowed and never
turned into user-facing text here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from ..errors import AddressBookError, NotFoundError, PersistenceError, ValidationError
from .api import UNSAVED_IDENTITY, ContactRecord, EntryStore
from .postal_code import require_valid_postal_code
from .sessions import EditSession

logger = logging.getLogger(__name__)


class OperationKind(str, Enum):
    INSERT = "insert"
    UPDATE = "update"


class DeleteReason(str, Enum):
    NOT_YET_PERSISTED = "not_yet_persisted"
    NOT_FOUND = "not_found"
    STORE_FAILURE = "store_failure"


@dataclass(frozen=True, slots=True)
class SaveResult:
    """
    Outcome of RecordController.save.

    Attributes
    ----------
    ok:
        True when the record was committed.
    operation:
        INSERT for a draft, UPDATE for a persisted record.
    error:
        ValidationError or PersistenceError (including NotFoundError) on failure.
    """

    ok: bool
    operation: OperationKind
    error: AddressBookError | None = None

    @property
    def message(self) -> str:
        if self.ok:
            return "Insertion successful" if self.operation is OperationKind.INSERT else "Update successful"
        return str(self.error) if self.error is not None else "Save failed"


@dataclass(frozen=True, slots=True)
class DeleteResult:
    """
    Outcome of RecordController.delete.

    Attributes
    ----------
    ok:
        True when the record was removed.
    reason:
        Why the delete did not happen; None on success.
    detail:
        Store error message for NOT_FOUND and STORE_FAILURE.
    error:
        The store exception, when there was one.
    """

    ok: bool
    reason: DeleteReason | None = None
    detail: str | None = None
    error: PersistenceError | None = None

    @property
    def message(self) -> str:
        if self.ok:
            return "Deletion successful"
        if self.reason is DeleteReason.NOT_YET_PERSISTED:
            return (
                "New entries must be saved before they can be deleted.\n"
                "To cancel a new entry, simply close the window containing the entry."
            )
        return self.detail or "Deletion failed"


class RecordController:
    """
    Stateless mediator between edit sessions and an EntryStore.

    Parameters
    ----------
    store:
        Any EntryStore implementation.
    """

    def __init__(self, store: EntryStore) -> None:
        self._store = store

    def save(self, draft: ContactRecord, session: EditSession | None = None) -> SaveResult:
        """
        Insert a draft or update a persisted record.

        The postal code is validated on every save. On a successful insert the
        new identity is assigned onto `draft`.

        Parameters
        ----------
        draft:
            Record to persist, mutated in place on insert.
        session:
            Optional edit session; its save counter and state are updated.

        Returns
        -------
        SaveResult
            ok=False with a ValidationError when the postal code is invalid
            (no store access), or with the store error when persistence failed.
        """
        operation = OperationKind.INSERT if draft.identity == UNSAVED_IDENTITY else OperationKind.UPDATE
        if session is not None:
            session.note_save_attempt()

        try:
            require_valid_postal_code(draft.postal_code)
        except ValidationError as exc:
            return SaveResult(ok=False, operation=operation, error=exc)

        try:
            if operation is OperationKind.INSERT:
                identity = self._store.insert(draft)
                draft.assign_identity(identity)
            else:
                self._store.update(draft)
        except PersistenceError as exc:
            logger.warning("%s of %s failed: %s", operation.value, draft.display_name(), exc)
            return SaveResult(ok=False, operation=operation, error=exc)

        if session is not None:
            session.mark_saved()
        return SaveResult(ok=True, operation=operation)

    def delete(self, record: ContactRecord, session: EditSession | None = None) -> DeleteResult:
        """
        Delete a persisted record.

        Drafts are rejected with NOT_YET_PERSISTED without touching the store.
        """
        if record.identity == UNSAVED_IDENTITY:
            return DeleteResult(ok=False, reason=DeleteReason.NOT_YET_PERSISTED)

        try:
            self._store.delete(record.identity)
        except NotFoundError as exc:
            return DeleteResult(ok=False, reason=DeleteReason.NOT_FOUND, detail=str(exc), error=exc)
        except PersistenceError as exc:
            logger.warning("delete of %s failed: %s", record.identity, exc)
            return DeleteResult(
                ok=False, reason=DeleteReason.STORE_FAILURE, detail=str(exc), error=exc
            )

        if session is not None:
            session.mark_deleted()
        return DeleteResult(ok=True)

    def search(self, last_name: str) -> Sequence[ContactRecord]:
        """
        Return stored records with this last name.

        Raises
        ------
        PersistenceError
            If the store cannot be read.
        """
        return self._store.find_by_last_name(last_name)
