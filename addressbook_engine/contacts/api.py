"""
Contact record types and the EntryStore persistence surface.

The GUI and CLI speak only in these types. They never see SQLite rows or
connections; persistence details belong to the store implementation.

Notes
-----
- ContactRecord is mutable: an edit window changes its draft in place.
- identity == 0 means "never persisted". A non-zero identity is assigned once
  by a successful insert and never changes afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, Sequence

UNSAVED_IDENTITY = 0


@dataclass(frozen=True, slots=True)
class PostalAddress:
    """
    A postal address attached to a contact.

    Attributes
    ----------
    line1:
        First street line. Must not be blank when stored.
    line2:
        Optional second street line.
    city:
        Town or city.
    county:
        County or region.
    """

    line1: str
    line2: str = ""
    city: str = ""
    county: str = ""


@dataclass(slots=True)
class ContactRecord:
    """
    The single entity of the address book.

    Attributes
    ----------
    identity:
        Store-assigned identifier; 0 for a draft.
    first_name, last_name:
        Name fields. last_name is the search key.
    postal_code:
        Routing-key postal code, empty or "XXX XXXX" shaped.
    addresses, emails, phones:
        Attached sub-records owned exclusively by this record.
    """

    identity: int = UNSAVED_IDENTITY
    first_name: str = ""
    last_name: str = ""
    postal_code: str = ""
    addresses: list[PostalAddress] = field(default_factory=list)
    emails: list[str] = field(default_factory=list)
    phones: list[str] = field(default_factory=list)

    @property
    def is_persisted(self) -> bool:
        return self.identity != UNSAVED_IDENTITY

    def assign_identity(self, identity: int) -> None:
        """
        Record the identity returned by a successful insert.

        Raises
        ------
        ValueError
            If identity is not positive, or the record already has a
            different identity.
        """
        if identity <= 0:
            raise ValueError(f"Identity must be positive, got {identity}")
        if self.is_persisted and self.identity != identity:
            raise ValueError(
                f"Record already has identity {self.identity}; refusing to reassign to {identity}"
            )
        self.identity = identity

    def display_name(self) -> str:
        full = f"{self.first_name} {self.last_name}".strip()
        return full or "(unnamed)"


class EntryStore(Protocol):
    """
    Atomic CRUD over the persistent contact collection.

    Every mutating method is a single transaction: on failure the store is
    left exactly as it was before the call.
    """

    def insert(self, record: ContactRecord) -> int:
        """
        Persist a draft and return its new identity.

        Raises
        ------
        ValueError
            If record.identity != 0.
        PersistenceError
            If the write cannot complete. Nothing is persisted.
        """
        raise NotImplementedError

    def update(self, record: ContactRecord) -> None:
        """
        Replace every persisted attribute of an existing record.

        Raises
        ------
        ValueError
            If record.identity == 0.
        NotFoundError
            If the identity is not stored.
        PersistenceError
            For other storage failures. The previous state is kept.
        """
        raise NotImplementedError

    def delete(self, identity: int) -> None:
        """
        Remove a record and its attached sub-records.

        Raises
        ------
        ValueError
            If identity == 0.
        NotFoundError
            If the identity is not stored.
        PersistenceError
            For other storage failures.
        """
        raise NotImplementedError

    def find_by_last_name(self, name: str) -> Sequence[ContactRecord]:
        """Return records whose last name matches; empty when nothing does."""
        raise NotImplementedError

    def get(self, identity: int) -> ContactRecord:
        """
        Read one record by identity.

        Raises
        ------
        NotFoundError
            If the identity is not stored.
        """
        raise NotImplementedError

    def count(self) -> int:
        """Return the number of stored records."""
        raise NotImplementedError

    def close(self) -> None:
        """Release storage resources. Safe to call more than once."""
        raise NotImplementedError
