"""
Domain exceptions for the address book engine.

Notes
-----
Engine code does not raise generic exceptions for expected failures. Storage
errors are translated into a PersistenceError subclass before they leave the
store, and only the presentation layer turns them into user-facing text.
"""

from __future__ import annotations


class AddressBookError(RuntimeError):
    """Base exception for all address book domain failures."""


class ValidationError(AddressBookError):
    """Raised when a record fails local validation (no store access attempted)."""


class PersistenceError(AddressBookError):
    """Raised when a storage operation cannot complete."""


class NotFoundError(PersistenceError):
    """Raised when an update, delete or read targets an identity that is not stored."""

    def __init__(self, identity: int) -> None:
        super().__init__(f"No contact with identity {identity}")
        self.identity = identity


class StoreClosedError(PersistenceError):
    """Raised when an operation is attempted on a closed store."""


class StoreOpenError(AddressBookError):
    """Raised when the storage connection cannot be opened at startup."""
