"""Builders for contact records used across the test suite."""

from __future__ import annotations

from addressbook_engine.contacts.api import ContactRecord, PostalAddress


def make_record(last_name: str = "Murphy", **overrides: object) -> ContactRecord:
    fields: dict[str, object] = {
        "first_name": "Aoife",
        "last_name": last_name,
        "postal_code": "A65 F4E2",
        "addresses": [PostalAddress(line1="1 Main Street", city="Athlone", county="Westmeath")],
        "emails": ["aoife@example.com"],
        "phones": ["+353 90 123 4567"],
    }
    fields.update(overrides)
    return ContactRecord(**fields)  # type: ignore[arg-type]
