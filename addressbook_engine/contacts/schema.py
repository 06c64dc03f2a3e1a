"""SQLite schema for the contact store.

Attached sub-records live in child tables and are removed with their contact
through ON DELETE CASCADE (foreign keys are enabled per connection).
"""

from __future__ import annotations

SCHEMA_V1 = """
PRAGMA journal_mode = WAL;

CREATE TABLE IF NOT EXISTS contacts (
    identity    INTEGER PRIMARY KEY AUTOINCREMENT,
    first_name  TEXT NOT NULL DEFAULT '',
    last_name   TEXT NOT NULL DEFAULT '' COLLATE NOCASE,
    postal_code TEXT NOT NULL DEFAULT ''
);

CREATE INDEX IF NOT EXISTS idx_contacts_last_name ON contacts(last_name);

CREATE TABLE IF NOT EXISTS addresses (
    identity INTEGER NOT NULL,
    position INTEGER NOT NULL,
    line1    TEXT NOT NULL CHECK(length(trim(line1)) > 0),
    line2    TEXT NOT NULL DEFAULT '',
    city     TEXT NOT NULL DEFAULT '',
    county   TEXT NOT NULL DEFAULT '',
    PRIMARY KEY (identity, position),
    FOREIGN KEY (identity) REFERENCES contacts(identity) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS emails (
    identity INTEGER NOT NULL,
    position INTEGER NOT NULL,
    address  TEXT NOT NULL CHECK(length(trim(address)) > 0),
    PRIMARY KEY (identity, position),
    FOREIGN KEY (identity) REFERENCES contacts(identity) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS phones (
    identity INTEGER NOT NULL,
    position INTEGER NOT NULL,
    number   TEXT NOT NULL CHECK(length(trim(number)) > 0),
    PRIMARY KEY (identity, position),
    FOREIGN KEY (identity) REFERENCES contacts(identity) ON DELETE CASCADE
);
"""
