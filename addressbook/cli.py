"""
Command-line interface for the address book.

Notes
-----
The CLI is thin. It parses arguments, opens the store for the selected book,
and delegates to RecordController. All human-readable messages are produced
here; the engine only raises and returns result objects.

Exit codes
----------
0  success
1  validation failure, unsaved record, or no matching contact
2  storage, path safety, or startup errors
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from addressbook_engine.contacts.api import ContactRecord, PostalAddress
from addressbook_engine.contacts.controller import DeleteReason, RecordController
from addressbook_engine.contacts.sqlite_store import SqliteEntryStore, open_entry_store
from addressbook_engine.errors import AddressBookError, NotFoundError, ValidationError
from addressbook_engine.logging_config import setup_logging
from addressbook_engine.paths import (
    SafetyViolationError,
    book_paths_as_text,
    ensure_book_directories,
    resolve_book_paths,
)
from addressbook_engine.settings_store import load_settings


def build_parser() -> argparse.ArgumentParser:
    """
    Build and return the top-level argument parser.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser.
    """
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--book",
        default=None,
        help="Address book name. Defaults to the book_name setting ('default').",
    )
    common.add_argument(
        "--data-root",
        default=None,
        help="Override the data root (primarily for testing). If omitted, defaults are used.",
    )
    common.add_argument(
        "--verbose",
        action="store_true",
        help="Log at the configured level instead of warnings only.",
    )

    parser = argparse.ArgumentParser(prog="addressbook", description="Address Book")
    sub = parser.add_subparsers(dest="command", required=True)

    init_p = sub.add_parser("init", parents=[common], help="Create the book folders and database")
    init_p.add_argument("--print-paths", action="store_true", help="Print resolved paths")

    add_p = sub.add_parser("add", parents=[common], help="Insert a new contact")
    add_p.add_argument("--last-name", required=True)
    add_p.add_argument("--first-name", default="")
    add_p.add_argument("--postal-code", default="", help='Empty or "XXX XXXX", e.g. "A65 F4E2"')
    add_p.add_argument("--address", action="append", default=[], help="Street line. Repeatable.")
    add_p.add_argument("--email", action="append", default=[], help="Email address. Repeatable.")
    add_p.add_argument("--phone", action="append", default=[], help="Phone number. Repeatable.")

    show_p = sub.add_parser("show", parents=[common], help="Show one contact by identity")
    show_p.add_argument("--id", type=int, required=True, dest="identity")

    search_p = sub.add_parser("search", parents=[common], help="Find contacts by last name")
    search_p.add_argument("--last-name", required=True)

    update_p = sub.add_parser("update", parents=[common], help="Change fields of a stored contact")
    update_p.add_argument("--id", type=int, required=True, dest="identity")
    update_p.add_argument("--first-name", default=None)
    update_p.add_argument("--last-name", default=None)
    update_p.add_argument("--postal-code", default=None)

    delete_p = sub.add_parser("delete", parents=[common], help="Delete a stored contact")
    delete_p.add_argument("--id", type=int, required=True, dest="identity")

    sub.add_parser("gui", parents=[common], help="Open the desktop address book")

    return parser


def format_record(record: ContactRecord) -> str:
    """Render a record as indented multi-line text."""
    lines = [f"[{record.identity}] {record.display_name()}"]
    if record.postal_code:
        lines.append(f"  postal code: {record.postal_code}")
    for address in record.addresses:
        parts = [address.line1, address.line2, address.city, address.county]
        lines.append("  address: " + ", ".join(p for p in parts if p))
    for email in record.emails:
        lines.append(f"  email: {email}")
    for phone in record.phones:
        lines.append(f"  phone: {phone}")
    return "\n".join(lines)


def _open_store(args: argparse.Namespace) -> SqliteEntryStore:
    data_root = Path(args.data_root) if args.data_root else None
    settings = load_settings(data_root=data_root)
    return open_entry_store(
        book_name=args.book or settings.book_name,
        data_root=data_root,
        journal_enabled=settings.journal_enabled,
    )


def _cmd_add(controller: RecordController, args: argparse.Namespace) -> int:
    draft = ContactRecord(
        first_name=args.first_name.strip(),
        last_name=args.last_name.strip(),
        postal_code=args.postal_code,
        addresses=[PostalAddress(line1=line) for line in args.address],
        emails=list(args.email),
        phones=list(args.phone),
    )
    result = controller.save(draft)
    if not result.ok:
        print(f"ERROR: {result.message}")
        return 1 if isinstance(result.error, ValidationError) else 2
    print(f"{result.message}: contact {draft.identity}")
    return 0


def _cmd_update(store: SqliteEntryStore, controller: RecordController, args: argparse.Namespace) -> int:
    record = store.get(args.identity)
    if args.first_name is not None:
        record.first_name = args.first_name.strip()
    if args.last_name is not None:
        record.last_name = args.last_name.strip()
    if args.postal_code is not None:
        record.postal_code = args.postal_code

    result = controller.save(record)
    if not result.ok:
        print(f"ERROR: {result.message}")
        return 1 if isinstance(result.error, (ValidationError, NotFoundError)) else 2
    print(f"{result.message}: contact {record.identity}")
    return 0


def _cmd_delete(controller: RecordController, args: argparse.Namespace) -> int:
    result = controller.delete(ContactRecord(identity=args.identity))
    if result.ok:
        print(f"{result.message}: contact {args.identity}")
        return 0
    print(f"ERROR: {result.message}")
    return 2 if result.reason is DeleteReason.STORE_FAILURE else 1


def _cmd_search(controller: RecordController, args: argparse.Namespace) -> int:
    found = controller.search(args.last_name)
    if not found:
        print(f'Entry with last name "{args.last_name}" not found in address book')
        return 1
    print("\n".join(format_record(r) for r in found))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """
    CLI entry point.

    Parameters
    ----------
    argv:
        Optional argument vector. If None, argparse uses sys.argv.

    Returns
    -------
    int
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    data_root = Path(args.data_root) if args.data_root else None

    if args.command == "gui":
        from gui.app import main as gui_main

        return gui_main(book_name=args.book, data_root=data_root)

    settings = load_settings(data_root=data_root)
    setup_logging(settings.log_level if args.verbose else "WARNING")

    try:
        if args.command == "init":
            paths = resolve_book_paths(args.book or settings.book_name, data_root=data_root)
            ensure_book_directories(paths)
            _open_store(args).close()
            if args.print_paths:
                print(book_paths_as_text(paths))
            return 0

        with _open_store(args) as store:
            controller = RecordController(store)

            if args.command == "add":
                return _cmd_add(controller, args)

            if args.command == "show":
                print(format_record(store.get(args.identity)))
                return 0

            if args.command == "search":
                return _cmd_search(controller, args)

            if args.command == "update":
                return _cmd_update(store, controller, args)

            if args.command == "delete":
                return _cmd_delete(controller, args)

    except NotFoundError as exc:
        print(f"ERROR: {exc}")
        return 1
    except (SafetyViolationError, AddressBookError, OSError) as exc:
        print(f"ERROR: {exc}")
        return 2

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
