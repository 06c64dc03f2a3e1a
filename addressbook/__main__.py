"""
Module entrypoint for the address book CLI.

This file exists so that `python -m addressbook ...` works when the console
script wrapper is not installed. It contains no logic of its own.
"""

from __future__ import annotations

from addressbook.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
