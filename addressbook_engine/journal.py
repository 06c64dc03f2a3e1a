"""
Append-only JSONL journal of committed store mutations.

One JSON object per line::

    {"data":{"identity":3,"last_name":"Murphy"},"event":"contact_inserted","ts":"..."}

The journal is an inspection aid. It is written after a transaction commits,
so it never records a mutation that was rolled back.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Protocol


class Clock(Protocol):
    """Injectable clock for deterministic timestamps."""

    def now(self) -> datetime:
        """Return the current time as a timezone-aware datetime."""
        ...


@dataclass(frozen=True, slots=True)
class SystemClock:
    """Clock returning the current system time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class FixedClock:
    """Clock that always returns the same instant (naive values are taken as UTC)."""

    fixed_time: datetime

    def now(self) -> datetime:
        if self.fixed_time.tzinfo is None:
            return self.fixed_time.replace(tzinfo=timezone.utc)
        return self.fixed_time


class StoreJournal:
    """
    Append-only JSONL journal.

    Parameters
    ----------
    journal_path:
        File to append to. Parent folders are created.
    clock:
        Source of event timestamps.
    """

    def __init__(self, journal_path: Path, *, clock: Clock | None = None) -> None:
        self._journal_path = journal_path
        self._clock = clock or SystemClock()
        self._journal_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._journal_path

    def append(self, event: str, data: Mapping[str, Any]) -> None:
        """
        Append one event record.

        Raises
        ------
        OSError
            If the journal cannot be written.
        TypeError
            If `data` is not JSON-serializable.
        """
        line = json.dumps(
            {"ts": self._clock.now().isoformat(), "event": event, "data": dict(data)},
            ensure_ascii=False,
            sort_keys=True,
            separators=(",", ":"),
        )
        with self._journal_path.open("a", encoding="utf-8", newline="\n") as handle:
            handle.write(line + "\n")

    def read_events(self) -> list[dict[str, Any]]:
        """Return all recorded events in append order (empty if no file yet)."""
        if not self._journal_path.exists():
            return []
        lines = self._journal_path.read_text(encoding="utf-8").splitlines()
        return [json.loads(line) for line in lines if line.strip()]
