"""Append-only record list for one model."""

import threading
from collections.abc import Iterable

from hookscope.collector.types import CallbackRecord


class CallbackLedger:
    """Callback records collected for a single model, in declaration order.

    Writers append under a lock so concurrent registrations on the same
    model keep a consistent order. Readers get snapshots.
    """

    def __init__(self, owner_name: str):
        self.owner_name = owner_name
        self._records: list[CallbackRecord] = []
        self._lock = threading.Lock()

    def extend(self, records: Iterable[CallbackRecord]) -> None:
        records = list(records)
        with self._lock:
            self._records.extend(records)

    def records(self) -> tuple[CallbackRecord, ...]:
        with self._lock:
            return tuple(self._records)

    def grouped(self) -> dict[str, list[CallbackRecord]]:
        """Records grouped by event, in first-declared event order."""
        groups: dict[str, list[CallbackRecord]] = {}
        for record in self.records():
            groups.setdefault(record.event, []).append(record)
        return groups

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
