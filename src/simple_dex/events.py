"""
Append-only notification log.

The pool publishes exactly one record per successful mutation, after the
reserves are committed. Observers either query past records (`query`) or
subscribe to live ones (`subscribe`). The pool itself never reads the log.
"""
from __future__ import annotations

import dataclasses
import threading
from typing import Callable, List, Optional, Type

from structlog import get_logger

from .core.datatypes import Notification

logger = get_logger()

Subscriber = Callable[[Notification], None]


class EventLog:
    """Ordered record of notifications; sequence numbers start at 1."""

    def __init__(self) -> None:
        self._records: List[Notification] = []
        self._subscribers: List[Subscriber] = []
        self._lock = threading.Lock()
        self.log = logger.new(component='events')

    def publish(self, record: Notification) -> Notification:
        """Stamp `record` with the next sequence number, store it and notify subscribers.

        The record is committed before any subscriber runs. A failing
        subscriber is logged and skipped; it cannot undo or block the
        mutation that produced the record.
        """
        with self._lock:
            stamped = dataclasses.replace(record, seq=len(self._records) + 1)
            self._records.append(stamped)
            subscribers = list(self._subscribers)
        self.log.debug('published', kind=type(stamped).__name__, seq=stamped.seq)
        for callback in subscribers:
            try:
                callback(stamped)
            except Exception:
                self.log.error('subscriber failed', seq=stamped.seq, exc_info=True)
        return stamped

    def subscribe(self, callback: Subscriber) -> None:
        with self._lock:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        with self._lock:
            self._subscribers.remove(callback)

    def query(self, kind: Optional[Type] = None, *, since: int = 0) -> List[Notification]:
        """Records with seq > `since`, optionally restricted to one record type."""
        with self._lock:
            records = list(self._records)
        return [r for r in records if r.seq > since and (kind is None or isinstance(r, kind))]

    def last(self, n: int = 1) -> List[Notification]:
        if n <= 0:
            return []
        with self._lock:
            return self._records[-n:]

    def __len__(self) -> int:
        return len(self._records)


__all__ = ["EventLog", "Subscriber"]
