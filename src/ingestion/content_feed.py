"""Latest-wins holder for fetched content.

Every refresh takes a ticket. Only the newest ticket may publish records, so a
slow fetch that finishes after a newer one is discarded instead of
overwriting fresher content.
"""

from __future__ import annotations

import sys
import threading
from collections.abc import Callable

import requests

from src.engine.content import ContentRecord


def _log_feed_status(name: str, status: str, records: int, error: str = "") -> None:
    msg = f"[FEED] feed={name} status={status} records={records}"
    if error:
        msg += f" error={error}"
    stream = sys.stderr if status in {"failed", "stale"} else sys.stdout
    print(msg, file=stream)


class ContentFeed:
    def __init__(self, name: str, verbose: bool = True) -> None:
        self.name = name
        self.verbose = verbose
        self._lock = threading.Lock()
        self._latest_ticket = 0
        self._records: list[ContentRecord] = []

    @property
    def records(self) -> list[ContentRecord]:
        with self._lock:
            return list(self._records)

    def start_refresh(self) -> int:
        with self._lock:
            self._latest_ticket += 1
            return self._latest_ticket

    def apply(self, ticket: int, records: list[ContentRecord]) -> bool:
        """Publish records for ``ticket``; return False when a newer refresh exists."""
        with self._lock:
            if ticket != self._latest_ticket:
                accepted = False
            else:
                self._records = list(records)
                accepted = True
        if self.verbose:
            _log_feed_status(self.name, "ok" if accepted else "stale", len(records))
        return accepted

    def refresh(self, fetch: Callable[[], list[ContentRecord]]) -> bool:
        """Run ``fetch`` under a fresh ticket. Fetch errors propagate; content is kept."""
        ticket = self.start_refresh()
        try:
            records = fetch()
        except requests.RequestException as exc:
            _log_feed_status(self.name, "failed", 0, str(exc))
            raise
        return self.apply(ticket, records)
