"""Holder for the single current snapshot.

Mutations go through ``commit()``; observers (persistence) are told about each
new snapshot. Reads never mutate.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from gantt_mcp.enums import SnapshotSource
from gantt_mcp.models.task import GanttSnapshot, default_snapshot

logger = logging.getLogger("gantt_mcp.state")

Observer = Callable[[GanttSnapshot, SnapshotSource], None]


class GanttState:
    """Current snapshot plus change observers."""

    def __init__(self, snapshot: GanttSnapshot | None = None):
        self._snapshot = snapshot if snapshot is not None else default_snapshot()
        self._observers: list[Observer] = []
        # Guards the swap only; the background remote load is the sole
        # writer outside the tool handlers.
        self._lock = threading.Lock()

    @property
    def snapshot(self) -> GanttSnapshot:
        return self._snapshot

    def subscribe(self, observer: Observer) -> None:
        self._observers.append(observer)

    def commit(self, snapshot: GanttSnapshot, source: SnapshotSource = SnapshotSource.EDIT) -> GanttSnapshot:
        """Make ``snapshot`` current and notify observers."""
        with self._lock:
            self._snapshot = snapshot
        for observer in list(self._observers):
            try:
                observer(snapshot, source)
            except Exception as e:
                logger.warning("Snapshot observer %r failed: %s", observer, e)
        return snapshot

    def reset(self, snapshot: GanttSnapshot | None = None) -> None:
        """Replace the snapshot without notifying observers (initial load, tests)."""
        with self._lock:
            self._snapshot = snapshot if snapshot is not None else default_snapshot()


# Process-wide state used by the MCP tools
state = GanttState()
