"""Transport-agnostic event dispatch: one handler per event kind."""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 100


class EventKind(str, Enum):
    # Declaration order is drain order in process_pending()
    POSE = "pose"
    POINT_CLOUD = "point_cloud"
    ELEVATION_MAP = "elevation_map"


Handler = Callable[[Any], Any]


class EventDispatcher:
    """Registry mapping each event kind to exactly one handler.

    ``dispatch`` runs the handler synchronously on the caller's thread.
    ``submit`` enqueues into a bounded per-kind queue for transports that
    receive on their own threads; ``process_pending`` later drains those
    queues on the processing thread. A full queue drops the new event.
    """

    def __init__(self, queue_size: int = DEFAULT_QUEUE_SIZE):
        if queue_size < 1:
            raise ValueError(f"queue_size must be >= 1, got {queue_size}")
        self._handlers: dict[EventKind, Handler] = {}
        self._queues: dict[EventKind, queue.Queue] = {
            kind: queue.Queue(maxsize=queue_size) for kind in EventKind
        }
        self.dropped: dict[EventKind, int] = {kind: 0 for kind in EventKind}
        self._dropped_lock = threading.Lock()

    def register(self, kind: EventKind, handler: Handler) -> None:
        if kind in self._handlers:
            raise ValueError(f"Handler already registered for '{kind.value}' events")
        self._handlers[kind] = handler

    def dispatch(self, kind: EventKind, payload: Any) -> Any:
        """Run the handler for ``kind`` to completion; its errors propagate."""
        handler = self._handlers.get(kind)
        if handler is None:
            raise KeyError(f"No handler registered for '{kind.value}' events")
        return handler(payload)

    def submit(self, kind: EventKind, payload: Any) -> bool:
        """Queue an event for later processing. Returns False if it was dropped."""
        try:
            self._queues[kind].put_nowait(payload)
        except queue.Full:
            with self._dropped_lock:
                self.dropped[kind] += 1
                dropped = self.dropped[kind]
            logger.warning(
                f"'{kind.value}' queue full ({self._queues[kind].maxsize}), "
                f"dropping event (dropped so far: {dropped})"
            )
            return False
        return True

    def pending(self, kind: EventKind) -> int:
        return self._queues[kind].qsize()

    def process_pending(self) -> int:
        """Drain every queue, pose events first. Returns the number handled."""
        handled = 0
        for kind in EventKind:
            q = self._queues[kind]
            while True:
                try:
                    payload = q.get_nowait()
                except queue.Empty:
                    break
                self.dispatch(kind, payload)
                handled += 1
        return handled
