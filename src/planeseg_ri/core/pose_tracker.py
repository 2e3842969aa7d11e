"""Latest-sensor-pose slot shared between pose and cloud handlers."""

from __future__ import annotations

import logging
import threading
import time

from .contracts import Pose

logger = logging.getLogger(__name__)


class PoseTracker:
    """Holds the most recently observed sensor pose.

    Last write wins: no timestamp comparison against clouds and no history.
    Reads and writes are serialized by a lock because pose and cloud events
    may be delivered on different threads. ``Pose`` is frozen, so handing out
    the stored instance is a snapshot.
    """

    def __init__(self, initial: Pose | None = None):
        self._lock = threading.Lock()
        self._pose = initial if initial is not None else Pose.identity()
        self._updated_at: float | None = None

    def update(self, pose: Pose) -> None:
        with self._lock:
            self._pose = pose
            self._updated_at = time.monotonic()

    def read(self) -> Pose:
        with self._lock:
            return self._pose

    def age(self) -> float | None:
        """Seconds since the last update, or None if no pose was ever received."""
        with self._lock:
            if self._updated_at is None:
                return None
            return time.monotonic() - self._updated_at
