"""Track keys whose work is already running."""

import threading
import time
from contextlib import contextmanager
from typing import Dict, Iterator

from ..errors import AlreadyInFlightError


class InFlightTracker:
    """Map request keys to the time their work started.

    `track` claims a key for the duration of a block and always releases it,
    whether the block succeeds or raises.
    """

    def __init__(self) -> None:
        self._in_flight: Dict[str, float] = {}
        self._lock = threading.Lock()

    def is_in_flight(self, key: str) -> bool:
        with self._lock:
            return key in self._in_flight

    def count(self) -> int:
        with self._lock:
            return len(self._in_flight)

    def clear(self) -> None:
        with self._lock:
            self._in_flight.clear()

    @contextmanager
    def track(self, key: str) -> Iterator[None]:
        """
        Claim `key` while the block runs.

        Raises:
            AlreadyInFlightError: another caller holds the key
        """
        with self._lock:
            if key in self._in_flight:
                raise AlreadyInFlightError(key)
            self._in_flight[key] = time.time()
        try:
            yield
        finally:
            with self._lock:
                self._in_flight.pop(key, None)
