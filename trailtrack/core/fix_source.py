"""Location fix source: pushed fixes fanned out to cancellable subscriptions."""
import itertools
import logging
import threading
import time
from typing import Callable, Dict, Optional, Tuple

from trailtrack.core.errors import TrailtrackError
from trailtrack.models.geo import GeoPoint

logger = logging.getLogger(__name__)

FixCallback = Callable[[GeoPoint], None]
ErrorCallback = Callable[["FixSourceError"], None]


class FixSourceError(TrailtrackError):
    """Fix source failed (permission denied, timeout, device error)."""


class Subscription:
    """Handle returned by FixSource.subscribe; cancel() stops delivery."""

    def __init__(self, source: "FixSource", sub_id: int) -> None:
        self._source = source
        self._id = sub_id
        self._cancelled = False

    @property
    def active(self) -> bool:
        return not self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._source._unsubscribe(self._id)


class FixSource:
    """Delivers fixes pushed by a device adapter or the API to subscribers."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._subscribers: Dict[int, Tuple[FixCallback, Optional[ErrorCallback]]] = {}

    def subscribe(self, on_fix: FixCallback, on_error: Optional[ErrorCallback] = None) -> Subscription:
        with self._lock:
            sub_id = next(self._ids)
            self._subscribers[sub_id] = (on_fix, on_error)
        return Subscription(self, sub_id)

    def _unsubscribe(self, sub_id: int) -> None:
        with self._lock:
            self._subscribers.pop(sub_id, None)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def push(self, lat: float, lng: float, timestamp: Optional[int] = None) -> GeoPoint:
        """Deliver one fix. Without a timestamp the fix is stamped on receipt."""
        ts = timestamp if timestamp is not None else int(self._clock() * 1000)
        fix = GeoPoint(lat=lat, lng=lng, timestamp=ts)
        with self._lock:
            targets = [cb for cb, _ in self._subscribers.values()]
        for cb in targets:
            cb(fix)
        return fix

    def fail(self, reason: str) -> None:
        """Report a source failure to every subscriber."""
        logger.warning("Fix source error: %s", reason)
        err = FixSourceError(reason)
        with self._lock:
            targets = [eb for _, eb in self._subscribers.values() if eb is not None]
        for eb in targets:
            eb(err)
