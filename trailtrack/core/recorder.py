"""Recording session: fix source -> sampler -> trail store."""
import logging
import math
import threading
from enum import Enum
from typing import Callable, List, Optional

from trailtrack.core.errors import RecordingError
from trailtrack.core.fix_source import FixSource, FixSourceError, Subscription
from trailtrack.core.sampler import Sampler
from trailtrack.core.trail_store import SessionJournal, TrailStore, add_trail, build_trail, now_ms
from trailtrack.models.geo import GeoPoint
from trailtrack.models.trail import Trail

logger = logging.getLogger(__name__)

UpdateCallback = Callable[[GeoPoint, List[GeoPoint]], None]


class RecordingStatus(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"
    ABORTED = "aborted"


def is_valid_fix(fix: GeoPoint) -> bool:
    """Finite coordinates within WGS84 bounds."""
    if not (math.isfinite(fix.lat) and math.isfinite(fix.lng)):
        return False
    return -90.0 <= fix.lat <= 90.0 and -180.0 <= fix.lng <= 180.0


class Recorder:
    """Owns one recording session at a time.

    Fixes arrive through a FixSource subscription and go through the Sampler
    admission gate. Accepted points are journaled so a restarted process can
    resume(). A fix-source failure aborts the session but keeps the path; the
    caller then either stop()s (materializing a trail from the partial path)
    or discard()s it.
    """

    def __init__(
        self,
        store: TrailStore,
        fix_source: FixSource,
        journal: Optional[SessionJournal] = None,
        sampler: Optional[Sampler] = None,
        on_update: Optional[UpdateCallback] = None,
        clock_ms: Callable[[], int] = now_ms,
    ) -> None:
        self._store = store
        self._fix_source = fix_source
        self._journal = journal
        self._sampler = sampler or Sampler()
        self._on_update = on_update
        self._clock_ms = clock_ms
        self._lock = threading.RLock()
        self._status = RecordingStatus.IDLE
        self._subscription: Optional[Subscription] = None
        self._abort_reason: Optional[str] = None
        self._current_position: Optional[GeoPoint] = None

    @property
    def status(self) -> RecordingStatus:
        with self._lock:
            return self._status

    @property
    def is_active(self) -> bool:
        return self.status != RecordingStatus.IDLE

    @property
    def path(self) -> List[GeoPoint]:
        with self._lock:
            return self._sampler.path

    @property
    def abort_reason(self) -> Optional[str]:
        with self._lock:
            return self._abort_reason

    @property
    def current_position(self) -> Optional[GeoPoint]:
        with self._lock:
            return self._current_position

    def start(self, initial_fix: GeoPoint) -> List[GeoPoint]:
        """Begin a session with initial_fix as its first point."""
        with self._lock:
            if self._status != RecordingStatus.IDLE:
                raise RecordingError(f"cannot start: session is {self._status.value}")
            if not is_valid_fix(initial_fix):
                raise RecordingError("initial fix has invalid coordinates")
            path = self._sampler.start(initial_fix)
            self._begin()
            self._accepted(initial_fix)
            logger.info("Recorder: started at %.6f,%.6f", initial_fix.lat, initial_fix.lng)
            return path

    def resume(self) -> bool:
        """Pick up a journaled session left by a previous process. True if resumed."""
        with self._lock:
            if self._status != RecordingStatus.IDLE or self._journal is None:
                return False
            path = self._journal.load()
            if not path:
                return False
            self._sampler.restore(path)
            self._begin()
            self._current_position = path[-1]
            logger.info("Recorder: resumed session with %d points", len(path))
            return True

    def _begin(self) -> None:
        self._status = RecordingStatus.RECORDING
        self._abort_reason = None
        self._subscription = self._fix_source.subscribe(self._on_fix, self._on_error)

    def _cancel_subscription(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

    def _accepted(self, fix: GeoPoint) -> None:
        self._current_position = fix
        path = self._sampler.path
        if self._journal is not None:
            self._journal.save(path)
        if self._on_update is not None:
            self._on_update(fix, path)

    def _on_fix(self, fix: GeoPoint) -> None:
        with self._lock:
            if self._status != RecordingStatus.RECORDING:
                return
            if not is_valid_fix(fix):
                logger.warning("Recorder: dropping invalid fix %s", fix)
                return
            if self._sampler.offer(fix):
                self._accepted(fix)

    def _on_error(self, err: FixSourceError) -> None:
        with self._lock:
            if self._status != RecordingStatus.RECORDING:
                return
            self._cancel_subscription()
            self._status = RecordingStatus.ABORTED
            self._abort_reason = str(err)
            logger.warning(
                "Recorder: session aborted (%s), keeping %d points", err, len(self._sampler.path)
            )

    def stop(self) -> Optional[Trail]:
        """End the session; persist and return a Trail if the path is significant."""
        with self._lock:
            if self._status == RecordingStatus.IDLE:
                raise RecordingError("no recording session")
            self._end()
            path = self._sampler.stop()
            if path is None:
                logger.info("Recorder: stopped, no significant path recorded")
                return None
            trail = build_trail(path, self._clock_ms())
            add_trail(self._store, trail)
            logger.info("Recorder: stopped, saved %s", trail.name)
            return trail

    def discard(self) -> None:
        """Drop the current or aborted session without saving."""
        with self._lock:
            if self._status == RecordingStatus.IDLE:
                return
            self._end()
            self._sampler.stop()
            logger.info("Recorder: session discarded")

    def _end(self) -> None:
        self._cancel_subscription()
        if self._journal is not None:
            self._journal.clear()
        self._status = RecordingStatus.IDLE
        self._current_position = None
