"""Time-compressed replay of a stored trail with pause, scrub and variable speed.

Simulated trail time advances as wall-clock time times the speed multiplier.
The marker is always the last path point reached; the player never
interpolates between points. While playing, a daemon thread re-evaluates the
clock every tick and hands a PlaybackFrame to on_frame.
"""
import bisect
import logging
import math
import threading
import time
from typing import Callable, List, Optional, Tuple

from trailtrack.config import PLAYBACK_TICK_SEC
from trailtrack.core.errors import InvalidTrail
from trailtrack.models.playback import PlaybackFrame, PlaybackState, PlaybackStatus
from trailtrack.models.trail import Trail

logger = logging.getLogger(__name__)

FrameCallback = Callable[[PlaybackFrame], None]


def index_at(timestamps: List[int], trail_time: float) -> int:
    """Greatest i with timestamps[i] <= trail_time (0 if none)."""
    return max(0, bisect.bisect_right(timestamps, trail_time) - 1)


def seek_index(fraction: float, n_points: int) -> int:
    """Path index for a scrub position; fraction is clamped to [0, 1]."""
    if math.isnan(fraction):
        fraction = 0.0
    f = max(0.0, min(1.0, fraction))
    return int(math.floor(f * (n_points - 1)))


class TrailPlayer:
    """Replays one loaded trail. States: idle, playing, paused, finished."""

    def __init__(
        self,
        on_frame: Optional[FrameCallback] = None,
        clock: Callable[[], float] = time.monotonic,
        tick_interval_sec: float = PLAYBACK_TICK_SEC,
        use_timer: bool = True,
    ) -> None:
        self._on_frame = on_frame
        self._clock = clock
        self._tick_interval = tick_interval_sec
        self._use_timer = use_timer
        self._lock = threading.RLock()

        self._trail: Optional[Trail] = None
        self._timestamps: List[int] = []
        self._status = PlaybackStatus.IDLE
        self._index = 0
        self._progress = 0.0
        self._speed = 1.0
        # Simulated trail time (ms since path start) as of the wall-clock anchor
        self._offset_ms = 0.0
        self._anchor = 0.0

        self._timer_stop: Optional[threading.Event] = None
        self._timer_thread: Optional[threading.Thread] = None

    # -- read side ---------------------------------------------------------

    @property
    def trail(self) -> Optional[Trail]:
        with self._lock:
            return self._trail

    @property
    def status(self) -> PlaybackStatus:
        with self._lock:
            return self._status

    @property
    def timer_running(self) -> bool:
        with self._lock:
            return self._timer_stop is not None and not self._timer_stop.is_set()

    def snapshot(self) -> PlaybackState:
        with self._lock:
            return PlaybackState(
                trail_id=self._trail.id if self._trail else None,
                status=self._status,
                progress_fraction=self._progress,
                speed=self._speed,
                index=self._index,
            )

    def frame(self) -> Optional[PlaybackFrame]:
        with self._lock:
            if self._trail is None:
                return None
            marker = self._trail.path[self._index]
            return PlaybackFrame(
                marker=marker,
                center=marker.center,
                progress_fraction=self._progress,
                speed=self._speed,
                status=self._status,
            )

    def view(self) -> Tuple[PlaybackState, Optional[PlaybackFrame]]:
        """Snapshot and frame taken under one lock hold, so both describe the same tick."""
        with self._lock:
            return self.snapshot(), self.frame()

    # -- controls ----------------------------------------------------------

    def load(self, trail: Trail) -> None:
        """Load a trail and reset to idle at its first point."""
        if not trail.path:
            raise InvalidTrail("trail path must have at least one point")
        with self._lock:
            self._cancel_timer()
            self._trail = trail
            self._timestamps = [p.timestamp for p in trail.path]
            self._status = PlaybackStatus.IDLE
            self._index = 0
            self._progress = 0.0
            self._speed = 1.0
            self._offset_ms = 0.0
            self._anchor = self._clock()
            logger.info("Player: loaded %s (%d points)", trail.id, len(trail.path))
            self._emit()

    def play(self) -> None:
        with self._lock:
            trail = self._require_trail()
            if self._status in (PlaybackStatus.PLAYING, PlaybackStatus.FINISHED):
                return
            if len(trail.path) < 2:
                self._finish()
                self._emit()
                return
            self._status = PlaybackStatus.PLAYING
            self._anchor = self._clock()
            self._start_timer()
            logger.info("Player: playing at %.1fx from %.3f", self._speed, self._progress)
            self._emit()

    def pause(self) -> None:
        with self._lock:
            if self._status != PlaybackStatus.PLAYING:
                return
            self._offset_ms = self._elapsed_ms(self._clock())
            self._status = PlaybackStatus.PAUSED
            self._cancel_timer()
            logger.info("Player: paused at %.3f", self._progress)
            self._emit()

    def seek(self, fraction: float) -> None:
        """Jump to the point at floor(fraction * (n - 1)); fraction is clamped."""
        with self._lock:
            trail = self._require_trail()
            self._index = seek_index(fraction, len(trail.path))
            self._progress = self._fraction_at(self._index)
            self._offset_ms = float(self._timestamps[self._index] - self._timestamps[0])
            self._anchor = self._clock()
            if self._status == PlaybackStatus.FINISHED:
                self._status = PlaybackStatus.PAUSED
            self._emit()

    def set_speed(self, multiplier: float) -> None:
        """Change how fast trail time runs from now on; the marker does not move."""
        if not (math.isfinite(multiplier) and multiplier > 0):
            raise ValueError("speed multiplier must be a positive number")
        with self._lock:
            if self._status == PlaybackStatus.PLAYING:
                now = self._clock()
                self._offset_ms = self._elapsed_ms(now)
                self._anchor = now
            self._speed = float(multiplier)
            if self._trail is not None:
                self._emit()

    def tick(self) -> Optional[PlaybackFrame]:
        """Re-evaluate the simulated clock now and return the current frame."""
        return self._tick(None)

    def close(self) -> None:
        """Unload the trail and stop any pending tick."""
        with self._lock:
            thread = self._timer_thread
            self._cancel_timer()
            if self._trail is not None:
                logger.info("Player: closed %s", self._trail.id)
            self._trail = None
            self._timestamps = []
            self._status = PlaybackStatus.IDLE
            self._index = 0
            self._progress = 0.0
            self._speed = 1.0
            self._offset_ms = 0.0
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=2.0)

    # -- internals ---------------------------------------------------------

    def _require_trail(self) -> Trail:
        if self._trail is None:
            raise InvalidTrail("no trail loaded")
        return self._trail

    def _duration_ms(self) -> int:
        return self._timestamps[-1] - self._timestamps[0]

    def _fraction_at(self, index: int) -> float:
        duration = self._duration_ms()
        if duration <= 0:
            return 0.0
        return (self._timestamps[index] - self._timestamps[0]) / duration

    def _elapsed_ms(self, now: float) -> float:
        return self._offset_ms + (now - self._anchor) * 1000.0 * self._speed

    def _finish(self) -> None:
        self._status = PlaybackStatus.FINISHED
        self._index = len(self._timestamps) - 1
        self._progress = 1.0
        self._offset_ms = float(self._duration_ms())
        self._cancel_timer()
        logger.info("Player: finished %s", self._trail.id if self._trail else None)

    def _tick(self, stop_event: Optional[threading.Event]) -> Optional[PlaybackFrame]:
        with self._lock:
            if stop_event is not None and stop_event.is_set():
                return None
            if self._trail is None:
                return None
            if self._status == PlaybackStatus.PLAYING:
                elapsed = self._elapsed_ms(self._clock())
                if elapsed >= self._duration_ms():
                    self._finish()
                else:
                    self._index = index_at(self._timestamps, self._timestamps[0] + elapsed)
                    self._progress = self._fraction_at(self._index)
                self._emit()
            return self.frame()

    def _emit(self) -> None:
        if self._on_frame is None:
            return
        frame = self.frame()
        if frame is not None:
            self._on_frame(frame)

    def _start_timer(self) -> None:
        if not self._use_timer:
            return
        self._cancel_timer()
        stop_event = threading.Event()
        thread = threading.Thread(target=self._timer_loop, args=(stop_event,), daemon=True)
        self._timer_stop = stop_event
        self._timer_thread = thread
        thread.start()

    def _cancel_timer(self) -> None:
        if self._timer_stop is not None:
            self._timer_stop.set()
        self._timer_stop = None
        self._timer_thread = None

    def _timer_loop(self, stop_event: threading.Event) -> None:
        """Tick until paused, finished or cancelled."""
        while not stop_event.wait(timeout=self._tick_interval):
            try:
                frame = self._tick(stop_event)
            except Exception as e:
                logger.warning("Player tick: %s", e)
                break
            if frame is None or frame.status != PlaybackStatus.PLAYING:
                break
