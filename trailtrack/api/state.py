"""Shared application state (injected into routes)."""
import logging
from typing import List, Optional

from trailtrack.core.fix_source import FixSource
from trailtrack.core.player import TrailPlayer
from trailtrack.core.recorder import Recorder
from trailtrack.core.trail_store import SessionJournal, TrailStore, delete_trail, get_trail_by_id
from trailtrack.models.geo import GeoPoint
from trailtrack.models.trail import Trail

logger = logging.getLogger(__name__)


class AppState:
    """Recording and playback are mutually exclusive; starting one stops the other."""

    def __init__(
        self,
        store: Optional[TrailStore] = None,
        journal: Optional[SessionJournal] = None,
        fix_source: Optional[FixSource] = None,
        player: Optional[TrailPlayer] = None,
    ) -> None:
        self.store = store or TrailStore()
        self.fix_source = fix_source or FixSource()
        self.recorder = Recorder(
            self.store,
            self.fix_source,
            journal=journal or SessionJournal(),
            on_update=self._on_recording_update,
        )
        self.player = player or TrailPlayer()

    def _on_recording_update(self, marker: GeoPoint, path: List[GeoPoint]) -> None:
        logger.debug("Recording: marker %.6f,%.6f (%d points)", marker.lat, marker.lng, len(path))

    def get_trails(self) -> List[Trail]:
        return self.store.load_all()

    def get_trail(self, trail_id: str) -> Optional[Trail]:
        return get_trail_by_id(self.store.load_all(), trail_id)

    def start_recording(self, initial_fix: GeoPoint) -> List[GeoPoint]:
        self.player.close()
        return self.recorder.start(initial_fix)

    def load_trail(self, trail_id: str) -> Optional[Trail]:
        """Load trail into the player; an active recording is stopped (and saved) first."""
        trail = self.get_trail(trail_id)
        if trail is None:
            return None
        if self.recorder.is_active:
            logger.info("Loading %s: stopping active recording first", trail_id)
            self.recorder.stop()
        self.player.load(trail)
        return trail

    def delete_trail(self, trail_id: str) -> bool:
        if not delete_trail(self.store, trail_id):
            return False
        current = self.player.trail
        if current is not None and current.id == trail_id:
            self.player.close()
        return True

    def shutdown(self) -> None:
        # Recording stays journaled so the next start can resume it
        self.player.close()


_state = AppState()


def get_state() -> AppState:
    return _state
