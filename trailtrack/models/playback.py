"""Player status and per-tick frames."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from trailtrack.models.geo import GeoPoint


class PlaybackStatus(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    FINISHED = "finished"


@dataclass(frozen=True)
class PlaybackState:
    """Snapshot of the player, reset whenever a trail is loaded."""
    trail_id: Optional[str]
    status: PlaybackStatus
    progress_fraction: float
    speed: float
    index: int


@dataclass(frozen=True)
class PlaybackFrame:
    """What the presentation side receives on every tick."""
    marker: GeoPoint
    center: Tuple[float, float]
    progress_fraction: float
    speed: float
    status: PlaybackStatus
