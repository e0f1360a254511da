"""Data models for fixes, trails, and playback."""
from trailtrack.models.geo import GeoPoint
from trailtrack.models.playback import PlaybackFrame, PlaybackState, PlaybackStatus
from trailtrack.models.trail import Trail

__all__ = [
    "GeoPoint",
    "Trail",
    "PlaybackFrame",
    "PlaybackState",
    "PlaybackStatus",
]
