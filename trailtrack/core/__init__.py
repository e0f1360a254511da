"""Core services: sampler, geometry, player, recorder, trail store."""
from trailtrack.core.player import TrailPlayer
from trailtrack.core.recorder import Recorder
from trailtrack.core.trail_store import TrailStore

__all__ = ["Recorder", "TrailPlayer", "TrailStore"]
