"""Stored trail record."""
from dataclasses import dataclass
from typing import Tuple

from trailtrack.models.geo import GeoPoint


@dataclass(frozen=True)
class Trail:
    """Completed recording: summarized path, immutable once created."""
    id: str
    name: str
    start_time: int
    end_time: int
    path: Tuple[GeoPoint, ...]
    distance: float  # meters

    @property
    def duration_ms(self) -> int:
        return self.end_time - self.start_time
