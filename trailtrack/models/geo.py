"""Location samples."""
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class GeoPoint:
    """A single location fix: degrees plus epoch milliseconds."""
    lat: float
    lng: float
    timestamp: int

    @property
    def center(self) -> Tuple[float, float]:
        return (self.lat, self.lng)

    def to_dict(self) -> dict:
        return {"lat": self.lat, "lng": self.lng, "timestamp": self.timestamp}

    @classmethod
    def from_dict(cls, data: dict) -> "GeoPoint":
        return cls(
            lat=float(data["lat"]),
            lng=float(data["lng"]),
            timestamp=int(data["timestamp"]),
        )
