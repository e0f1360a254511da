"""Human-readable trail summaries."""
from typing import Optional


def format_duration(ms: int) -> str:
    """'1h 2m 3s', or '2m 3s' when under an hour."""
    seconds = (ms // 1000) % 60
    minutes = (ms // (1000 * 60)) % 60
    hours = ms // (1000 * 60 * 60)
    prefix = f"{hours}h " if hours > 0 else ""
    return f"{prefix}{minutes}m {seconds}s"


def format_distance(distance: Optional[float]) -> str:
    if distance is None:
        return "N/A"
    if distance < 1000:
        return f"{distance:.0f} m"
    return f"{distance / 1000:.2f} km"
