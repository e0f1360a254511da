"""Domain errors raised by core services and mapped to HTTP codes by the API."""


class TrailtrackError(Exception):
    """Base for all trailtrack domain errors."""


class InvalidTrail(TrailtrackError):
    """Trail cannot be played or stored (e.g. empty path)."""


class RecordingError(TrailtrackError):
    """Recording operation not valid in the current session state."""
