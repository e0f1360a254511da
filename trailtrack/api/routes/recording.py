"""Recording session: start with an initial fix, push fixes, stop to save a trail."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from trailtrack.api.state import AppState, get_state
from trailtrack.core.errors import RecordingError
from trailtrack.core.recorder import RecordingStatus
from trailtrack.core.trail_store import now_ms
from trailtrack.models.geo import GeoPoint

router = APIRouter()


class FixBody(BaseModel):
    lat: float = Field(ge=-90.0, le=90.0)
    lng: float = Field(ge=-180.0, le=180.0)
    timestamp: Optional[int] = None


class ErrorBody(BaseModel):
    reason: str = "Geolocation error"


def _status(state: AppState) -> dict:
    recorder = state.recorder
    position = recorder.current_position
    path = recorder.path
    return {
        "status": recorder.status.value,
        "abort_reason": recorder.abort_reason,
        "current_position": position.to_dict() if position else None,
        "center": [position.lat, position.lng] if position else None,
        "points": len(path),
        "path": [p.to_dict() for p in path],
    }


@router.get("")
def get_recording(state: AppState = Depends(get_state)):
    """Return the current session's status and accepted path."""
    return _status(state)


@router.post("/start")
def start_recording(body: FixBody, state: AppState = Depends(get_state)):
    """Start a session; the body is the initial fix. Stops any playback."""
    ts = body.timestamp if body.timestamp is not None else now_ms()
    try:
        state.start_recording(GeoPoint(lat=body.lat, lng=body.lng, timestamp=ts))
    except RecordingError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _status(state)


@router.post("/fix")
def push_fix(body: FixBody, state: AppState = Depends(get_state)):
    """Deliver one raw fix from the device. Rejection by the admission gate is not an error."""
    if state.recorder.status != RecordingStatus.RECORDING:
        raise HTTPException(status_code=409, detail="No active recording session")
    before = len(state.recorder.path)
    fix = state.fix_source.push(body.lat, body.lng, body.timestamp)
    return {
        "accepted": len(state.recorder.path) > before,
        "fix": fix.to_dict(),
        "points": len(state.recorder.path),
    }


@router.post("/error")
def report_error(body: ErrorBody, state: AppState = Depends(get_state)):
    """Report a location source failure; the session aborts but keeps its path."""
    state.fix_source.fail(body.reason)
    return _status(state)


@router.post("/stop")
def stop_recording(state: AppState = Depends(get_state)):
    """Stop the session. Saves a trail when at least two points were accepted."""
    try:
        trail = state.recorder.stop()
    except RecordingError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if trail is None:
        return {"saved": False, "message": "No significant path recorded.", "trail": None}
    return {
        "saved": True,
        "message": f"Trail saved: {trail.name}",
        "trail": {
            "id": trail.id,
            "name": trail.name,
            "start_time": trail.start_time,
            "end_time": trail.end_time,
            "distance": trail.distance,
            "points": len(trail.path),
        },
    }


@router.post("/discard")
def discard_recording(state: AppState = Depends(get_state)):
    """Drop the current or aborted session without saving."""
    state.recorder.discard()
    return _status(state)
