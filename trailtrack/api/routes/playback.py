"""Trail playback: load, play/pause, seek, speed, and current frame."""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from trailtrack.api.state import AppState, get_state
from trailtrack.core.errors import InvalidTrail

router = APIRouter()


class LoadBody(BaseModel):
    trail_id: str


class SeekBody(BaseModel):
    fraction: float


class SpeedBody(BaseModel):
    multiplier: float = Field(gt=0, allow_inf_nan=False)


def _playback(state: AppState) -> dict:
    snap, frame = state.player.view()
    return {
        "trail_id": snap.trail_id,
        "status": snap.status.value,
        "progress_fraction": snap.progress_fraction,
        "speed": snap.speed,
        "index": snap.index,
        "marker": frame.marker.to_dict() if frame else None,
        "center": list(frame.center) if frame else None,
    }


@router.get("")
def get_playback(state: AppState = Depends(get_state)):
    """Return the player's current position and progress."""
    return _playback(state)


@router.post("/load")
def load_trail(body: LoadBody, state: AppState = Depends(get_state)):
    """Load a stored trail; stops (and saves) an active recording first."""
    try:
        trail = state.load_trail(body.trail_id)
    except InvalidTrail as e:
        raise HTTPException(status_code=400, detail=str(e))
    if trail is None:
        raise HTTPException(status_code=404, detail="Trail not found")
    return _playback(state)


@router.post("/play")
def play(state: AppState = Depends(get_state)):
    try:
        state.player.play()
    except InvalidTrail as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _playback(state)


@router.post("/pause")
def pause(state: AppState = Depends(get_state)):
    state.player.pause()
    return _playback(state)


@router.post("/seek")
def seek(body: SeekBody, state: AppState = Depends(get_state)):
    """Scrub to a fraction of the path (clamped to [0, 1])."""
    try:
        state.player.seek(body.fraction)
    except InvalidTrail as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _playback(state)


@router.post("/speed")
def set_speed(body: SpeedBody, state: AppState = Depends(get_state)):
    try:
        state.player.set_speed(body.multiplier)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _playback(state)
