"""Stored trails: list, detail, delete."""
from fastapi import APIRouter, Depends, HTTPException

from trailtrack.api.state import AppState, get_state
from trailtrack.core.formatting import format_distance, format_duration
from trailtrack.models.trail import Trail

router = APIRouter()


def _trail_summary(t: Trail) -> dict:
    return {
        "id": t.id,
        "name": t.name,
        "start_time": t.start_time,
        "end_time": t.end_time,
        "distance": t.distance,
        "points": len(t.path),
        "duration_ms": t.duration_ms,
        "duration_label": format_duration(t.duration_ms),
        "distance_label": format_distance(t.distance),
    }


def _trail_to_dict(t: Trail) -> dict:
    out = _trail_summary(t)
    out["path"] = [p.to_dict() for p in t.path]
    return out


@router.get("/")
def list_trails(state: AppState = Depends(get_state)):
    """List all stored trails (without paths)."""
    return [_trail_summary(t) for t in state.get_trails()]


@router.get("/{trail_id}")
def get_trail(trail_id: str, state: AppState = Depends(get_state)):
    """Return one trail including its path."""
    trail = state.get_trail(trail_id)
    if trail is None:
        raise HTTPException(status_code=404, detail="Trail not found")
    return _trail_to_dict(trail)


@router.delete("/{trail_id}", status_code=204)
def delete_trail(trail_id: str, state: AppState = Depends(get_state)):
    """Delete a trail; unloads the player if it was showing it."""
    if not state.delete_trail(trail_id):
        raise HTTPException(status_code=404, detail="Trail not found")
