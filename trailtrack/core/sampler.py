"""Admission filter that reduces a raw fix stream to a storable path.

A fix is accepted only when enough time has passed *and* the position has
moved far enough since the last accepted fix. The first fix of a session is
always accepted. State is an immutable value passed in and returned out, so a
session can be replayed or inspected without hidden fields.
"""
import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from trailtrack.config import MIN_DISTANCE_M, MIN_INTERVAL_MS
from trailtrack.core.geometry import great_circle_distance
from trailtrack.models.geo import GeoPoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SamplerState:
    last_accepted_point: Optional[GeoPoint] = None
    last_accepted_time: int = 0


@dataclass(frozen=True)
class Decision:
    accept: bool
    state: SamplerState


def start(initial_fix: GeoPoint) -> Tuple[List[GeoPoint], SamplerState]:
    """Open a session: the initial fix is the first path point."""
    state = SamplerState(
        last_accepted_point=initial_fix,
        last_accepted_time=initial_fix.timestamp,
    )
    return [initial_fix], state


def offer(
    fix: GeoPoint,
    state: SamplerState,
    min_interval_ms: int = MIN_INTERVAL_MS,
    min_distance_m: float = MIN_DISTANCE_M,
) -> Decision:
    """Decide whether fix joins the path. Rejection returns the same state."""
    time_passed = fix.timestamp - state.last_accepted_time
    if state.last_accepted_point is not None:
        distance_moved = great_circle_distance(state.last_accepted_point, fix)
    else:
        distance_moved = math.inf

    if time_passed >= min_interval_ms and distance_moved >= min_distance_m:
        logger.debug("Sampler: accept dt=%dms d=%.1fm", time_passed, distance_moved)
        return Decision(
            accept=True,
            state=SamplerState(last_accepted_point=fix, last_accepted_time=fix.timestamp),
        )
    logger.debug("Sampler: reject dt=%dms d=%.1fm", time_passed, distance_moved)
    return Decision(accept=False, state=state)


def stop(path: List[GeoPoint]) -> Optional[List[GeoPoint]]:
    """Return the path if it is worth keeping (two points or more), else None."""
    if len(path) < 2:
        return None
    return path


class Sampler:
    """One recording session's path and state around the functions above."""

    def __init__(
        self,
        min_interval_ms: int = MIN_INTERVAL_MS,
        min_distance_m: float = MIN_DISTANCE_M,
    ) -> None:
        self.min_interval_ms = min_interval_ms
        self.min_distance_m = min_distance_m
        self._path: List[GeoPoint] = []
        self._state = SamplerState()

    @property
    def path(self) -> List[GeoPoint]:
        return list(self._path)

    @property
    def state(self) -> SamplerState:
        return self._state

    def start(self, initial_fix: GeoPoint) -> List[GeoPoint]:
        self._path, self._state = start(initial_fix)
        return self.path

    def restore(self, path: List[GeoPoint]) -> None:
        """Continue a session from a journaled path (last point is the last accepted)."""
        if not path:
            self._path, self._state = [], SamplerState()
            return
        self._path = list(path)
        self._state = SamplerState(
            last_accepted_point=path[-1],
            last_accepted_time=path[-1].timestamp,
        )

    def offer(self, fix: GeoPoint) -> bool:
        decision = offer(fix, self._state, self.min_interval_ms, self.min_distance_m)
        if decision.accept:
            self._path.append(fix)
            self._state = decision.state
        return decision.accept

    def stop(self) -> Optional[List[GeoPoint]]:
        result = stop(self._path)
        self._path, self._state = [], SamplerState()
        return result
