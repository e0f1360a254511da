"""Persist and load trails (JSON), whole collection at a time."""
import json
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from trailtrack.config import ACTIVE_SESSION_PATH, TRAILS_PATH, ensure_data_dir
from trailtrack.core.errors import InvalidTrail
from trailtrack.core.geometry import cumulative_distance
from trailtrack.models.geo import GeoPoint
from trailtrack.models.trail import Trail

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


def trail_to_dict(t: Trail) -> dict:
    return {
        "id": t.id,
        "name": t.name,
        "startTime": t.start_time,
        "endTime": t.end_time,
        "path": [p.to_dict() for p in t.path],
        "distance": t.distance,
    }


def trail_from_dict(item: dict) -> Trail:
    path = tuple(GeoPoint.from_dict(p) for p in item["path"])
    if not path:
        raise InvalidTrail(f"trail {item.get('id')!r} has an empty path")
    return Trail(
        id=item["id"],
        name=item["name"],
        start_time=int(item["startTime"]),
        end_time=int(item["endTime"]),
        path=path,
        distance=float(item["distance"]),
    )


def build_trail(path: Sequence[GeoPoint], created_ms: Optional[int] = None) -> Trail:
    """Summarize an accepted path into a new Trail (id and name from creation/start time)."""
    if not path:
        raise InvalidTrail("path must have at least one point")
    created = created_ms if created_ms is not None else now_ms()
    start = path[0].timestamp
    started_at = datetime.fromtimestamp(start / 1000.0)
    return Trail(
        id=f"trail_{created}",
        name=f"Trail - {started_at.strftime('%b %d, %Y %H:%M')}",
        start_time=start,
        end_time=path[-1].timestamp,
        path=tuple(path),
        distance=cumulative_distance(path),
    )


class TrailStore:
    """JSON-file backed trail collection: load_all() / save_all() only."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path

    def _file(self) -> Path:
        if self._path is not None:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            return self._path
        ensure_data_dir()
        return TRAILS_PATH

    def load_all(self) -> List[Trail]:
        """Load all trails from disk; unreadable file means no trails."""
        p = self._file()
        if not p.exists():
            return []
        try:
            data = json.loads(p.read_text())
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Trail store: cannot read %s (%s), treating as empty", p, e)
            return []
        items = data.get("trails") if isinstance(data, dict) else None
        if not isinstance(items, list):
            logger.warning("Trail store: %s is not a trail collection, treating as empty", p)
            return []
        out = []
        seen = set()
        for item in items:
            try:
                trail = trail_from_dict(item)
            except (KeyError, TypeError, ValueError, InvalidTrail) as e:
                logger.warning("Trail store: skipping malformed entry (%s)", e)
                continue
            if trail.id in seen:
                continue
            seen.add(trail.id)
            out.append(trail)
        return out

    def save_all(self, trails: List[Trail]) -> None:
        """Save all trails to disk, replacing what was there."""
        p = self._file()
        data = {"trails": [trail_to_dict(t) for t in trails]}
        tmp = p.with_suffix(p.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2))
        tmp.replace(p)


def get_trail_by_id(trails: List[Trail], trail_id: str) -> Optional[Trail]:
    """Return trail by id or None."""
    for t in trails:
        if t.id == trail_id:
            return t
    return None


def add_trail(store: TrailStore, trail: Trail) -> List[Trail]:
    """Read the collection, append trail (replacing a same-id entry), write it back."""
    trails = [t for t in store.load_all() if t.id != trail.id]
    trails.append(trail)
    store.save_all(trails)
    logger.info("Trail store: saved %s (%d points, %.0f m)", trail.id, len(trail.path), trail.distance)
    return trails


def delete_trail(store: TrailStore, trail_id: str) -> bool:
    """Remove trail by id; save. Returns True if found and removed."""
    trails = store.load_all()
    for i, t in enumerate(trails):
        if t.id == trail_id:
            trails.pop(i)
            store.save_all(trails)
            logger.info("Trail store: deleted %s", trail_id)
            return True
    return False


class SessionJournal:
    """In-progress recording path, kept on disk so a restart can resume it."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path

    def _file(self) -> Path:
        if self._path is not None:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            return self._path
        ensure_data_dir()
        return ACTIVE_SESSION_PATH

    def save(self, path: Sequence[GeoPoint]) -> None:
        self._file().write_text(json.dumps({"path": [p.to_dict() for p in path]}))

    def load(self) -> List[GeoPoint]:
        p = self._file()
        if not p.exists():
            return []
        try:
            data = json.loads(p.read_text())
            return [GeoPoint.from_dict(item) for item in data.get("path", [])]
        except (json.JSONDecodeError, OSError, AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning("Session journal: cannot read %s (%s), ignoring", p, e)
            return []

    def clear(self) -> None:
        p = self._file()
        if p.exists():
            p.unlink()
