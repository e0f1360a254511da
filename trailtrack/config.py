"""Configuration: env, data paths, admission thresholds, playback tick."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Base paths (project root = parent of trailtrack package)
BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env from project root so TRAILTRACK_* overrides are set
load_dotenv(BASE_DIR / ".env")

DATA_DIR = Path(os.getenv("TRAILTRACK_DATA_DIR", str(BASE_DIR / "data")))
TRAILS_PATH = DATA_DIR / "trails.json"
ACTIVE_SESSION_PATH = DATA_DIR / "active_session.json"

# API
API_HOST = os.getenv("TRAILTRACK_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("TRAILTRACK_API_PORT", "8000"))

# Admission gate: a fix joins the path only when both are met
MIN_INTERVAL_MS = int(os.getenv("TRAILTRACK_MIN_INTERVAL_MS", "2500"))
MIN_DISTANCE_M = float(os.getenv("TRAILTRACK_MIN_DISTANCE_M", "10"))

# Player re-evaluates the simulated clock this often while playing
PLAYBACK_TICK_SEC = float(os.getenv("TRAILTRACK_PLAYBACK_TICK_SEC", "0.1"))

# Mean Earth radius for haversine
EARTH_RADIUS_M = 6_371_000.0


def ensure_data_dir() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)
