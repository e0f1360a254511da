"""FastAPI app, CORS, and route registration."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(name)s: %(message)s",
)

from trailtrack.api.state import AppState, get_state
from trailtrack.config import ensure_data_dir

# Import routes after state to avoid circular imports
from trailtrack.api.routes import playback, recording, trails

__all__ = ["app", "AppState", "get_state"]

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    ensure_data_dir()
    state = get_state()
    if state.recorder.resume():
        logger.info("Resumed recording session (%d points)", len(state.recorder.path))

    yield

    state.shutdown()


app = FastAPI(
    title="Trailtrack API",
    description="Local REST API for recording and replaying trails",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(trails.router, prefix="/api/trails", tags=["trails"])
app.include_router(recording.router, prefix="/api/recording", tags=["recording"])
app.include_router(playback.router, prefix="/api/playback", tags=["playback"])
