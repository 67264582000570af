from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from api.deps import load_playback_config
from api.routes.ear_training import router as ear_training_router
from api.routes.export import router as export_router
from api.routes.playback import router as playback_router
from api.routes.progressions import router as progressions_router
from api.routes.voice_leading import router as voice_leading_router
from infrastructure.metrics import get_metrics_response
from playback.engine import AudioEngine
from playback.practice import PracticePlayer
from playback.scheduler import PlaybackScheduler


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the audio engine and practice player once per process.

    The engine opens its MIDI port lazily on the first playback request,
    so a machine without a MIDI backend can still serve theory endpoints.
    """
    config = load_playback_config()
    engine = AudioEngine(config)
    player = PracticePlayer(engine, PlaybackScheduler(), config)
    app.state.audio_engine = engine
    app.state.practice_player = player
    try:
        yield
    finally:
        player.stop()
        engine.close()


app = FastAPI(title="Jazz Piano Trainer", lifespan=lifespan)

# CORS: allow the practice UI dev server to call the API
# Browsers treat localhost and 127.0.0.1 as different origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(progressions_router)
app.include_router(voice_leading_router)
app.include_router(ear_training_router)
app.include_router(playback_router)
app.include_router(export_router)


@app.get("/health")
def health() -> dict[str, str]:
    """Return a simple liveness check."""
    return {"status": "ok"}


@app.get("/metrics")
def metrics() -> Response:
    """Prometheus metrics endpoint.

    Returns metrics in Prometheus text exposition format.
    """
    body, content_type = get_metrics_response()
    return Response(content=body, media_type=content_type)
