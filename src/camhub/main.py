
import os
from pathlib import Path
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .api.routes import router as cameras_router
from .api.ws import router as ws_router
from .core.node_manager import manager
from .logging_config import configure_logging
from .api.health import router as health_router
from .api.video import router as video_router

configure_logging()

app = FastAPI(title="camhub",
              description="Publishes camera and video-file frames with calibration info on a topic bus",
              version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(cameras_router)
app.include_router(video_router)
app.include_router(ws_router)

@app.on_event("startup")
async def startup_event():
    cfg_path = os.getenv('CAMHUB_CONFIG', str(Path(__file__).parent / 'config' / 'config.yaml'))
    manager.load_from_config(Path(cfg_path))

@app.on_event("shutdown")
def shutdown_event():
    manager.stop_all()

# Run: uvicorn camhub.main:app --host 0.0.0.0 --port 8080
