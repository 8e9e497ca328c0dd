from fastapi import APIRouter
from ..core.node_manager import manager

router = APIRouter(prefix="", tags=["health"])


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.get("/ready")
async def ready():
    ready_any = any(manager.latest(n.image_topic) is not None for n in manager.nodes.values())
    return {"ready": ready_any}


@router.get("/health/cameras")
async def health_cameras():
    return {"cameras": [{"id": s.id, "open": s.is_open, "state": s.state} for s in manager.list()]}
