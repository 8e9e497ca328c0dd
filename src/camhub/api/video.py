from typing import List
from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from ..core.encoding import image_to_jpeg
from ..core.errors import UnsupportedEncoding
from ..core.node_manager import manager
from ..core.schemas import CameraStatus

router = APIRouter(prefix="/video", tags=["video"])


@router.get("/cameras", response_model=List[CameraStatus])
async def list_cameras():
    return [s for s in manager.list() if s.kind == "camera"]


@router.get("/{camera_id}/snapshot.jpg")
def snapshot(camera_id: str, quality: int = 80):
    node = manager.get(camera_id)
    if not node or node.kind != "camera":
        raise HTTPException(status_code=404, detail="camera not found")

    image = manager.latest(node.image_topic)
    if not image:
        raise HTTPException(status_code=404, detail="no frame yet")

    try:
        jpeg = image_to_jpeg(image, quality=quality)
    except UnsupportedEncoding as e:
        raise HTTPException(status_code=415, detail=str(e))
    return Response(content=jpeg, media_type="image/jpeg")
