
from fastapi import APIRouter, HTTPException
from ..core.node_manager import manager
from ..core.schemas import CameraInfo, CameraStatus, ImageSummary, TriggerResponse
from ..node import CameraNode

router = APIRouter(prefix='/cameras', tags=['cameras'])


def _node(camera_id: str) -> CameraNode:
    node = manager.get(camera_id)
    if not node:
        raise HTTPException(status_code=404, detail='camera not found')
    return node


@router.get('', response_model=list[CameraStatus])
async def list_cameras():
    return manager.list()


@router.get('/{camera_id}', response_model=CameraStatus)
async def camera_status(camera_id: str):
    return _node(camera_id).status()


@router.get('/{camera_id}/image_raw', response_model=ImageSummary)
async def latest_image(camera_id: str):
    image = manager.latest(_node(camera_id).image_topic)
    if not image:
        raise HTTPException(status_code=404, detail='no image yet')
    return ImageSummary.from_image(image)


@router.get('/{camera_id}/camera_info', response_model=CameraInfo)
async def latest_camera_info(camera_id: str):
    info = manager.latest(_node(camera_id).camera_info_topic)
    if not info:
        raise HTTPException(status_code=404, detail='no camera info')
    return info


@router.post('/{camera_id}/trigger_capture', response_model=TriggerResponse)
def trigger_capture(camera_id: str):
    node = _node(camera_id)
    if not node.is_open:
        raise HTTPException(status_code=503, detail='camera not open')
    return node.trigger()
