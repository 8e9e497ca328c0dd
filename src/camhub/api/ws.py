
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from fastapi.encoders import jsonable_encoder
from ..core.node_manager import manager
from ..core.schemas import Image, ImageSummary

router = APIRouter()


def _summary(msg):
    # Raw pixels stay on the bus; clients get the metadata
    if isinstance(msg, Image):
        return ImageSummary.from_image(msg).model_dump()
    return msg.model_dump()


@router.websocket('/ws')
async def ws_endpoint(ws: WebSocket):
    await ws.accept()
    try:
        subscriptions: set[str] = set()
        while True:
            msg = await ws.receive_json()
            action = msg.get('action')

            if action == 'subscribe':
                topic = msg.get('topic')
                if not isinstance(topic, str):
                    await ws.send_json({'type': 'error', 'error': 'topic must be a string'})
                    continue

                if topic in manager.bus.topics():
                    subscriptions.add(topic)
                    await ws.send_json({'type': 'subscribed', 'topic': topic})
                else:
                    await ws.send_json({'type': 'error', 'error': f'unknown topic {topic}'})

            elif action == 'unsubscribe':
                subscriptions.discard(msg.get('topic'))
                await ws.send_json({'type': 'unsubscribed', 'topic': msg.get('topic')})

            elif action == 'topics':
                await ws.send_json({'type': 'topics', 'topics': manager.bus.topics()})

            elif action == 'poll':
                out = {}
                for topic in list(subscriptions):
                    m = manager.latest(topic)
                    if m is not None:
                        out[topic] = _summary(m)
                await ws.send_json({'type': 'poll-result', 'data': jsonable_encoder(out)})

            else:
                await ws.send_json({'type': 'error', 'error': 'unknown action'})
    except WebSocketDisconnect:
        return
