import time

import pytest
from fastapi.testclient import TestClient

from camhub.camera_config import CameraConfig
from camhub.core.node_manager import manager
from camhub.main import app
from camhub.node import CameraNode

from conftest import FakeCapture, failing_factory, fake_calibration, make_frames, source_factory, wait_for


def _add(node_id, capture=None, factory=None, **params):
    params.setdefault('camera_info_path', 'info.yaml')
    node = CameraNode(node_id, CameraConfig(**params), manager.bus,
                      source_factory=factory or source_factory(capture),
                      calibration_loader=fake_calibration, sleep=time.sleep)
    manager.register(node)
    return node


@pytest.fixture
def client():
    yield TestClient(app)
    manager.stop_all()
    manager.nodes.clear()


def test_health(client):
    assert client.get('/health').json() == {'status': 'ok'}
    assert client.get('/ready').json() == {'ready': False}


def test_cameras_and_latest_messages(client):
    _add('dev', FakeCapture(make_frames(2), is_file=False, width=4, height=3))
    assert wait_for(lambda: manager.latest('dev/camera_info') is not None)
    assert wait_for(lambda: not manager.get('dev').running)

    cams = client.get('/cameras').json()
    assert [c['id'] for c in cams] == ['dev']
    assert cams[0]['camera_info'] is True

    img = client.get('/cameras/dev/image_raw').json()
    assert img['encoding'] == 'bgr8'
    assert img['size'] == img['height'] * img['step']
    assert 'data' not in img

    info = client.get('/cameras/dev/camera_info').json()
    assert info['header']['stamp'] == img['header']['stamp']
    assert (info['width'], info['height']) == (4, 3)

    snap = client.get('/video/dev/snapshot.jpg')
    assert snap.status_code == 200
    assert snap.headers['content-type'] == 'image/jpeg'
    assert snap.content[:2] == b'\xff\xd8'

    assert client.get('/ready').json() == {'ready': True}
    assert client.get('/health/cameras').json()['cameras'][0]['id'] == 'dev'


def test_unknown_camera(client):
    assert client.get('/cameras/nope').status_code == 404
    assert client.post('/cameras/nope/trigger_capture').status_code == 404
    assert client.get('/video/nope/snapshot.jpg').status_code == 404


def test_trigger_capture(client):
    node = _add('sync', FakeCapture(make_frames(2), is_file=True), filename='clip.mp4', fps=100, sync_mode=True)
    assert wait_for(lambda: node.loop.dropped > 2)
    assert client.get('/cameras/sync/image_raw').status_code == 404

    r = client.post('/cameras/sync/trigger_capture')
    assert r.status_code == 200
    assert r.json() == {'success': True, 'message': 'Capture triggered'}
    assert wait_for(lambda: manager.bus.count('sync/image_raw') == 1)
    assert client.get('/cameras/sync/image_raw').status_code == 200


def test_trigger_on_closed_camera(client):
    _add('broken', factory=failing_factory, index=7)
    assert client.get('/cameras/broken').json()['is_open'] is False
    assert client.post('/cameras/broken/trigger_capture').status_code == 503


def test_websocket_poll(client):
    _add('dev', FakeCapture(make_frames(1), is_file=False))
    assert wait_for(lambda: manager.latest('dev/image_raw') is not None)
    with client.websocket_connect('/ws') as ws:
        ws.send_json({'action': 'topics'})
        assert 'dev/image_raw' in ws.receive_json()['topics']
        ws.send_json({'action': 'subscribe', 'topic': 'dev/image_raw'})
        assert ws.receive_json() == {'type': 'subscribed', 'topic': 'dev/image_raw'}
        ws.send_json({'action': 'subscribe', 'topic': 'nope'})
        assert ws.receive_json()['type'] == 'error'
        ws.send_json({'action': 'poll'})
        res = ws.receive_json()
        assert res['type'] == 'poll-result'
        assert res['data']['dev/image_raw']['encoding'] == 'bgr8'
        ws.send_json({'action': 'bogus'})
        assert ws.receive_json() == {'type': 'error', 'error': 'unknown action'}
