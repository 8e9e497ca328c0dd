import pytest
from pydantic import ValidationError

from camhub.core.node_manager import NodeManager

from conftest import CONFIG_DIR, FakeCapture, fake_calibration, make_frames, wait_for


def test_load_from_config(tmp_path):
    opened = []

    def factory(source):
        opened.append(source)
        return FakeCapture(make_frames(2), is_file=isinstance(source, str))

    cfg = tmp_path / 'cameras.yaml'
    cfg.write_text("""
cameras:
  - id: front
    params: {index: 2, camera_info_path: calib/front.yaml}
  - id: replay
    params: {filename: clip.mp4, camera_info_path: /abs/replay.yaml, fps: 50, sync_mode: true}
""")
    m = NodeManager(source_factory=factory, calibration_loader=fake_calibration)
    m.load_from_config(cfg)
    try:
        assert opened == [2, str(tmp_path / 'clip.mp4')]
        front = m.get('front')
        assert front.config.camera_info_path == str(tmp_path / 'calib' / 'front.yaml')
        assert m.get('replay').config.sync_mode
        assert [s.id for s in m.list()] == ['front', 'replay']
        assert wait_for(lambda: m.latest('front/image_raw') is not None)
        assert m.latest('replay/image_raw') is None
    finally:
        m.stop_all()
    assert not any(n.running for n in m.nodes.values())


def test_shipped_config_parses():
    m = NodeManager(source_factory=lambda s: FakeCapture([], is_file=False))
    m.load_from_config(CONFIG_DIR / 'config.yaml')
    m.stop_all()
    assert m.get('cam0').config.fps == 30


def test_invalid_params_rejected(tmp_path):
    cfg = tmp_path / 'bad.yaml'
    cfg.write_text("cameras:\n  - id: x\n    params: {index: 0, filename: a.mp4, camera_info_path: c.yaml}\n")
    with pytest.raises(ValidationError):
        NodeManager().load_from_config(cfg)


def test_duplicate_ids_rejected(tmp_path):
    cfg = tmp_path / 'dup.yaml'
    cfg.write_text("cameras:\n  - id: x\n    params: {camera_info_path: c.yaml}\n"
                   "  - id: x\n    params: {camera_info_path: c.yaml}\n")
    m = NodeManager(source_factory=lambda s: FakeCapture([], is_file=False))
    with pytest.raises(ValueError):
        m.load_from_config(cfg)
    m.stop_all()
