import time
from pathlib import Path

import numpy as np
import pytest

from camhub.core.capture import CaptureSource
from camhub.core.errors import CalibrationError, CaptureOpenError
from camhub.core.schemas import CameraInfo

CONFIG_DIR = Path(__file__).resolve().parents[1] / 'src' / 'camhub' / 'config'


class FakeCapture(CaptureSource):
    """Replays a fixed list of frames; file sources can be rewound."""

    def __init__(self, frames, is_file=False, fps=30.0, frame_count=None, width=4, height=3):
        self.frames = list(frames)
        self.is_file = is_file
        self._fps = fps
        self._frame_count = len(self.frames) if frame_count is None else frame_count
        self._width = width
        self._height = height
        self.pos = 0
        self.reads = 0
        self.rewinds = 0
        self.configured = None
        self.released = False
        self.read_after_release = False

    def read(self):
        if self.released:
            self.read_after_release = True
            return False, None
        self.reads += 1
        if self.pos >= len(self.frames):
            return False, None
        frame = self.frames[self.pos]
        self.pos += 1
        return True, frame

    def rewind(self):
        self.rewinds += 1
        self.pos = 0

    def configure(self, width=0, height=0, fps=0):
        self.configured = (width, height, fps)

    @property
    def width(self):
        return self._width

    @property
    def height(self):
        return self._height

    @property
    def fps(self):
        return self._fps

    @property
    def frame_count(self):
        return self._frame_count

    def release(self):
        self.released = True


def make_frames(n, shape=(3, 4, 3), dtype=np.uint8):
    return [np.full(shape, i, dtype=dtype) for i in range(n)]


def source_factory(capture):
    def factory(source):
        capture.source = source
        return capture
    return factory


def failing_factory(source):
    raise CaptureOpenError(f"cannot open device {source}")


def fake_calibration(path):
    return 'test_cam', CameraInfo(width=640, height=480, distortion_model='plumb_bob',
                                  d=[0.1, 0.0, 0.0, 0.0, 0.0],
                                  k=[500.0, 0.0, 2.0, 0.0, 500.0, 1.5, 0.0, 0.0, 1.0])


def missing_calibration(path):
    raise CalibrationError(f"cannot read {path}")


def wait_for(predicate, timeout=5.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def frames():
    return make_frames(3)
