
import logging
from abc import ABC, abstractmethod
from typing import Optional, Tuple, Union

import cv2
import numpy as np

from .errors import CaptureOpenError

log = logging.getLogger(__name__)


class CaptureSource(ABC):
    """What the capture loop needs from a camera device or video file."""

    is_file: bool = False

    @abstractmethod
    def read(self) -> Tuple[bool, Optional[np.ndarray]]:
        ...

    @abstractmethod
    def rewind(self) -> None:
        ...

    @abstractmethod
    def configure(self, width: int = 0, height: int = 0, fps: float = 0) -> None:
        """Request a frame size and rate; zero leaves the source default."""

    @property
    @abstractmethod
    def width(self) -> float:
        ...

    @property
    @abstractmethod
    def height(self) -> float:
        ...

    @property
    @abstractmethod
    def fps(self) -> float:
        ...

    @property
    @abstractmethod
    def frame_count(self) -> float:
        ...

    @abstractmethod
    def release(self) -> None:
        ...


class OpenCVCapture(CaptureSource):
    """CaptureSource backed by cv2.VideoCapture."""

    def __init__(self, source: Union[int, str]):
        self.source = source
        self.is_file = isinstance(source, str)
        self._cap = cv2.VideoCapture(source)
        if not self._cap.isOpened():
            self._cap.release()
            kind = "file" if self.is_file else "device"
            raise CaptureOpenError(f"cannot open {kind} {source}")

    def read(self) -> Tuple[bool, Optional[np.ndarray]]:
        return self._cap.read()

    def rewind(self) -> None:
        self._cap.set(cv2.CAP_PROP_POS_FRAMES, 0)

    def configure(self, width: int = 0, height: int = 0, fps: float = 0) -> None:
        # Not all cameras honor these
        if height > 0:
            self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
        if width > 0:
            self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        if fps > 0:
            self._cap.set(cv2.CAP_PROP_FPS, fps)

    @property
    def width(self) -> float:
        return self._cap.get(cv2.CAP_PROP_FRAME_WIDTH)

    @property
    def height(self) -> float:
        return self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT)

    @property
    def fps(self) -> float:
        return self._cap.get(cv2.CAP_PROP_FPS)

    @property
    def frame_count(self) -> float:
        return self._cap.get(cv2.CAP_PROP_FRAME_COUNT)

    def release(self) -> None:
        self._cap.release()


def open_capture(source: Union[int, str]) -> CaptureSource:
    log.info("OpenCV version %s", cv2.__version__)
    return OpenCVCapture(source)
