
import logging
import threading
import time
from enum import Enum
from typing import Callable, Optional

import numpy as np

from .capture import CaptureSource
from .encoding import image_from_frame
from .schedule import PublishSchedule
from .schemas import Image, Time
from .trigger import TriggerGate

log = logging.getLogger(__name__)


class LoopState(str, Enum):
    RUNNING = "running"
    STOPPED = "stopped"


class CaptureLoop:
    """Reads frames from a capture source and hands them to a publish callback.

    File sources are rewound on end of stream; device sources stop the
    loop. In single-image mode the first frame read is cached and
    republished on every tick without touching the source again.
    """

    def __init__(
        self,
        source: CaptureSource,
        publish: Callable[[Image], None],
        gate: TriggerGate,
        frame_id: str = "camera_frame",
        schedule: Optional[PublishSchedule] = None,
        single_image_mode: bool = False,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.source = source
        self.publish = publish
        self.gate = gate
        self.frame_id = frame_id
        self.schedule = schedule
        self.single_image_mode = single_image_mode
        self.clock = clock
        self.sleep = sleep
        self.state = LoopState.STOPPED
        self.reads = 0
        self.rewinds = 0
        self.published = 0
        self.dropped = 0
        self._frame: Optional[np.ndarray] = None
        self._frame_loaded = False

    def run(self, cancel: threading.Event) -> None:
        log.info("Single Image Mode = %s", self.single_image_mode)
        self.state = LoopState.RUNNING
        try:
            while not cancel.is_set():
                if not self.step():
                    break
        finally:
            self.state = LoopState.STOPPED

    def step(self) -> bool:
        """Run one iteration; returns False once the source has ended."""
        if not self.single_image_mode or not self._frame_loaded:
            ok, frame = self.source.read()
            self.reads += 1
            if not ok:
                if self.source.is_file:
                    log.info("Reached EOF, looping back to start.")
                    self.source.rewind()
                    self.rewinds += 1
                    return True
                log.info("EOF or error reading frame, stop publishing")
                return False
            self._frame = frame
            if self.single_image_mode:
                self._frame_loaded = True

        stamp = self.clock()
        image = image_from_frame(self._frame, Time.from_seconds(stamp), self.frame_id)

        if self.gate.should_publish():
            self.publish(image)
            self.published += 1
        else:
            self.dropped += 1

        if self.schedule is not None:
            wait = self.schedule.wait_after(stamp)
            if wait > 0:
                self.sleep(wait)
        return True
