
import logging
import time
from typing import Callable, Optional, Tuple, Union

from .camera_config import CameraConfig
from .core.bus import MessageBus, Publisher
from .core.calibration import read_calibration
from .core.capture import CaptureSource, open_capture
from .core.capture_loop import CaptureLoop, LoopState
from .core.errors import CalibrationError, CaptureOpenError
from .core.node_base import AbstractNode
from .core.schedule import PublishSchedule
from .core.schemas import CameraInfo, CameraStatus, Image, TriggerResponse
from .core.trigger import TriggerGate

log = logging.getLogger(__name__)

SourceFactory = Callable[[Union[int, str]], CaptureSource]
CalibrationLoader = Callable[[str], Tuple[str, CameraInfo]]


class CameraNode(AbstractNode):
    """Publishes frames from one camera device or video file.

    Topics: `<id>/image_raw` and, when calibration loads, `<id>/camera_info`.
    Lifecycle: start() opens the source and runs the capture loop on its
    own thread; stop() joins that thread before releasing the source.
    """

    def __init__(
        self,
        node_id: str,
        config: CameraConfig,
        bus: MessageBus,
        kind: str = "camera",
        source_factory: SourceFactory = open_capture,
        calibration_loader: CalibrationLoader = read_calibration,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
    ):
        super().__init__(node_id, kind)
        self.config = config
        self.bus = bus
        self.source_factory = source_factory
        self.calibration_loader = calibration_loader
        self.clock = clock
        self.sleep = sleep
        self.gate = TriggerGate(config.sync_mode)

        self.capture: Optional[CaptureSource] = None
        self.loop: Optional[CaptureLoop] = None
        self.camera_info: Optional[CameraInfo] = None
        self.publish_fps = 0
        self.width = 0.0
        self.height = 0.0
        self.image_pub: Optional[Publisher] = None
        self.camera_info_pub: Optional[Publisher] = None

    @property
    def image_topic(self) -> str:
        return f"{self.node_id}/image_raw"

    @property
    def camera_info_topic(self) -> str:
        return f"{self.node_id}/camera_info"

    @property
    def is_open(self) -> bool:
        return self.capture is not None

    def open(self) -> None:
        """Open the capture source and set up publishers. Raises CaptureOpenError."""
        cfg = self.config
        log.info("%s params: %s", self.node_id, cfg.model_dump())
        capture = self.source_factory(cfg.source)
        try:
            self._setup(capture)
        except Exception:
            capture.release()
            raise
        self.capture = capture

    def _setup(self, capture: CaptureSource) -> None:
        cfg = self.config

        if cfg.file:
            # Publish at the specified rate, or at the recorded rate
            self.publish_fps = cfg.fps if cfg.fps > 0 else int(capture.fps)
            self.width, self.height = capture.width, capture.height
            log.info("file %s open, width %g, height %g, publish fps %d",
                     cfg.filename, self.width, self.height, self.publish_fps)
        else:
            capture.configure(width=cfg.width, height=cfg.height, fps=cfg.fps)
            self.publish_fps = cfg.fps
            self.width, self.height = capture.width, capture.height
            log.info("device %d open, width %g, height %g, device fps %g",
                     cfg.source, self.width, self.height, capture.fps)

        schedule = PublishSchedule(self.publish_fps, self.clock()) if self.publish_fps > 0 else None

        try:
            camera_name, info = self.calibration_loader(cfg.camera_info_path)
        except CalibrationError as e:
            log.warning("cannot get camera info, will not publish: %s", e)
            self.camera_info = None
            self.camera_info_pub = None
        else:
            log.info("got camera info for '%s'", camera_name)
            info.header.frame_id = cfg.camera_frame_id
            info.width = int(self.width)
            info.height = int(self.height)
            self.camera_info = info
            self.camera_info_pub = self.bus.create_publisher(self.camera_info_topic, CameraInfo)

        self.image_pub = self.bus.create_publisher(self.image_topic, Image)
        self.loop = CaptureLoop(
            capture,
            self._publish,
            self.gate,
            frame_id=cfg.camera_frame_id,
            schedule=schedule,
            single_image_mode=cfg.file and capture.frame_count == 1,
            clock=self.clock,
            sleep=self.sleep,
        )

    def start(self) -> bool:
        if self.running:
            return True
        if not self.is_open:
            try:
                self.open()
            except CaptureOpenError as e:
                log.error("%s: %s", self.node_id, e)
                return False
        super().start()
        log.info("%s: start publishing", self.node_id)
        return True

    def stop(self) -> None:
        super().stop()
        if self.capture is not None:
            self.capture.release()
            self.capture = None
            log.info("%s: capture released", self.node_id)

    def run(self) -> None:
        self.loop.run(self._stop)

    def trigger(self) -> TriggerResponse:
        return self.gate.request_trigger()

    def _publish(self, image: Image) -> None:
        self.image_pub.publish(image)
        if self.camera_info_pub is not None:
            info = self.camera_info.model_copy(deep=True)
            info.header.stamp = image.header.stamp
            self.camera_info_pub.publish(info)

    def status(self) -> CameraStatus:
        state = self.loop.state if self.loop else LoopState.STOPPED
        return CameraStatus(
            id=self.node_id,
            kind=self.kind,
            source=str(self.config.source),
            is_open=self.is_open,
            state=state.value,
            sync_mode=self.config.sync_mode,
            publish_fps=self.publish_fps,
            width=int(self.width) if self.is_open else None,
            height=int(self.height) if self.is_open else None,
            camera_info=self.camera_info_pub is not None,
            single_image_mode=bool(self.loop and self.loop.single_image_mode),
        )
