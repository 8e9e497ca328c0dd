
from typing import List, Optional

from pydantic import BaseModel, Field


class Time(BaseModel):
    sec: int = 0
    nanosec: int = 0

    @classmethod
    def from_seconds(cls, seconds: float) -> "Time":
        sec, nanosec = divmod(int(round(seconds * 1e9)), 1_000_000_000)
        return cls(sec=sec, nanosec=nanosec)

    def to_seconds(self) -> float:
        return self.sec + self.nanosec / 1e9


class Header(BaseModel):
    stamp: Time = Field(default_factory=Time)
    frame_id: str = ""


class Image(BaseModel):
    header: Header = Field(default_factory=Header)
    height: int = 0
    width: int = 0
    encoding: str = ""
    is_bigendian: bool = False
    step: int = Field(0, description="Full row length in bytes")
    data: bytes = b""


class ImageSummary(BaseModel):
    """Image metadata without the pixel payload, for JSON consumers."""
    header: Header
    height: int
    width: int
    encoding: str
    is_bigendian: bool
    step: int
    size: int

    @classmethod
    def from_image(cls, image: Image) -> "ImageSummary":
        return cls(
            header=image.header,
            height=image.height,
            width=image.width,
            encoding=image.encoding,
            is_bigendian=image.is_bigendian,
            step=image.step,
            size=len(image.data),
        )


class RegionOfInterest(BaseModel):
    x_offset: int = 0
    y_offset: int = 0
    height: int = 0
    width: int = 0
    do_rectify: bool = False


class CameraInfo(BaseModel):
    header: Header = Field(default_factory=Header)
    height: int = 0
    width: int = 0
    distortion_model: str = ""
    d: List[float] = Field(default_factory=list)
    k: List[float] = Field(default_factory=lambda: [0.0] * 9)
    r: List[float] = Field(default_factory=lambda: [0.0] * 9)
    p: List[float] = Field(default_factory=lambda: [0.0] * 12)
    binning_x: int = 0
    binning_y: int = 0
    roi: RegionOfInterest = Field(default_factory=RegionOfInterest)


class TriggerResponse(BaseModel):
    success: bool
    message: str = ""


class CameraStatus(BaseModel):
    id: str
    kind: str
    source: str
    is_open: bool
    state: str
    sync_mode: bool
    publish_fps: float = 0.0
    width: Optional[int] = None
    height: Optional[int] = None
    camera_info: bool = False
    single_image_mode: bool = False
