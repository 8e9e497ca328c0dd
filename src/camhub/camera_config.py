
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class CameraConfig(BaseModel):
    """Startup parameters of a camera node. Immutable once built."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    index: Optional[int] = Field(None, ge=0, description="Device index, e.g. 0 for /dev/video0")
    filename: Optional[str] = Field(None, description="Video or image file to play back")
    width: int = Field(0, ge=0, description="Requested width, 0 for the source default")
    height: int = Field(0, ge=0, description="Requested height, 0 for the source default")
    fps: int = Field(0, ge=0, description="Requested/publish rate, 0 for the source default")
    camera_frame_id: str = "camera_frame"
    camera_info_path: str = Field(..., description="Calibration YAML file")
    sync_mode: bool = False

    @field_validator("camera_info_path")
    @classmethod
    def _info_path_set(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("camera_info_path must not be empty")
        return v

    @field_validator("filename")
    @classmethod
    def _filename_set(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("filename must not be empty")
        return v

    @model_validator(mode="after")
    def _one_source(self) -> "CameraConfig":
        if self.index is not None and self.filename is not None:
            raise ValueError("index and filename are mutually exclusive")
        return self

    @property
    def file(self) -> bool:
        return self.filename is not None

    @property
    def source(self) -> Union[int, str]:
        if self.filename is not None:
            return self.filename
        return self.index if self.index is not None else 0

    def resolve(self, base: Path) -> "CameraConfig":
        """Return a copy with relative file paths anchored at base."""
        changes = {}
        if not Path(self.camera_info_path).is_absolute():
            changes["camera_info_path"] = str(base / self.camera_info_path)
        # URLs (rtsp://, http://) are passed to OpenCV untouched
        if self.filename is not None and "://" not in self.filename and not Path(self.filename).is_absolute():
            changes["filename"] = str(base / self.filename)
        return self.model_copy(update=changes) if changes else self
