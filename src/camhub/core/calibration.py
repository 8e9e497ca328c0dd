
"""Camera calibration files in the ROS camera_calibration YAML layout."""

from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

import yaml

from .errors import CalibrationError
from .schemas import CameraInfo, RegionOfInterest


def _matrix(doc: Dict[str, Any], key: str, rows: int, cols: int) -> List[float]:
    m = doc.get(key)
    if m is None:
        raise CalibrationError(f"missing {key}")
    if not isinstance(m, dict):
        raise CalibrationError(f"{key} must be a mapping with rows, cols and data")
    data = m.get("data") or []
    if m.get("rows") != rows or m.get("cols") != cols or len(data) != rows * cols:
        raise CalibrationError(f"{key} must be {rows}x{cols}")
    return [float(v) for v in data]


def _mapping(doc: Dict[str, Any], key: str) -> Dict[str, Any]:
    m = doc.get(key) or {}
    if not isinstance(m, dict):
        raise CalibrationError(f"{key} must be a mapping")
    return m


def parse_calibration(text: str) -> Tuple[str, CameraInfo]:
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise CalibrationError(f"invalid YAML: {e}") from e
    if not isinstance(doc, dict):
        raise CalibrationError("calibration must be a YAML mapping")

    try:
        dist = _mapping(doc, "distortion_coefficients")
        d = [float(v) for v in dist.get("data") or []]
        roi = _mapping(doc, "roi")
        info = CameraInfo(
            width=int(doc.get("image_width", 0)),
            height=int(doc.get("image_height", 0)),
            distortion_model=str(doc.get("distortion_model", "plumb_bob" if d else "")),
            d=d,
            k=_matrix(doc, "camera_matrix", 3, 3),
            r=_matrix(doc, "rectification_matrix", 3, 3),
            p=_matrix(doc, "projection_matrix", 3, 4),
            binning_x=int(doc.get("binning_x", 0)),
            binning_y=int(doc.get("binning_y", 0)),
            roi=RegionOfInterest(**roi),
        )
    except (TypeError, ValueError) as e:
        raise CalibrationError(f"invalid calibration value: {e}") from e
    return str(doc.get("camera_name", "")), info


def read_calibration(path: Union[str, Path]) -> Tuple[str, CameraInfo]:
    """Load (camera_name, CameraInfo) from a calibration file."""
    if not str(path):
        raise CalibrationError("calibration path is empty")
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CalibrationError(f"cannot read {path}: {e}") from e
    return parse_calibration(text)
