
"""Mapping between OpenCV frames and wire image messages."""

from typing import Dict, Tuple

import cv2
import numpy as np

from .errors import UnsupportedEncoding
from .schemas import Header, Image, Time

_CN_SHIFT = 3
_CN_MAX = 512

_DEPTHS: Dict[np.dtype, int] = {
    np.dtype(np.uint8): cv2.CV_8U,
    np.dtype(np.int8): cv2.CV_8S,
    np.dtype(np.uint16): cv2.CV_16U,
    np.dtype(np.int16): cv2.CV_16S,
    np.dtype(np.int32): cv2.CV_32S,
    np.dtype(np.float32): cv2.CV_32F,
    np.dtype(np.float64): cv2.CV_64F,
}

ENCODINGS: Dict[int, str] = {
    cv2.CV_8UC1: "mono8",
    cv2.CV_8UC3: "bgr8",
    cv2.CV_16SC1: "mono16",
    cv2.CV_8UC4: "rgba8",
}

# encoding -> (dtype, channels), used to turn a message back into a frame
_LAYOUTS: Dict[str, Tuple[np.dtype, int]] = {
    "mono8": (np.dtype(np.uint8), 1),
    "bgr8": (np.dtype(np.uint8), 3),
    "mono16": (np.dtype(np.int16), 1),
    "rgba8": (np.dtype(np.uint8), 4),
}


def mat_type(frame: np.ndarray) -> int:
    """Return the OpenCV mat type (depth + channels) of a numpy frame."""
    depth = _DEPTHS.get(frame.dtype)
    if depth is None:
        raise UnsupportedEncoding(f"unsupported pixel depth {frame.dtype}")
    if frame.ndim == 2:
        channels = 1
    elif frame.ndim == 3:
        channels = frame.shape[2]
    else:
        raise UnsupportedEncoding(f"unsupported frame shape {frame.shape}")
    if not 1 <= channels <= _CN_MAX:
        raise UnsupportedEncoding(f"unsupported channel count {channels}")
    return depth + ((channels - 1) << _CN_SHIFT)


def mat_type2encoding(mat_type_tag: int) -> str:
    try:
        return ENCODINGS[mat_type_tag]
    except KeyError:
        raise UnsupportedEncoding(f"unsupported encoding type {mat_type_tag}") from None


def image_from_frame(frame: np.ndarray, stamp: Time, frame_id: str) -> Image:
    """Build an Image message from an OpenCV frame.

    The pixel payload spans exactly height * step bytes; non-contiguous
    frames are compacted first so that step matches the copied rows.
    """
    encoding = mat_type2encoding(mat_type(frame))
    frame = np.ascontiguousarray(frame)
    return Image(
        header=Header(stamp=stamp, frame_id=frame_id),
        height=frame.shape[0],
        width=frame.shape[1],
        encoding=encoding,
        is_bigendian=False,
        step=frame.strides[0],
        data=frame.tobytes(),
    )


def image_to_array(image: Image) -> np.ndarray:
    """Rebuild a numpy frame from an Image message produced by image_from_frame."""
    layout = _LAYOUTS.get(image.encoding)
    if layout is None:
        raise UnsupportedEncoding(f"unsupported encoding {image.encoding!r}")
    dtype, channels = layout
    if image.is_bigendian:
        dtype = dtype.newbyteorder(">")
    rows = np.frombuffer(image.data, dtype=dtype).reshape(image.height, image.step // dtype.itemsize)
    pixels = rows[:, : image.width * channels]
    if channels == 1:
        return pixels.reshape(image.height, image.width)
    return pixels.reshape(image.height, image.width, channels)


def image_to_jpeg(image: Image, quality: int = 80) -> bytes:
    frame = image_to_array(image)
    if image.encoding == "mono16":
        frame = cv2.convertScaleAbs(frame, alpha=1.0 / 256.0)
    elif image.encoding == "rgba8":
        frame = cv2.cvtColor(frame, cv2.COLOR_RGBA2BGR)
    ok, buf = cv2.imencode(".jpg", frame, [int(cv2.IMWRITE_JPEG_QUALITY), int(max(1, min(100, quality)))])
    if not ok:
        raise UnsupportedEncoding(f"cannot encode {image.encoding} image as JPEG")
    return buf.tobytes()
