
class CamhubError(Exception):
    """Base class for camhub errors."""


class CaptureOpenError(CamhubError):
    """Raised when a camera device or video file cannot be opened."""


class UnsupportedEncoding(CamhubError):
    """Raised when a frame's pixel layout has no wire encoding."""


class CalibrationError(CamhubError):
    """Raised when a calibration file is missing or cannot be parsed."""
