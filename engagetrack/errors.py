"""Capture error taxonomy."""

from enum import Enum
from typing import Optional


class CaptureErrorKind(str, Enum):
    """Closed set of capture failure kinds."""

    CAMERA_UNAVAILABLE = "camera_unavailable"
    FRAME_NOT_READY = "frame_not_ready"
    UNKNOWN = "unknown"


_DEFAULT_MESSAGES = {
    CaptureErrorKind.CAMERA_UNAVAILABLE: "Camera is unavailable",
    CaptureErrorKind.FRAME_NOT_READY: "No frame available yet",
    CaptureErrorKind.UNKNOWN: "Failed to access camera",
}


class CaptureError(Exception):
    """Error raised by camera acquisition or frame reads.

    Attributes:
        kind: The failure kind.
        detail: Optional human-readable detail.
    """

    kind = CaptureErrorKind.UNKNOWN

    def __init__(self, detail: Optional[str] = None, kind: Optional[CaptureErrorKind] = None):
        if kind is not None:
            self.kind = kind
        self.detail = detail
        super().__init__(self.message)

    @property
    def message(self) -> str:
        """Readable message for display to the user."""
        return self.detail or _DEFAULT_MESSAGES[self.kind]


class CameraUnavailable(CaptureError):
    """Permission denied, no device, or device busy."""

    kind = CaptureErrorKind.CAMERA_UNAVAILABLE


class FrameNotReady(CaptureError):
    """The frame source has no decodable frame yet."""

    kind = CaptureErrorKind.FRAME_NOT_READY
