"""Camera acquisition and live frame streams."""

import logging
from typing import Optional, Protocol

import cv2
import numpy as np

from ..errors import CameraUnavailable, FrameNotReady
from ..detection.base import FrameSource

_log = logging.getLogger(__name__)


class CameraStream(FrameSource, Protocol):
    """A frame source backed by an acquired device."""

    @property
    def live(self) -> bool:
        """Whether the underlying device is still delivering."""
        ...

    def grab(self) -> Optional[np.ndarray]:
        """Pull the next frame from the device.

        Returns:
            RGB frame, or None if the device returned nothing this time.

        Raises:
            CameraUnavailable: If the device is no longer delivering.
        """
        ...

    def stop(self) -> None:
        """Release the device."""
        ...


class CameraProvider(Protocol):
    """Protocol for camera acquisition."""

    def acquire(self, width: int, height: int, facing_mode: str) -> CameraStream:
        """Open a video-only stream.

        Args:
            width: Ideal frame width.
            height: Ideal frame height.
            facing_mode: Preferred camera facing ("user" = front).

        Returns:
            The acquired stream.

        Raises:
            CameraUnavailable: If the device is denied, missing or busy.
        """
        ...


class OpenCVCameraStream:
    """Live stream over an open cv2.VideoCapture.

    grab() pulls the newest frame from the device; read_pixels() hands out
    the last grabbed frame as RGBA.
    """

    def __init__(self, cap: cv2.VideoCapture):
        self._cap = cap
        self._frame: Optional[np.ndarray] = None
        self.width = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        self.height = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))

    @property
    def live(self) -> bool:
        return self._cap is not None and self._cap.isOpened()

    @property
    def ready(self) -> bool:
        return self._frame is not None

    def grab(self) -> Optional[np.ndarray]:
        """Read the next frame from the device.

        Returns:
            RGB frame, or None if the device returned nothing.

        Raises:
            CameraUnavailable: If the device is no longer open.
        """
        if not self.live:
            raise CameraUnavailable("Camera disconnected")
        ret, frame = self._cap.read()
        if not ret or frame is None:
            return None
        self._frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        self.height, self.width = self._frame.shape[:2]
        return self._frame

    def read_pixels(self) -> np.ndarray:
        if not self.live:
            raise CameraUnavailable("Camera disconnected")
        if self._frame is None:
            raise FrameNotReady()
        return cv2.cvtColor(self._frame, cv2.COLOR_RGB2RGBA)

    def stop(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            _log.info("Camera stream released")
        self._frame = None


class OpenCVCameraProvider:
    """Acquires local cameras through OpenCV."""

    def __init__(self, device: int = 0, backend: int = cv2.CAP_ANY):
        """Initialize the provider.

        Args:
            device: System camera index (0 = primary).
            backend: OpenCV capture backend.
        """
        self.device = device
        self.backend = backend

    def acquire(self, width: int, height: int, facing_mode: str) -> OpenCVCameraStream:
        # Desktop capture has no facing selection; the device index decides
        _log.debug("Requesting camera %d (%dx%d, facing=%s)", self.device, width, height, facing_mode)
        cap = cv2.VideoCapture(self.device, self.backend)
        if not cap.isOpened():
            cap.release()
            raise CameraUnavailable(f"Could not open camera {self.device}")

        cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
        cap.set(cv2.CAP_PROP_BUFFERSIZE, 1)

        stream = OpenCVCameraStream(cap)
        _log.info("Camera %d opened at %dx%d", self.device, stream.width, stream.height)
        return stream


class StaticCameraProvider:
    """Hands out a stream that already exists, e.g. a file-backed source."""

    def __init__(self, stream: CameraStream):
        self.stream = stream
        self.acquisitions = 0

    def acquire(self, width: int, height: int, facing_mode: str) -> CameraStream:
        self.acquisitions += 1
        return self.stream
