"""Recorded-input and frame-source helpers."""

import contextlib
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, Optional

import cv2
import numpy as np
from PIL import Image

from ..errors import CameraUnavailable, FrameNotReady


VIDEO_EXTENSIONS = {".mp4", ".avi", ".mov", ".mkv", ".webm"}


def is_video_file(filename: str) -> bool:
    """Check if filename has a video extension."""
    return Path(filename).suffix.lower() in VIDEO_EXTENSIONS


def load_still(path: str) -> np.ndarray:
    """Load a still image as an RGB array."""
    return np.array(Image.open(path).convert("RGB"))


@dataclass(frozen=True)
class Recording:
    """A recorded input to replay through the capture loop.

    Stills have no timing of their own, so they replay as `frame_count`
    copies at the requested rate.
    """

    path: str
    width: int
    height: int
    fps: float
    frame_count: int

    @property
    def is_still(self) -> bool:
        return not is_video_file(self.path)


def open_recording(path: str, still_frames: int, still_fps: float) -> Recording:
    """Read the size and timing of a video or still image.

    Args:
        path: Video or image file.
        still_frames: Replay length for a still image.
        still_fps: Replay rate for a still image, and fallback rate for
            videos that report none.

    Returns:
        Recording describing the input.

    Raises:
        OSError: If the input cannot be read.
    """
    if not is_video_file(path):
        height, width = load_still(path).shape[:2]
        return Recording(path, width, height, still_fps, still_frames)

    cap = cv2.VideoCapture(path)
    try:
        ok, frame = cap.read() if cap.isOpened() else (False, None)
        if not ok:
            raise IOError(f"Cannot read video file: {path}")
        height, width = frame.shape[:2]
        fps = cap.get(cv2.CAP_PROP_FPS) or still_fps
        return Recording(path, width, height, fps, int(cap.get(cv2.CAP_PROP_FRAME_COUNT)))
    finally:
        cap.release()


def replay_frames(recording: Recording) -> Iterator[np.ndarray]:
    """Yield the RGB frames of a recording from the start."""
    if recording.is_still:
        image = load_still(recording.path)
        for _ in range(recording.frame_count):
            yield image
        return

    cap = cv2.VideoCapture(recording.path)
    try:
        while True:
            ok, frame = cap.read()
            if not ok:
                break
            yield cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
    finally:
        cap.release()


@contextlib.contextmanager
def annotated_writer(
    path: str, width: int, height: int, fps: float
) -> Iterator[Callable[[np.ndarray], None]]:
    """Open an mp4 writer and yield a function that appends RGB frames.

    Frames of another size are resized to (width, height).

    Raises:
        OSError: If the output file cannot be created.
    """
    writer = cv2.VideoWriter(path, cv2.VideoWriter_fourcc(*"mp4v"), fps, (width, height))
    if not writer.isOpened():
        raise IOError(f"Cannot create video writer: {path}")

    def write(frame: np.ndarray) -> None:
        if frame.shape[:2] != (height, width):
            frame = cv2.resize(frame, (width, height))
        writer.write(cv2.cvtColor(frame, cv2.COLOR_RGB2BGR))

    try:
        yield write
    finally:
        writer.release()


class ArrayFrameSource:
    """Frame stream fed with in-memory arrays.

    Satisfies the camera stream protocol, so recorded frames and synthetic
    test frames go through the same capture loop as a live camera.
    """

    def __init__(self, frame: Optional[np.ndarray] = None, width: int = 0, height: int = 0):
        """Initialize the source.

        Args:
            frame: Optional first frame, RGB or RGBA.
            width: Reported width before the first frame (0 = unknown).
            height: Reported height before the first frame (0 = unknown).
        """
        self.width = width
        self.height = height
        self._frame: Optional[np.ndarray] = None
        self._live = True
        if frame is not None:
            self.push(frame)

    @property
    def live(self) -> bool:
        return self._live

    @property
    def ready(self) -> bool:
        return self._frame is not None

    def push(self, frame: np.ndarray) -> None:
        """Make a frame current.

        Args:
            frame: (H, W, 3) RGB or (H, W, 4) RGBA uint8 array.
        """
        if frame.ndim != 3 or frame.shape[2] not in (3, 4):
            raise ValueError(f"Expected RGB or RGBA frame, got shape {frame.shape}")
        if frame.shape[2] == 3:
            frame = cv2.cvtColor(frame, cv2.COLOR_RGB2RGBA)
        self._frame = frame
        self.height, self.width = frame.shape[:2]

    def grab(self) -> Optional[np.ndarray]:
        """Return the current frame as RGB, or None before the first push."""
        if not self._live:
            raise CameraUnavailable("Stream stopped")
        if self._frame is None:
            return None
        return cv2.cvtColor(self._frame, cv2.COLOR_RGBA2RGB)

    def read_pixels(self) -> np.ndarray:
        if self._frame is None:
            raise FrameNotReady()
        return self._frame

    def stop(self) -> None:
        self._live = False
        self._frame = None
