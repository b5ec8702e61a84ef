"""Capture module: camera acquisition and the analysis loop."""

from .camera import (
    CameraProvider,
    CameraStream,
    OpenCVCameraProvider,
    OpenCVCameraStream,
    StaticCameraProvider,
)
from .controller import CaptureController, CaptureSession, CaptureState
from .scheduler import FrameScheduler, Scheduler

__all__ = [
    "CameraProvider",
    "CameraStream",
    "OpenCVCameraProvider",
    "OpenCVCameraStream",
    "StaticCameraProvider",
    "CaptureController",
    "CaptureSession",
    "CaptureState",
    "FrameScheduler",
    "Scheduler",
]
