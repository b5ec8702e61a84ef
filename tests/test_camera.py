from unittest.mock import MagicMock, patch

import cv2
import numpy as np
import pytest

from engagetrack.capture.camera import OpenCVCameraProvider, StaticCameraProvider
from engagetrack.core.io import ArrayFrameSource
from engagetrack.errors import CameraUnavailable, FrameNotReady


def _make_mock_capture(frame=None, ret=True, opened=True):
    """Create a mock cv2.VideoCapture returning the given BGR frame."""
    mock_cap = MagicMock()
    mock_cap.read.return_value = (ret, frame)
    mock_cap.isOpened.return_value = opened
    mock_cap.get.side_effect = lambda prop: {
        cv2.CAP_PROP_FRAME_WIDTH: 640.0,
        cv2.CAP_PROP_FRAME_HEIGHT: 480.0,
    }.get(prop, 0.0)
    return mock_cap


def test_acquire_requests_target_resolution():
    mock_cap = _make_mock_capture()

    with patch("engagetrack.capture.camera.cv2.VideoCapture", return_value=mock_cap):
        stream = OpenCVCameraProvider(device=0).acquire(640, 480, "user")

    mock_cap.set.assert_any_call(cv2.CAP_PROP_FRAME_WIDTH, 640)
    mock_cap.set.assert_any_call(cv2.CAP_PROP_FRAME_HEIGHT, 480)
    assert (stream.width, stream.height) == (640, 480)
    assert stream.live is True
    assert stream.ready is False


def test_acquire_unopened_device_raises():
    mock_cap = _make_mock_capture(opened=False)

    with patch("engagetrack.capture.camera.cv2.VideoCapture", return_value=mock_cap):
        with pytest.raises(CameraUnavailable):
            OpenCVCameraProvider(device=3).acquire(640, 480, "user")

    mock_cap.release.assert_called_once()


def test_grab_converts_to_rgb_and_rgba():
    bgr = np.zeros((480, 640, 3), dtype=np.uint8)
    bgr[:, :] = (70, 90, 150)
    mock_cap = _make_mock_capture(frame=bgr)

    with patch("engagetrack.capture.camera.cv2.VideoCapture", return_value=mock_cap):
        stream = OpenCVCameraProvider().acquire(640, 480, "user")

    rgb = stream.grab()
    assert tuple(rgb[0, 0]) == (150, 90, 70)
    assert stream.ready is True

    rgba = stream.read_pixels()
    assert rgba.shape == (480, 640, 4)
    assert tuple(rgba[0, 0]) == (150, 90, 70, 255)


def test_failed_read_is_not_ready():
    mock_cap = _make_mock_capture(frame=None, ret=False)

    with patch("engagetrack.capture.camera.cv2.VideoCapture", return_value=mock_cap):
        stream = OpenCVCameraProvider().acquire(640, 480, "user")

    assert stream.grab() is None
    with pytest.raises(FrameNotReady):
        stream.read_pixels()


def test_stop_releases_device():
    mock_cap = _make_mock_capture()

    with patch("engagetrack.capture.camera.cv2.VideoCapture", return_value=mock_cap):
        stream = OpenCVCameraProvider().acquire(640, 480, "user")

    stream.stop()
    stream.stop()

    mock_cap.release.assert_called_once()
    assert stream.live is False
    with pytest.raises(CameraUnavailable):
        stream.read_pixels()
    with pytest.raises(CameraUnavailable):
        stream.grab()


def test_static_provider_counts_acquisitions():
    source = ArrayFrameSource()
    provider = StaticCameraProvider(source)

    assert provider.acquire(640, 480, "user") is source
    assert provider.acquisitions == 1
