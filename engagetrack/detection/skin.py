"""Skin-tone attention heuristic.

A fast colour-segmentation proxy for face presence, gaze and head pose.
There is no model: every sampled pixel is tested against fixed RGB
thresholds and the resulting skin region is measured geometrically.
"""

from typing import Tuple

import cv2
import numpy as np

from ..config import (
    BOX_PADDING,
    CENTER_TOLERANCE,
    FACE_RATIO_MAX,
    FACE_RATIO_MIN,
    FACE_WEIGHT,
    GAZE_WEIGHT,
    MIN_SKIN_PIXELS,
    POSE_WEIGHT,
    SAMPLE_STRIDE,
    SYMMETRY_THRESHOLD,
    TARGET_HEIGHT,
    TARGET_WIDTH,
)
from ..errors import FrameNotReady
from .base import BoundingBox, DetectionResult, FrameSource


def skin_mask(pixels: np.ndarray, stride: int = SAMPLE_STRIDE) -> np.ndarray:
    """Classify sampled pixels as skin tone.

    Args:
        pixels: (H, W, 3 or 4) uint8 array in RGB(A) order.
        stride: Sample every Nth row and column.

    Returns:
        Boolean mask over the sampled grid.
    """
    sampled = pixels[::stride, ::stride, :3].astype(np.int16)
    r = sampled[:, :, 0]
    g = sampled[:, :, 1]
    b = sampled[:, :, 2]
    return (
        (r > 60) & (g > 40) & (b > 20)
        & (r > g) & (r > b)
        & (np.abs(r - g) > 10)
        & (r - b > 10)
        & (r < 250) & (g < 230) & (b < 210)
    )


def skin_coordinates(
    pixels: np.ndarray, stride: int = SAMPLE_STRIDE
) -> Tuple[np.ndarray, np.ndarray]:
    """Pixel coordinates of sampled skin-tone pixels.

    Returns:
        Tuple of (xs, ys) in full-frame pixel units.
    """
    rows, cols = np.nonzero(skin_mask(pixels, stride))
    return cols * stride, rows * stride


def attention_score(face: bool, gaze: bool, pose: bool) -> float:
    """Weighted sum of the three signals, clamped to 1.0."""
    score = 0.0
    if face:
        score += FACE_WEIGHT
    if gaze:
        score += GAZE_WEIGHT
    if pose:
        score += POSE_WEIGHT
    return min(1.0, score)


def analyze_pixels(pixels: np.ndarray) -> DetectionResult:
    """Estimate attention from one RGBA frame.

    Args:
        pixels: (H, W, 4) uint8 array in RGBA order. RGB also works.

    Returns:
        DetectionResult for the frame.
    """
    height, width = pixels.shape[:2]
    xs, ys = skin_coordinates(pixels)
    skin_count = int(xs.size)

    total_samples = (width * height) / (SAMPLE_STRIDE * SAMPLE_STRIDE)
    skin_ratio = skin_count / total_samples if total_samples else 0.0
    face_detected = FACE_RATIO_MIN < skin_ratio < FACE_RATIO_MAX

    bounding_box = None
    eye_gaze_focused = False
    head_pose_engaged = False

    if face_detected and skin_count > MIN_SKIN_PIXELS:
        min_x, max_x = int(xs.min()), int(xs.max())
        min_y, max_y = int(ys.min()), int(ys.max())

        # Only the near edge is clamped to the frame
        bounding_box = BoundingBox(
            x_min=max(0, min_x - BOX_PADDING),
            y_min=max(0, min_y - BOX_PADDING),
            width=min(width - min_x + BOX_PADDING * 2, max_x - min_x + BOX_PADDING * 2),
            height=min(height - min_y + BOX_PADDING * 2, max_y - min_y + BOX_PADDING * 2),
        )

        # Head pose: region center inside the central half of the frame
        center_x = (min_x + max_x) / 2
        center_y = (min_y + max_y) / 2
        head_pose_engaged = bool(
            abs(center_x - width / 2) < width * CENTER_TOLERANCE
            and abs(center_y - height / 2) < height * CENTER_TOLERANCE
        )

        # Gaze: left/right balance of skin pixels about the region center
        left = int(np.count_nonzero(xs < center_x))
        right = skin_count - left
        symmetry = min(left, right) / max(left, right)
        eye_gaze_focused = symmetry > SYMMETRY_THRESHOLD

    return DetectionResult(
        face_detected=bool(face_detected),
        eye_gaze_focused=bool(eye_gaze_focused),
        head_pose_engaged=head_pose_engaged,
        attention_score=attention_score(face_detected, eye_gaze_focused, head_pose_engaged),
        bounding_box=bounding_box,
    )


class FrameAnalyzer:
    """Runs the skin-tone heuristic against a frame source.

    The analysis buffer takes the source's native resolution, falling back
    to 640x480 when the source does not report one.
    """

    def __init__(self, default_width: int = TARGET_WIDTH, default_height: int = TARGET_HEIGHT):
        self.default_width = default_width
        self.default_height = default_height

    def buffer_size(self, source: FrameSource) -> Tuple[int, int]:
        """Analysis buffer (width, height) for a source."""
        return (
            source.width or self.default_width,
            source.height or self.default_height,
        )

    def analyze(self, source: FrameSource) -> DetectionResult:
        """Analyze the source's current frame.

        Args:
            source: Frame source to read from.

        Returns:
            DetectionResult for the current frame.

        Raises:
            FrameNotReady: If the source has no decodable frame.
        """
        if not source.ready:
            raise FrameNotReady()

        pixels = source.read_pixels()
        width, height = self.buffer_size(source)
        if pixels.shape[:2] != (height, width):
            pixels = cv2.resize(pixels, (width, height), interpolation=cv2.INTER_LINEAR)
        return analyze_pixels(pixels)
