"""Detection result types and the frame source protocol."""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Optional, Protocol

import numpy as np

from ..config import (
    FULLY_ENGAGED_THRESHOLD,
    PARTIALLY_ENGAGED_THRESHOLD,
)


class EngagementLevel(str, Enum):
    """Four-bucket discretization of attention."""

    AWAY = "away"
    PASSIVELY_PRESENT = "passively_present"
    PARTIALLY_ENGAGED = "partially_engaged"
    FULLY_ENGAGED = "fully_engaged"


@dataclass(frozen=True)
class BoundingBox:
    """Padded face region in pixel units.

    The far edge is not clamped to the frame, so ``x_min + width`` may
    exceed the frame width.
    """

    x_min: int
    y_min: int
    width: int
    height: int


@dataclass(frozen=True)
class DetectionResult:
    """Attention estimate for one analyzed frame.

    Attributes:
        face_detected: Skin ratio within the face-presence band.
        eye_gaze_focused: Skin region is left/right symmetric.
        head_pose_engaged: Skin region is centered in the frame.
        attention_score: Weighted combination of the flags (0.0 to 1.0).
        bounding_box: Padded skin region, or None when no face region.
    """

    face_detected: bool
    eye_gaze_focused: bool
    head_pose_engaged: bool
    attention_score: float
    bounding_box: Optional[BoundingBox] = None

    @property
    def engagement_level(self) -> EngagementLevel:
        return classify_engagement(self)

    def to_dict(self) -> dict:
        return asdict(self)


NO_FACE = DetectionResult(
    face_detected=False,
    eye_gaze_focused=False,
    head_pose_engaged=False,
    attention_score=0.0,
)


def classify_engagement(detection: Optional[DetectionResult]) -> EngagementLevel:
    """Map a detection to its engagement level.

    Args:
        detection: Detection to classify. None counts as no face.

    Returns:
        The engagement level.
    """
    if detection is None or not detection.face_detected:
        return EngagementLevel.AWAY
    if detection.attention_score >= FULLY_ENGAGED_THRESHOLD:
        return EngagementLevel.FULLY_ENGAGED
    if detection.attention_score >= PARTIALLY_ENGAGED_THRESHOLD:
        return EngagementLevel.PARTIALLY_ENGAGED
    return EngagementLevel.PASSIVELY_PRESENT


class FrameSource(Protocol):
    """Protocol for anything that can hand out RGBA pixels."""

    width: int
    height: int

    @property
    def ready(self) -> bool:
        """Whether a decodable frame is available."""
        ...

    def read_pixels(self) -> np.ndarray:
        """Read the current frame.

        Returns:
            (height, width, 4) uint8 array in RGBA order.

        Raises:
            FrameNotReady: If no frame is available.
        """
        ...
