"""Overlay drawing utilities."""

from typing import Optional, Tuple

import cv2
import numpy as np

from ..config import FULLY_ENGAGED_THRESHOLD, PARTIALLY_ENGAGED_THRESHOLD
from ..detection.base import DetectionResult

# RGB
GREEN = (34, 197, 94)
AMBER = (245, 158, 11)
RED = (239, 68, 68)
GREY = (148, 163, 184)

CORNER_LENGTH = 20


def score_color(score: float) -> Tuple[int, int, int]:
    """Overlay colour for an attention score."""
    if score >= FULLY_ENGAGED_THRESHOLD:
        return GREEN
    if score >= PARTIALLY_ENGAGED_THRESHOLD:
        return AMBER
    return RED


def draw_detection(frame: np.ndarray, detection: Optional[DetectionResult]) -> np.ndarray:
    """Draw the face box and attention label onto a copy of the frame.

    Args:
        frame: RGB frame.
        detection: Detection to draw, or None.

    Returns:
        Annotated RGB frame.
    """
    output = np.ascontiguousarray(frame[:, :, :3]).copy()
    if detection is None:
        return output

    if not detection.face_detected:
        cv2.putText(output, "No face", (10, 24), cv2.FONT_HERSHEY_SIMPLEX, 0.6, GREY, 2)
        return output

    color = score_color(detection.attention_score)
    box = detection.bounding_box
    if box is not None:
        x1, y1 = box.x_min, box.y_min
        x2, y2 = box.x_min + box.width, box.y_min + box.height
        cv2.rectangle(output, (x1, y1), (x2, y2), color, 3)

        corners = (
            ((x1, y1 + CORNER_LENGTH), (x1, y1), (x1 + CORNER_LENGTH, y1)),
            ((x2 - CORNER_LENGTH, y1), (x2, y1), (x2, y1 + CORNER_LENGTH)),
            ((x1, y2 - CORNER_LENGTH), (x1, y2), (x1 + CORNER_LENGTH, y2)),
            ((x2 - CORNER_LENGTH, y2), (x2, y2), (x2, y2 - CORNER_LENGTH)),
        )
        for points in corners:
            cv2.polylines(output, [np.array(points, dtype=np.int32)], False, color, 4)

    label = f"Attention: {round(detection.attention_score * 100)}%"
    cv2.putText(output, label, (10, 24), cv2.FONT_HERSHEY_SIMPLEX, 0.6, color, 2)
    return output
