"""Detection module for skin-tone attention estimation."""

from .base import (
    NO_FACE,
    BoundingBox,
    DetectionResult,
    EngagementLevel,
    FrameSource,
    classify_engagement,
)
from .skin import FrameAnalyzer, analyze_pixels, attention_score, skin_mask

__all__ = [
    "NO_FACE",
    "BoundingBox",
    "DetectionResult",
    "EngagementLevel",
    "FrameSource",
    "classify_engagement",
    "FrameAnalyzer",
    "analyze_pixels",
    "attention_score",
    "skin_mask",
]
