"""Constants and configuration dataclasses for engagetrack."""

from dataclasses import dataclass, field
from typing import Optional
import uuid


# Capture
TARGET_WIDTH = 640
TARGET_HEIGHT = 480
FACING_MODE = "user"
ANALYZE_EVERY_N_TICKS = 3

# Skin-tone analysis
SAMPLE_STRIDE = 4
FACE_RATIO_MIN = 0.08
FACE_RATIO_MAX = 0.5
MIN_SKIN_PIXELS = 50
BOX_PADDING = 20
CENTER_TOLERANCE = 0.25
SYMMETRY_THRESHOLD = 0.7

# Attention score weights
FACE_WEIGHT = 0.40
GAZE_WEIGHT = 0.35
POSE_WEIGHT = 0.25

# Engagement level thresholds
FULLY_ENGAGED_THRESHOLD = 0.7
PARTIALLY_ENGAGED_THRESHOLD = 0.4

# Telemetry
METRIC_INTERVAL_S = 1.0
METRICS_TABLE = "engagement_metrics"


@dataclass
class CameraConfig:
    """Configuration for the live camera."""

    device: int = 0


@dataclass
class SessionConfig:
    """Configuration for the tracked session and participant."""

    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    participant_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    consent: bool = True
    metric_interval: float = METRIC_INTERVAL_S


@dataclass
class OutputConfig:
    """Configuration for annotated output video."""

    path: Optional[str] = None
    fps: int = 15
    frames: int = 90


@dataclass
class DisplayConfig:
    """Configuration for the preview window."""

    enabled: bool = True
    window_name: str = "engagetrack"


@dataclass
class ProcessingConfig:
    """Combined configuration for a run."""

    mode: str
    input_path: Optional[str]
    camera: CameraConfig
    session: SessionConfig
    output: OutputConfig
    display: DisplayConfig
    verbose: bool = False

    @classmethod
    def from_args(
        cls,
        mode: str,
        input_path: Optional[str] = None,
        camera_device: int = 0,
        session_id: Optional[str] = None,
        participant_id: Optional[str] = None,
        consent: bool = True,
        metric_interval: float = METRIC_INTERVAL_S,
        output_path: Optional[str] = None,
        fps: int = 15,
        frames: int = 90,
        display_enabled: bool = True,
        verbose: bool = False,
    ) -> "ProcessingConfig":
        """Create ProcessingConfig from CLI arguments."""
        session = SessionConfig(consent=consent, metric_interval=metric_interval)
        if session_id:
            session.session_id = session_id
        if participant_id:
            session.participant_id = participant_id
        return cls(
            mode=mode,
            input_path=input_path,
            camera=CameraConfig(device=camera_device),
            session=session,
            output=OutputConfig(path=output_path, fps=fps, frames=frames),
            display=DisplayConfig(enabled=display_enabled),
            verbose=verbose,
        )
