"""Throttled, consent-gated persistence of detection samples."""

import logging
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional

from ..config import METRIC_INTERVAL_S, METRICS_TABLE
from ..detection.base import DetectionResult, classify_engagement
from .store import Store

_log = logging.getLogger(__name__)


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class EngagementSample:
    """One persisted telemetry row."""

    session_id: str
    participant_id: str
    face_detected: bool
    eye_gaze_focused: bool
    head_pose_engaged: bool
    attention_score: float
    engagement_level: str
    camera_on: bool
    screen_focused: bool = True
    timestamp: str = field(default_factory=utc_now)

    @classmethod
    def from_detection(
        cls,
        detection: DetectionResult,
        session_id: str,
        participant_id: str,
        camera_on: bool = True,
    ) -> "EngagementSample":
        return cls(
            session_id=session_id,
            participant_id=participant_id,
            face_detected=detection.face_detected,
            eye_gaze_focused=detection.eye_gaze_focused,
            head_pose_engaged=detection.head_pose_engaged,
            attention_score=detection.attention_score,
            engagement_level=classify_engagement(detection).value,
            camera_on=camera_on,
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ConsentState:
    """Participant consent with an audit timestamp."""

    given: bool = False
    updated_at: Optional[str] = None

    def grant(self) -> None:
        self.given = True
        self.updated_at = utc_now()

    def withdraw(self) -> None:
        self.given = False
        self.updated_at = utc_now()


class SampleRecorder:
    """Persist at most one sample per interval while consent is given.

    Use an instance as a CaptureController subscriber.
    """

    def __init__(
        self,
        store: Store,
        session_id: str,
        participant_id: str,
        consent: Optional[ConsentState] = None,
        interval: float = METRIC_INTERVAL_S,
        max_attempts: int = 3,
        clock: Callable[[], float] = time.monotonic,
        table: str = METRICS_TABLE,
    ):
        """Initialize the recorder.

        Args:
            store: Row store to insert into.
            session_id: Tracked session identifier.
            participant_id: Tracked participant identifier.
            consent: Consent flag (default: not given).
            interval: Minimum seconds between inserts.
            max_attempts: Insert attempts before a sample is dropped.
            clock: Monotonic time source.
            table: Destination table name.
        """
        self.store = store
        self.session_id = session_id
        self.participant_id = participant_id
        self.consent = consent if consent is not None else ConsentState()
        self.interval = interval
        self.max_attempts = max(1, max_attempts)
        self.clock = clock
        self.table = table
        self.camera_on = True
        self.recorded = 0
        self.dropped = 0
        self._last_sent: Optional[float] = None

    def __call__(self, detection: Optional[DetectionResult]) -> Optional[EngagementSample]:
        return self.record(detection)

    def record(self, detection: Optional[DetectionResult]) -> Optional[EngagementSample]:
        """Persist a sample if consent is given and the interval has passed.

        Returns:
            The sample written, or None if skipped or dropped.
        """
        if detection is None or not self.consent.given:
            return None

        now = self.clock()
        if self._last_sent is not None and now - self._last_sent < self.interval:
            return None
        self._last_sent = now

        sample = EngagementSample.from_detection(
            detection,
            session_id=self.session_id,
            participant_id=self.participant_id,
            camera_on=self.camera_on,
        )
        row = sample.to_dict()
        for attempt in range(1, self.max_attempts + 1):
            try:
                self.store.insert(self.table, row)
            except Exception as e:
                _log.warning(
                    "Sample insert failed (attempt %d/%d): %s", attempt, self.max_attempts, e
                )
                continue
            self.recorded += 1
            return sample

        self.dropped += 1
        _log.error("Dropping sample for participant %s after %d attempts", self.participant_id, self.max_attempts)
        return None
