"""Capture lifecycle and the per-repaint analysis loop."""

import logging
from dataclasses import dataclass
from functools import partial
from typing import Callable, List, Optional

from ..config import ANALYZE_EVERY_N_TICKS, FACING_MODE, TARGET_HEIGHT, TARGET_WIDTH
from ..detection.base import DetectionResult
from ..detection.skin import FrameAnalyzer
from ..errors import CameraUnavailable, CaptureError, CaptureErrorKind, FrameNotReady
from .camera import CameraProvider, CameraStream
from .scheduler import Scheduler

_log = logging.getLogger(__name__)

DetectionCallback = Callable[[DetectionResult], None]


@dataclass(frozen=True)
class CaptureState:
    """Snapshot of the controller's outward flags."""

    is_loading: bool = False
    is_active: bool = False
    error: Optional[CaptureError] = None
    detection: Optional[DetectionResult] = None


@dataclass
class CaptureSession:
    """Mutable loop state for one active capture."""

    stream: CameraStream
    handle: Optional[int] = None
    last_detection: Optional[DetectionResult] = None
    frame_count: int = 0
    active: bool = True


class CaptureController:
    """Owns the camera stream and drives frame analysis.

    A tick fires once per repaint through the injected scheduler. Every
    ANALYZE_EVERY_N_TICKS-th tick analyzes the current frame; the other
    ticks re-publish the previous result.
    """

    def __init__(
        self,
        provider: CameraProvider,
        scheduler: Scheduler,
        analyzer: Optional[FrameAnalyzer] = None,
        analyze_every: int = ANALYZE_EVERY_N_TICKS,
    ):
        """Initialize the controller.

        Args:
            provider: Camera acquisition backend.
            scheduler: Per-repaint callback scheduler.
            analyzer: Frame analyzer (default: skin-tone heuristic).
            analyze_every: Analyze every Nth tick.
        """
        self.provider = provider
        self.scheduler = scheduler
        self.analyzer = analyzer or FrameAnalyzer()
        self.analyze_every = analyze_every
        self._session: Optional[CaptureSession] = None
        self._loading = False
        self._error: Optional[CaptureError] = None
        self._subscribers: List[DetectionCallback] = []

    @property
    def state(self) -> CaptureState:
        session = self._session
        return CaptureState(
            is_loading=self._loading,
            is_active=session is not None and session.active,
            error=self._error,
            detection=session.last_detection if session else None,
        )

    @property
    def session(self) -> Optional[CaptureSession]:
        return self._session

    @property
    def stream(self) -> Optional[CameraStream]:
        return self._session.stream if self._session else None

    def subscribe(self, callback: DetectionCallback) -> Callable[[], None]:
        """Register a listener for published detections.

        Returns:
            Function that removes the listener.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def start(self) -> bool:
        """Acquire the camera and begin the analysis loop.

        Acquisition failures are recorded in ``state.error`` and reported
        once; nothing is retried.

        Returns:
            True if capture is active, False if acquisition failed.
        """
        if self._loading or self._session is not None:
            return True

        self._loading = True
        self._error = None
        try:
            stream = self.provider.acquire(TARGET_WIDTH, TARGET_HEIGHT, FACING_MODE)
        except CaptureError as e:
            return self._fail(e)
        except Exception as e:
            return self._fail(CaptureError(str(e) or None, kind=CaptureErrorKind.UNKNOWN))

        try:
            session = CaptureSession(stream=stream)
            self._session = session
            session.handle = self.scheduler.schedule_next(partial(self._tick, session))
        except BaseException:
            self._session = None
            stream.stop()
            raise
        finally:
            self._loading = False

        _log.info("Capture started")
        return True

    def stop(self) -> None:
        """Cancel the loop and release the stream. Safe to call repeatedly."""
        session = self._session
        self._session = None
        self._loading = False
        self._error = None
        if session is None:
            return
        self._teardown(session)
        _log.info("Capture stopped after %d ticks", session.frame_count)

    def _fail(self, error: CaptureError) -> bool:
        self._loading = False
        self._error = error
        _log.warning("Camera acquisition failed: %s", error.message)
        return False

    def _teardown(self, session: CaptureSession) -> None:
        session.active = False
        if session.handle is not None:
            self.scheduler.cancel(session.handle)
            session.handle = None
        session.last_detection = None
        session.stream.stop()

    def _tick(self, session: CaptureSession) -> None:
        # Ticks belong to the session that scheduled them
        if session is not self._session or not session.active:
            return

        session.frame_count += 1
        if session.frame_count % self.analyze_every == 0:
            try:
                session.last_detection = self.analyzer.analyze(session.stream)
            except FrameNotReady:
                pass
            except CameraUnavailable as e:
                self._lose_camera(session, e)
                return
            except Exception:
                _log.debug("Frame analysis failed; keeping last result", exc_info=True)

        if session.last_detection is not None:
            self._publish(session.last_detection)

        if session.active:
            session.handle = self.scheduler.schedule_next(partial(self._tick, session))

    def _lose_camera(self, session: CaptureSession, error: CaptureError) -> None:
        _log.warning("Camera lost: %s", error.message)
        self._teardown(session)
        self._session = None
        self._error = error

    def _publish(self, detection: DetectionResult) -> None:
        for callback in list(self._subscribers):
            try:
                callback(detection)
            except Exception:
                _log.exception("Detection subscriber %r failed", callback)

    def __enter__(self) -> "CaptureController":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
