"""Live webcam tracking with a preview window."""

import sys
from typing import Optional

import cv2

from ..capture.camera import OpenCVCameraProvider
from ..capture.controller import CaptureController
from ..capture.scheduler import FrameScheduler
from ..config import METRICS_TABLE, ProcessingConfig
from ..core.utils import draw_detection
from ..errors import CameraUnavailable
from ..telemetry.report import SessionReport, summarize_session
from ..telemetry.store import InMemoryStore, Store
from .headless import build_recorder

QUIT_KEYS = {ord("q"), 27}


def run_live(
    config: ProcessingConfig,
    store: Optional[Store] = None,
    provider=None,
) -> Optional[SessionReport]:
    """Track the local camera until the user quits.

    The display loop is the repaint source: every iteration grabs a frame,
    fires the scheduled tick and redraws the preview.

    Args:
        config: Processing configuration.
        store: Store to record into (default: new in-memory store).
        provider: Camera provider (default: OpenCV device from config).

    Returns:
        Session report, or None when capture failed or nothing was recorded.
    """
    store = store if store is not None else InMemoryStore()
    provider = provider or OpenCVCameraProvider(config.camera.device)
    scheduler = FrameScheduler()
    controller = CaptureController(provider, scheduler)
    controller.subscribe(build_recorder(config, store))

    with controller:
        if not controller.start():
            print(f"Camera error: {controller.state.error.message}", file=sys.stderr)
            print("Check camera permissions and run again to retry.", file=sys.stderr)
            return None

        print("Tracking started. Press q or Esc to stop.")
        stream = controller.stream
        try:
            while controller.state.is_active:
                try:
                    frame = stream.grab()
                except CameraUnavailable as e:
                    print(f"Camera lost: {e.message}", file=sys.stderr)
                    break
                scheduler.run_pending()

                if frame is None or not config.display.enabled:
                    continue
                preview = draw_detection(frame, controller.state.detection)
                cv2.imshow(config.display.window_name, cv2.cvtColor(preview, cv2.COLOR_RGB2BGR))
                if (cv2.waitKey(1) & 0xFF) in QUIT_KEYS:
                    break
        except KeyboardInterrupt:
            pass
        finally:
            if config.display.enabled:
                cv2.destroyAllWindows()

        lost = controller.state.error
        if lost is not None:
            print(f"Camera lost: {lost.message}", file=sys.stderr)

    return summarize_session(
        store.select(METRICS_TABLE, session_id=config.session.session_id)
    )
