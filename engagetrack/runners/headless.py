"""Headless analysis of recorded video or still images."""

import contextlib
import sys
from typing import Optional

from tqdm import tqdm

from ..capture.camera import StaticCameraProvider
from ..capture.controller import CaptureController
from ..capture.scheduler import FrameScheduler
from ..config import METRICS_TABLE, ProcessingConfig
from ..core.io import ArrayFrameSource, annotated_writer, open_recording, replay_frames
from ..core.utils import draw_detection
from ..telemetry.recorder import ConsentState, SampleRecorder
from ..telemetry.report import SessionReport, summarize_session
from ..telemetry.store import InMemoryStore, Store


def build_recorder(config: ProcessingConfig, store: Store, clock=None) -> SampleRecorder:
    """Create the sample recorder for a run.

    Args:
        config: Processing configuration.
        store: Destination store.
        clock: Optional time source (default: monotonic wall clock).

    Returns:
        Configured SampleRecorder.
    """
    consent = ConsentState()
    if config.session.consent:
        consent.grant()
    kwargs = {"clock": clock} if clock is not None else {}
    return SampleRecorder(
        store,
        session_id=config.session.session_id,
        participant_id=config.session.participant_id,
        consent=consent,
        interval=config.session.metric_interval,
        **kwargs,
    )


def print_report(report: Optional[SessionReport]) -> None:
    """Print a session report to stdout."""
    if report is None:
        print("No engagement samples recorded.")
        return
    print("Session report:")
    print(f"  Samples:              {report.total_samples}")
    print(f"  Average engagement:   {report.avg_engagement_score}%")
    print(f"  Fully engaged:        {report.fully_engaged_count}")
    print(f"  Partially engaged:    {report.partially_engaged_count}")
    print(f"  Passively present:    {report.passively_present_count}")
    print(f"  Face detection rate:  {report.face_detection_rate:.0%}")


def run_headless(config: ProcessingConfig, store: Optional[Store] = None) -> Optional[SessionReport]:
    """Run the capture loop over a recorded file.

    Each input frame is one repaint. Sample throttling follows media time
    (frame index / fps) so recordings produce the same sample rate as a
    live session.

    Args:
        config: Processing configuration.
        store: Store to record into (default: new in-memory store).

    Returns:
        Session report, or None when nothing was recorded.

    Raises:
        SystemExit: If the input cannot be read.
    """
    store = store if store is not None else InMemoryStore()
    source = ArrayFrameSource()
    scheduler = FrameScheduler()
    controller = CaptureController(StaticCameraProvider(source), scheduler)

    media_time = [0.0]
    recorder = build_recorder(config, store, clock=lambda: media_time[0])
    controller.subscribe(recorder)

    try:
        recording = open_recording(
            config.input_path, still_frames=config.output.frames, still_fps=config.output.fps
        )
    except OSError as e:
        print(f"Cannot read from {config.input_path}: {e}", file=sys.stderr)
        sys.exit(1)
    fps = recording.fps

    with contextlib.ExitStack() as stack:
        writer = None
        if config.output.path:
            writer = stack.enter_context(
                annotated_writer(config.output.path, recording.width, recording.height, fps)
            )
        stack.enter_context(controller)

        if not controller.start():
            print(f"Capture failed: {controller.state.error.message}", file=sys.stderr)
            sys.exit(1)

        def process(frame):
            source.push(frame)
            scheduler.run_pending()
            media_time[0] += 1.0 / fps
            if writer is not None:
                writer(draw_detection(frame, controller.state.detection))

        for frame in tqdm(replay_frames(recording), total=recording.frame_count, desc="Analyzing"):
            process(frame)

    report = summarize_session(
        store.select(METRICS_TABLE, session_id=config.session.session_id)
    )
    if config.output.path:
        print(f"Annotated video saved to: {config.output.path}")
    return report
