import numpy as np
import pytest

from engagetrack.core.io import ArrayFrameSource
from engagetrack.detection.base import BoundingBox, EngagementLevel
from engagetrack.detection.skin import FrameAnalyzer, analyze_pixels, attention_score, skin_mask
from engagetrack.errors import FrameNotReady


def expected_score(result):
    return min(
        1.0,
        0.40 * result.face_detected
        + 0.35 * result.eye_gaze_focused
        + 0.25 * result.head_pose_engaged,
    )


def test_black_frame_is_away(frame_factory):
    result = analyze_pixels(frame_factory())

    assert result.face_detected is False
    assert result.attention_score == 0.0
    assert result.bounding_box is None
    assert result.engagement_level == EngagementLevel.AWAY


def test_centered_face_is_fully_engaged(centered_face):
    result = analyze_pixels(centered_face)

    assert result.face_detected is True
    assert result.head_pose_engaged is True
    assert result.eye_gaze_focused is True
    assert result.attention_score == pytest.approx(1.0)
    assert result.engagement_level == EngagementLevel.FULLY_ENGAGED
    # Skin extent x 212..424, y 132..344, padded by 20
    assert result.bounding_box == BoundingBox(x_min=192, y_min=112, width=252, height=252)


def test_off_center_face_keeps_gaze_but_loses_pose(corner_face):
    result = analyze_pixels(corner_face)

    assert result.face_detected is True
    assert result.head_pose_engaged is False
    assert result.eye_gaze_focused is True
    assert result.attention_score == pytest.approx(0.75)
    assert result.engagement_level == EngagementLevel.FULLY_ENGAGED
    assert result.bounding_box.x_min == 0
    assert result.bounding_box.y_min == 0


def test_lopsided_region_loses_gaze(frame_factory):
    frame = frame_factory(regions=[(220, 80, 100, 320), (400, 160, 20, 20)])
    result = analyze_pixels(frame)

    assert result.face_detected is True
    assert result.head_pose_engaged is True
    assert result.eye_gaze_focused is False
    assert result.attention_score == pytest.approx(0.65)
    assert result.engagement_level == EngagementLevel.PARTIALLY_ENGAGED


def test_small_region_has_no_box(frame_factory):
    # 6x6 samples on a 64x64 frame: ratio in range, too few pixels for a box
    frame = frame_factory(width=64, height=64, regions=[(20, 20, 24, 24)])
    result = analyze_pixels(frame)

    assert result.face_detected is True
    assert result.bounding_box is None
    assert result.eye_gaze_focused is False
    assert result.head_pose_engaged is False
    assert result.attention_score == pytest.approx(0.4)
    assert result.engagement_level == EngagementLevel.PARTIALLY_ENGAGED


@pytest.mark.parametrize(
    "region",
    [
        (0, 0, 192, 128),  # 48x32 samples, ratio exactly 0.08
        (0, 0, 480, 320),  # 120x80 samples, ratio exactly 0.5
        (0, 0, 640, 480),  # whole frame
        (0, 0, 40, 40),
    ],
)
def test_ratio_outside_band_means_no_face(frame_factory, region):
    result = analyze_pixels(frame_factory(regions=[region]))

    assert result.face_detected is False
    assert result.bounding_box is None
    assert result.attention_score == 0.0


def test_box_far_edge_is_not_clamped(frame_factory):
    # Documented behaviour: only x_min/y_min are clamped to the frame
    frame = frame_factory(regions=[(424, 264, 216, 216)])
    result = analyze_pixels(frame)

    box = result.bounding_box
    assert box == BoundingBox(x_min=404, y_min=244, width=252, height=252)
    assert box.x_min + box.width > 640
    assert box.y_min + box.height > 480


def test_skin_thresholds():
    pixels = np.array(
        [[
            [150, 90, 70],   # skin
            [0, 0, 0],
            [255, 200, 150],  # r too high
            [100, 95, 50],   # r - g too small
            [120, 60, 115],  # r - b too small
            [90, 30, 20],    # g too low
        ]],
        dtype=np.uint8,
    )
    mask = skin_mask(pixels, stride=1)
    assert mask.tolist() == [[True, False, False, False, False, False]]


def test_attention_score_weights():
    assert attention_score(False, False, False) == 0.0
    assert attention_score(True, False, False) == pytest.approx(0.40)
    assert attention_score(True, True, False) == pytest.approx(0.75)
    assert attention_score(True, False, True) == pytest.approx(0.65)
    assert attention_score(True, True, True) <= 1.0


def test_score_invariants_on_noise():
    rng = np.random.RandomState(7)
    for _ in range(20):
        frame = rng.randint(0, 256, size=(120, 160, 4), dtype=np.uint8)
        result = analyze_pixels(frame)

        assert 0.0 <= result.attention_score <= 1.0
        assert result.attention_score == pytest.approx(expected_score(result))
        if result.bounding_box is None:
            assert result.eye_gaze_focused is False
            assert result.head_pose_engaged is False


def test_analyzer_requires_ready_source():
    with pytest.raises(FrameNotReady):
        FrameAnalyzer().analyze(ArrayFrameSource())


class UnsizedSource:
    width = 0
    height = 0
    ready = True

    def __init__(self, frame):
        self.frame = frame

    def read_pixels(self):
        return self.frame


def test_analyzer_defaults_buffer_to_target_size(frame_factory):
    # Half-size frame from a source that reports no resolution
    small = frame_factory(width=320, height=240, regions=[(106, 66, 108, 108)])
    analyzer = FrameAnalyzer()
    source = UnsizedSource(small)

    assert analyzer.buffer_size(source) == (640, 480)
    result = analyzer.analyze(source)
    assert result.face_detected is True
    assert result.head_pose_engaged is True
