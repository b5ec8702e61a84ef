import numpy as np
import pytest

SKIN = (150, 90, 70)


def make_frame(width=640, height=480, regions=(), color=SKIN):
    """RGBA black frame with skin-coloured rectangles.

    Args:
        regions: Iterable of (x, y, w, h) rectangles.
    """
    frame = np.zeros((height, width, 4), dtype=np.uint8)
    frame[:, :, 3] = 255
    for x, y, w, h in regions:
        frame[y:y + h, x:x + w, :3] = color
    return frame


@pytest.fixture
def frame_factory():
    return make_frame


@pytest.fixture
def centered_face():
    # 216px square = 54x54 samples = ~15% of a 640x480 frame
    return make_frame(regions=[(212, 132, 216, 216)])


@pytest.fixture
def corner_face():
    return make_frame(regions=[(0, 0, 216, 216)])
