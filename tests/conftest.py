"""
Pytest Configuration for ExamGuard Tests

Synthetic frames are RGB uint8 arrays. A "person" is a compact 24x24
skin blob: small enough that every stride-4 seed inside it lies within
the 0.15 * min(width, height) merge radius of the first seed, so it
clusters into exactly one candidate.

Skin coverage has to exceed 1.5% of the frame in *sampled* pixels,
which one compact blob cannot reach on its own. Frames therefore also
carry speckle: isolated single skin pixels on the sampling grid. They
count as skin samples but grow to size 1 and never become regions.
"""
import os
import sys
import pytest
import numpy as np

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

SKIN = (200, 140, 110)
FRAME_SIZE = 200
BLOB_SIZE = 24


def _add_blob(frame: np.ndarray, x: int, y: int, size: int = BLOB_SIZE):
    frame[y:y + size, x:x + size] = SKIN


def _add_speckle(frame: np.ndarray, rows):
    """Single skin pixels on the stride-4 grid, for every listed row"""
    width = frame.shape[1]
    for y in rows:
        frame[y, 0:width:4] = SKIN


@pytest.fixture
def skin_color():
    return SKIN


@pytest.fixture
def black_frame():
    return np.zeros((FRAME_SIZE, FRAME_SIZE, 3), dtype=np.uint8)


@pytest.fixture
def make_frame():
    """Factory: frame with blobs at the given top-left corners plus speckle"""
    def _make(blobs=(), speckle=True, size=FRAME_SIZE):
        frame = np.zeros((size, size, 3), dtype=np.uint8)
        for x, y in blobs:
            _add_blob(frame, x, y)
        if speckle:
            # 15 rows above and 15 rows below the blob band: 1500 samples
            _add_speckle(frame, list(range(0, 60, 4)) + list(range(140, 200, 4)))
        return frame
    return _make


@pytest.fixture
def single_person_frame(make_frame):
    # Centered; seeds at 88..108 stay within 28.3px of (88, 88)
    return make_frame(blobs=[(88, 88)])


@pytest.fixture
def two_person_frame(make_frame):
    # Anchors 96px apart, well beyond the 30px merge radius
    return make_frame(blobs=[(40, 88), (136, 88)])


@pytest.fixture
def fake_clock():
    """Manually advanced monotonic clock"""
    class FakeClock:
        def __init__(self):
            self.now = 1000.0

        def __call__(self):
            return self.now

        def advance(self, seconds: float):
            self.now += seconds

    return FakeClock()
