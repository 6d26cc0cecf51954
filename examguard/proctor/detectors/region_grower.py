"""
Region Grower - Bounded flood fill over skin-like pixels

Uses an explicit work-list instead of recursion so large connected
regions cannot exhaust the interpreter stack.
"""

import logging
import numpy as np
from typing import Optional, Set, Tuple

from .skin_classifier import skin_mask

logger = logging.getLogger(__name__)


class RegionGrower:
    """
    Grows 4-connected skin regions from seed pixels of a single frame.

    The skin mask is computed once per frame. Sizes found by earlier
    fills are remembered for every skin pixel they reached, since all of
    those pixels share one connected component and therefore the same
    capped size.
    """

    MAX_REGION_SIZE = 200

    def __init__(
        self,
        frame: Optional[np.ndarray] = None,
        mask: Optional[np.ndarray] = None,
        max_size: int = MAX_REGION_SIZE
    ):
        """
        Initialize grower for one frame.

        Args:
            frame: RGB image; ignored when a precomputed mask is given
            mask: Optional boolean skin mask of shape (height, width)
            max_size: Stop growing once this many pixels are collected
        """
        if mask is None:
            if frame is None:
                raise ValueError("RegionGrower needs a frame or a mask")
            mask = skin_mask(frame)

        self.mask = mask
        self.height, self.width = mask.shape[:2]
        self.max_size = max_size

        # 0 means "not grown yet"; every reached skin pixel has size >= 1
        self._known = np.zeros((self.height, self.width), dtype=np.int32)
        self.last_visited: Set[Tuple[int, int]] = set()

    def grow(self, start_x: int, start_y: int) -> int:
        """
        Count skin-like pixels connected to the seed, up to max_size.

        Returns:
            Region size; 0 for out-of-bounds or non-skin seeds
        """
        if not (0 <= start_x < self.width and 0 <= start_y < self.height):
            self.last_visited = set()
            return 0

        cached = self._known[start_y, start_x]
        if cached:
            self.last_visited = set()
            return int(cached)

        visited: Set[Tuple[int, int]] = set()
        reached = []
        stack = [(start_x, start_y)]
        size = 0

        while stack and size < self.max_size:
            x, y = stack.pop()

            if (x, y) in visited or x < 0 or x >= self.width or y < 0 or y >= self.height:
                continue
            visited.add((x, y))

            if self.mask[y, x]:
                size += 1
                reached.append((x, y))
                stack.extend(((x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)))

        for x, y in reached:
            self._known[y, x] = size

        self.last_visited = visited
        return size


def grow_region(frame: np.ndarray, start_x: int, start_y: int) -> int:
    """Grow a single region on a frame without reusing any state"""
    return RegionGrower(frame).grow(start_x, start_y)
