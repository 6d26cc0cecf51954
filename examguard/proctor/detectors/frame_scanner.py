"""
Frame Scanner - Coarse skin sampling and frame-to-frame movement

Walks the frame on a sparse grid, grows a region from every skin-like
sample and compares against the previous frame for movement.
"""

import logging
import numpy as np
from dataclasses import dataclass, field
from typing import List, Optional

from ..types import SkinRegion
from .skin_classifier import skin_mask
from .region_grower import RegionGrower

logger = logging.getLogger(__name__)


@dataclass
class ScanResult:
    """Raw per-frame measurements before clustering"""
    skin_pixels: int = 0
    candidate_regions: List[SkinRegion] = field(default_factory=list)
    movement_detected: bool = False


class FrameScanner:
    """
    Collects candidate skin regions and a movement flag from a frame.

    Regions grown from different seeds in the same blob overlap; they
    are only merged later by the clusterer.
    """

    SAMPLE_STRIDE = 4            # grid step in both axes
    MIN_REGION_SIZE = 50         # grown size must exceed this
    MOVEMENT_PIXEL_STEP = 4      # every 4th pixel of the flattened stream
    MOVEMENT_DIFF_THRESHOLD = 30 # summed |dR|+|dG|+|dB|
    MOVEMENT_AREA_DIVISOR = 1000 # changed pixels must exceed area / 1000

    def scan(self, frame: np.ndarray, previous_frame: Optional[np.ndarray] = None) -> ScanResult:
        """
        Scan one frame.

        Args:
            frame: RGB image (height, width, 3|4)
            previous_frame: Frame from the previous cycle, if any

        Returns:
            ScanResult with sampled skin count, regions and movement flag
        """
        height, width = frame.shape[:2]
        mask = skin_mask(frame)
        grower = RegionGrower(mask=mask)

        result = ScanResult()

        # argwhere yields grid hits in row-major order, same as a y/x loop
        stride = self.SAMPLE_STRIDE
        for row, col in np.argwhere(mask[::stride, ::stride]):
            x, y = int(col) * stride, int(row) * stride
            result.skin_pixels += 1

            region_size = grower.grow(x, y)
            if region_size > self.MIN_REGION_SIZE:
                result.candidate_regions.append(SkinRegion(x=x, y=y, size=region_size))

        result.movement_detected = self.detect_movement(frame, previous_frame)

        logger.debug(
            f"Scanned {width}x{height}: skin={result.skin_pixels} "
            f"regions={len(result.candidate_regions)} movement={result.movement_detected}"
        )
        return result

    def detect_movement(self, frame: np.ndarray, previous_frame: Optional[np.ndarray]) -> bool:
        """
        Compare sampled pixels against the previous frame.

        Returns:
            False when there is no previous frame or the shapes differ
        """
        if previous_frame is None:
            return False

        if previous_frame.shape[:2] != frame.shape[:2]:
            return False

        height, width = frame.shape[:2]

        current = frame[..., :3].reshape(-1, 3)[::self.MOVEMENT_PIXEL_STEP].astype(np.int16)
        previous = previous_frame[..., :3].reshape(-1, 3)[::self.MOVEMENT_PIXEL_STEP].astype(np.int16)

        diff = np.abs(current - previous).sum(axis=1)
        changed = int(np.count_nonzero(diff > self.MOVEMENT_DIFF_THRESHOLD))

        return changed > (width * height) / self.MOVEMENT_AREA_DIVISOR
