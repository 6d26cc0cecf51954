"""
Consensus Tracker - Damps single-frame noise in the face count
"""

import math
import logging
from collections import deque
from dataclasses import replace
from typing import Deque

from ..types import DetectionResult

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round .5 upward (round(2.5) == 3), unlike Python's banker's rounding"""
    return int(math.floor(value + 0.5))


class ConsensusTracker:
    """
    Rolling history of per-frame face counts.

    The consensus count is the rounded mean of the last HISTORY_SIZE raw
    counts. Confidence is discounted while the window is still filling.
    """

    HISTORY_SIZE = 5

    def __init__(self, history_size: int = HISTORY_SIZE):
        self.history_size = history_size
        self._history: Deque[int] = deque(maxlen=history_size)

    @property
    def history(self) -> list:
        return list(self._history)

    def update(self, result: DetectionResult) -> DetectionResult:
        """
        Push a raw result and return the smoothed one.

        Only faces and confidence are overwritten; quality and frame
        analysis pass through from the raw result.
        """
        faces, confidence = self.update_counts(result.faces, result.confidence)
        return replace(result, faces=faces, confidence=confidence)

    def update_counts(self, raw_faces: int, raw_confidence: float):
        """
        Push a raw face count.

        Returns:
            Tuple of (consensus_faces, discounted_confidence)
        """
        self._history.append(raw_faces)

        mean = sum(self._history) / len(self._history)
        consensus = round_half_up(mean)
        confidence = raw_confidence * (len(self._history) / self.history_size)

        return consensus, confidence

    def reset(self):
        """Clear history; only used at session start"""
        self._history.clear()
