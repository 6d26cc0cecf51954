"""
Presence Engine - One full detection cycle per frame

Pipeline:
    FrameScanner -> cluster_regions -> DetectionScorer
        -> ConsensusTracker -> ViolationClassifier

All mutable state (consensus history, warning counter, retained
previous frame) lives on the instance, one instance per exam session.
"""

import logging
import numpy as np
from typing import List, Optional, Tuple

from .detectors import FrameScanner, cluster_regions
from .scoring import DetectionScorer, ConsensusTracker
from .violations import AdvisoryBoard, ViolationClassifier
from .types import DetectionResult, ExternalSignals, ViolationEvent

logger = logging.getLogger(__name__)


def _is_usable_frame(frame) -> bool:
    if not isinstance(frame, np.ndarray) or frame.ndim != 3:
        return False
    height, width, channels = frame.shape
    return channels in (3, 4) and width > 0 and height > 0


class PresenceEngine:
    """
    Person-presence detection and violation consensus for one session.
    """

    def __init__(
        self,
        classifier: Optional[ViolationClassifier] = None,
        history_size: int = ConsensusTracker.HISTORY_SIZE
    ):
        self.scanner = FrameScanner()
        self.scorer = DetectionScorer()
        self.tracker = ConsensusTracker(history_size=history_size)
        self.classifier = classifier or ViolationClassifier()

        self._previous_frame: Optional[np.ndarray] = None

    @property
    def board(self) -> AdvisoryBoard:
        return self.classifier.board

    @property
    def previous_frame(self) -> Optional[np.ndarray]:
        return self._previous_frame

    def analyze(self, frame: np.ndarray, previous_frame: Optional[np.ndarray] = None) -> DetectionResult:
        """
        Single-frame estimate without touching session state.

        Returns:
            Raw DetectionResult; a zero/low result for unusable frames
        """
        if not _is_usable_frame(frame):
            logger.debug("Unusable frame passed to engine, scoring as empty")
            return DetectionResult()

        height, width = frame.shape[:2]
        scan = self.scanner.scan(frame, previous_frame)
        clusters = cluster_regions(scan.candidate_regions, width, height)

        return self.scorer.score(
            scan.skin_pixels,
            clusters,
            scan.movement_detected,
            width,
            height
        )

    def process_frame(
        self,
        frame: np.ndarray,
        previous_frame: Optional[np.ndarray] = None,
        signals: Optional[ExternalSignals] = None
    ) -> Tuple[DetectionResult, List[ViolationEvent]]:
        """
        Run one detection cycle.

        Args:
            frame: RGB uint8 image (height, width, 3|4)
            previous_frame: Frame to compare for movement; defaults to the
                            frame retained from the previous cycle
            signals: Browser-side signals observed this cycle

        Returns:
            Tuple of (consensus DetectionResult, violations emitted this cycle)
        """
        if not _is_usable_frame(frame):
            return DetectionResult(), self.classifier.evaluate_signals(signals)

        if frame.dtype != np.uint8:
            frame = np.clip(frame, 0, 255).astype(np.uint8)

        if previous_frame is None:
            previous_frame = self._previous_frame

        raw = self.analyze(frame, previous_frame)
        self._previous_frame = frame.copy()

        result = self.tracker.update(raw)

        violations = self.classifier.evaluate_detection(result)
        violations.extend(self.classifier.evaluate_signals(signals))

        logger.debug(
            f"Cycle: raw_faces={raw.faces} consensus={result.faces} "
            f"quality={result.quality.value} violations={len(violations)}"
        )

        return result, violations

    def process_signals(self, signals: Optional[ExternalSignals]) -> List[ViolationEvent]:
        """Classify browser signals without a frame"""
        return self.classifier.evaluate_signals(signals)
