"""
Detection Scorer - Turns scan measurements into a presence estimate
"""

import logging
from typing import Sequence

from ..types import Cluster, DetectionQuality, DetectionResult, FrameAnalysis

logger = logging.getLogger(__name__)


class DetectionScorer:
    """
    Computes face count, confidence and quality tier for one frame.

    Formula:
        skin_ratio = skin_pixels / (width * height)
        region_confidence = min(clusters / 2, 1)
        confidence = min(skin_ratio * 50
                         + region_confidence * 0.4
                         + (0.1 if movement else 0), 1)

    The reported face count is capped at MAX_FACES even when more
    clusters exist.
    """

    SKIN_THRESHOLD_RATIO = 0.015
    MAX_FACES = 3

    SKIN_RATIO_WEIGHT = 50
    REGION_WEIGHT = 0.4
    MOVEMENT_BONUS = 0.1

    HIGH_CONFIDENCE = 0.7
    MEDIUM_CONFIDENCE = 0.4

    def score(
        self,
        skin_pixels: int,
        clusters: Sequence[Cluster],
        movement_detected: bool,
        width: int,
        height: int
    ) -> DetectionResult:
        """
        Score one frame.

        Args:
            skin_pixels: Skin-like samples counted by the scanner
            clusters: Clusters surviving the size floor
            movement_detected: Movement flag from the scanner
            width: Frame width
            height: Frame height

        Returns:
            DetectionResult for this frame alone
        """
        cluster_count = len(clusters)
        analysis = FrameAnalysis(
            skin_pixels=skin_pixels,
            face_regions=cluster_count,
            movement_detected=movement_detected
        )

        area = width * height
        if area <= 0:
            return DetectionResult(frame_analysis=analysis)

        has_enough_skin = skin_pixels > area * self.SKIN_THRESHOLD_RATIO

        if not has_enough_skin or cluster_count == 0:
            return DetectionResult(frame_analysis=analysis)

        faces = min(cluster_count, self.MAX_FACES)

        skin_ratio = skin_pixels / area
        region_confidence = min(cluster_count / 2, 1)
        movement_bonus = self.MOVEMENT_BONUS if movement_detected else 0

        confidence = min(
            skin_ratio * self.SKIN_RATIO_WEIGHT
            + region_confidence * self.REGION_WEIGHT
            + movement_bonus,
            1
        )

        if confidence > self.HIGH_CONFIDENCE and cluster_count >= faces:
            quality = DetectionQuality.HIGH
        elif confidence > self.MEDIUM_CONFIDENCE:
            quality = DetectionQuality.MEDIUM
        else:
            quality = DetectionQuality.LOW

        return DetectionResult(
            faces=faces,
            confidence=float(confidence),
            quality=quality,
            frame_analysis=analysis
        )
