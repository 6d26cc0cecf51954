"""
Violation Metrics - Aggregates per-session detection and violation counts
"""

import logging
from typing import Dict, Any, Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from ..types import DetectionQuality, DetectionResult, ViolationEvent, ViolationType

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ViolationMetrics:
    """
    Aggregates counts for a proctoring session.

    The total warning count mirrors what the exam client shows: one per
    emitted violation of any type.
    """

    session_id: str

    # Frame counters
    frame_count: int = 0
    skipped_frames: int = 0

    # Detection counters
    movement_frames: int = 0
    low_quality_frames: int = 0

    # Violations by type
    violation_counts: Dict[str, int] = field(
        default_factory=lambda: {t.value: 0 for t in ViolationType}
    )

    # Timestamps
    started_at: datetime = field(default_factory=_utcnow)
    last_frame_at: datetime = field(default_factory=_utcnow)

    @property
    def warning_count(self) -> int:
        return sum(self.violation_counts.values())

    def update(self, result: DetectionResult):
        """Update metrics from a processed frame's consensus result"""
        self.frame_count += 1
        self.last_frame_at = _utcnow()

        if result.frame_analysis.movement_detected:
            self.movement_frames += 1

        if result.quality == DetectionQuality.LOW:
            self.low_quality_frames += 1

    def add_skipped_frame(self):
        self.skipped_frames += 1

    def add_violations(self, events: Iterable[ViolationEvent]):
        for event in events:
            key = event.type.value
            self.violation_counts[key] = self.violation_counts.get(key, 0) + 1

    def get_summary(self) -> Dict[str, Any]:
        """
        Get complete metrics summary.

        Returns:
            Dict with all aggregated metrics
        """
        duration = (self.last_frame_at - self.started_at).total_seconds()

        return {
            "session_id": self.session_id,
            "frame_count": self.frame_count,
            "skipped_frames": self.skipped_frames,
            "duration_seconds": duration,
            "movement_frames": self.movement_frames,
            "low_quality_frames": self.low_quality_frames,
            "violation_counts": dict(self.violation_counts),
            "warning_count": self.warning_count
        }
