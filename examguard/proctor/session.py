"""
Proctor Session - Manages a single proctoring session
"""

import uuid
import logging
import numpy as np
from datetime import datetime, timezone
from typing import Callable, Dict, Any, List, Optional

from ..config import settings
from .engine import PresenceEngine
from .metrics import ViolationMetrics
from .types import ExternalSignals, ViolationEvent
from .violations import AdvisoryBoard, ViolationClassifier
from .utils.frame_quality import check_frame_quality
from .utils.logging import log_session_start, log_session_end, log_violation, log_suspension

logger = logging.getLogger(__name__)

ViolationListener = Callable[[ViolationEvent], None]


class ProctorSession:
    """
    Manages a single proctoring session.

    Owns the presence engine (consensus history, warning counter,
    retained frame), keeps the violation log and notifies listeners.
    """

    def __init__(
        self,
        assessment_id: str,
        student_id: str,
        session_id: Optional[str] = None,
        clock: Optional[Callable[[], float]] = None
    ):
        """
        Initialize a new proctoring session.

        Args:
            assessment_id: ID of the assessment being proctored
            student_id: ID of the student being proctored
            session_id: Optional custom session ID (auto-generated if not provided)
            clock: Optional monotonic clock for advisory expiry
        """
        self.id = session_id or f"EXM_{uuid.uuid4().hex[:6].upper()}"
        self.assessment_id = assessment_id
        self.student_id = student_id
        self.started_at = datetime.now(timezone.utc)
        self.is_active = True

        board = AdvisoryBoard(display_seconds=settings.WARNING_DISPLAY_SECONDS, clock=clock)
        classifier = ViolationClassifier(
            board=board,
            max_warnings=settings.MAX_MULTI_PERSON_WARNINGS,
            on_suspension=self._on_suspension
        )
        self.engine = PresenceEngine(classifier=classifier)

        self.metrics = ViolationMetrics(session_id=self.id)
        self.violations: List[ViolationEvent] = []
        self._listeners: List[ViolationListener] = []
        self.last_detection = None

        log_session_start(self.id, assessment_id, student_id)

        logger.info(f"Proctoring session started: {self.id}")

    @property
    def board(self) -> AdvisoryBoard:
        return self.engine.board

    @property
    def multiple_person_warnings(self) -> int:
        return self.engine.classifier.multiple_person_warnings

    @property
    def suspended(self) -> bool:
        return self.board.suspended

    def add_listener(self, listener: ViolationListener):
        """Register a consumer for emitted violations"""
        self._listeners.append(listener)

    def _on_suspension(self, warnings: int):
        log_suspension(self.id, warnings)

    def _record(self, events: List[ViolationEvent]):
        self.violations.extend(events)
        self.metrics.add_violations(events)

        for event in events:
            log_violation(self.id, event.type.value, event.severity.value, event.description)
            for listener in self._listeners:
                try:
                    listener(event)
                except Exception as e:
                    logger.warning(f"Violation listener failed: {e}")

    def _advisory_state(self) -> Dict[str, Any]:
        warning = self.board.current_warning
        violation = self.board.current_violation
        return {
            "advisory": warning.message if warning else None,
            "current_violation": violation.to_dict() if violation else None,
            "suspension_notice": self.board.suspension_notice
        }

    def process_frame(
        self,
        frame: np.ndarray,
        signals: Optional[ExternalSignals] = None
    ) -> Dict[str, Any]:
        """
        Process a single frame through the detection pipeline.

        Args:
            frame: RGB image from webcam
            signals: Browser-side signals observed with this frame

        Returns:
            Dict with detection result, violations and advisory state
        """
        if not self.is_active:
            return {"error": "Session is not active"}

        quality = check_frame_quality(
            frame,
            min_size=(settings.MIN_FRAME_WIDTH, settings.MIN_FRAME_HEIGHT)
        )
        if not quality["is_valid"]:
            logger.debug(f"Frame skipped: {quality['issues']}")
            self.metrics.add_skipped_frame()

            # Signals are still honored when the frame is unusable
            events = self.engine.process_signals(signals)
            self._record(events)

            return {
                "processed": False,
                "quality_issues": quality["issues"],
                "detection": None,
                "violations": [e.to_dict() for e in events],
                "warning_count": self.metrics.warning_count,
                "multiple_person_warnings": self.multiple_person_warnings,
                "suspended": self.suspended,
                "frame_count": self.metrics.frame_count,
                **self._advisory_state()
            }

        result, events = self.engine.process_frame(frame, signals=signals)

        self.metrics.update(result)
        self._record(events)
        self.last_detection = result

        return {
            "processed": True,
            "quality_issues": quality["issues"],
            "detection": result.to_dict(),
            "violations": [e.to_dict() for e in events],
            "warning_count": self.metrics.warning_count,
            "multiple_person_warnings": self.multiple_person_warnings,
            "suspended": self.suspended,
            "frame_count": self.metrics.frame_count,
            **self._advisory_state()
        }

    def process_signals(self, signals: ExternalSignals) -> Dict[str, Any]:
        """
        Classify browser signals reported between frames.

        Returns:
            Dict with violations emitted and advisory state
        """
        if not self.is_active:
            return {"error": "Session is not active"}

        events = self.engine.process_signals(signals)
        self._record(events)

        return {
            "violations": [e.to_dict() for e in events],
            "warning_count": self.metrics.warning_count,
            **self._advisory_state()
        }

    def get_status(self) -> Dict[str, Any]:
        """Current live status of the session"""
        duration = (datetime.now(timezone.utc) - self.started_at).total_seconds()
        return {
            "session_id": self.id,
            "is_active": self.is_active,
            "frames_processed": self.metrics.frame_count,
            "warning_count": self.metrics.warning_count,
            "multiple_person_warnings": self.multiple_person_warnings,
            "suspended": self.suspended,
            "last_detection": self.last_detection.to_dict() if self.last_detection else None,
            "duration_seconds": duration,
            **self._advisory_state()
        }

    def finalize(self) -> Dict[str, Any]:
        """
        Finalize the session and return final results.

        Returns:
            Final proctoring results with violation counts
        """
        self.is_active = False

        log_session_end(
            self.id,
            len(self.violations),
            self.multiple_person_warnings,
            self.metrics.frame_count
        )

        result = {
            "session_id": self.id,
            "assessment_id": self.assessment_id,
            "student_id": self.student_id,
            "frames_processed": self.metrics.frame_count,
            "violation_counts": dict(self.metrics.violation_counts),
            "warning_count": self.metrics.warning_count,
            "multiple_person_warnings": self.multiple_person_warnings,
            "suspended": self.suspended,
            "duration_seconds": (datetime.now(timezone.utc) - self.started_at).total_seconds(),
            "metrics_summary": self.metrics.get_summary()
        }

        logger.info(f"Session {self.id} finalized: violations={len(self.violations)}")

        return result
