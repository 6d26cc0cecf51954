"""
Violation Classifier - Turns detection results and browser signals
into typed violation events

Rules are independent and reactive:
- Presence rules run only on medium/high quality results
- Multiple-person detections escalate a session-scoped warning counter;
  the third warning raises a suspension advisory exactly once
- Tab visibility, fullscreen and keyboard signals are classified on
  state transitions reported by the browser
"""

import logging
from typing import Callable, List, Optional

from ..types import (
    DetectionQuality,
    DetectionResult,
    ExternalSignals,
    KeyEvent,
    Severity,
    ViolationEvent,
    ViolationType
)
from .advisory import AdvisoryBoard

logger = logging.getLogger(__name__)


FORBIDDEN_KEYS = {"F12", "F11", "Tab", "Escape"}
FORBIDDEN_CTRL_KEYS = {"c", "v", "a", "t", "w"}


def is_forbidden_key(event: KeyEvent) -> bool:
    """Check a keydown against the exam deny-list"""
    return (
        event.key in FORBIDDEN_KEYS
        or (event.ctrl and event.key in FORBIDDEN_CTRL_KEYS)
        or (event.alt and event.key == "Tab")
        or (event.ctrl and event.shift and event.key == "I")
    )


class ViolationClassifier:
    """
    Classifies one cycle's inputs into violation events.

    Owns the multiple-person warning counter and the last observed
    visibility/fullscreen state for a single session.
    """

    MAX_WARNINGS = 3
    TRUSTED_QUALITIES = (DetectionQuality.HIGH, DetectionQuality.MEDIUM)

    def __init__(
        self,
        board: Optional[AdvisoryBoard] = None,
        max_warnings: int = MAX_WARNINGS,
        on_suspension: Optional[Callable[[int], None]] = None
    ):
        """
        Args:
            board: Display state for advisories (a fresh one if omitted)
            max_warnings: Warning number that triggers the suspension advisory
            on_suspension: Optional callback fired with the warning count
                           when suspension is signaled
        """
        self.board = board or AdvisoryBoard()
        self.max_warnings = max_warnings
        self.on_suspension = on_suspension

        self.multiple_person_warnings = 0
        self._tab_visible = True
        self._fullscreen: Optional[bool] = None
        self._current_question = 0

    def _emit(self, events: List[ViolationEvent], event: ViolationEvent):
        events.append(event)
        self.board.show_violation(event)

    def evaluate_detection(self, result: DetectionResult) -> List[ViolationEvent]:
        """
        Classify a consensus detection result.

        Low-quality results are ignored: no events and no state change.
        """
        events: List[ViolationEvent] = []

        if result.quality not in self.TRUSTED_QUALITIES:
            return events

        faces = result.faces

        if faces == 0:
            self.board.show_warning("No person detected in camera")
            self._emit(events, ViolationEvent(
                type=ViolationType.FACE_NOT_DETECTED,
                severity=Severity.HIGH,
                description="No person detected in camera feed"
            ))

        elif faces > 1:
            self.multiple_person_warnings += 1
            count = self.multiple_person_warnings

            if count <= self.max_warnings:
                self.board.show_warning(
                    f"Warning {count}/{self.max_warnings}: Multiple people detected!"
                )
                if count == self.max_warnings:
                    self.board.signal_suspension()
                    if self.on_suspension is not None:
                        self.on_suspension(count)

            self._emit(events, ViolationEvent(
                type=ViolationType.MULTIPLE_FACES,
                severity=Severity.HIGH,
                description=f"Multiple people detected: {faces} (Warning {count})"
            ))

        else:
            self.board.clear_warning()

        return events

    def evaluate_signals(self, signals: Optional[ExternalSignals]) -> List[ViolationEvent]:
        """
        Classify browser-side signals.

        Visibility and fullscreen fire on a True -> False transition;
        a key event fires every time it is forbidden.
        """
        events: List[ViolationEvent] = []

        if signals is None:
            return events

        if signals.current_question is not None:
            self._current_question = signals.current_question

        if signals.tab_visible is not None:
            if self._tab_visible and not signals.tab_visible:
                self._emit(events, ViolationEvent(
                    type=ViolationType.TAB_SWITCH,
                    severity=Severity.HIGH,
                    description="Student switched away from exam tab"
                ))
            self._tab_visible = signals.tab_visible

        if signals.fullscreen is not None:
            lost = self._fullscreen is True and not signals.fullscreen
            if lost and self._current_question > 0:
                self._emit(events, ViolationEvent(
                    type=ViolationType.FULLSCREEN_EXIT,
                    severity=Severity.HIGH,
                    description="Student exited fullscreen mode"
                ))
            self._fullscreen = signals.fullscreen

        if signals.key_event is not None and is_forbidden_key(signals.key_event):
            self._emit(events, ViolationEvent(
                type=ViolationType.SUSPICIOUS_MOVEMENT,
                severity=Severity.MEDIUM,
                description=f"Attempted to use forbidden key: {signals.key_event.key}"
            ))

        return events
