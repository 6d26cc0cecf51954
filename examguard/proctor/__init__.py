"""
ExamGuard Proctoring Module

Enforces exam integrity during assessments by detecting:
- Absence from the camera
- Multiple-person presence
- Tab switches
- Fullscreen exits
- Forbidden key presses

Person presence is estimated from skin-color heuristics and spatial
clustering, then smoothed over a short rolling history.
"""

from .engine import PresenceEngine
from .session import ProctorSession
from .types import (
    DetectionQuality,
    DetectionResult,
    ExternalSignals,
    KeyEvent,
    Severity,
    ViolationEvent,
    ViolationType
)

__all__ = [
    "PresenceEngine",
    "ProctorSession",
    "DetectionQuality",
    "DetectionResult",
    "ExternalSignals",
    "KeyEvent",
    "Severity",
    "ViolationEvent",
    "ViolationType"
]
