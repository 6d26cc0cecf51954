"""
Proctoring Types - Value objects shared by the detection pipeline
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Any, Optional


class DetectionQuality(str, Enum):
    """Confidence bucket gating whether a result may drive violations"""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ViolationType(str, Enum):
    FACE_NOT_DETECTED = "face_not_detected"
    MULTIPLE_FACES = "multiple_faces"
    TAB_SWITCH = "tab_switch"
    FULLSCREEN_EXIT = "fullscreen_exit"
    SUSPICIOUS_MOVEMENT = "suspicious_movement"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class SkinRegion:
    """Candidate blob grown from a single seed pixel"""
    x: int
    y: int
    size: int


@dataclass
class Cluster:
    """Merged group of regions; (x, y) stays on the first region's seed"""
    x: int
    y: int
    size: int


@dataclass
class FrameAnalysis:
    skin_pixels: int = 0
    face_regions: int = 0
    movement_detected: bool = False


@dataclass
class DetectionResult:
    """Per-frame person-presence estimate"""
    faces: int = 0
    confidence: float = 0.0
    quality: DetectionQuality = DetectionQuality.LOW
    frame_analysis: FrameAnalysis = field(default_factory=FrameAnalysis)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "faces": self.faces,
            "confidence": self.confidence,
            "quality": self.quality.value,
            "frame_analysis": asdict(self.frame_analysis)
        }


@dataclass(frozen=True)
class ViolationEvent:
    """A classified exam-integrity violation. Immutable once emitted."""
    type: ViolationType
    severity: Severity
    description: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "timestamp": self.timestamp.isoformat(),
            "severity": self.severity.value,
            "description": self.description
        }


@dataclass(frozen=True)
class KeyEvent:
    """Snapshot of a browser keydown event"""
    key: str
    ctrl: bool = False
    shift: bool = False
    alt: bool = False


@dataclass
class ExternalSignals:
    """
    Browser-side integrity state reported alongside a frame.

    Every field is optional; None means "not observed this cycle".
    """
    tab_visible: Optional[bool] = None
    fullscreen: Optional[bool] = None
    key_event: Optional[KeyEvent] = None
    current_question: Optional[int] = None
