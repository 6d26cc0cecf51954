"""Scoring modules"""

from .detection_scorer import DetectionScorer
from .consensus import ConsensusTracker

__all__ = ["DetectionScorer", "ConsensusTracker"]
