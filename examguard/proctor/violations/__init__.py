"""Violation classification and advisory display state"""

from .advisory import Advisory, AdvisoryBoard
from .classifier import ViolationClassifier, is_forbidden_key

__all__ = ["Advisory", "AdvisoryBoard", "ViolationClassifier", "is_forbidden_key"]
