"""Metrics aggregation"""

from .aggregator import ViolationMetrics

__all__ = ["ViolationMetrics"]
