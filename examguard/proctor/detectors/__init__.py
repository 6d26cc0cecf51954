"""Detector modules for proctoring"""

from .skin_classifier import is_skin_like, skin_mask
from .region_grower import RegionGrower, grow_region
from .frame_scanner import FrameScanner, ScanResult
from .region_clusterer import cluster_regions

__all__ = [
    "is_skin_like",
    "skin_mask",
    "RegionGrower",
    "grow_region",
    "FrameScanner",
    "ScanResult",
    "cluster_regions"
]
