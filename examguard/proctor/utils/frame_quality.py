"""
Frame Quality Gate - Decides whether a webcam frame reaches the engine

Only structural problems block a frame. Lighting and focus problems are
reported so the exam client can prompt the student, but the frame is
still scored.
"""

import cv2
import numpy as np
import logging
from typing import Dict, Any, Tuple

logger = logging.getLogger(__name__)

EMPTY_FRAME = "empty_frame"
BAD_SHAPE = "bad_shape"
TOO_SMALL = "too_small"
TOO_DARK = "too_dark"
TOO_BRIGHT = "too_bright"
TOO_BLURRY = "too_blurry"

BLOCKING_ISSUES = (EMPTY_FRAME, TOO_SMALL, BAD_SHAPE)


def _rejected(issue: str, dimensions: Tuple[int, int]) -> Dict[str, Any]:
    return {
        "is_valid": False,
        "issues": [issue],
        "brightness": 0.0,
        "blur_score": 0.0,
        "dimensions": dimensions
    }


def check_frame_quality(
    frame: np.ndarray,
    min_brightness: float = 40,
    max_brightness: float = 220,
    min_blur_score: float = 50,
    min_size: Tuple[int, int] = (100, 100)
) -> Dict[str, Any]:
    """
    Inspect an RGB (or RGBA) frame.

    Args:
        frame: Image of shape (height, width, 3|4)
        min_brightness: Mean gray level below which the frame is too_dark
        max_brightness: Mean gray level above which the frame is too_bright
        min_blur_score: Laplacian variance below which the frame is too_blurry
        min_size: Minimum (width, height)

    Returns:
        Dict with is_valid (no blocking issue), issues, brightness,
        blur_score and dimensions as (width, height)
    """
    if frame is None or frame.size == 0:
        return _rejected(EMPTY_FRAME, (0, 0))

    if frame.ndim != 3 or frame.shape[2] not in (3, 4):
        width = frame.shape[1] if frame.ndim > 1 else 0
        return _rejected(BAD_SHAPE, (width, frame.shape[0]))

    height, width = frame.shape[:2]
    issues = []

    if width < min_size[0] or height < min_size[1]:
        issues.append(TOO_SMALL)

    rgb = np.ascontiguousarray(frame[..., :3], dtype=np.uint8)
    gray = cv2.cvtColor(rgb, cv2.COLOR_RGB2GRAY)

    brightness = float(np.mean(gray))
    if brightness < min_brightness:
        issues.append(TOO_DARK)
    elif brightness > max_brightness:
        issues.append(TOO_BRIGHT)

    blur_score = float(cv2.Laplacian(gray, cv2.CV_64F).var())
    if blur_score < min_blur_score:
        issues.append(TOO_BLURRY)

    return {
        "is_valid": not any(issue in BLOCKING_ISSUES for issue in issues),
        "issues": issues,
        "brightness": brightness,
        "blur_score": blur_score,
        "dimensions": (width, height)
    }
