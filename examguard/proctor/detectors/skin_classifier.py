"""
Skin Classifier - Decides whether a pixel color is skin-like

A pixel is skin-like when ANY of three color-space rules fires:
- RGB: explicit channel bounds and red dominance
- YCbCr: chroma window Cb in [77, 127], Cr in [133, 173]
- HSV: hue in [0, 50], saturation in [0.23, 0.68], value >= 0.35

The thresholds are empirical and must not be tuned without
treating it as a behavior change.
"""

import logging
import numpy as np

logger = logging.getLogger(__name__)


def _rgb_rule(r: int, g: int, b: int) -> bool:
    return (
        r > 95 and g > 40 and b > 20
        and max(r, g, b) - min(r, g, b) > 15
        and abs(r - g) > 15
        and r > g and r > b
    )


def _ycbcr_rule(r: int, g: int, b: int) -> bool:
    cb = -0.169 * r - 0.331 * g + 0.5 * b + 128
    cr = 0.5 * r - 0.419 * g - 0.081 * b + 128
    return 77 <= cb <= 127 and 133 <= cr <= 173


def _hsv_rule(r: int, g: int, b: int) -> bool:
    high = max(r, g, b)
    low = min(r, g, b)
    diff = high - low

    h = 0.0
    if diff != 0:
        if high == r:
            h = ((g - b) / diff) % 6
        elif high == g:
            h = (b - r) / diff + 2
        else:
            h = (r - g) / diff + 4
    h = h * 60
    if h < 0:
        h += 360

    s = 0.0 if high == 0 else diff / high
    v = high / 255

    return 0 <= h <= 50 and 0.23 <= s <= 0.68 and v >= 0.35


def is_skin_like(r: int, g: int, b: int) -> bool:
    """
    Classify a single 8-bit RGB color.

    Args:
        r, g, b: Channel values in 0-255

    Returns:
        True if any of the RGB, YCbCr or HSV rules fires
    """
    r, g, b = int(r), int(g), int(b)
    return _rgb_rule(r, g, b) or _ycbcr_rule(r, g, b) or _hsv_rule(r, g, b)


def skin_mask(frame: np.ndarray) -> np.ndarray:
    """
    Vectorized is_skin_like over a whole frame.

    Args:
        frame: RGB (or RGBA) uint8 image, shape (height, width, 3|4)

    Returns:
        Boolean array of shape (height, width)
    """
    pixels = frame[..., :3].astype(np.float64)
    r = pixels[..., 0]
    g = pixels[..., 1]
    b = pixels[..., 2]

    high = pixels.max(axis=-1)
    low = pixels.min(axis=-1)
    diff = high - low

    rgb = (
        (r > 95) & (g > 40) & (b > 20)
        & (diff > 15)
        & (np.abs(r - g) > 15)
        & (r > g) & (r > b)
    )

    cb = -0.169 * r - 0.331 * g + 0.5 * b + 128
    cr = 0.5 * r - 0.419 * g - 0.081 * b + 128
    ycbcr = (cb >= 77) & (cb <= 127) & (cr >= 133) & (cr <= 173)

    # Hue branches are evaluated in the same precedence as the scalar rule
    with np.errstate(divide="ignore", invalid="ignore"):
        safe_diff = np.where(diff == 0, 1.0, diff)
        hue = np.where(
            high == r,
            np.mod((g - b) / safe_diff, 6),
            np.where(high == g, (b - r) / safe_diff + 2, (r - g) / safe_diff + 4)
        )
        hue = np.where(diff == 0, 0.0, hue) * 60
        hue = np.where(hue < 0, hue + 360, hue)

        saturation = np.where(high == 0, 0.0, diff / np.where(high == 0, 1.0, high))
    value = high / 255

    hsv = (
        (hue >= 0) & (hue <= 50)
        & (saturation >= 0.23) & (saturation <= 0.68)
        & (value >= 0.35)
    )

    return rgb | ycbcr | hsv
