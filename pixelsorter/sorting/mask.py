"""
Contrast mask construction.

A pixel is included in the mask when its normalized color attribute lies
inside the closed band [lower, upper].
"""

import logging

import numpy as np

from pixelsorter.sorting.base import ColorKey
from pixelsorter.sorting.color import get_color_key

logger = logging.getLogger(__name__)


def build_mask(
    image: np.ndarray,
    attribute: "str | ColorKey",
    lower: float,
    upper: float,
) -> np.ndarray:
    """
    Build the contrast mask of an image.

    Channels are normalized by 255, hue by 360 and saturation/value by 100,
    so every attribute is compared against the same [0, 1] band.

    Args:
        image: RGBA (or RGB) uint8 array of shape (H, W, C).
        attribute: Contrast-classification attribute (ColorKey or name).
        lower: Inclusive lower bound of the band.
        upper: Inclusive upper bound of the band.

    Returns:
        Boolean array of shape (H, W). True marks pixels eligible for sorting.

    Example:
        >>> image = np.array([[[0, 0, 0, 255], [255, 0, 0, 255]]], dtype=np.uint8)
        >>> build_mask(image, "red", 0.5, 1.0).tolist()
        [[False, True]]
    """
    key = get_color_key(attribute)

    if lower > upper:
        logger.debug(f"Empty contrast band [{lower}, {upper}], nothing will be sorted")

    values = key.normalized(image)
    return (values >= lower) & (values <= upper)


def mask_coverage(mask: np.ndarray) -> float:
    """Fraction of pixels included in the mask."""
    if mask.size == 0:
        return 0.0
    return float(np.count_nonzero(mask)) / mask.size
