"""
Pixelsorter Sorting Module - Contrast masking and span sorting.

This module provides the pixel sorting engine:
- Color keys (red, green, blue, hue, saturation, value)
- Contrast mask construction
- Span sorting along rows or columns
- Per-file and batch processing

Example:
    >>> from pixelsorter.sorting import build_mask, sort_pixels
    >>> mask = build_mask(pixels, "value", 0.25, 0.8)
    >>> result = sort_pixels(pixels, mask, "hue", "down")
"""

from pixelsorter.sorting.base import (
    BatchOutput,
    ColorKey,
    FileResult,
    ScanAxis,
    SortDirection,
)
from pixelsorter.sorting.color import (
    BlueKey,
    GreenKey,
    HueKey,
    RedKey,
    SaturationKey,
    ValueKey,
    get_color_key,
    get_color_keys,
    rgb_to_hsv,
    rgb_to_hsv_array,
)
from pixelsorter.sorting.mask import build_mask
from pixelsorter.sorting.processor import (
    BatchProcessor,
    process_file,
    sort_image,
)
from pixelsorter.sorting.spans import find_spans, sort_pixels

__all__ = [
    # Base
    "ColorKey",
    "ScanAxis",
    "SortDirection",
    "FileResult",
    "BatchOutput",
    # Color
    "RedKey",
    "GreenKey",
    "BlueKey",
    "HueKey",
    "SaturationKey",
    "ValueKey",
    "get_color_key",
    "get_color_keys",
    "rgb_to_hsv",
    "rgb_to_hsv_array",
    # Mask
    "build_mask",
    # Spans
    "find_spans",
    "sort_pixels",
    # Processor
    "BatchProcessor",
    "process_file",
    "sort_image",
]
