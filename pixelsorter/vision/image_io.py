"""
Image decoding and encoding.

Images are handled internally as RGBA uint8 arrays. The channel layout of
the source file is remembered so the sorted result can be written back in
the same layout and format.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import cv2
import numpy as np

logger = logging.getLogger(__name__)


class ImageIOError(OSError):
    """Raised when an image cannot be read or written."""

    pass


@dataclass
class DecodedImage:
    """
    Decoded image with its source layout.

    Attributes:
        pixels: RGBA uint8 array of shape (H, W, 4).
        source_channels: Channel count of the file (1, 3 or 4).
    """

    pixels: np.ndarray
    source_channels: int = 4

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]


def _to_uint8(image: np.ndarray, path: Path) -> np.ndarray:
    if image.dtype == np.uint8:
        return image
    if image.dtype == np.uint16:
        return np.round(image.astype(np.float64) / 257.0).astype(np.uint8)
    raise ImageIOError(f"Unsupported image depth {image.dtype}: {path}")


def load_image(path: str | Path) -> DecodedImage:
    """
    Decode an image file to RGBA.

    Args:
        path: Image file path.

    Returns:
        DecodedImage with RGBA pixels.

    Raises:
        ImageIOError: If the file cannot be decoded.
    """
    path = Path(path)
    image = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if image is None:
        raise ImageIOError(f"Failed to load image: {path}")

    image = _to_uint8(image, path)

    if image.ndim == 2:
        return DecodedImage(cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA), 1)
    if image.shape[2] == 3:
        return DecodedImage(cv2.cvtColor(image, cv2.COLOR_BGR2RGBA), 3)
    if image.shape[2] == 4:
        return DecodedImage(cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA), 4)

    raise ImageIOError(f"Unsupported channel count {image.shape[2]}: {path}")


def encode_pixels(pixels: np.ndarray, channels: int = 4) -> np.ndarray:
    """Convert RGBA pixels to the OpenCV layout for the given channel count."""
    if channels == 1:
        return np.ascontiguousarray(pixels[..., 0])
    if channels == 3:
        return cv2.cvtColor(pixels, cv2.COLOR_RGBA2BGR)
    return cv2.cvtColor(pixels, cv2.COLOR_RGBA2BGRA)


def save_image(path: str | Path, pixels: np.ndarray, channels: int = 4) -> Path:
    """
    Encode RGBA pixels to a file. The format follows the file extension.

    Args:
        path: Destination path.
        pixels: RGBA uint8 array of shape (H, W, 4).
        channels: Channel count to write (1, 3 or 4).

    Returns:
        The written path.

    Raises:
        ImageIOError: If encoding or writing fails.
    """
    path = Path(path)
    try:
        ok = cv2.imwrite(str(path), encode_pixels(pixels, channels))
    except cv2.error as e:
        raise ImageIOError(f"Failed to write image {path}: {e}") from e

    if not ok:
        raise ImageIOError(f"Failed to write image: {path}")

    logger.debug(f"Wrote {path}")
    return path
