"""
Pixelsorter Vision - Image decoding, encoding and debug mask export.

This module provides:
- RGBA decoding of image files via OpenCV
- Encoding back to the source format and channel layout
- Black and white visualization of contrast masks
"""

from pixelsorter.vision.image_io import (
    DecodedImage,
    ImageIOError,
    load_image,
    save_image,
)
from pixelsorter.vision.mask_export import export_mask, mask_to_image

__all__ = [
    "DecodedImage",
    "ImageIOError",
    "load_image",
    "save_image",
    "export_mask",
    "mask_to_image",
]
