"""Debug export of contrast masks.

Renders a boolean contrast mask as an opaque black and white image so the
band selection can be inspected next to the sorted output.

Example:
    >>> from pixelsorter.vision.mask_export import export_mask
    >>> export_mask(mask, Path("out/photo.png"))
    PosixPath('out/photo.png_mask.png')
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from pixelsorter.vision.image_io import save_image

logger = logging.getLogger(__name__)

MASK_SUFFIX = "_mask"


def mask_to_image(mask: np.ndarray) -> np.ndarray:
    """Convert a boolean mask to RGBA: included white, excluded black."""
    value = np.where(mask, 255, 0).astype(np.uint8)
    alpha = np.full(mask.shape, 255, dtype=np.uint8)
    return np.stack([value, value, value, alpha], axis=-1)


def mask_path_for(output_path: Path) -> Path:
    """Debug mask path for a sorted output: <name>_mask.png in the same folder.

    The full output name, extension included, is kept so outputs that share
    a stem get distinct masks.
    """
    return output_path.with_name(f"{output_path.name}{MASK_SUFFIX}.png")


def export_mask(mask: np.ndarray, output_path: Path) -> Path:
    """Write the mask visualization next to the sorted output.

    Args:
        mask: Boolean mask (H, W).
        output_path: Path of the sorted image the mask belongs to.

    Returns:
        Path of the written mask image.
    """
    mask_path = mask_path_for(Path(output_path))
    logger.info(f"Saving contrast mask: {mask_path}")
    return save_image(mask_path, mask_to_image(mask), channels=4)
