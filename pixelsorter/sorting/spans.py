"""
Span sorting.

Walks an image line by line (rows or columns, depending on the direction),
finds maximal runs of masked pixels and sorts every run by a color key.
Pixels outside the mask never move, and only the RGB triples are permuted:
the alpha plane stays where it is.
"""

import logging
from collections.abc import Iterator

import numpy as np
from tqdm import tqdm

from pixelsorter.sorting.base import ColorKey, ScanAxis, SortDirection
from pixelsorter.sorting.color import get_color_key

logger = logging.getLogger(__name__)


def find_spans(line_mask: np.ndarray) -> list[tuple[int, int]]:
    """
    Find maximal runs of True values in a 1D mask.

    Args:
        line_mask: Boolean array for one scan line.

    Returns:
        List of half-open (start, end) pairs in scan order.

    Example:
        >>> find_spans(np.array([True, True, False, True]))
        [(0, 2), (3, 4)]
    """
    line_mask = np.asarray(line_mask, dtype=bool)
    if line_mask.size == 0:
        return []

    padded = np.concatenate([[False], line_mask, [False]]).astype(np.int8)
    changes = np.diff(padded)
    starts = np.flatnonzero(changes == 1)
    ends = np.flatnonzero(changes == -1)
    return [(int(s), int(e)) for s, e in zip(starts, ends, strict=True)]


def count_spans(mask: np.ndarray, axis: ScanAxis, min_length: int = 2) -> int:
    """Count spans of at least min_length pixels along the given axis."""
    lines = mask if axis == ScanAxis.ROWS else mask.T
    return sum(
        1
        for line in lines
        for start, end in find_spans(line)
        if end - start >= min_length
    )


def iter_scan_lines(array: np.ndarray, axis: ScanAxis) -> Iterator[np.ndarray]:
    """
    Yield views of each scan line.

    Rows are yielded top to bottom, columns left to right. Every line is
    a view into array, so writing to it writes to the array.
    """
    if axis == ScanAxis.ROWS:
        for y in range(array.shape[0]):
            yield array[y]
    else:
        for x in range(array.shape[1]):
            yield array[:, x]


def sort_line(
    line: np.ndarray,
    line_keys: np.ndarray,
    line_mask: np.ndarray,
    descending: bool,
) -> int:
    """
    Sort every masked span of one scan line in place.

    Args:
        line: Pixel view of shape (N, C) to reorder.
        line_keys: Sort key per pixel, shape (N,).
        line_mask: Mask per pixel, shape (N,).
        descending: Sort from high to low key values.

    Returns:
        Number of spans that were sorted (spans of one pixel are skipped).
    """
    sorted_spans = 0
    for start, end in find_spans(line_mask):
        if end - start < 2:
            continue
        seg_keys = line_keys[start:end]
        order = np.argsort(-seg_keys if descending else seg_keys, kind="stable")
        line[start:end] = line[start:end][order]
        sorted_spans += 1
    return sorted_spans


def sort_pixels(
    image: np.ndarray,
    mask: np.ndarray,
    sort_by: "str | ColorKey",
    direction: "str | SortDirection",
    show_progress: bool = False,
) -> np.ndarray:
    """
    Sort masked spans of an image.

    Args:
        image: RGBA (or RGB) uint8 array of shape (H, W, C). Not modified.
        mask: Boolean array of shape (H, W) from build_mask.
        sort_by: Sort key (ColorKey or name).
        direction: left/right sort rows, up/down sort columns. left and up
            are descending, right and down ascending.
        show_progress: Show a progress bar over scan lines.

    Returns:
        Sorted copy of the image.

    Raises:
        ValueError: If image and mask dimensions differ.
    """
    key = get_color_key(sort_by)
    direction = SortDirection.parse(direction)

    if image.ndim != 3 or image.shape[2] < 3:
        raise ValueError(f"Expected an (H, W, C>=3) image, got shape {image.shape}")
    if mask.shape != image.shape[:2]:
        raise ValueError(
            f"Mask shape {mask.shape} does not match image shape {image.shape[:2]}"
        )

    result = image.copy()
    if result.size == 0:
        return result

    keys = key.compute(image)
    rgb = result[..., :3]
    axis = direction.axis
    total_lines = rgb.shape[0] if axis == ScanAxis.ROWS else rgb.shape[1]

    lines = zip(
        iter_scan_lines(rgb, axis),
        iter_scan_lines(keys, axis),
        iter_scan_lines(mask, axis),
        strict=True,
    )
    sorted_spans = 0
    for line, line_keys, line_mask in tqdm(
        lines,
        total=total_lines,
        desc=f"Sorting {axis.value}",
        disable=not show_progress,
        leave=False,
    ):
        sorted_spans += sort_line(line, line_keys, line_mask, direction.descending)

    logger.debug(
        f"Sorted {sorted_spans} spans by {key.name} "
        f"({direction.value}, {'descending' if direction.descending else 'ascending'})"
    )
    return result
