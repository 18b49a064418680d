"""
Per-file pipeline and batch processing.

Each input image is decoded, masked, sorted and encoded to
<input_path>/out/<same file name>. Files are independent, so a batch can
optionally run on a thread pool without changing the result.
"""

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
from tqdm import tqdm

from pixelsorter.sorting.base import BatchOutput, FileResult
from pixelsorter.sorting.mask import build_mask, mask_coverage
from pixelsorter.sorting.spans import count_spans, sort_pixels
from pixelsorter.vision.image_io import ImageIOError, load_image, save_image
from pixelsorter.vision.mask_export import export_mask

if TYPE_CHECKING:
    from pixelsorter.utils.config import Settings

logger = logging.getLogger(__name__)


def sort_image(
    pixels: np.ndarray,
    settings: "Settings",
) -> tuple[np.ndarray, np.ndarray]:
    """
    Mask and sort one decoded image.

    Args:
        pixels: RGBA uint8 array of shape (H, W, 4). Not modified.
        settings: Run settings.

    Returns:
        Tuple of (sorted pixels, contrast mask).
    """
    mask = build_mask(
        pixels,
        settings.contrast_type,
        settings.contrast_lower,
        settings.contrast_upper,
    )
    sorted_pixels = sort_pixels(
        pixels,
        mask,
        settings.sort_by,
        settings.sort_direction,
        # Line bars only when files run one at a time
        show_progress=settings.debug and settings.jobs == 1,
    )
    return sorted_pixels, mask


def get_input_files(directory: Path) -> list[Path]:
    """Get every non-directory entry directly inside a directory, by name."""
    return sorted(p for p in Path(directory).iterdir() if not p.is_dir())


def process_file(
    input_path: Path,
    output_path: Path,
    settings: "Settings",
) -> FileResult:
    """
    Sort a single image file.

    Args:
        input_path: Image to read.
        output_path: Where to write the sorted image.
        settings: Run settings.

    Returns:
        FileResult describing the run.

    Raises:
        ImageIOError: If the image cannot be decoded or encoded.
    """
    logger.info(f"Opening image: {input_path}")
    decoded = load_image(input_path)
    logger.debug(
        f"Decoded {decoded.width}x{decoded.height}, "
        f"{decoded.source_channels} channel(s)"
    )

    sorted_pixels, mask = sort_image(decoded.pixels, settings)
    logger.debug(f"Masked {mask_coverage(mask):.0%} of pixels")

    mask_path = None
    if settings.debug:
        mask_path = export_mask(mask, output_path)

    logger.debug(f"Creating new image: {output_path}")
    save_image(output_path, sorted_pixels, decoded.source_channels)

    return FileResult(
        input_path=input_path,
        output_path=output_path,
        mask_path=mask_path,
        span_count=count_spans(mask, settings.sort_direction.axis),
        sorted_pixels=int(np.count_nonzero(mask)),
    )


def process_file_isolated(
    input_path: Path,
    output_path: Path,
    settings: "Settings",
) -> FileResult:
    """Sort a single image file, recording failures instead of raising."""
    try:
        return process_file(input_path, output_path, settings)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to sort {input_path}: {e}")
        return FileResult(input_path, output_path, error=str(e))


class BatchProcessor:
    """
    Sorts every file of the input directory.

    With one worker files run sequentially in directory order. With more,
    they run on a thread pool; results are still reported in directory order.

    Args:
        max_workers: Number of files processed at once. Default: 1.
            None uses one worker per CPU.
    """

    def __init__(self, max_workers: int | None = 1) -> None:
        self.max_workers = max_workers or (os.cpu_count() or 4)

    def run(self, settings: "Settings", show_progress: bool = True) -> BatchOutput:
        """
        Sort all images of settings.input_path into settings.output_dir.

        Args:
            settings: Run settings.
            show_progress: Whether to show a progress bar over files.

        Returns:
            BatchOutput with one FileResult per input file.

        Raises:
            ImageIOError: If the output directory cannot be created.
            OSError: On the first per-file failure when
                settings.continue_on_error is False.
        """
        start_time = time.time()

        output_dir = settings.output_dir
        try:
            output_dir.mkdir(exist_ok=True)
        except OSError as e:
            raise ImageIOError(
                f"Unable to create the output directory {output_dir}: {e}"
            ) from e

        input_files = get_input_files(settings.input_path)
        logger.info(f"Found {len(input_files)} files in {settings.input_path}")

        jobs = [(path, output_dir / path.name) for path in input_files]
        worker = (
            process_file_isolated if settings.continue_on_error else process_file
        )

        if self.max_workers == 1 or len(jobs) <= 1:
            results = [
                worker(input_path, output_path, settings)
                for input_path, output_path in tqdm(
                    jobs, desc="Sorting", disable=not show_progress
                )
            ]
        else:
            results = self._run_pool(jobs, worker, settings, show_progress)

        elapsed = time.time() - start_time
        return BatchOutput(results=results, elapsed_seconds=elapsed)

    def _run_pool(self, jobs, worker, settings, show_progress) -> list[FileResult]:
        results_by_index: list[FileResult | None] = [None] * len(jobs)
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {
                executor.submit(worker, input_path, output_path, settings): idx
                for idx, (input_path, output_path) in enumerate(jobs)
            }

            for future in tqdm(
                as_completed(futures),
                total=len(futures),
                desc="Sorting",
                disable=not show_progress,
            ):
                idx = futures[future]
                try:
                    results_by_index[idx] = future.result()
                except Exception:
                    for pending in futures:
                        pending.cancel()
                    raise

        return [result for result in results_by_index if result is not None]
