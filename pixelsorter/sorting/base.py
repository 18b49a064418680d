"""
Base classes for pixel sorting.

Provides the abstract color key, the scan direction vocabulary and data
classes for per-file and batch results.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import numpy as np


class ScanAxis(str, Enum):
    """Which lines of the image are treated as independent sort units."""

    ROWS = "rows"
    COLUMNS = "columns"


class SortDirection(str, Enum):
    """
    External four-valued sort direction.

    Each direction fixes both the scan axis and the sort order:
    left/up sort descending, right/down sort ascending.
    """

    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"

    @property
    def axis(self) -> ScanAxis:
        if self in (SortDirection.LEFT, SortDirection.RIGHT):
            return ScanAxis.ROWS
        return ScanAxis.COLUMNS

    @property
    def descending(self) -> bool:
        return self in (SortDirection.LEFT, SortDirection.UP)

    @classmethod
    def parse(cls, value: "str | SortDirection") -> "SortDirection":
        """Parse a direction name (case-insensitive)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(d.value for d in cls)
            raise ValueError(
                f"Unknown sort direction: {value!r} (expected one of: {valid})"
            ) from None


class ColorKey(ABC):
    """
    Abstract base class for per-pixel color attributes.

    A color key is used both as the sort key inside a span and as the
    contrast-classification attribute of the mask.

    Subclasses must implement:
    - name: Attribute name used in settings files
    - scale: Upper bound of the raw value, used for normalization
    - compute: Raw attribute values for an array of RGB pixels
    """

    name: str = "base"
    description: str = "Base color key"
    scale: float = 1.0

    @abstractmethod
    def compute(self, pixels: np.ndarray) -> np.ndarray:
        """
        Compute raw attribute values.

        Args:
            pixels: Array of shape (..., C) with C >= 3, RGB(A) order, uint8.

        Returns:
            Array of shape (...) with one value per pixel.
        """
        pass

    def normalized(self, pixels: np.ndarray) -> np.ndarray:
        """Attribute values scaled to [0, 1]."""
        return self.compute(pixels).astype(np.float64) / self.scale

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


@dataclass
class FileResult:
    """
    Result for a single processed image.

    Attributes:
        input_path: Source image.
        output_path: Where the sorted image was (or would have been) written.
        mask_path: Debug mask image, when one was written.
        span_count: Number of spans with at least two pixels.
        sorted_pixels: Number of pixels inside the contrast band.
        error: Failure message, None on success.
    """

    input_path: Path
    output_path: Path
    mask_path: Path | None = None
    span_count: int = 0
    sorted_pixels: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchOutput:
    """
    Output from sorting a whole input directory.

    Attributes:
        results: Per-file results in directory enumeration order.
        elapsed_seconds: Time taken for the batch.
    """

    results: list[FileResult] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def failures(self) -> list[FileResult]:
        return [r for r in self.results if not r.ok]

    @property
    def processed(self) -> list[FileResult]:
        return [r for r in self.results if r.ok]
