"""
Color attribute extraction.

Provides RGB channel keys and HSV keys (hue, saturation, value) used both
for sorting spans and for building the contrast mask.
"""

import numpy as np

from pixelsorter.sorting.base import ColorKey


def rgb_to_hsv(r: int, g: int, b: int) -> tuple[float, float, float]:
    """
    Convert one 8-bit RGB pixel to HSV.

    Args:
        r: Red channel (0-255).
        g: Green channel (0-255).
        b: Blue channel (0-255).

    Returns:
        Tuple of (hue in [0, 360), saturation in [0, 100], value in [0, 100]).

    Example:
        >>> rgb_to_hsv(255, 0, 0)
        (0.0, 100.0, 100.0)
    """
    r, g, b = r / 255.0, g / 255.0, b / 255.0
    mx = max(r, g, b)
    mn = min(r, g, b)
    delta = mx - mn

    h = 0.0
    if mx == mn:
        h = 0.0
    elif mx == r:
        h = (60.0 * ((g - b) / delta) + 360.0) % 360.0
    elif mx == g:
        h = (60.0 * ((b - r) / delta) + 120.0) % 360.0
    else:
        h = (60.0 * ((r - g) / delta) + 240.0) % 360.0

    s = 0.0 if mx == 0.0 else (delta / mx) * 100.0

    return h, s, mx * 100.0


def rgb_to_hsv_array(pixels: np.ndarray) -> np.ndarray:
    """
    Vectorized version of rgb_to_hsv.

    Args:
        pixels: Array of shape (..., C) with C >= 3 in RGB(A) order.

    Returns:
        Float64 array of shape (..., 3) holding (hue, saturation, value).
    """
    rgb = pixels[..., :3].astype(np.float64) / 255.0
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]

    mx = rgb.max(axis=-1)
    mn = rgb.min(axis=-1)
    delta = mx - mn

    # Gray pixels take the hue 0 branch, so the divisor only matters elsewhere
    safe_delta = np.where(delta == 0, 1.0, delta)
    hue_r = np.mod(60.0 * ((g - b) / safe_delta) + 360.0, 360.0)
    hue_g = np.mod(60.0 * ((b - r) / safe_delta) + 120.0, 360.0)
    hue_b = np.mod(60.0 * ((r - g) / safe_delta) + 240.0, 360.0)
    hue = np.where(mx == r, hue_r, np.where(mx == g, hue_g, hue_b))
    hue = np.where(delta == 0, 0.0, hue)

    safe_max = np.where(mx == 0, 1.0, mx)
    saturation = np.where(mx == 0, 0.0, (delta / safe_max) * 100.0)

    return np.stack([hue, saturation, mx * 100.0], axis=-1)


class ChannelKey(ColorKey):
    """Raw 8-bit channel value. Compared as integers."""

    channel: int = 0
    scale = 255.0

    def compute(self, pixels: np.ndarray) -> np.ndarray:
        return pixels[..., self.channel].astype(np.int64)


class RedKey(ChannelKey):
    name = "red"
    description = "Red channel"
    channel = 0


class GreenKey(ChannelKey):
    name = "green"
    description = "Green channel"
    channel = 1


class BlueKey(ChannelKey):
    name = "blue"
    description = "Blue channel"
    channel = 2


class HSVKey(ColorKey):
    """One component of the HSV conversion. Compared as floats."""

    component: int = 0

    def compute(self, pixels: np.ndarray) -> np.ndarray:
        return rgb_to_hsv_array(pixels)[..., self.component]


class HueKey(HSVKey):
    """
    Hue in degrees.

    Red sits at 0, green at 120 and blue at 240. Gray pixels have hue 0.
    """

    name = "hue"
    description = "Hue (0-360)"
    scale = 360.0
    component = 0


class SaturationKey(HSVKey):
    name = "saturation"
    description = "Saturation (0-100)"
    scale = 100.0
    component = 1


class ValueKey(HSVKey):
    name = "value"
    description = "Value / brightness (0-100)"
    scale = 100.0
    component = 2


def get_color_keys() -> dict[str, type[ColorKey]]:
    """Get available color keys by settings name."""
    return {
        "red": RedKey,
        "green": GreenKey,
        "blue": BlueKey,
        "hue": HueKey,
        "saturation": SaturationKey,
        "value": ValueKey,
    }


COLOR_KEY_NAMES = tuple(get_color_keys())


def get_color_key(key: "str | ColorKey") -> ColorKey:
    """
    Resolve a color key by name.

    Args:
        key: Key name (case-insensitive) or an existing ColorKey.

    Returns:
        ColorKey instance.

    Raises:
        ValueError: If the name is not a known attribute.
    """
    if isinstance(key, ColorKey):
        return key

    keys = get_color_keys()
    name = str(key).strip().lower()
    if name not in keys:
        raise ValueError(
            f"Unknown color attribute: {key!r}\n"
            f"Available attributes: {', '.join(keys)}"
        )
    return keys[name]()
