import math
import numpy as np

# ITU-R BT.601 luma weights
LUMA_WEIGHTS = (0.299, 0.587, 0.114)


def brightness(r: float, g: float, b: float) -> float:
    """
    Perceptual brightness of an RGB triple, normalized to 0..1.
    """
    # Clamped so float error on white never lands above 1.0
    return clamp((LUMA_WEIGHTS[0] * r + LUMA_WEIGHTS[1] * g + LUMA_WEIGHTS[2] * b) / 255, 0.0, 1.0)


def clamp(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(max_value, value))


def round_half_up(value: float) -> int:
    """Round halves up (2.5 -> 3) instead of to even."""
    return int(math.floor(value + 0.5))


def brightness_map(pixels: np.ndarray) -> np.ndarray:
    """
    Calculate perceptual brightness for every pixel of an RGB or RGBA array.
    Returns a float64 array shaped (height, width).
    """
    rgb = pixels[..., :3].astype(np.float64)
    luma = (LUMA_WEIGHTS[0] * rgb[..., 0] + LUMA_WEIGHTS[1] * rgb[..., 1] + LUMA_WEIGHTS[2] * rgb[..., 2]) / 255
    return np.clip(luma, 0.0, 1.0)
