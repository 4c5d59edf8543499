import math
import cv2
import numpy as np
from .color import brightness


def _pixel_brightness(pixels: np.ndarray, x: int, y: int) -> float:
    r, g, b = pixels[y, x, :3]
    return brightness(float(r), float(g), float(b))


def get_local_variance(pixels: np.ndarray, x: int, y: int, width: int, height: int, radius: int = 3) -> float:
    """
    Variance of brightness in the (2r+1)x(2r+1) window around (x, y), clipped at the image bounds.
    High around food detail, low on uniform areas such as pans and counters.
    """
    values = []
    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            nx = x + dx
            ny = y + dy
            if 0 <= nx < width and 0 <= ny < height:
                values.append(_pixel_brightness(pixels, nx, ny))

    if len(values) < 2:
        return 0.0

    mean = sum(values) / len(values)
    return sum((v - mean) ** 2 for v in values) / len(values)


def get_edge_strength(pixels: np.ndarray, x: int, y: int, width: int, height: int) -> float:
    """
    Gradient magnitude from central differences of the four axis neighbors.
    Zero on the outer border.
    """
    if x == 0 or x == width - 1 or y == 0 or y == height - 1:
        return 0.0

    gx = _pixel_brightness(pixels, x + 1, y) - _pixel_brightness(pixels, x - 1, y)
    gy = _pixel_brightness(pixels, x, y + 1) - _pixel_brightness(pixels, x, y - 1)
    return math.sqrt(gx * gx + gy * gy)


def get_center_weight(x: float, y: float, width: int, height: int, floor: float = 0.3) -> float:
    """
    Falls off linearly from 1.0 at the center to `floor` at the farthest corner.
    """
    center_x = width / 2
    center_y = height / 2
    max_dist = math.sqrt(center_x * center_x + center_y * center_y)
    dist = math.sqrt((x - center_x) ** 2 + (y - center_y) ** 2)
    return max(floor, 1.0 - (dist / max_dist) * (1.0 - floor))


def variance_map(luma: np.ndarray, radius: int = 3) -> np.ndarray:
    """
    Windowed brightness variance for every pixel of a brightness map.
    Windows are clipped at the array bounds, so edge pixels only see in-bounds neighbors.
    """
    ksize = (2 * radius + 1, 2 * radius + 1)

    def box_sum(values):
        return cv2.boxFilter(values, cv2.CV_64F, ksize, normalize=False, borderType=cv2.BORDER_CONSTANT)

    count = box_sum(np.ones_like(luma, dtype=np.float64))
    mean = box_sum(luma) / count
    mean_sq = box_sum(luma * luma) / count

    variance = np.maximum(mean_sq - mean * mean, 0.0)
    variance[count < 2] = 0.0
    return variance


def edge_map(luma: np.ndarray) -> np.ndarray:
    """
    Vectorized get_edge_strength over a whole brightness map.
    """
    edges = np.zeros_like(luma, dtype=np.float64)
    if luma.shape[0] < 3 or luma.shape[1] < 3:
        return edges

    gx = luma[1:-1, 2:] - luma[1:-1, :-2]
    gy = luma[2:, 1:-1] - luma[:-2, 1:-1]
    edges[1:-1, 1:-1] = np.sqrt(gx * gx + gy * gy)
    return edges


def center_weight_grid(xs: np.ndarray, ys: np.ndarray, width: int, height: int, floor: float = 0.3) -> np.ndarray:
    """
    Center weights for the grid of columns xs and rows ys, shaped (len(ys), len(xs)).
    """
    center_x = width / 2
    center_y = height / 2
    max_dist = math.sqrt(center_x * center_x + center_y * center_y)
    dist = np.hypot(xs[np.newaxis, :] - center_x, ys[:, np.newaxis] - center_y)
    return np.maximum(floor, 1.0 - (dist / max_dist) * (1.0 - floor))
