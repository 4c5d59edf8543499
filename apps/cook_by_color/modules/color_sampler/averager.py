import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Tuple

import numpy as np

from .color import brightness_map, round_half_up
from .features import variance_map, edge_map, center_weight_grid
from .schemas import ColorVector, RasterBuffer, SamplingConfig, DEFAULT_SAMPLING

logger = logging.getLogger(__name__)

Partial = Tuple[np.ndarray, float]


def _accumulate_band(
    raster: RasterBuffer,
    luma: np.ndarray,
    ys: np.ndarray,
    xs: np.ndarray,
    config: SamplingConfig,
) -> Partial:
    """
    Weighted channel sums and total weight for the sampled rows ys.

    Only reads luma rows ys[0] - radius .. ys[-1] + radius, so bands can be
    processed independently from the shared read-only buffers.
    """
    halo = max(config.variance_radius, 1)
    top = max(0, int(ys[0]) - halo)
    bottom = min(raster.height, int(ys[-1]) + halo + 1)
    band = luma[top:bottom]

    rows = ys - top
    variance = variance_map(band, config.variance_radius)[np.ix_(rows, xs)]
    edges = edge_map(band)[np.ix_(rows, xs)]
    center = center_weight_grid(xs, ys, raster.width, raster.height, config.center_floor)

    variance_weight = np.minimum(1.0, variance * config.variance_scale)
    edge_weight = np.minimum(1.0, edges * config.edge_scale)
    weights = center * (config.base_weight + config.variance_boost * variance_weight + config.edge_boost * edge_weight)

    rgb = raster.pixels[np.ix_(ys, xs)][..., :3].astype(np.float64)
    sums = np.einsum('ij,ijc->c', weights, rgb)
    return sums, float(weights.sum())


def _split_rows(ys: np.ndarray, workers: int) -> List[np.ndarray]:
    return [band for band in np.array_split(ys, workers) if band.size]


def simple_average(raster: RasterBuffer) -> ColorVector:
    """
    Unweighted mean over all pixels.
    """
    if raster.pixels.size == 0:
        raise ValueError("Cannot average an empty raster")
    rgb = raster.pixels[..., :3].reshape(-1, 3).astype(np.float64)
    means = rgb.sum(axis=0) / rgb.shape[0]
    return ColorVector(*(round_half_up(m) for m in means))


def weighted_average(raster: RasterBuffer, config: SamplingConfig = DEFAULT_SAMPLING, workers: int = 1) -> ColorVector:
    """
    Compute a weighted average color that favors food over background.

    Pixels are sampled every `stride` rows and columns. Each sample is weighted by
    its distance from the center, the local brightness variance (food detail) and
    the edge strength, which suppresses uniform areas like empty pans and counters.

    Args:
        raster: Decoded RGBA image
        config: Sampling density and weighting constants
        workers: Number of threads; sampled rows are split into bands when > 1

    Returns:
        ColorVector with each channel rounded to the nearest integer
    """
    ys = np.arange(0, raster.height, config.stride)
    xs = np.arange(0, raster.width, config.stride)

    total = np.zeros(3, dtype=np.float64)
    total_weight = 0.0

    if ys.size and xs.size:
        luma = brightness_map(raster.pixels)
        bands = _split_rows(ys, max(1, workers))
        if len(bands) > 1:
            with ThreadPoolExecutor(max_workers=len(bands)) as executor:
                partials = list(executor.map(lambda band: _accumulate_band(raster, luma, band, xs, config), bands))
        else:
            partials = [_accumulate_band(raster, luma, ys, xs, config)]

        for sums, weight in partials:
            total += sums
            total_weight += weight

    if total_weight == 0:
        logger.debug("No weighted samples in %dx%d raster, using simple average", raster.width, raster.height)
        return simple_average(raster)

    r, g, b = total / total_weight
    return ColorVector(round_half_up(r), round_half_up(g), round_half_up(b))
