import logging
import threading
import time
from typing import Optional

from .averager import weighted_average
from .comparator import compare
from .loader import decode_image, MAX_IMAGE_DIMENSION
from .schemas import (
    ComparisonResult, ExpectedColorStats, GuidanceConfig, SamplingConfig,
    DEFAULT_GUIDANCE, DEFAULT_SAMPLING,
)

logger = logging.getLogger(__name__)


class AnalysisCancelled(Exception):
    """The caller abandoned the analysis before pixel processing started."""


def analyze_image(
    data: bytes,
    expected: ExpectedColorStats,
    sampling: SamplingConfig = DEFAULT_SAMPLING,
    guidance: GuidanceConfig = DEFAULT_GUIDANCE,
    max_dimension: int = MAX_IMAGE_DIMENSION,
    workers: int = 1,
    cancel_event: Optional[threading.Event] = None,
) -> ComparisonResult:
    """
    Decode a photo, compute its weighted average color and compare it against
    the expected stats of a recipe step.

    Raises:
        DecodeError: if the photo cannot be decoded
        AnalysisCancelled: if cancel_event was set while decoding
    """
    start_time = time.time()

    raster = decode_image(data, max_dimension)
    if cancel_event is not None and cancel_event.is_set():
        raise AnalysisCancelled("Analysis cancelled after decode")

    average = weighted_average(raster, sampling, workers)
    result = compare(average, expected, guidance)

    processing_time = (time.time() - start_time) * 1000
    logger.debug(
        "Analyzed %dx%d photo in %.1f ms: average=%s category=%s",
        raster.width, raster.height, processing_time, average.hex, result.category.value,
    )
    return result
