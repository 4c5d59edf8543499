import logging
import cv2
import numpy as np
from .color import round_half_up
from .schemas import RasterBuffer

logger = logging.getLogger(__name__)

MAX_IMAGE_DIMENSION = 600


class DecodeError(ValueError):
    """The image bytes could not be decoded or rendered."""


def scaled_size(width: int, height: int, max_dimension: int = MAX_IMAGE_DIMENSION):
    """
    Target (width, height) so that the longest side is at most max_dimension.
    Never upscales; both sides are at least 1.
    """
    scale = min(1.0, max_dimension / max(width, height))
    return max(1, round_half_up(width * scale)), max(1, round_half_up(height * scale))


def decode_image(data: bytes, max_dimension: int = MAX_IMAGE_DIMENSION) -> RasterBuffer:
    """
    Decode raw image bytes into an RGBA raster, downscaled to max_dimension.

    Raises:
        DecodeError: if the bytes are empty, not an image, or cannot be resized
    """
    if not data:
        raise DecodeError("No image data")

    buffer = np.frombuffer(data, dtype=np.uint8)
    try:
        bgr_image = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
    except cv2.error as e:
        raise DecodeError(f"Could not decode image: {e}") from e

    if bgr_image is None or bgr_image.size == 0:
        raise DecodeError("Could not load image")

    h_img, w_img = bgr_image.shape[:2]
    width, height = scaled_size(w_img, h_img, max_dimension)

    try:
        if (width, height) != (w_img, h_img):
            bgr_image = cv2.resize(bgr_image, (width, height), interpolation=cv2.INTER_AREA)
        pixels = cv2.cvtColor(bgr_image, cv2.COLOR_BGR2RGBA)
    except cv2.error as e:
        raise DecodeError(f"Could not render image at {width}x{height}: {e}") from e

    logger.debug("Decoded %dx%d image, scaled to %dx%d", w_img, h_img, width, height)
    return RasterBuffer(width=width, height=height, pixels=pixels)


def encode_png(rgb_image: np.ndarray) -> bytes:
    """
    Encode an RGB uint8 array as PNG bytes.
    """
    ok, encoded = cv2.imencode('.png', cv2.cvtColor(rgb_image, cv2.COLOR_RGB2BGR))
    if not ok:
        raise ValueError("Could not encode image")
    return encoded.tobytes()
