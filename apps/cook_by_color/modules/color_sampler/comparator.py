from typing import List
from .color import brightness, clamp
from .schemas import (
    ColorVector, ComparisonCategory, ComparisonResult, Delta, ExpectedColorStats,
    GuidanceConfig, DEFAULT_GUIDANCE,
)

# Category boundaries as fractions of the step tolerance
MATCH_FRACTION = 0.4
CLOSE_FRACTION = 0.9

TOO_DARK = "Looks too dark; add a splash of coconut milk/stock to lighten and stir."
TOO_PALE = "Looks too pale; add a small spoon of curry paste to deepen color."
TOO_RED = "Too red; add a bit more coconut milk to balance."
TOO_GREEN = "Too green/under-browned; add a spoon of paste or simmer a bit longer."
TOO_COOL = "Too cool-toned; add a touch of coconut milk and stir to warm the tone."
TOO_WARM = "Too warm-toned; balance with a splash of stock/coconut milk."
ON_TRACK = "Color is on track. Keep going!"


def compute_category(delta: float, tolerance: float) -> ComparisonCategory:
    if abs(delta) <= tolerance * MATCH_FRACTION:
        return ComparisonCategory.MATCH
    if abs(delta) <= tolerance * CLOSE_FRACTION:
        return ComparisonCategory.CLOSE
    return ComparisonCategory.OFF


def guidance_from_deltas(delta: Delta, expected: ExpectedColorStats, config: GuidanceConfig = DEFAULT_GUIDANCE) -> List[str]:
    """
    All applicable rules fire, in a fixed order. Never returns an empty list.
    """
    guidance = []
    min_b, max_b = expected.brightness_range

    # Thresholds are the full band width, not the distance to the nearest bound
    if delta.brightness < 0 and delta.brightness < min_b - max_b:
        guidance.append(TOO_DARK)
    elif delta.brightness > 0 and delta.brightness > max_b - min_b:
        guidance.append(TOO_PALE)

    if delta.r > config.channel_excess and delta.g < config.opposing_deficit:
        guidance.append(TOO_RED)
    if delta.g > config.channel_excess and delta.r < config.opposing_deficit:
        guidance.append(TOO_GREEN)
    if delta.b > config.blue_excess:
        guidance.append(TOO_COOL)
    if delta.b < config.blue_deficit:
        guidance.append(TOO_WARM)

    if not guidance:
        guidance.append(ON_TRACK)
    return guidance


def compare(average: ColorVector, expected: ExpectedColorStats, config: GuidanceConfig = DEFAULT_GUIDANCE) -> ComparisonResult:
    """
    Compare a measured average color against a step's expected color profile.
    """
    measured = brightness(average.r, average.g, average.b)
    target_brightness = clamp((expected.brightness_range[0] + expected.brightness_range[1]) / 2, 0, 1)

    delta = Delta(
        r=average.r - expected.avg_rgb.r,
        g=average.g - expected.avg_rgb.g,
        b=average.b - expected.avg_rgb.b,
        brightness=measured - target_brightness,
    )

    max_delta = max(abs(delta.r), abs(delta.g), abs(delta.b))
    return ComparisonResult(
        average=average,
        brightness=measured,
        delta=delta,
        category=compute_category(max_delta, expected.tolerance),
        guidance=tuple(guidance_from_deltas(delta, expected, config)),
    )
