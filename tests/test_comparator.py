import unittest
import sys
import os

# Add apps to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from apps.cook_by_color.modules.color_sampler import comparator
from apps.cook_by_color.modules.color_sampler.comparator import compute_category, guidance_from_deltas, compare
from apps.cook_by_color.modules.color_sampler.color import brightness
from apps.cook_by_color.modules.color_sampler.schemas import (
    ColorVector, ComparisonCategory, Delta, ExpectedColorStats, GuidanceConfig,
)

CURRY = ExpectedColorStats(avg_rgb=ColorVector(178, 62, 38), brightness_range=(0.4, 0.6), tolerance=40)


def delta(r=0, g=0, b=0, brightness=0.0):
    return Delta(r=r, g=g, b=b, brightness=brightness)


class TestCategory(unittest.TestCase):

    def test_examples(self):
        self.assertEqual(compute_category(5, 40), ComparisonCategory.MATCH)
        self.assertEqual(compute_category(30, 40), ComparisonCategory.CLOSE)
        self.assertEqual(compute_category(60, 40), ComparisonCategory.OFF)
        self.assertEqual(compute_category(60, 40), "off")

    def test_boundaries(self):
        self.assertEqual(compute_category(16, 40), ComparisonCategory.MATCH)
        self.assertEqual(compute_category(16.5, 40), ComparisonCategory.CLOSE)
        self.assertEqual(compute_category(36, 40), ComparisonCategory.CLOSE)
        self.assertEqual(compute_category(36.5, 40), ComparisonCategory.OFF)

    def test_uses_absolute_delta(self):
        self.assertEqual(compute_category(-5, 40), ComparisonCategory.MATCH)
        self.assertEqual(compute_category(-30, 40), ComparisonCategory.CLOSE)
        self.assertEqual(compute_category(-60, 40), ComparisonCategory.OFF)

    def test_monotonic(self):
        previous = ComparisonCategory.MATCH
        for d in range(0, 80):
            current = compute_category(d, 40)
            self.assertGreaterEqual(current.severity, previous.severity)
            previous = current

    def test_zero_tolerance(self):
        self.assertEqual(compute_category(0, 0), ComparisonCategory.MATCH)
        self.assertEqual(compute_category(1, 0), ComparisonCategory.OFF)


class TestGuidance(unittest.TestCase):

    def test_on_track_when_nothing_fires(self):
        self.assertEqual(guidance_from_deltas(delta(), CURRY), [comparator.ON_TRACK])
        self.assertEqual(guidance_from_deltas(delta(r=15, g=-10, b=15, brightness=0.19), CURRY), [comparator.ON_TRACK])

    def test_brightness_uses_band_width(self):
        # band width is 0.2
        self.assertEqual(guidance_from_deltas(delta(brightness=-0.25), CURRY), [comparator.TOO_DARK])
        self.assertEqual(guidance_from_deltas(delta(brightness=-0.15), CURRY), [comparator.ON_TRACK])
        self.assertEqual(guidance_from_deltas(delta(brightness=0.25), CURRY), [comparator.TOO_PALE])
        self.assertEqual(guidance_from_deltas(delta(brightness=0.15), CURRY), [comparator.ON_TRACK])

    def test_channel_rules(self):
        self.assertEqual(guidance_from_deltas(delta(r=16, g=-11), CURRY), [comparator.TOO_RED])
        self.assertEqual(guidance_from_deltas(delta(g=16, r=-11), CURRY), [comparator.TOO_GREEN])
        self.assertEqual(guidance_from_deltas(delta(b=16), CURRY), [comparator.TOO_COOL])
        self.assertEqual(guidance_from_deltas(delta(b=-16), CURRY), [comparator.TOO_WARM])

    def test_red_needs_green_deficit(self):
        self.assertEqual(guidance_from_deltas(delta(r=40, g=0), CURRY), [comparator.ON_TRACK])

    def test_all_applicable_rules_fire_in_order(self):
        guidance = guidance_from_deltas(delta(r=20, g=-20, b=-20, brightness=-0.5), CURRY)
        self.assertEqual(guidance, [comparator.TOO_DARK, comparator.TOO_RED, comparator.TOO_WARM])

        guidance = guidance_from_deltas(delta(r=-20, g=20, b=20, brightness=0.5), CURRY)
        self.assertEqual(guidance, [comparator.TOO_PALE, comparator.TOO_GREEN, comparator.TOO_COOL])

    def test_custom_thresholds(self):
        config = GuidanceConfig(channel_excess=30, blue_excess=30, blue_deficit=-30)
        self.assertEqual(guidance_from_deltas(delta(r=20, g=-20, b=20), CURRY, config), [comparator.ON_TRACK])
        self.assertEqual(guidance_from_deltas(delta(r=31, g=-20), CURRY, config), [comparator.TOO_RED])


class TestCompare(unittest.TestCase):

    def test_exact_match(self):
        avg = ColorVector(128, 128, 128)
        b = brightness(128, 128, 128)
        expected = ExpectedColorStats(avg_rgb=avg, brightness_range=(b - 0.05, b + 0.05), tolerance=40)

        result = compare(avg, expected)
        self.assertEqual(result.category, ComparisonCategory.MATCH)
        self.assertEqual(result.guidance, ("Color is on track. Keep going!",))
        self.assertEqual((result.delta.r, result.delta.g, result.delta.b), (0, 0, 0))
        self.assertAlmostEqual(result.delta.brightness, 0.0)
        self.assertEqual(result.average, avg)

    def test_signed_deltas(self):
        result = compare(ColorVector(200, 50, 38), CURRY)
        self.assertEqual((result.delta.r, result.delta.g, result.delta.b), (22, -12, 0))
        self.assertAlmostEqual(result.brightness, brightness(200, 50, 38))
        self.assertAlmostEqual(result.delta.brightness, brightness(200, 50, 38) - 0.5)
        # max |delta| = 22 of tolerance 40
        self.assertEqual(result.category, ComparisonCategory.CLOSE)
        self.assertIn(comparator.TOO_RED, result.guidance)

    def test_midpoint_is_clamped(self):
        expected = ExpectedColorStats(avg_rgb=ColorVector(255, 255, 255), brightness_range=(1.2, 1.4), tolerance=10)
        result = compare(ColorVector(255, 255, 255), expected)
        self.assertAlmostEqual(result.delta.brightness, 0.0)

    def test_guidance_never_empty(self):
        for r in (0, 90, 180, 255):
            for g in (0, 90, 180, 255):
                for b in (0, 90, 180, 255):
                    self.assertTrue(compare(ColorVector(r, g, b), CURRY).guidance)


if __name__ == '__main__':
    unittest.main()
