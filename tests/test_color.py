#!/usr/bin/env python3
"""
Tests for the density to color mapping.
"""

import colorsys
import os
import sys
import unittest

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from waterfall.core.color import (
    BASELINE,
    HSL,
    KNEE,
    color_for_count,
    density,
    hsl_for_count,
    hsl_to_rgb,
)
from waterfall.core.legend import color_scale


class TestColorMapping(unittest.TestCase):
    """Test cases for hsl_for_count / color_for_count"""

    def test_baseline_independent_of_max(self):
        """Empty cells have the same color whatever the global maximum"""
        baseline = color_for_count(0, 1)
        for max_count in (2, 10, 999, 10 ** 12):
            self.assertEqual(color_for_count(0, max_count), baseline)
        self.assertEqual(hsl_for_count(0, 50), HSL(236.0, 1.0, 0.25))

    def test_zero_max_returns_baseline(self):
        self.assertEqual(density(5, 0), 0.0)
        self.assertEqual(hsl_for_count(0, 0), BASELINE)
        self.assertEqual(hsl_for_count(7, 0), BASELINE)
        self.assertEqual(color_for_count(7, 0), hsl_to_rgb(BASELINE))

    def test_max_is_red(self):
        for max_count in (1, 10, 12345):
            hsl = hsl_for_count(max_count, max_count)
            self.assertAlmostEqual(hsl.h, 0.0, places=9)
            self.assertEqual(hsl.l, 0.50)
            self.assertEqual(hsl.s, 1.0)
            self.assertEqual(color_for_count(max_count, max_count), (255, 0, 0))

    def test_hue_ramp_midpoint(self):
        """count=5 of max=10 sits at n=0.5 on the hue ramp"""
        hsl = hsl_for_count(5, 10)
        self.assertAlmostEqual(hsl.h, 147.5)
        self.assertEqual(hsl.l, 0.50)

    def test_lightness_ramp_below_knee(self):
        hsl = hsl_for_count(1, 10)  # n = 0.1, half way to the knee
        self.assertEqual(hsl.h, 236.0)
        self.assertAlmostEqual(hsl.l, 0.375)

    def test_knee_is_continuous(self):
        at_knee = hsl_for_count(20, 100)
        self.assertAlmostEqual(at_knee.h, 236.0)
        self.assertAlmostEqual(at_knee.l, 0.50)
        just_below = hsl_for_count(199, 1000)
        self.assertAlmostEqual(just_below.l, 0.25 + 0.25 * (0.199 / KNEE))

    def test_monotonic_ramp(self):
        """Lightness never decreases up to the knee, hue never increases after it"""
        max_count = 1000
        previous = hsl_for_count(0, max_count)
        for count in range(1, max_count + 1):
            current = hsl_for_count(count, max_count)
            if count / max_count < KNEE:
                self.assertGreaterEqual(current.l, previous.l)
                self.assertEqual(current.h, 236.0)
            else:
                self.assertLessEqual(current.h, previous.h)
                self.assertEqual(current.l, 0.50)
            previous = current

    def test_count_above_max_is_clamped(self):
        self.assertEqual(color_for_count(50, 10), color_for_count(10, 10))

    def test_rgb_matches_colorsys(self):
        r, g, b = color_for_count(3, 10)
        hsl = hsl_for_count(3, 10)
        h, l, s = colorsys.rgb_to_hls(r / 255, g / 255, b / 255)
        self.assertAlmostEqual(h * 360, hsl.h, delta=1.0)
        self.assertAlmostEqual(l, hsl.l, delta=0.01)


def test_color_scale_legend():
    text = color_scale(steps=10)

    assert text.plain.startswith('Color scale: ')
    assert text.plain.endswith('(0 → max)')
    # One styled swatch per step, both ends included
    assert len(text.spans) == 11


if __name__ == '__main__':
    unittest.main()
