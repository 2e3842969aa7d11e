"""Tests for planeseg_ri.utils.palette."""

import numpy as np
import pytest

from planeseg_ri.utils.palette import DEFAULT_COLORS, ColorPalette


class TestColorPalette:
    def test_default_palette(self):
        palette = ColorPalette()
        assert len(palette) == len(DEFAULT_COLORS) == 28
        assert palette.color_for(0) == pytest.approx((51 / 255, 160 / 255, 44 / 255))
        assert palette.color_for(10) == (1.0, 0.0, 0.0)

    def test_cycles_every_palette_size(self):
        palette = ColorPalette()
        p = len(palette)
        for i in range(3 * p):
            assert palette.color_for(i) == palette.color_for(i + p)

    def test_single_color_palette(self):
        palette = ColorPalette([(0.2, 0.4, 0.6)])
        assert {palette.color_for(i) for i in range(10)} == {(0.2, 0.4, 0.6)}

    def test_order_is_kept(self):
        colors = [(1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0)]
        palette = ColorPalette(colors)
        assert [palette.color_for(i) for i in range(4)] == colors + [colors[0]]

    def test_scaled_to_255(self):
        palette = ColorPalette([(1.0, 0.5, 0.0)])
        scaled = palette.color_for_255(3)
        assert scaled.dtype == np.uint8
        assert scaled.tolist() == [255, 128, 0]

    def test_empty_palette_rejected(self):
        with pytest.raises(ValueError):
            ColorPalette([])

    def test_out_of_range_channel_rejected(self):
        with pytest.raises(ValueError):
            ColorPalette([(1.0, 2.0, 0.0)])

    def test_non_triple_rejected(self):
        with pytest.raises(ValueError):
            ColorPalette([(1.0, 0.0)])

    def test_negative_index_rejected(self):
        with pytest.raises(ValueError):
            ColorPalette().color_for(-1)

    def test_palette_is_a_snapshot(self):
        colors = [(1.0, 0.0, 0.0)]
        palette = ColorPalette(colors)
        colors.append((0.0, 1.0, 0.0))
        assert len(palette) == 1
