"""
Unit tests for SpeciesPalette class.
"""

from kittener.pool.palette import SpeciesPalette


class TestSpeciesPalette:

    def test_color_is_stable(self):
        palette = SpeciesPalette()
        assert palette.color_of(1) == palette.color_of(1)

    def test_channels_in_unit_range(self):
        palette = SpeciesPalette()
        for species_id in range(20):
            assert all(0.0 <= channel <= 1.0 for channel in palette.color_of(species_id))

    def test_colors_are_separated(self):
        palette = SpeciesPalette(min_distance=0.1)
        colors = [palette.color_of(species_id) for species_id in range(5)]
        for i, color1 in enumerate(colors):
            for color2 in colors[i + 1:]:
                assert max(abs(a - b) for a, b in zip(color1, color2)) > 0.1

    def test_falls_back_when_crowded(self):
        palette = SpeciesPalette(min_distance=0.9, max_draws=5)
        colors = [palette.color_of(species_id) for species_id in range(30)]
        assert len(colors) == 30
        assert all(color is not None for color in colors)

    def test_release(self):
        palette = SpeciesPalette()
        palette.color_of(4)
        assert 4 in palette
        palette.release(4)
        assert 4 not in palette
        assert len(palette) == 0
        palette.release(4)
