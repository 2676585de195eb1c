"""Tests for palcodec.core.palette: global colors, groups and flattening."""

from palcodec.core.colors import Color, ColorSpace
from palcodec.core.palette import Group, Palette


def sample_palette() -> Palette:
    return Palette(
        name='Sample',
        colors=[Color.rgb(1, 0, 0, name='red'), Color.rgb(0, 0, 1, name='blue')],
        groups=[Group('Greys', [Color.gray(0.5), Color.gray(1)]), Group('Empty')],
    )


class TestAllColors:
    def test_globals_then_groups(self):
        names = [c.name for c in sample_palette().all_colors()]
        assert names == ['red', 'blue', '', '']
        assert sample_palette().all_colors()[2] == Color.gray(0.5)

    def test_color_count(self):
        assert sample_palette().color_count == 4
        assert Palette().color_count == 0

    def test_all_colors_is_a_copy(self):
        palette = sample_palette()
        palette.all_colors().append(Color.gray(0))
        assert palette.color_count == 4


class TestEquality:
    def test_format_is_ignored(self):
        a = sample_palette()
        b = sample_palette()
        b.format = 'gimp'
        assert a == b

    def test_group_order_matters(self):
        a = sample_palette()
        b = sample_palette()
        b.groups.reverse()
        assert a != b


class TestConverted:
    def test_every_color_converted(self):
        converted = sample_palette().converted(ColorSpace.RGB)
        assert converted.groups[0].colors[0] == Color.rgb(0.5, 0.5, 0.5)
        assert all(c.space is ColorSpace.RGB for c in converted.all_colors())
        assert [g.name for g in converted.groups] == ['Greys', 'Empty']

    def test_original_untouched(self):
        palette = sample_palette()
        palette.converted(ColorSpace.RGB)
        assert palette.groups[0].colors[0].space is ColorSpace.Gray


class TestGradient:
    def test_evenly_spaced_from_globals(self):
        gradient = sample_palette().gradient()
        assert gradient.name == 'Sample'
        assert [s.position for s in gradient.stops] == [0.0, 1.0]
        assert gradient.colors == sample_palette().colors
