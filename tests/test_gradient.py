"""Tests for palcodec.core.gradient: normalize, transparency merge, edges, sampling."""

import pytest
from palcodec.core.colors import Color, ColorSpace
from palcodec.core.errors import CannotNormalizeError, GradientMergeError
from palcodec.core.gradient import (
    BoundaryPolicy,
    Gradient,
    Gradients,
    Stop,
    TransparencyStop,
)
from palcodec.core.palette import Group, Palette

RED = Color.rgb(1, 0, 0)
GREEN = Color.rgb(0, 1, 0)
BLUE = Color.rgb(0, 0, 1)


def _positions(gradient):
    return [s.position for s in gradient.stops]


class TestNormalize:
    def test_rescales_and_sorts(self):
        g = Gradient(stops=[Stop(60, BLUE), Stop(30, RED), Stop(45, GREEN)])
        n = g.normalized()
        assert _positions(n) == pytest.approx([0.0, 0.5, 1.0])
        assert n.colors == [RED, GREEN, BLUE]

    def test_degenerate_span(self):
        g = Gradient(stops=[Stop(0.3, RED), Stop(0.3, BLUE)])
        with pytest.raises(CannotNormalizeError):
            g.normalized()

    def test_no_stops(self):
        with pytest.raises(CannotNormalizeError):
            Gradient().normalized()

    def test_ties_keep_insertion_order(self):
        g = Gradient(stops=[Stop(1, RED), Stop(0.5, GREEN), Stop(0.5, BLUE), Stop(0, RED)])
        assert g.sorted().colors == [RED, GREEN, BLUE, RED]

    def test_original_untouched(self):
        g = Gradient(stops=[Stop(10, RED), Stop(20, BLUE)])
        g.normalized()
        assert _positions(g) == [10, 20]


class TestTransparencyStop:
    def test_values_clamped(self):
        t = TransparencyStop(position=1.5, value=-1, midpoint=2)
        assert (t.position, t.value, t.midpoint) == (1.0, 0.0, 1.0)


class TestMergeTransparency:
    def test_identity_without_transparency(self):
        g = Gradient(stops=[Stop(0, RED), Stop(1, BLUE)])
        assert g.merge_transparency_stops() is g

    def test_merged_stops_cover_union(self):
        g = Gradient(
            stops=[Stop(0, RED), Stop(1, BLUE)],
            transparency_stops=[TransparencyStop(0, 1.0), TransparencyStop(0.25, 0.5), TransparencyStop(1, 0.0)],
        )
        merged = g.merge_transparency_stops()
        assert merged.transparency_stops is None
        assert _positions(merged) == pytest.approx([0.0, 0.25, 1.0])
        quarter = merged.stops[1].color
        assert quarter.space is ColorSpace.RGB
        assert quarter.components == pytest.approx((0.75, 0.0, 0.25))
        assert quarter.alpha == pytest.approx(0.5)
        assert merged.stops[2].color.alpha == pytest.approx(0.0)

    def test_stop_count_at_least_max(self):
        g = Gradient(
            stops=[Stop(0, RED), Stop(0.3, GREEN), Stop(0.6, BLUE), Stop(1, RED)],
            transparency_stops=[TransparencyStop(0, 1), TransparencyStop(0.5, 0.2), TransparencyStop(1, 1)],
        )
        merged = g.merge_transparency_stops()
        assert len(merged.stops) >= max(len(g.stops), len(g.transparency_stops))
        assert len(merged.stops) == 5

    def test_independent_normalization(self):
        g = Gradient(
            stops=[Stop(10, RED), Stop(30, BLUE)],
            transparency_stops=[TransparencyStop(0.2, 0.0), TransparencyStop(0.6, 1.0)],
        )
        merged = g.merge_transparency_stops()
        assert _positions(merged) == pytest.approx([0.0, 1.0])
        assert [s.color.alpha for s in merged.stops] == pytest.approx([0.0, 1.0])

    def test_cmyk_stops_converted(self):
        g = Gradient(
            stops=[Stop(0, Color.cmyk(0, 0, 0, 1)), Stop(1, Color.cmyk(0, 0, 0, 0))],
            transparency_stops=[TransparencyStop(0, 1), TransparencyStop(1, 1)],
        )
        merged = g.merge_transparency_stops()
        assert merged.stops[0].color.components == pytest.approx((0, 0, 0))
        assert merged.stops[1].color.components == pytest.approx((1, 1, 1))

    def test_boundary_policy_accepts_strings(self):
        g = Gradient(
            stops=[Stop(0, RED), Stop(1, BLUE)],
            transparency_stops=[TransparencyStop(0, 1), TransparencyStop(1, 0)],
        )
        assert g.merge_transparency_stops('strict') == g.merge_transparency_stops(BoundaryPolicy.CLAMP)

    def test_single_transparency_stop_cannot_normalize(self):
        g = Gradient(stops=[Stop(0, RED), Stop(1, BLUE)], transparency_stops=[TransparencyStop(0.5, 0.5)])
        with pytest.raises(CannotNormalizeError):
            g.merge_transparency_stops()

    def _unbracketed(self, monkeypatch):
        # transparency stops that stop short of 1.0 leave the last color position unbracketed
        monkeypatch.setattr(
            Gradient,
            'normalized_transparency_stops',
            lambda self: [TransparencyStop(0, 1.0), TransparencyStop(0.5, 0.0)],
        )
        return Gradient(
            stops=[Stop(0, RED), Stop(1, BLUE)],
            transparency_stops=[TransparencyStop(0, 1.0), TransparencyStop(1, 0.0)],
        )

    def test_strict_boundary_fails(self, monkeypatch):
        g = self._unbracketed(monkeypatch)
        with pytest.raises(GradientMergeError):
            g.merge_transparency_stops(BoundaryPolicy.STRICT)

    def test_clamp_boundary_uses_end_segment(self, monkeypatch):
        g = self._unbracketed(monkeypatch)
        merged = g.merge_transparency_stops(BoundaryPolicy.CLAMP)
        assert _positions(merged) == pytest.approx([0.0, 0.5, 1.0])
        assert merged.stops[-1].color.components == pytest.approx((0, 0, 1))
        assert merged.stops[-1].color.alpha == 0.0


class TestExpandToEdges:
    def test_inserts_edge_stops(self):
        g = Gradient(stops=[Stop(0.8, BLUE), Stop(0.2, RED)])
        e = g.expand_to_edges()
        assert _positions(e) == [0.0, 0.2, 0.8, 1.0]
        assert e.colors == [RED, RED, BLUE, BLUE]

    def test_near_edges_left_alone(self):
        g = Gradient(stops=[Stop(0.04, RED), Stop(0.96, BLUE)])
        assert _positions(g.expand_to_edges()) == [0.04, 0.96]

    def test_transparency_edges(self):
        g = Gradient(
            stops=[Stop(0, RED), Stop(1, BLUE)],
            transparency_stops=[TransparencyStop(0.5, 0.3)],
        )
        t = g.expand_to_edges().transparency_stops
        assert [x.position for x in t] == [0.0, 0.5, 1.0]
        assert [x.value for x in t] == pytest.approx([0.3, 0.3, 0.3])


class TestHelpers:
    def test_from_colors_even_spacing(self):
        g = Gradient.from_colors([RED, GREEN, BLUE], name='rgb')
        assert _positions(g) == pytest.approx([0, 0.5, 1])
        assert g.name == 'rgb'

    def test_merge_identical_neighbours(self):
        g = Gradient(stops=[Stop(0, RED), Stop(0.5, GREEN), Stop(0.5, GREEN), Stop(1, BLUE)])
        assert len(g.merge_identical_neighbouring_stops().stops) == 3

    def test_has_transparency_from_alpha(self):
        g = Gradient(stops=[Stop(0, RED.with_alpha(0.5)), Stop(1, BLUE)])
        assert g.has_transparency
        assert not g.without_transparency().has_transparency

    def test_palette_projection(self):
        g = Gradient(name='g', stops=[Stop(1, BLUE), Stop(0, RED)])
        assert g.palette() == Palette(name='g', colors=[RED, BLUE])

    def test_palette_gradient(self):
        p = Palette(name='p', colors=[RED, BLUE], groups=[Group('ignored', [GREEN])])
        g = p.gradient()
        assert g.name == 'p'
        assert g.colors == [RED, BLUE]

    def test_gradients_container(self):
        book = Gradients([Gradient(name='a'), Gradient(name='b')], name='book')
        assert len(book) == 2
        assert [g.name for g in book] == ['a', 'b']
        assert book[1].name == 'b'


class TestSampling:
    def test_color_at_midpoint(self):
        g = Gradient(stops=[Stop(0, RED), Stop(1, BLUE)])
        c = g.color_at(0.5)
        assert c.components == pytest.approx((0.5, 0, 0.5))

    def test_sample_endpoints(self):
        g = Gradient(stops=[Stop(10, RED), Stop(20, GREEN), Stop(30, BLUE)])
        colors = g.sample(5)
        assert len(colors) == 5
        assert colors[0].components == pytest.approx((1, 0, 0))
        assert colors[2].components == pytest.approx((0, 1, 0))
        assert colors[-1].components == pytest.approx((0, 0, 1))

    def test_positions_clipped(self):
        g = Gradient(stops=[Stop(0, RED), Stop(1, BLUE)])
        below, above = g.colors_at([-1, 2])
        assert below.components == pytest.approx((1, 0, 0))
        assert above.components == pytest.approx((0, 0, 1))

    def test_alpha_interpolated(self):
        g = Gradient(stops=[Stop(0, RED.with_alpha(0)), Stop(1, RED)])
        assert g.color_at(0.25).alpha == pytest.approx(0.25)

    def test_sample_count_must_be_positive(self):
        with pytest.raises(ValueError):
            Gradient(stops=[Stop(0, RED), Stop(1, BLUE)]).sample(0)
