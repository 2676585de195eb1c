"""Gradient model: color stops, transparency stops and the stop algorithms.

Stops are not required to be sorted or normalized on construction. The
algorithms that need a 0..1 range (merge, sampling) normalize a copy first
and fail with CannotNormalizeError when all positions coincide.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from palcodec.core.colors import Color, ColorSpace
from palcodec.core.errors import CannotNormalizeError, GradientMergeError
from palcodec.core.palette import Palette

logger = logging.getLogger(__name__)

# Stops closer than this to an edge are treated as touching it
EDGE_EPSILON = 0.05


class BoundaryPolicy(str, Enum):
    """What merge_transparency_stops does with a position that no segment brackets."""

    CLAMP = 'clamp'
    STRICT = 'strict'


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


@dataclass(frozen=True)
class Stop:
    position: float
    color: Color


@dataclass(frozen=True)
class TransparencyStop:
    """An opacity stop. Position, value and midpoint are clamped to 0..1."""

    position: float
    value: float
    midpoint: float = 0.5

    def __post_init__(self) -> None:
        object.__setattr__(self, 'position', _clamp(self.position))
        object.__setattr__(self, 'value', _clamp(self.value))
        object.__setattr__(self, 'midpoint', _clamp(self.midpoint))


def _find_segment(positions: list[float], value: float) -> int | None:
    """Index i of the first consecutive pair with positions[i] <= value <= positions[i + 1]."""
    for i in range(len(positions) - 1):
        if positions[i] <= value <= positions[i + 1]:
            return i
    return None


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def _fraction(value: float, t1: float, t2: float) -> float:
    span = t2 - t1
    if span == 0:
        return 0.0
    return (value - t1) / span


@dataclass
class Gradient:
    name: str | None = None
    stops: list[Stop] = field(default_factory=list)
    transparency_stops: list[TransparencyStop] | None = None

    @classmethod
    def from_colors(
        cls,
        colors: list[Color],
        positions: list[float] | None = None,
        name: str | None = None,
    ) -> Gradient:
        """Build a gradient from colors, evenly spaced over 0..1 unless positions are given."""
        if positions is None:
            if len(colors) == 1:
                positions = [0.0]
            else:
                step = 1.0 / (len(colors) - 1) if colors else 0.0
                positions = [i * step for i in range(len(colors))]
        if len(positions) != len(colors):
            raise ValueError('colors and positions must be the same length')
        return cls(name=name, stops=[Stop(float(p), c) for p, c in zip(positions, colors)])

    # Properties

    @property
    def min_position(self) -> float:
        return min((s.position for s in self.stops), default=0.0)

    @property
    def max_position(self) -> float:
        return max((s.position for s in self.stops), default=0.0)

    @property
    def colors(self) -> list[Color]:
        return [s.color for s in self.stops]

    def transparency_map(self) -> list[TransparencyStop]:
        """Transparency stops, or stops derived from each color's alpha when there are none."""
        if self.transparency_stops is not None:
            return list(self.transparency_stops)
        return [TransparencyStop(s.position, s.color.alpha) for s in self.stops]

    @property
    def has_transparency(self) -> bool:
        return any(t.value < 0.99 for t in self.transparency_map())

    # Copies

    def sorted(self) -> Gradient:
        """Copy with both stop lists sorted ascending. Ties keep insertion order."""
        tstops = None
        if self.transparency_stops is not None:
            tstops = sorted(self.transparency_stops, key=lambda t: t.position)
        return Gradient(self.name, sorted(self.stops, key=lambda s: s.position), tstops)

    def normalized(self) -> Gradient:
        """Copy with color stop positions rescaled to 0..1 and sorted."""
        if not self.stops:
            raise CannotNormalizeError('gradient has no stops')
        lo, hi = self.min_position, self.max_position
        span = hi - lo
        if span == 0:
            raise CannotNormalizeError(f'all stops are at position {lo}')
        ordered = sorted(self.stops, key=lambda s: s.position)
        scaled = [Stop((s.position - lo) / span, s.color) for s in ordered]
        tstops = list(self.transparency_stops) if self.transparency_stops is not None else None
        return Gradient(self.name, scaled, tstops)

    def normalized_transparency_stops(self) -> list[TransparencyStop]:
        """Transparency stops rescaled to 0..1 and sorted. Empty when there are none."""
        if not self.transparency_stops:
            return []
        positions = [t.position for t in self.transparency_stops]
        lo, hi = min(positions), max(positions)
        span = hi - lo
        if span == 0:
            raise CannotNormalizeError(f'all transparency stops are at position {lo}')
        ordered = sorted(self.transparency_stops, key=lambda t: t.position)
        return [TransparencyStop((t.position - lo) / span, t.value, t.midpoint) for t in ordered]

    def without_transparency(self) -> Gradient:
        stops = [Stop(s.position, s.color.with_alpha(1.0)) for s in self.stops]
        return Gradient(self.name, stops, None)

    def merge_transparency_stops(self, boundary: BoundaryPolicy | str = BoundaryPolicy.CLAMP) -> Gradient:
        """Bake the transparency stops into the color stops.

        Both stop sets are normalized independently. One output stop is made
        for every distinct position in either set, with RGB interpolated in
        the bracketing color segment and alpha interpolated in the bracketing
        transparency segment. Returns self when there are no transparency stops.
        """
        if not self.transparency_stops:
            return self
        boundary = BoundaryPolicy(boundary)

        colors = self.normalized()
        c_pos = [s.position for s in colors.stops]
        c_rgb = [s.color.converted(ColorSpace.RGB).components for s in colors.stops]

        trans = self.normalized_transparency_stops()
        t_pos = [t.position for t in trans]
        t_val = [t.value for t in trans]

        merged: list[Stop] = []
        for pos in sorted(set(c_pos + t_pos)):
            ci = _find_segment(c_pos, pos)
            ti = _find_segment(t_pos, pos)
            if ci is None or ti is None:
                if boundary is BoundaryPolicy.STRICT:
                    logger.error('no bracketing segment for merge position %r', pos)
                    raise GradientMergeError(f'no bracketing segment for position {pos!r}')
                pos = _clamp(pos)
                ci = _find_segment(c_pos, pos)
                ti = _find_segment(t_pos, pos)
                if ci is None:
                    ci = 0 if pos <= c_pos[0] else len(c_pos) - 2
                if ti is None:
                    ti = 0 if pos <= t_pos[0] else len(t_pos) - 2

            f = _fraction(pos, c_pos[ci], c_pos[ci + 1])
            r, g, b = (_lerp(a, z, f) for a, z in zip(c_rgb[ci], c_rgb[ci + 1]))
            a = _lerp(t_val[ti], t_val[ti + 1], _fraction(pos, t_pos[ti], t_pos[ti + 1]))
            merged.append(Stop(pos, Color.rgb(r, g, b, alpha=a)))

        return Gradient(self.name, merged, None)

    def expand_to_edges(self) -> Gradient:
        """Sorted copy with synthetic stops at 0 and 1 when the outer stops sit inside the edges."""
        gradient = self.sorted()
        stops = list(gradient.stops)
        if stops and stops[0].position > EDGE_EPSILON:
            stops.insert(0, Stop(0.0, stops[0].color))
        if stops and stops[-1].position < 1.0 - EDGE_EPSILON:
            stops.append(Stop(1.0, stops[-1].color))

        tstops = gradient.transparency_stops
        if tstops:
            tstops = list(tstops)
            if tstops[0].position > EDGE_EPSILON:
                tstops.insert(0, TransparencyStop(0.0, tstops[0].value))
            if tstops[-1].position < 1.0 - EDGE_EPSILON:
                tstops.append(TransparencyStop(1.0, tstops[-1].value))
        return Gradient(self.name, stops, tstops)

    def merge_identical_neighbouring_stops(self) -> Gradient:
        """Drop a stop when it equals the previous one in position and color.

        Segment-based formats store each interior stop twice (end of one
        segment, start of the next).
        """
        if len(self.stops) < 2:
            return self
        merged = [self.stops[0]]
        for stop in self.stops[1:]:
            if stop != merged[-1]:
                merged.append(stop)
        return Gradient(self.name, merged, self.transparency_stops)

    def palette(self) -> Palette:
        return Palette(name=self.name or '', colors=self.sorted().colors)

    # Sampling

    def snapshot(self) -> GradientSnapshot:
        return GradientSnapshot(self)

    def color_at(self, t: float) -> Color:
        return self.snapshot().color_at(t)

    def colors_at(self, ts: list[float]) -> list[Color]:
        return self.snapshot().colors_at(ts)

    def sample(self, count: int) -> list[Color]:
        """`count` evenly spaced colors from 0 to 1 inclusive."""
        return self.snapshot().sample(count)


class GradientSnapshot:
    """A gradient prepared for repeated sampling.

    Normalized, sorted and transparency-merged once; colors are held as an
    RGBA array so many positions can be sampled in one pass.
    """

    def __init__(self, gradient: Gradient):
        prepared = gradient.normalized().merge_transparency_stops()
        self.gradient = prepared
        self._positions = np.array([s.position for s in prepared.stops], dtype=float)
        rgba = []
        for s in prepared.stops:
            rgb = s.color.converted(ColorSpace.RGB)
            rgba.append((*rgb.components, rgb.alpha))
        self._rgba = np.array(rgba, dtype=float)

    def colors_at(self, ts: list[float]) -> list[Color]:
        t = np.clip(np.asarray(ts, dtype=float), 0.0, 1.0)
        channels = [np.interp(t, self._positions, self._rgba[:, i]) for i in range(4)]
        return [Color.rgb(r, g, b, alpha=a) for r, g, b, a in zip(*channels)]

    def color_at(self, t: float) -> Color:
        return self.colors_at([t])[0]

    def sample(self, count: int) -> list[Color]:
        if count < 1:
            raise ValueError('count must be at least 1')
        if count == 1:
            return self.colors_at([0.0])
        return self.colors_at(list(np.linspace(0.0, 1.0, count)))


@dataclass
class Gradients:
    """An ordered book of gradients."""

    gradients: list[Gradient] = field(default_factory=list)
    name: str | None = None
    format: str | None = field(default=None, compare=False)

    def __len__(self) -> int:
        return len(self.gradients)

    def __iter__(self):
        return iter(self.gradients)

    def __getitem__(self, index: int) -> Gradient:
        return self.gradients[index]
