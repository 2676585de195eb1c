"""Colorspace conversion.

The default converter uses naive, non-colorimetric formulas between RGB,
CMYK and Gray. LAB is not reachable with it. A more accurate converter can
be swapped in with set_default_converter() or passed per call.
"""

from __future__ import annotations

import logging
from typing import Protocol

from palcodec.core.colors import Color, ColorSpace
from palcodec.core.errors import UnsupportedConversionError

logger = logging.getLogger(__name__)


class ColorSpaceConverter(Protocol):
    def convert(self, color: Color, to: ColorSpace) -> Color: ...


# Naive formulas on plain component tuples


def cmyk_to_rgb(c: float, m: float, y: float, k: float) -> tuple[float, float, float]:
    return (1 - c) * (1 - k), (1 - m) * (1 - k), (1 - y) * (1 - k)


def rgb_to_cmyk(r: float, g: float, b: float) -> tuple[float, float, float, float]:
    k = 1 - max(r, g, b)
    if k == 1:
        return 0.0, 0.0, 0.0, 1.0
    return (1 - r - k) / (1 - k), (1 - g - k) / (1 - k), (1 - b - k) / (1 - k), k


def rgb_to_gray(r: float, g: float, b: float) -> float:
    return 0.299 * r + 0.587 * g + 0.114 * b


def gray_to_rgb(w: float) -> tuple[float, float, float]:
    return w, w, w


_NAIVE = {
    (ColorSpace.CMYK, ColorSpace.RGB): lambda c: cmyk_to_rgb(*c),
    (ColorSpace.RGB, ColorSpace.CMYK): lambda c: rgb_to_cmyk(*c),
    (ColorSpace.Gray, ColorSpace.RGB): lambda c: gray_to_rgb(c[0]),
    (ColorSpace.RGB, ColorSpace.Gray): lambda c: (rgb_to_gray(*c),),
    (ColorSpace.Gray, ColorSpace.CMYK): lambda c: rgb_to_cmyk(*gray_to_rgb(c[0])),
    (ColorSpace.CMYK, ColorSpace.Gray): lambda c: (rgb_to_gray(*cmyk_to_rgb(*c)),),
}


class NaiveConverter:
    """Approximate RGB/CMYK/Gray conversion. Carries name, type and alpha across."""

    def convert(self, color: Color, to: ColorSpace) -> Color:
        if color.space is to:
            return color
        fn = _NAIVE.get((color.space, to))
        if fn is None:
            logger.error('unsupported colorspace conversion %s -> %s', color.space.value, to.value)
            raise UnsupportedConversionError(f'Cannot convert {color.space.value} to {to.value}')
        return Color(color.name, to, fn(color.components), color.color_type, color.alpha)


_default: ColorSpaceConverter = NaiveConverter()


def default_converter() -> ColorSpaceConverter:
    return _default


def set_default_converter(converter: ColorSpaceConverter) -> ColorSpaceConverter:
    """Install a converter for all subsequent conversions. Returns the previous one."""
    global _default
    previous = _default
    _default = converter
    return previous


def convert(color: Color, to: ColorSpace, converter: ColorSpaceConverter | None = None) -> Color:
    """Convert color to the target colorspace. Same-space input is returned as-is."""
    if color.space is to:
        return color
    return (converter or _default).convert(color, to)
