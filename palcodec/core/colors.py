"""Color value type: colorspace, components, color type and alpha.

A Color is immutable. The component count is checked against the colorspace
on construction, so every Color in the system satisfies that invariant.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum

from palcodec.core.errors import ConversionError, InvalidComponentCountError, ValidationError

logger = logging.getLogger(__name__)


class ColorSpace(Enum):
    CMYK = 'CMYK'
    RGB = 'RGB'
    LAB = 'LAB'
    Gray = 'Gray'

    @property
    def component_count(self) -> int:
        return _COMPONENT_COUNTS[self]


_COMPONENT_COUNTS = {
    ColorSpace.CMYK: 4,
    ColorSpace.RGB: 3,
    ColorSpace.LAB: 3,
    ColorSpace.Gray: 1,
}


class ColorType(Enum):
    GLOBAL = 'global'
    SPOT = 'spot'
    NORMAL = 'normal'


class HexFormat(Enum):
    """Byte order for hex color strings."""

    RGB = 'rgb'
    RGBA = 'rgba'
    ARGB = 'argb'


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


@dataclass(frozen=True)
class Color:
    """A single named color."""

    name: str
    space: ColorSpace
    components: tuple[float, ...]
    color_type: ColorType = ColorType.GLOBAL
    alpha: float = 1.0

    def __post_init__(self) -> None:
        components = tuple(float(c) for c in self.components)
        if len(components) != self.space.component_count:
            logger.error(
                'invalid component count %d for colorspace %s', len(components), self.space.value
            )
            raise InvalidComponentCountError(
                f'{self.space.value} requires {self.space.component_count} components, got {len(components)}'
            )
        object.__setattr__(self, 'components', components)
        object.__setattr__(self, 'alpha', _clamp(float(self.alpha)))
        object.__setattr__(self, 'name', self.name or '')

    # Construction helpers

    @classmethod
    def rgb(
        cls,
        r: float,
        g: float,
        b: float,
        alpha: float = 1.0,
        name: str = '',
        color_type: ColorType = ColorType.GLOBAL,
    ) -> Color:
        return cls(name, ColorSpace.RGB, (r, g, b), color_type, alpha)

    @classmethod
    def cmyk(
        cls,
        c: float,
        m: float,
        y: float,
        k: float,
        alpha: float = 1.0,
        name: str = '',
        color_type: ColorType = ColorType.GLOBAL,
    ) -> Color:
        return cls(name, ColorSpace.CMYK, (c, m, y, k), color_type, alpha)

    @classmethod
    def gray(
        cls, white: float, alpha: float = 1.0, name: str = '', color_type: ColorType = ColorType.GLOBAL
    ) -> Color:
        return cls(name, ColorSpace.Gray, (white,), color_type, alpha)

    @classmethod
    def lab(
        cls,
        l: float,  # noqa: E741
        a: float,
        b: float,
        alpha: float = 1.0,
        name: str = '',
        color_type: ColorType = ColorType.GLOBAL,
    ) -> Color:
        return cls(name, ColorSpace.LAB, (l, a, b), color_type, alpha)

    @classmethod
    def from_rgb255(cls, r: int, g: int, b: int, a: int = 255, name: str = '') -> Color:
        return cls.rgb(r / 255.0, g / 255.0, b / 255.0, alpha=a / 255.0, name=name)

    @classmethod
    def from_hex(cls, text: str, fmt: HexFormat = HexFormat.RGBA, name: str = '') -> Color:
        """Parse #rgb, #rgba, #rrggbb or #rrggbbaa (hash optional).

        With HexFormat.ARGB the alpha byte leads instead of trailing.
        """
        h = text.strip().lstrip('#')
        if len(h) in (3, 4):
            h = ''.join(ch * 2 for ch in h)
        if len(h) not in (6, 8):
            raise ValidationError(f'Invalid hex color: {text!r}')
        try:
            values = [int(h[i : i + 2], 16) for i in range(0, len(h), 2)]
        except ValueError as exc:
            raise ValidationError(f'Invalid hex color: {text!r}') from exc
        if len(values) == 3:
            return cls.from_rgb255(*values, name=name)
        if fmt is HexFormat.ARGB:
            a, r, g, b = values
        else:
            r, g, b, a = values
        return cls.from_rgb255(r, g, b, a, name=name)

    # Accessors

    def rgb255(self) -> tuple[int, int, int, int]:
        """(r, g, b, a) as 0..255 integers. Only valid for RGB colors."""
        if self.space is not ColorSpace.RGB:
            raise ConversionError(f'rgb255() requires an RGB color, got {self.space.value}')
        r, g, b = (int(round(_clamp(c) * 255)) for c in self.components)
        return r, g, b, int(round(self.alpha * 255))

    def hex_string(self, fmt: HexFormat = HexFormat.RGB, hashmark: bool = True, uppercase: bool = False) -> str:
        r, g, b, a = self.rgb255()
        if fmt is HexFormat.RGB:
            body = f'{r:02x}{g:02x}{b:02x}'
        elif fmt is HexFormat.RGBA:
            body = f'{r:02x}{g:02x}{b:02x}{a:02x}'
        else:
            body = f'{a:02x}{r:02x}{g:02x}{b:02x}'
        if uppercase:
            body = body.upper()
        return f'#{body}' if hashmark else body

    def converted(self, to: ColorSpace) -> Color:
        """Convert using the active colorspace converter."""
        from palcodec.core.conversion import convert

        return convert(self, to)

    # Copy-producing updates

    def with_alpha(self, alpha: float) -> Color:
        return replace(self, alpha=alpha)

    def with_name(self, name: str) -> Color:
        return replace(self, name=name)

    def with_color_type(self, color_type: ColorType) -> Color:
        return replace(self, color_type=color_type)
