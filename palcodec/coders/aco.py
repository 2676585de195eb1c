"""Adobe Photoshop swatches (.aco).

An .aco file holds a version 1 section and, optionally, a version 2 section
listing the same colors again with names. Each section is parsed into its
own result; a v2 section with colors replaces the v1 colors wholesale. A
file with no v2 section, or an empty one, keeps the v1 colors. A v2 section
that is cut short is an error.

    section  uint16 version  uint16 count  entry*
    entry    uint16 space  uint16 c0..c3  [v2: uint32 units, UTF-16BE, NUL]
"""

import logging
from dataclasses import dataclass, field

from palcodec.core.bytestream import BytesReader, BytesWriter
from palcodec.core.colors import Color, ColorSpace
from palcodec.core.errors import UnsupportedColorSpaceError, UnsupportedVersionError
from palcodec.core.palette import Palette
from palcodec.core.types import Coder

logger = logging.getLogger(__name__)

coder = Coder(
    name='aco',
    title='Adobe Photoshop Swatches',
    extensions=('aco',),
    type_identifier='com.adobe.aco',
)

SPACE_RGB = 0
SPACE_HSB = 1
SPACE_CMYK = 2
SPACE_LAB = 7
SPACE_GRAY = 8

_SPACE_NAMES = {SPACE_HSB: 'HSB', SPACE_LAB: 'LAB'}


@dataclass
class _Section:
    version: int
    colors: list[Color] = field(default_factory=list)


def _color_from_entry(space: int, c: tuple[int, int, int, int], name: str) -> Color:
    if space == SPACE_RGB:
        return Color(name, ColorSpace.RGB, (c[0] / 65535.0, c[1] / 65535.0, c[2] / 65535.0))
    if space == SPACE_CMYK:
        # 0 means 100% ink
        return Color(name, ColorSpace.CMYK, tuple((65535 - v) / 65535.0 for v in c))
    if space == SPACE_GRAY:
        return Color(name, ColorSpace.Gray, (min(c[0], 10000) / 10000.0,))
    label = _SPACE_NAMES.get(space, str(space))
    logger.error('unsupported aco colorspace %s', label)
    raise UnsupportedColorSpaceError(f'unsupported colorspace {label}')


def _read_section(reader: BytesReader, version: int) -> _Section:
    section = _Section(version)
    count = reader.read_uint16()
    for _ in range(count):
        space = reader.read_uint16()
        components = (reader.read_uint16(), reader.read_uint16(), reader.read_uint16(), reader.read_uint16())
        name = reader.read_adobe_pascal_string() if version == 2 else ''
        section.colors.append(_color_from_entry(space, components, name))
    return section


def _read_v2_section(reader: BytesReader) -> _Section | None:
    """The v2 section when one follows, otherwise None."""
    if len(reader.peek(2)) < 2:
        return None
    version = reader.read_uint16()
    if version != 2:
        logger.debug('ignoring trailing data with version tag %d after v1 section', version)
        return None
    return _read_section(reader, 2)


@coder.decoder
def decode(reader: BytesReader) -> Palette:
    version = reader.read_uint16()
    if version != 1:
        logger.error('aco file does not start with a v1 section (version %d)', version)
        raise UnsupportedVersionError(f'expected version 1 section, got {version}')
    v1 = _read_section(reader, 1)
    v2 = _read_v2_section(reader)

    chosen = v2 if v2 is not None and v2.colors else v1
    return Palette(colors=chosen.colors)


def _entry_for_color(color: Color) -> tuple[int, tuple[int, int, int, int]]:
    if color.space is ColorSpace.LAB:
        color = color.converted(ColorSpace.RGB)

    def scaled(v: float, top: int) -> int:
        return int(round(max(0.0, min(1.0, v)) * top))

    if color.space is ColorSpace.RGB:
        r, g, b = (scaled(v, 65535) for v in color.components)
        return SPACE_RGB, (r, g, b, 0)
    if color.space is ColorSpace.CMYK:
        c, m, y, k = (65535 - scaled(v, 65535) for v in color.components)
        return SPACE_CMYK, (c, m, y, k)
    return SPACE_GRAY, (scaled(color.components[0], 10000), 0, 0, 0)


@coder.encoder
def encode(palette: Palette) -> bytes:
    colors = palette.all_colors()
    entries = [_entry_for_color(c) for c in colors]

    w = BytesWriter()
    for version in (1, 2):
        w.write_uint16(version)
        w.write_uint16(len(colors))
        for color, (space, components) in zip(colors, entries):
            w.write_uint16(space)
            for value in components:
                w.write_uint16(value)
            if version == 2:
                w.write_adobe_pascal_string(color.name)
    return w.getvalue()
