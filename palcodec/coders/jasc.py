"""JASC / PaintShop Pro palette (.pal, .psppalette).

    JASC-PAL
    0100
    <count>
    r g b
    ...
"""

import logging
import re

from palcodec.core.bytestream import BytesReader
from palcodec.core.colors import Color, ColorSpace
from palcodec.core.errors import InvalidHeaderError, UnsupportedVersionError
from palcodec.core.palette import Palette
from palcodec.core.types import Coder

logger = logging.getLogger(__name__)

coder = Coder(
    name='jasc',
    title='PaintShop Pro Palette',
    extensions=('pal', 'psppalette'),
    type_identifier='com.jasc.pal',
)

_COLOR_RE = re.compile(r'^\s*(\d+)\s+(\d+)\s+(\d+)\s*$')


@coder.decoder
def decode(reader: BytesReader) -> Palette:
    lines = reader.read_text(fallback='latin-1').splitlines()
    if len(lines) < 3 or 'JASC-PAL' not in lines[0]:
        logger.error('jasc: missing JASC-PAL header')
        raise InvalidHeaderError('missing JASC-PAL header')
    if lines[1].strip() != '0100':
        logger.error('jasc: unsupported version %r', lines[1])
        raise UnsupportedVersionError(f'unsupported JASC version {lines[1].strip()!r}')
    try:
        count = int(lines[2])
    except ValueError as exc:
        raise InvalidHeaderError(f'invalid color count {lines[2]!r}') from exc

    colors = []
    for line in lines[3:]:
        m = _COLOR_RE.match(line)
        if m:
            r, g, b = (min(255, int(v)) for v in m.group(1, 2, 3))
            colors.append(Color.from_rgb255(r, g, b))
    if count != len(colors):
        logger.warning('jasc: header says %d colors, found %d', count, len(colors))
    return Palette(colors=colors)


@coder.encoder
def encode(palette: Palette) -> bytes:
    colors = [c.converted(ColorSpace.RGB) for c in palette.all_colors()]
    lines = ['JASC-PAL', '0100', str(len(colors))]
    for color in colors:
        r, g, b, _a = color.rgb255()
        lines.append(f'{r} {g} {b}')
    return ('\r\n'.join(lines) + '\r\n').encode('ascii')
