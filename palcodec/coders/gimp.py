"""GIMP palette (.gpl).

    GIMP Palette
    Name: Tango
    #Colors: 2
    252 233  79	Butter 1
    237 212   0	Butter 2

Color lines are three decimal channels and an optional name. Comment and
Columns lines are skipped.
"""

import logging
import re

from palcodec.core.bytestream import BytesReader
from palcodec.core.colors import Color, ColorSpace
from palcodec.core.errors import InvalidHeaderError
from palcodec.core.palette import Palette
from palcodec.core.types import Coder

logger = logging.getLogger(__name__)

coder = Coder(
    name='gimp',
    title='GIMP Palette',
    extensions=('gpl',),
    type_identifier='org.gimp.gpl',
)

HEADER = 'GIMP Palette'

_NAME_RE = re.compile(r'^Name:\s*(.*)$')
_COLOR_RE = re.compile(r'^\s*(\d+)\s+(\d+)\s+(\d+)(.*)$')


@coder.decoder
def decode(reader: BytesReader) -> Palette:
    lines = reader.read_text(fallback='latin-1').splitlines()
    if not lines or HEADER not in lines[0]:
        logger.error('gpl: missing %r header', HEADER)
        raise InvalidHeaderError(f'missing {HEADER!r} header')

    palette = Palette()
    for line in lines[1:]:
        m = _NAME_RE.match(line)
        if m:
            palette.name = m.group(1).strip()
            continue
        m = _COLOR_RE.match(line)
        if m:
            r, g, b = (min(255, int(v)) for v in m.group(1, 2, 3))
            palette.colors.append(Color.from_rgb255(r, g, b, name=m.group(4).strip()))
    return palette


@coder.encoder
def encode(palette: Palette) -> bytes:
    colors = [c.converted(ColorSpace.RGB) for c in palette.all_colors()]
    lines = [HEADER]
    if palette.name:
        lines.append(f'Name: {palette.name}')
    lines.append(f'#Colors: {len(colors)}')
    for color in colors:
        r, g, b, _a = color.rgb255()
        line = f'{r}\t{g}\t{b}'
        if color.name:
            line += f'\t{color.name}'
        lines.append(line)
    return ('\n'.join(lines) + '\n').encode('utf-8')
