"""Plain hex color lists (.hex).

Any run of `#0-9a-fA-F` characters that parses as #rgb[a] or #rrggbb[aa]
is a color; everything else separates values. Lines starting with ';' are
comments. A file with no colors at all is rejected.
"""

import logging
import re

from palcodec.core.bytestream import BytesReader
from palcodec.core.colors import Color, ColorSpace, HexFormat
from palcodec.core.errors import FormatError, ValidationError
from palcodec.core.palette import Palette
from palcodec.core.types import Coder

logger = logging.getLogger(__name__)

coder = Coder(
    name='hex',
    title='Hex RGBA',
    extensions=('hex',),
)

_TOKEN_RE = re.compile(r'[#0-9a-fA-F]+')


@coder.decoder
def decode(reader: BytesReader) -> Palette:
    palette = Palette()
    for line in reader.read_text(fallback='latin-1').splitlines():
        if line.startswith(';'):
            continue
        for token in _TOKEN_RE.findall(line):
            try:
                palette.colors.append(Color.from_hex(token, HexFormat.RGBA))
            except ValidationError:
                logger.debug('hex: skipping token %r', token)
    if not palette.colors:
        logger.error('hex: no colors found')
        raise FormatError('no hex colors found')
    return palette


@coder.encoder
def encode(palette: Palette) -> bytes:
    lines = []
    for color in palette.all_colors():
        rgb = color.converted(ColorSpace.RGB)
        fmt = HexFormat.RGBA if rgb.alpha < 1.0 else HexFormat.RGB
        lines.append(rgb.hex_string(fmt) + '\n')
    return ''.join(lines).encode('utf-8')
