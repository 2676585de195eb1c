"""Adobe Color Table (.act).

256 RGB byte triplets (768 bytes), optionally followed by a big-endian
int16 count of colors in use and an int16 index of the transparent color
(-1 / 0xFFFF for none).
"""

import logging

from palcodec.core.bytestream import BytesReader, BytesWriter
from palcodec.core.colors import Color, ColorSpace
from palcodec.core.errors import IndexOutOfRangeError
from palcodec.core.palette import Palette
from palcodec.core.types import Coder

logger = logging.getLogger(__name__)

coder = Coder(
    name='act',
    title='Adobe Color Table',
    extensions=('act',),
    type_identifier='com.adobe.act',
)

TABLE_SIZE = 256


@coder.decoder
def decode(reader: BytesReader) -> Palette:
    colors = []
    for _ in range(TABLE_SIZE):
        r, g, b = reader.read(3)
        colors.append(Color.from_rgb255(r, g, b))

    if len(reader.peek(2)) == 2:
        count = reader.read_int16()
        if not 0 <= count <= TABLE_SIZE:
            logger.error('act color count %d outside 0..%d', count, TABLE_SIZE)
            raise IndexOutOfRangeError(f'color count {count} outside 0..{TABLE_SIZE}')
        colors = colors[:count]

    if len(reader.peek(2)) == 2:
        alpha_index = reader.read_int16()
        if alpha_index >= 0:
            if alpha_index >= len(colors):
                logger.error('act transparency index %d beyond %d colors', alpha_index, len(colors))
                raise IndexOutOfRangeError(f'transparency index {alpha_index} beyond {len(colors)} colors')
            colors[alpha_index] = colors[alpha_index].with_alpha(0.0)

    return Palette(colors=colors)


@coder.encoder
def encode(palette: Palette) -> bytes:
    colors = [c.converted(ColorSpace.RGB) for c in palette.all_colors()[:TABLE_SIZE]]

    w = BytesWriter()
    for color in colors:
        r, g, b, _a = color.rgb255()
        w.write(bytes((r, g, b)))
    w.write(bytes(3 * (TABLE_SIZE - len(colors))))

    if len(colors) < TABLE_SIZE:
        w.write_uint16(len(colors))
        w.write_uint16(0xFFFF)
    return w.getvalue()
