"""Microsoft RIFF palette (.pal).

    'RIFF' uint32le size 'PAL ' 'data' uint32le chunk-size
    int16le version  int16le count  (r, g, b, flags)*

Only the first chunk is read, and it must be the 'data' chunk.
"""

import logging

from palcodec.core.bytestream import BytesReader, BytesWriter, Endian
from palcodec.core.colors import Color, ColorSpace
from palcodec.core.errors import InvalidHeaderError, ValidationError
from palcodec.core.palette import Palette
from palcodec.core.types import Coder

logger = logging.getLogger(__name__)

coder = Coder(
    name='riff',
    title='Microsoft RIFF',
    extensions=('pal',),
    type_identifier='com.microsoft.riff.pal',
)

PAL_VERSION = 0x0300
MAX_ENTRIES = 0x7FFF


@coder.decoder
def decode(reader: BytesReader) -> Palette:
    if reader.read(4) != b'RIFF':
        logger.error('missing RIFF magic')
        raise InvalidHeaderError('missing RIFF magic')
    reader.read_uint32(Endian.LITTLE)
    if reader.read(4) != b'PAL ':
        logger.error('RIFF form type is not PAL')
        raise InvalidHeaderError("RIFF form type is not 'PAL '")
    if reader.read(4) != b'data':
        logger.error('RIFF PAL file does not start with a data chunk')
        raise InvalidHeaderError('expected a data chunk')
    reader.read_uint32(Endian.LITTLE)

    reader.read_int16(Endian.LITTLE)  # palette version
    count = reader.read_int16(Endian.LITTLE)
    if count < 0:
        raise InvalidHeaderError(f'negative entry count {count}')
    colors = []
    for _ in range(count):
        r, g, b, _flags = reader.read(4)
        colors.append(Color.from_rgb255(r, g, b))
    return Palette(colors=colors)


@coder.encoder
def encode(palette: Palette) -> bytes:
    colors = [c.converted(ColorSpace.RGB) for c in palette.all_colors()]
    if len(colors) > MAX_ENTRIES:
        raise ValidationError(f'RIFF palettes hold at most {MAX_ENTRIES} colors, got {len(colors)}')

    data = BytesWriter()
    data.write_uint16(PAL_VERSION, Endian.LITTLE)
    data.write_uint16(len(colors), Endian.LITTLE)
    for color in colors:
        r, g, b, _a = color.rgb255()
        data.write(bytes((r, g, b, 0)))

    w = BytesWriter()
    w.write(b'RIFF')
    w.write_uint32(4 + 8 + len(data), Endian.LITTLE)
    w.write(b'PAL ')
    w.write(b'data')
    w.write_uint32(len(data), Endian.LITTLE)
    w.write(data.getvalue())
    return w.getvalue()
