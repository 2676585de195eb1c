"""Affinity palette (.afpalette), versions 10 and 11. Decode only.

The container is undocumented. The reader checks the little-endian header
then jumps between tagged sub-containers with a forward pattern seek:

    NClP  uint32le length, ASCII palette name
    VlaP  uint32le color count, then one 'rloC' record per color
    VNaP  uint32le (unknown), uint32le name count, (uint32le length, UTF-8)*

Some files list fewer color records than the count claims. When a record
cannot be read the reader rewinds to the record start and moves on to the
names; an unknown color type is always an error.
"""

import colorsys
import io
import logging

from palcodec.core.bytestream import BytesReader, Endian
from palcodec.core.colors import Color
from palcodec.core.errors import FormatError, InvalidHeaderError, UnsupportedColorSpaceError, UnsupportedVersionError
from palcodec.core.palette import Palette
from palcodec.core.types import Coder

logger = logging.getLogger(__name__)

coder = Coder(
    name='afpalette',
    title='Affinity Designer Palette',
    extensions=('afpalette',),
    type_identifier='com.seriflabs.afpalette',
)

BOM = 0x414BFF00
VERSIONS = (10, 11)

LE = Endian.LITTLE


def _read_floats(reader: BytesReader, count: int) -> list[float]:
    return [reader.read_float32(LE) for _ in range(count)]


def _read_color(reader: BytesReader) -> Color:
    reader.read_through_ascii('rloC')
    reader.skip(6)
    tag = reader.read(4)

    if tag == b'ABGR':
        reader.read_through_ascii('Dloc_')
        r, g, b = _read_floats(reader, 3)
        return Color.rgb(r, g, b)
    if tag == b'KYMC':
        reader.read_through_ascii('Hloc_')
        c, m, y, k = _read_floats(reader, 4)
        return Color.cmyk(c, m, y, k)
    if tag == b'YARG':
        reader.read_through_ascii('<loc_')
        (white,) = _read_floats(reader, 1)
        return Color.gray(white)
    if tag == b'ABAL':
        reader.read_through_ascii('<loc_')
        l, a, b = (reader.read_uint16(LE) for _ in range(3))  # noqa: E741
        return Color.lab(l / 65535.0 * 100.0, a / 65535.0 * 256.0 - 128.0, b / 65535.0 * 256.0 - 128.0)
    if tag == b'ALSH':
        reader.read_through_ascii('Dloc_')
        h, s, lightness = _read_floats(reader, 3)
        return Color.rgb(*colorsys.hls_to_rgb(h, lightness, s))

    logger.error('afpalette: unsupported color type %r at offset %d', tag, reader.position)
    raise UnsupportedColorSpaceError(f'unsupported color type {tag!r}')


@coder.decoder
def decode(reader: BytesReader) -> Palette:
    # in-memory copy, failed color records are rewound
    reader = BytesReader(io.BytesIO(reader.read_to_end()))

    if reader.read_uint32(LE) != BOM:
        logger.error('afpalette: invalid BOM')
        raise InvalidHeaderError('invalid afpalette BOM')
    version = reader.read_uint32(LE)
    if version not in VERSIONS:
        logger.error('afpalette: unsupported version %d', version)
        raise UnsupportedVersionError(f'unsupported afpalette version {version}')

    reader.read_through_ascii('NClP')
    name = reader.read_ascii(reader.read_uint32(LE))

    reader.read_through_ascii('VlaP')
    count = reader.read_uint32(LE)
    colors: list[Color] = []
    for index in range(count):
        start = reader.position
        try:
            colors.append(_read_color(reader))
        except UnsupportedColorSpaceError:
            raise
        except FormatError as exc:
            logger.debug('afpalette: stopped after %d of %d colors (%s)', index, count, exc)
            reader.seek(start)
            break

    reader.read_through_ascii('VNaP')
    reader.read_uint32(LE)
    name_count = reader.read_uint32(LE)
    for index in range(min(name_count, len(colors))):
        colors[index] = colors[index].with_name(reader.read_utf8(reader.read_uint32(LE)))

    return Palette(name=name, colors=colors)
