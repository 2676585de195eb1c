"""Paint.NET palette (.txt): one AARRGGBB hex value per line, ';' comments."""

import logging

from palcodec.core.bytestream import BytesReader
from palcodec.core.colors import Color, ColorSpace, HexFormat
from palcodec.core.errors import FormatError, ValidationError
from palcodec.core.palette import Palette
from palcodec.core.types import Coder

logger = logging.getLogger(__name__)

coder = Coder(
    name='paintnet',
    title='Paint.NET Palette',
    extensions=('txt',),
    type_identifier='com.getpaint.palette',
)

HEADER = (
    '; paint.net Palette File\r\n'
    '; Lines that start with a semicolon are comments\r\n'
    '; Colors are written as 8-digit hexadecimal numbers: aarrggbb\r\n'
)

# Anything shorter cannot hold a color line
MIN_LENGTH = 4


@coder.decoder
def decode(reader: BytesReader) -> Palette:
    text = reader.read_text()
    if len(text) < MIN_LENGTH:
        logger.error('paintnet: %d characters is too short for a palette', len(text))
        raise FormatError('data too short for a Paint.NET palette')

    palette = Palette()
    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith(';'):
            continue
        if len(line) != 8:
            logger.error('paintnet: line %d is not an 8 digit AARRGGBB value', number)
            raise FormatError(f'line {number}: expected 8 hex digits, got {line!r}')
        try:
            palette.colors.append(Color.from_hex(line, HexFormat.ARGB))
        except ValidationError as exc:
            raise FormatError(f'line {number}: {exc}') from exc
    return palette


@coder.encoder
def encode(palette: Palette) -> bytes:
    body = ''.join(
        c.converted(ColorSpace.RGB).hex_string(HexFormat.ARGB, hashmark=False, uppercase=True) + '\r\n'
        for c in palette.all_colors()
    )
    return (HEADER + body).encode('utf-8')
