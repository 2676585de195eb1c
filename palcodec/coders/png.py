"""PNG swatch strips.

Decoding reads the first row of any image Pillow can open and collapses
runs of (nearly) equal pixels into one color each. Encoding draws every
color of the palette as a square swatch in a single horizontal strip; the
swatch edge comes from PALCODEC_PNG_SWATCH_SIZE.
"""

import io
import logging

import numpy as np
from PIL import Image, UnidentifiedImageError

from palcodec.core.bytestream import BytesReader
from palcodec.core.colors import Color, ColorSpace
from palcodec.core.env import settings_from_environ
from palcodec.core.errors import FormatError, ValidationError
from palcodec.core.palette import Palette
from palcodec.core.types import Coder

logger = logging.getLogger(__name__)

coder = Coder(
    name='png',
    title='PNG swatch image',
    extensions=('png',),
    type_identifier='public.png',
)

# Two neighbouring pixels closer than this on every channel are one color
ACCURACY = 0.001


def first_row_colors(image: Image.Image, accuracy: float = ACCURACY) -> list[Color]:
    """Distinct consecutive colors along the top row of an image."""
    row = np.array(image.convert('RGBA'))[0].astype(float) / 255.0
    unique: list[np.ndarray] = []
    for pixel in row:
        if unique and np.all(np.abs(pixel - unique[-1]) <= accuracy):
            continue
        unique.append(pixel)
    return [Color.rgb(r, g, b, alpha=a) for r, g, b, a in unique]


def swatch_strip(colors: list[Color], swatch_size: int) -> Image.Image:
    """A swatch_size-high strip with one swatch_size square per color."""
    if not colors:
        raise ValidationError('cannot draw an image for a palette with no colors')
    pixels = np.array([c.converted(ColorSpace.RGB).rgb255() for c in colors], dtype=np.uint8)
    strip = np.repeat(pixels, swatch_size, axis=0)
    return Image.fromarray(np.repeat(strip[np.newaxis, :, :], swatch_size, axis=0))


@coder.decoder
def decode(reader: BytesReader) -> Palette:
    try:
        image = Image.open(io.BytesIO(reader.read_to_end()))
        image.load()
    except (UnidentifiedImageError, OSError) as exc:
        logger.error('png: cannot read image: %s', exc)
        raise FormatError(f'not a readable image: {exc}') from exc
    return Palette(colors=first_row_colors(image))


@coder.encoder
def encode(palette: Palette) -> bytes:
    image = swatch_strip(palette.all_colors(), settings_from_environ().png_swatch_size)
    buf = io.BytesIO()
    image.save(buf, format='PNG')
    return buf.getvalue()
