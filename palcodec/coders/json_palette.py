"""JSON palette (.jsoncolorpalette), the canonical interchange form."""

from palcodec.core import serialize
from palcodec.core.bytestream import BytesReader
from palcodec.core.palette import Palette
from palcodec.core.types import Coder

coder = Coder(
    name='json',
    title='JSON Color Palette',
    extensions=('jsoncolorpalette',),
    type_identifier='public.palcodec.palette.json',
)


@coder.decoder
def decode(reader: BytesReader) -> Palette:
    return serialize.palette_from_dict(serialize.loads(reader.read_text()))


@coder.encoder
def encode(palette: Palette) -> bytes:
    return serialize.dumps(serialize.palette_to_dict(palette))
