"""JSON gradients (.jsoncolorgradient), the canonical interchange form."""

from palcodec.core import serialize
from palcodec.core.bytestream import BytesReader
from palcodec.core.gradient import Gradients
from palcodec.core.types import Coder, ModelKind

coder = Coder(
    name='jsongradient',
    title='JSON Color Gradient',
    extensions=('jsoncolorgradient',),
    kind=ModelKind.GRADIENTS,
)


@coder.decoder
def decode(reader: BytesReader) -> Gradients:
    return serialize.gradients_from_dict(serialize.loads(reader.read_text()))


@coder.encoder
def encode(gradients: Gradients) -> bytes:
    return serialize.dumps(serialize.gradients_to_dict(gradients))
