"""Coder: the per-format decode/encode contract.

A coder module creates one Coder and attaches plain functions to it:

    coder = Coder(name='gimp', title='GIMP Palette', extensions=('gpl',))

    @coder.decoder
    def decode(reader: BytesReader) -> Palette:
        ...

    @coder.encoder
    def encode(palette: Palette) -> bytes:
        ...

The Coder itself keeps no per-call state, so one instance can serve any
number of concurrent decodes.
"""

from __future__ import annotations

import io
from collections.abc import Callable
from enum import Enum
from os import PathLike
from typing import BinaryIO, Union

from palcodec.core.bytestream import BytesReader
from palcodec.core.errors import DecodeNotImplementedError, EncodeNotImplementedError
from palcodec.core.gradient import Gradients
from palcodec.core.palette import Palette

Model = Union[Palette, Gradients]


class ModelKind(Enum):
    PALETTE = 'palette'
    GRADIENTS = 'gradients'


class Coder:
    """Metadata plus the decode/encode functions for one file format."""

    def __init__(
        self,
        name: str,
        title: str = '',
        extensions: tuple[str, ...] = (),
        type_identifier: str = '',
        kind: ModelKind = ModelKind.PALETTE,
    ):
        self.name = name
        self.title = title or name
        self.extensions = tuple(e.lower().lstrip('.') for e in extensions)
        self.type_identifier = type_identifier or f'public.palcodec.{kind.value}.{name}'
        self.kind = kind
        self._decode_fn: Callable[[BytesReader], Model] | None = None
        self._encode_fn: Callable[[Model], bytes] | None = None

    def __repr__(self) -> str:
        return f'Coder({self.name!r}, extensions={self.extensions!r})'

    def decoder(self, fn: Callable[[BytesReader], Model]) -> Callable[[BytesReader], Model]:
        """Decorator to register the decode function."""
        self._decode_fn = fn
        return fn

    def encoder(self, fn: Callable[[Model], bytes]) -> Callable[[Model], bytes]:
        """Decorator to register the encode function."""
        self._encode_fn = fn
        return fn

    @property
    def can_decode(self) -> bool:
        return self._decode_fn is not None

    @property
    def can_encode(self) -> bool:
        return self._encode_fn is not None

    # Decoding

    def decode_stream(self, stream: BinaryIO) -> Model:
        if self._decode_fn is None:
            raise DecodeNotImplementedError(f'{self.title} coder cannot decode')
        model = self._decode_fn(BytesReader(stream))
        model.format = self.name
        return model

    def decode_bytes(self, data: bytes) -> Model:
        return self.decode_stream(io.BytesIO(data))

    def decode_path(self, path: str | PathLike) -> Model:
        with open(path, 'rb') as f:
            return self.decode_stream(f)

    # Encoding

    def encode(self, model: Model) -> bytes:
        if self._encode_fn is None:
            raise EncodeNotImplementedError(f'{self.title} coder cannot encode')
        return self._encode_fn(model)
