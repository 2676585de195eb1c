"""Adobe Swatch Exchange (.ase) palettes.

Layout, all big-endian:

    'ASEF'  uint16 1  uint16 0  uint32 block-count
    block*  uint16 type  uint32 length  payload

Block types are group start (0xC001), group end (0xC002) and color
(0x0001). Groups do not nest: the reader is a two-state machine (Idle,
InsideGroup) and the stream must finish Idle. A color block is a name,
a 4-byte colorspace tag, float32 components and a uint16 color type.
A block whose payload is not exactly its declared length is rejected.
"""

import logging
from enum import Enum

from palcodec.core.bytestream import BytesReader, BytesWriter
from palcodec.core.colors import Color, ColorSpace, ColorType
from palcodec.core.errors import (
    FormatError,
    GroupAlreadyOpenError,
    GroupNotOpenError,
    InvalidHeaderError,
    UnknownBlockTypeError,
    UnsupportedColorSpaceError,
    UnsupportedVersionError,
    UnterminatedGroupError,
)
from palcodec.core.palette import Group, Palette
from palcodec.core.types import Coder

logger = logging.getLogger(__name__)

coder = Coder(
    name='ase',
    title='Adobe Swatch Exchange',
    extensions=('ase',),
    type_identifier='com.adobe.ase',
)

MAGIC = b'ASEF'
GROUP_START = 0xC001
GROUP_END = 0xC002
COLOR_BLOCK = 0x0001

_SPACE_TAGS = {
    b'CMYK': ColorSpace.CMYK,
    b'RGB ': ColorSpace.RGB,
    b'LAB ': ColorSpace.LAB,
    b'Gray': ColorSpace.Gray,
}
_TAG_FOR_SPACE = {space: tag for tag, space in _SPACE_TAGS.items()}

_COLOR_TYPES = {0: ColorType.GLOBAL, 1: ColorType.SPOT, 2: ColorType.NORMAL}
_COLOR_TYPE_CODES = {t: code for code, t in _COLOR_TYPES.items()}


class _State(Enum):
    IDLE = 'idle'
    INSIDE_GROUP = 'inside_group'


def _read_name(reader: BytesReader) -> str:
    """uint16 unit count (terminator included) then UTF-16BE units ending in NUL."""
    units = reader.read_uint16()
    if units == 0:
        return ''
    text = reader.read_utf16(units)
    if not text.endswith('\x00'):
        logger.error('ase name is not NUL terminated')
        raise FormatError('name is not NUL terminated')
    return text[:-1]


def _read_color(reader: BytesReader) -> Color:
    name = _read_name(reader)
    tag = reader.read(4)
    space = _SPACE_TAGS.get(tag)
    if space is None:
        logger.error('unknown ase color model %r', tag)
        raise UnsupportedColorSpaceError(f'unknown color model {tag!r}')
    components = [reader.read_float32() for _ in range(space.component_count)]
    type_code = reader.read_uint16()
    color_type = _COLOR_TYPES.get(type_code)
    if color_type is None:
        logger.error('unknown ase color type %d', type_code)
        raise FormatError(f'unknown color type {type_code}')
    return Color(name, space, components, color_type)


@coder.decoder
def decode(reader: BytesReader) -> Palette:
    if reader.read(4) != MAGIC:
        logger.error('invalid .ase header')
        raise InvalidHeaderError('missing ASEF magic')
    major, minor = reader.read_uint16(), reader.read_uint16()
    if (major, minor) != (1, 0):
        logger.error('unsupported .ase version %d.%d', major, minor)
        raise UnsupportedVersionError(f'unsupported version {major}.{minor}')
    block_count = reader.read_uint32()

    palette = Palette()
    state = _State.IDLE
    group: Group | None = None

    for _ in range(block_count):
        block_type = reader.read_uint16()
        length = reader.read_uint32()
        start = reader.position

        if block_type == GROUP_START:
            if state is not _State.IDLE:
                logger.error('group start with a group already open')
                raise GroupAlreadyOpenError()
            group = Group(name=_read_name(reader))
            state = _State.INSIDE_GROUP
        elif block_type == GROUP_END:
            if state is not _State.INSIDE_GROUP:
                logger.error('group end without an open group')
                raise GroupNotOpenError()
            palette.groups.append(group)
            group = None
            state = _State.IDLE
        elif block_type == COLOR_BLOCK:
            color = _read_color(reader)
            if state is _State.INSIDE_GROUP:
                group.colors.append(color)
            else:
                palette.colors.append(color)
        else:
            logger.error('unknown ase block type 0x%04x', block_type)
            raise UnknownBlockTypeError(f'unknown block type 0x{block_type:04x}')

        consumed = reader.position - start
        if consumed != length:
            logger.error('ase block 0x%04x declares %d bytes, payload is %d', block_type, length, consumed)
            raise FormatError(f'block 0x{block_type:04x} length {length} does not match its {consumed} byte payload')

    if state is not _State.IDLE:
        logger.error('ase stream ended inside group %r', group.name)
        raise UnterminatedGroupError(f'group {group.name!r} is not closed')
    return palette


def _name_payload(name: str) -> bytes:
    w = BytesWriter()
    raw = name.encode('utf-16-be')
    w.write_uint16(len(raw) // 2 + 1)
    w.write(raw)
    w.write(b'\x00\x00')
    return w.getvalue()


def _color_block(color: Color) -> bytes:
    payload = BytesWriter()
    payload.write(_name_payload(color.name))
    payload.write(_TAG_FOR_SPACE[color.space])
    for value in color.components:
        payload.write_float32(value)
    payload.write_uint16(_COLOR_TYPE_CODES[color.color_type])

    block = BytesWriter()
    block.write_uint16(COLOR_BLOCK)
    block.write_uint32(len(payload))
    block.write(payload.getvalue())
    return block.getvalue()


@coder.encoder
def encode(palette: Palette) -> bytes:
    blocks = len(palette.colors) + 2 * len(palette.groups) + sum(len(g.colors) for g in palette.groups)

    w = BytesWriter()
    w.write(MAGIC)
    w.write_uint16(1)
    w.write_uint16(0)
    w.write_uint32(blocks)

    for color in palette.colors:
        w.write(_color_block(color))

    for group in palette.groups:
        name = _name_payload(group.name)
        w.write_uint16(GROUP_START)
        w.write_uint32(len(name))
        w.write(name)
        for color in group.colors:
            w.write(_color_block(color))
        w.write_uint16(GROUP_END)
        w.write_uint32(0)

    return w.getvalue()
