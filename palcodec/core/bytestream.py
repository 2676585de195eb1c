"""Forward-only binary reading and writing shared by every binary coder.

BytesReader wraps any readable binary file object. Every read either returns
exactly the requested bytes or raises TruncatedDataError; nothing blocks or
returns short. Pattern seeks scan forward and fail at end of stream.
"""

from __future__ import annotations

import io
import logging
import struct
from enum import Enum
from typing import BinaryIO

from palcodec.core.errors import FormatError, PatternNotFoundError, TruncatedDataError

logger = logging.getLogger(__name__)

UTF8_BOM = b'\xef\xbb\xbf'


class Endian(Enum):
    BIG = '>'
    LITTLE = '<'


class BytesReader:
    """Sequential reader over a binary stream."""

    def __init__(self, stream: BinaryIO):
        self._stream = stream
        self._position = 0
        self._pushback = b''
        self._origin = stream.tell() if stream.seekable() else 0

    @classmethod
    def from_bytes(cls, data: bytes) -> BytesReader:
        return cls(io.BytesIO(data))

    @classmethod
    def from_path(cls, path) -> BytesReader:
        with open(path, 'rb') as f:
            return cls(io.BytesIO(f.read()))

    @property
    def position(self) -> int:
        """Number of bytes consumed so far."""
        return self._position

    def _raw(self, count: int) -> bytes:
        head, self._pushback = self._pushback[:count], self._pushback[count:]
        if len(head) == count:
            return head
        chunks = [head]
        remaining = count - len(head)
        while remaining > 0:
            chunk = self._stream.read(remaining)
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        return b''.join(chunks)

    def read(self, count: int) -> bytes:
        if count < 0:
            raise FormatError(f'negative read length {count}')
        data = self._raw(count)
        if len(data) != count:
            logger.debug('unexpected end of data at offset %d (wanted %d, got %d)', self._position, count, len(data))
            self._position += len(data)
            raise TruncatedDataError(f'expected {count} bytes at offset {self._position - len(data)}, got {len(data)}')
        self._position += count
        return data

    def peek(self, count: int) -> bytes:
        """Up to `count` upcoming bytes without consuming them (may be shorter at EOF)."""
        data = self._raw(count)
        self._pushback = data + self._pushback
        return data

    def seek(self, position: int) -> None:
        """Move back (or forward) to an offset previously reported by `position`.

        Only for seekable streams; coders that backtrack read the whole input
        into memory first.
        """
        if not self._stream.seekable():
            raise FormatError('stream does not support seeking')
        self._stream.seek(self._origin + position)
        self._pushback = b''
        self._position = position

    def at_end(self) -> bool:
        return self.peek(1) == b''

    def skip(self, count: int) -> None:
        self.read(count)

    def read_to_end(self) -> bytes:
        data = self._pushback + self._stream.read()
        self._pushback = b''
        self._position += len(data)
        return data

    # Integers and floats

    def _unpack(self, fmt: str, size: int, endian: Endian):
        return struct.unpack(endian.value + fmt, self.read(size))[0]

    def read_uint8(self) -> int:
        return self.read(1)[0]

    def read_int8(self) -> int:
        return self._unpack('b', 1, Endian.BIG)

    def read_uint16(self, endian: Endian = Endian.BIG) -> int:
        return self._unpack('H', 2, endian)

    def read_int16(self, endian: Endian = Endian.BIG) -> int:
        return self._unpack('h', 2, endian)

    def read_uint32(self, endian: Endian = Endian.BIG) -> int:
        return self._unpack('I', 4, endian)

    def read_int32(self, endian: Endian = Endian.BIG) -> int:
        return self._unpack('i', 4, endian)

    def read_float32(self, endian: Endian = Endian.BIG) -> float:
        return self._unpack('f', 4, endian)

    def read_float64(self, endian: Endian = Endian.BIG) -> float:
        return self._unpack('d', 8, endian)

    # Strings

    def read_ascii(self, count: int) -> str:
        raw = self.read(count)
        try:
            return raw.decode('ascii')
        except UnicodeDecodeError as exc:
            raise FormatError(f'non-ascii bytes in {raw!r}') from exc

    def read_utf8(self, count: int) -> str:
        raw = self.read(count)
        try:
            return raw.decode('utf-8')
        except UnicodeDecodeError as exc:
            raise FormatError('invalid utf-8 string') from exc

    def read_utf16(self, units: int, endian: Endian = Endian.BIG) -> str:
        raw = self.read(units * 2)
        try:
            return raw.decode('utf-16-be' if endian is Endian.BIG else 'utf-16-le')
        except UnicodeDecodeError as exc:
            raise FormatError('invalid utf-16 string') from exc

    def read_utf16_zero_terminated(self, endian: Endian = Endian.BIG) -> str:
        """UTF-16 code units up to (and consuming) a 0x0000 terminator."""
        units = bytearray()
        while True:
            unit = self.read(2)
            if unit == b'\x00\x00':
                break
            units += unit
        try:
            return bytes(units).decode('utf-16-be' if endian is Endian.BIG else 'utf-16-le')
        except UnicodeDecodeError as exc:
            raise FormatError('invalid utf-16 string') from exc

    def read_pascal_utf16(self, endian: Endian = Endian.BIG) -> str:
        """uint16 code-unit count followed by that many UTF-16 units. No terminator."""
        units = self.read_uint16(endian)
        if units == 0:
            return ''
        return self.read_utf16(units, endian)

    def read_adobe_pascal_string(self) -> str:
        """Adobe unicode string: uint32 unit count (including a trailing NUL), UTF-16BE units."""
        units = self.read_uint32(Endian.BIG)
        if units == 0:
            return ''
        text = self.read_utf16(units, Endian.BIG)
        if not text.endswith('\x00'):
            raise FormatError('unicode string is not NUL terminated')
        return text[:-1]

    def read_text(self, encoding: str = 'utf-8', fallback: str | None = None) -> str:
        """Remaining bytes as text, with any UTF-8 BOM removed.

        When the bytes are not valid `encoding` they are decoded with
        `fallback` if one is given, otherwise FormatError is raised.
        """
        raw = self.read_to_end()
        if raw.startswith(UTF8_BOM):
            raw = raw[len(UTF8_BOM) :]
        try:
            return raw.decode(encoding)
        except UnicodeDecodeError as exc:
            if fallback is not None:
                logger.debug('text is not valid %s, decoding as %s', encoding, fallback)
                return raw.decode(fallback, errors='replace')
            raise FormatError(f'text is not valid {encoding}') from exc

    # Pattern seek

    def read_through(self, pattern: bytes) -> None:
        """Consume bytes up to and including the next occurrence of `pattern`.

        Raises PatternNotFoundError when the stream ends first.
        """
        if not pattern:
            return
        window = bytearray()
        n = len(pattern)
        while True:
            chunk = self._raw(1)
            if not chunk:
                logger.debug('pattern %r not found before end of data', pattern)
                raise PatternNotFoundError(f'pattern {pattern!r} not found')
            self._position += 1
            window += chunk
            if len(window) > n:
                del window[0]
            if window == pattern:
                return

    def read_through_ascii(self, text: str) -> None:
        self.read_through(text.encode('ascii'))


class BytesWriter:
    """Append-only binary writer, the inverse of BytesReader."""

    def __init__(self) -> None:
        self._buffer = io.BytesIO()

    def getvalue(self) -> bytes:
        return self._buffer.getvalue()

    def __len__(self) -> int:
        return self._buffer.tell()

    def write(self, data: bytes) -> None:
        self._buffer.write(data)

    def _pack(self, fmt: str, value, endian: Endian) -> None:
        try:
            self._buffer.write(struct.pack(endian.value + fmt, value))
        except struct.error as exc:
            raise FormatError(f'value {value!r} does not fit field {fmt!r}') from exc

    def write_uint8(self, value: int) -> None:
        self._pack('B', value, Endian.BIG)

    def write_uint16(self, value: int, endian: Endian = Endian.BIG) -> None:
        self._pack('H', value, endian)

    def write_int16(self, value: int, endian: Endian = Endian.BIG) -> None:
        self._pack('h', value, endian)

    def write_uint32(self, value: int, endian: Endian = Endian.BIG) -> None:
        self._pack('I', value, endian)

    def write_int32(self, value: int, endian: Endian = Endian.BIG) -> None:
        self._pack('i', value, endian)

    def write_float32(self, value: float, endian: Endian = Endian.BIG) -> None:
        self._pack('f', value, endian)

    def write_float64(self, value: float, endian: Endian = Endian.BIG) -> None:
        self._pack('d', value, endian)

    def write_ascii(self, text: str) -> None:
        self._buffer.write(text.encode('ascii'))

    def write_utf16(self, text: str, endian: Endian = Endian.BIG) -> int:
        """Write UTF-16 units without a terminator. Returns the unit count."""
        raw = text.encode('utf-16-be' if endian is Endian.BIG else 'utf-16-le')
        self._buffer.write(raw)
        return len(raw) // 2

    def write_pascal_utf16(self, text: str, endian: Endian = Endian.BIG) -> None:
        raw = text.encode('utf-16-be' if endian is Endian.BIG else 'utf-16-le')
        self.write_uint16(len(raw) // 2, endian)
        self._buffer.write(raw)

    def write_adobe_pascal_string(self, text: str) -> None:
        raw = text.encode('utf-16-be')
        self.write_uint32(len(raw) // 2 + 1)
        self._buffer.write(raw)
        self._buffer.write(b'\x00\x00')
