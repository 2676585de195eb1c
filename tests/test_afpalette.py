"""Tests for the Affinity palette decoder, built from synthetic containers."""

import struct

import pytest
from palcodec.coders import afpalette
from palcodec.core.colors import Color, ColorSpace
from palcodec.core.errors import (
    EncodeNotImplementedError,
    InvalidHeaderError,
    PatternNotFoundError,
    UnsupportedColorSpaceError,
    UnsupportedVersionError,
)
from palcodec.core.palette import Palette


def _record(tag: bytes, marker: bytes, payload: bytes) -> bytes:
    return b'rloC' + b'\x01' * 6 + tag + b'\x00\x07' + marker + payload


def _rgb(r: float, g: float, b: float) -> bytes:
    return _record(b'ABGR', b'Dloc_', struct.pack('<3f', r, g, b))


def _names(*names: str) -> bytes:
    body = b''.join(struct.pack('<I', len(n.encode('utf-8'))) + n.encode('utf-8') for n in names)
    return b'VNaP' + struct.pack('<II', 0, len(names)) + body


def _container(records: list[bytes], names: list[str], count: int | None = None, version: int = 11) -> bytes:
    n = len(records) if count is None else count
    return (
        struct.pack('<II', afpalette.BOM, version)
        + b'\x00' * 8
        + b'NClP'
        + struct.pack('<I', 5)
        + b'Brand'
        + b'\x00' * 4
        + b'VlaP'
        + struct.pack('<I', n)
        + b''.join(records)
        + _names(*names)
    )


class TestDecode:
    def test_rgb_colors_and_names(self):
        data = _container([_rgb(1, 0, 0), _rgb(0, 0.5, 1)], ['Red', 'Sky'])
        palette = afpalette.coder.decode_bytes(data)
        assert palette.name == 'Brand'
        assert palette.format == 'afpalette'
        assert palette.colors == [Color.rgb(1, 0, 0, name='Red'), Color.rgb(0, 0.5, 1, name='Sky')]

    def test_other_color_types(self):
        records = [
            _record(b'KYMC', b'Hloc_', struct.pack('<4f', 0, 0.5, 1, 0)),
            _record(b'YARG', b'<loc_', struct.pack('<f', 0.25)),
            _record(b'ABAL', b'<loc_', struct.pack('<3H', 65535, 0, 65535)),
            _record(b'ALSH', b'Dloc_', struct.pack('<3f', 0, 1, 0.5)),
        ]
        palette = afpalette.coder.decode_bytes(_container(records, []))
        cmyk, gray, lab, hsl = palette.colors
        assert cmyk == Color.cmyk(0, 0.5, 1, 0)
        assert gray == Color.gray(0.25)
        assert lab.space is ColorSpace.LAB
        assert lab.components == pytest.approx((100, -128, 128))
        assert hsl.components == pytest.approx((1, 0, 0))

    def test_fewer_records_than_count(self):
        data = _container([_rgb(1, 1, 1)], ['White', 'Missing'], count=3)
        palette = afpalette.coder.decode_bytes(data)
        assert palette.colors == [Color.rgb(1, 1, 1, name='White')]

    def test_fewer_names_than_colors(self):
        palette = afpalette.coder.decode_bytes(_container([_rgb(0, 0, 0), _rgb(1, 1, 1)], ['Black']))
        assert [c.name for c in palette.colors] == ['Black', '']

    def test_unsupported_color_type(self):
        data = _container([_record(b'XXXX', b'Dloc_', b'')], [])
        with pytest.raises(UnsupportedColorSpaceError):
            afpalette.coder.decode_bytes(data)

    def test_bad_bom(self):
        with pytest.raises(InvalidHeaderError):
            afpalette.coder.decode_bytes(struct.pack('<II', 0, 11))

    def test_bad_version(self):
        with pytest.raises(UnsupportedVersionError):
            afpalette.coder.decode_bytes(_container([], [], version=9))

    def test_missing_names_container(self):
        data = _container([_rgb(1, 0, 0)], []).replace(b'VNaP', b'XXXX')
        with pytest.raises(PatternNotFoundError):
            afpalette.coder.decode_bytes(data)


class TestEncode:
    def test_decode_only(self):
        assert not afpalette.coder.can_encode
        with pytest.raises(EncodeNotImplementedError):
            afpalette.coder.encode(Palette())
