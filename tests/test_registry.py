"""Tests for palcodec.registry: discovery, extension lookup and first-success dispatch."""

import pytest
from palcodec import registry
from palcodec.core.colors import Color
from palcodec.core.errors import (
    CapabilityError,
    DecodeNotImplementedError,
    EncodeNotImplementedError,
    FormatError,
    NoCoderError,
    UnsupportedFormatError,
)
from palcodec.core.gradient import Gradients
from palcodec.core.palette import Palette
from palcodec.core.types import Coder, ModelKind
from palcodec.registry import CoderRegistry, first_success, normalize_extension


def _xml_coder(name: str, fail: bool) -> Coder:
    coder = Coder(name=name, extensions=('xml',))

    @coder.decoder
    def decode(reader):
        reader.read_to_end()
        if fail:
            raise FormatError(f'{name} cannot parse this')
        return Palette(name=name, colors=[Color.rgb(1, 1, 1)])

    return coder


class TestFirstSuccess:
    def test_returns_first_non_failing(self):
        calls = []

        def attempt(n):
            calls.append(n)
            if n < 2:
                raise FormatError('no')
            return n * 10

        assert first_success([0, 1, 2, 3], attempt) == 20
        assert calls == [0, 1, 2]

    def test_exhaustion_raises_single_error(self):
        def attempt(n):
            raise FormatError(f'specific failure {n}')

        with pytest.raises(UnsupportedFormatError):
            first_success([1, 2], attempt)

    def test_no_candidates(self):
        with pytest.raises(UnsupportedFormatError):
            first_success([], lambda c: c)

    def test_other_exceptions_propagate(self):
        def attempt(n):
            raise KeyError(n)

        with pytest.raises(KeyError):
            first_success([1], attempt)


class TestDispatchFallback:
    def test_second_candidate_wins(self):
        reg = CoderRegistry([_xml_coder('first', fail=True), _xml_coder('second', fail=False)])
        palette = reg.decode_bytes(b'<palette/>', extension='xml')
        assert palette.name == 'second'
        assert palette.format == 'second'

    def test_registration_order(self):
        reg = CoderRegistry([_xml_coder('a', fail=False), _xml_coder('b', fail=False)])
        assert [c.name for c in reg.coders_for('.XML')] == ['a', 'b']
        assert reg.decode_bytes(b'', extension='xml').name == 'a'

    def test_all_fail(self):
        reg = CoderRegistry([_xml_coder('a', fail=True), _xml_coder('b', fail=True)])
        with pytest.raises(UnsupportedFormatError):
            reg.decode_bytes(b'', extension='xml')

    def test_unknown_extension(self):
        reg = CoderRegistry([_xml_coder('a', fail=False)])
        with pytest.raises(NoCoderError):
            reg.decode_bytes(b'', extension='json')

    def test_explicit_coder_skips_fallback(self):
        failing = _xml_coder('a', fail=True)
        reg = CoderRegistry([failing, _xml_coder('b', fail=False)])
        with pytest.raises(FormatError) as exc_info:
            reg.decode_bytes(b'', coder='a')
        assert not isinstance(exc_info.value, UnsupportedFormatError)

    def test_decode_path_uses_suffix(self, tmp_path):
        path = tmp_path / 'colors.XML'
        path.write_bytes(b'<x/>')
        reg = CoderRegistry([_xml_coder('a', fail=True), _xml_coder('b', fail=False)])
        assert reg.decode_path(path).name == 'b'


class TestLookup:
    def test_normalize_extension(self):
        assert normalize_extension('ASE') == 'ase'
        assert normalize_extension('.ase') == 'ase'
        assert normalize_extension('some/dir/file.Ase') == 'ase'

    def test_coder_named(self):
        coder = _xml_coder('a', fail=False)
        assert CoderRegistry([coder]).coder_named('a') is coder

    def test_coder_named_missing(self):
        with pytest.raises(NoCoderError):
            CoderRegistry([]).coder_named('nope')

    def test_no_coder_is_a_capability_error(self):
        with pytest.raises(CapabilityError):
            CoderRegistry([]).coder_for_type('public.nothing')

    def test_registry_is_read_only(self):
        reg = CoderRegistry([_xml_coder('a', fail=False)])
        with pytest.raises(TypeError):
            reg._by_extension['xml'] = ()

    def test_kind_filter(self):
        gradient_coder = Coder(name='g', extensions=('xml',), kind=ModelKind.GRADIENTS)
        reg = CoderRegistry([_xml_coder('a', fail=False), gradient_coder])
        assert reg.coders_for('xml', ModelKind.GRADIENTS) == (gradient_coder,)
        assert reg.gradient_coders() == (gradient_coder,)
        assert [c.name for c in reg.palette_coders()] == ['a']


class TestCapabilities:
    def test_encode_not_implemented(self):
        coder = _xml_coder('a', fail=False)
        assert not coder.can_encode
        with pytest.raises(EncodeNotImplementedError):
            CoderRegistry([coder]).encode(Palette(), 'a')

    def test_decode_not_implemented(self):
        coder = Coder(name='writer', extensions=('w',))
        coder.encoder(lambda palette: b'')
        with pytest.raises(DecodeNotImplementedError):
            coder.decode_bytes(b'')

    def test_encode_kind_mismatch(self):
        coder = Coder(name='writer', extensions=('w',))
        coder.encoder(lambda palette: b'')
        with pytest.raises(CapabilityError):
            CoderRegistry([coder]).encode(Gradients(), coder)

    def test_type_identifier_default(self):
        assert Coder(name='x').type_identifier == 'public.palcodec.palette.x'


class TestDefaultRegistry:
    def test_discovers_all_coders(self):
        names = {c.name for c in registry.default_registry()}
        assert {'ase', 'aco', 'act', 'riff', 'afpalette', 'png', 'gimp', 'jasc', 'paintnet', 'hex'} <= names
        assert {'json', 'ggr', 'jsongradient'} <= names

    def test_built_once(self):
        assert registry.discover() is registry.discover()

    def test_shared_extensions_ordered(self):
        assert [c.name for c in registry.coders_for('txt')] == ['paintnet']
        assert [c.name for c in registry.coders_for('pal')] == ['riff', 'jasc']

    def test_get(self):
        assert registry.get('ase').extensions == ('ase',)

    def test_get_unknown(self):
        with pytest.raises(NoCoderError):
            registry.get('nope')
