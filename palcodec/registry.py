"""Coder registry and dispatch.

A CoderRegistry is an immutable, ordered collection of coders with an
extension index. Formats can share an extension ('.pal' is RIFF or JASC), so an
extension maps to an ordered tuple of candidates; decoding tries them in
registration order and returns the first success.

discover() scans palcodec/coders/ for modules that define a `coder` object
of type Coder and builds the default registry once. It handles both normal
Python (pkgutil.iter_modules) and frozen binaries (where iter_modules
returns nothing, so it falls back to the explicit module list below).

Tests and embedders build their own registries:

    reg = CoderRegistry([ase.coder, gimp.coder])
    palette = reg.decode_path('colors.gpl')
"""

from __future__ import annotations

import importlib
import logging
import pkgutil
from collections.abc import Callable, Iterable
from os import PathLike
from pathlib import Path
from types import MappingProxyType
from typing import TypeVar

from palcodec.core.errors import CapabilityError, NoCoderError, PaletteCodecError, UnsupportedFormatError
from palcodec.core.gradient import Gradients
from palcodec.core.types import Coder, Model, ModelKind

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Registration order. Where coders share an extension the stricter format
# comes first: riff before jasc for .pal.
_CODER_MODULES = [
    'ase',
    'aco',
    'act',
    'riff',
    'afpalette',
    'png',
    'gimp',
    'jasc',
    'paintnet',
    'hex',
    'json_palette',
    'ggr',
    'json_gradient',
]

_default: CoderRegistry | None = None


def normalize_extension(extension: str | PathLike) -> str:
    """'ASE', '.ase' and 'dir/file.ase' all become 'ase'."""
    text = str(extension)
    suffix = Path(text).suffix
    return (suffix or text).lower().lstrip('.')


def first_success(candidates: Iterable[T], attempt: Callable[[T], object]):
    """Return attempt(candidate) for the first candidate that does not fail.

    Failing candidates' PaletteCodecErrors are logged and dropped. When every
    candidate fails (or there are none) a single UnsupportedFormatError is
    raised instead of the last candidate's error.
    """
    tried = []
    for candidate in candidates:
        try:
            return attempt(candidate)
        except PaletteCodecError as exc:
            logger.debug('candidate %r failed: %s', candidate, exc)
            tried.append(getattr(candidate, 'name', repr(candidate)))
    if tried:
        raise UnsupportedFormatError(f'no coder could decode the data (tried {", ".join(tried)})')
    raise UnsupportedFormatError('no candidate coders')


class CoderRegistry:
    """Read-only set of coders indexed by extension, name and type identifier."""

    def __init__(self, coders: Iterable[Coder]):
        self._coders = tuple(coders)
        by_extension: dict[str, list[Coder]] = {}
        for coder in self._coders:
            for ext in coder.extensions:
                by_extension.setdefault(ext, []).append(coder)
        self._by_extension = MappingProxyType({ext: tuple(cs) for ext, cs in by_extension.items()})
        self._by_name = MappingProxyType({c.name: c for c in self._coders})
        self._by_type = MappingProxyType({c.type_identifier: c for c in self._coders})

    def __repr__(self) -> str:
        return f'CoderRegistry({[c.name for c in self._coders]!r})'

    def __len__(self) -> int:
        return len(self._coders)

    def __iter__(self):
        return iter(self._coders)

    # Lookup

    @property
    def coders(self) -> tuple[Coder, ...]:
        return self._coders

    @property
    def extensions(self) -> tuple[str, ...]:
        return tuple(sorted(self._by_extension))

    def coders_for(self, extension: str | PathLike, kind: ModelKind | None = None) -> tuple[Coder, ...]:
        """Candidate coders for an extension (or a path), in registration order."""
        candidates = self._by_extension.get(normalize_extension(extension), ())
        if kind is not None:
            candidates = tuple(c for c in candidates if c.kind is kind)
        return candidates

    def coder_named(self, name: str) -> Coder:
        coder = self._by_name.get(name)
        if coder is None:
            raise NoCoderError(f'Unknown coder: {name}. Available: {", ".join(sorted(self._by_name))}')
        return coder

    def coder_for_type(self, type_identifier: str) -> Coder:
        coder = self._by_type.get(type_identifier)
        if coder is None:
            raise NoCoderError(f'no coder for type identifier {type_identifier!r}')
        return coder

    def palette_coders(self) -> tuple[Coder, ...]:
        return tuple(c for c in self._coders if c.kind is ModelKind.PALETTE)

    def gradient_coders(self) -> tuple[Coder, ...]:
        return tuple(c for c in self._coders if c.kind is ModelKind.GRADIENTS)

    def _resolve(self, coder: Coder | str) -> Coder:
        return self.coder_named(coder) if isinstance(coder, str) else coder

    # Decode / encode

    def decode_bytes(
        self,
        data: bytes,
        extension: str | PathLike | None = None,
        coder: Coder | str | None = None,
        kind: ModelKind | None = None,
    ) -> Model:
        """Decode with an explicit coder, or try every candidate for `extension`.

        With neither a coder nor an extension, every decoding coder (of `kind`,
        if given) is tried.
        """
        if coder is not None:
            return self._resolve(coder).decode_bytes(data)

        if extension is not None:
            candidates = self.coders_for(extension, kind)
            if not candidates:
                raise NoCoderError(f'no coder registered for extension {normalize_extension(extension)!r}')
        else:
            candidates = tuple(c for c in self._coders if kind is None or c.kind is kind)
        candidates = tuple(c for c in candidates if c.can_decode)
        return first_success(candidates, lambda c: c.decode_bytes(data))

    def decode_path(
        self,
        path: str | PathLike,
        coder: Coder | str | None = None,
        kind: ModelKind | None = None,
    ) -> Model:
        with open(path, 'rb') as f:
            data = f.read()
        if coder is not None:
            return self._resolve(coder).decode_bytes(data)
        return self.decode_bytes(data, extension=path, kind=kind)

    def encode(self, model: Model, coder: Coder | str) -> bytes:
        coder = self._resolve(coder)
        kind = ModelKind.GRADIENTS if isinstance(model, Gradients) else ModelKind.PALETTE
        if coder.kind is not kind:
            raise CapabilityError(f'{coder.title} coder encodes {coder.kind.value}, not {kind.value}')
        return coder.encode(model)


def discover() -> CoderRegistry:
    """Import all coder modules and return the default registry (built once)."""
    global _default
    if _default is not None:
        return _default

    import palcodec.coders as pkg

    # Try pkgutil first (works in normal Python)
    found_modules = [
        modname for _importer, modname, _ispkg in pkgutil.iter_modules(pkg.__path__) if not modname.startswith('_')
    ]

    # Frozen binary fallback: pkgutil finds nothing, use known list
    if not found_modules:
        found_modules = _CODER_MODULES

    known = [m for m in _CODER_MODULES if m in found_modules]
    ordered = known + sorted(m for m in found_modules if m not in _CODER_MODULES)

    coders = []
    for modname in ordered:
        module = importlib.import_module(f'palcodec.coders.{modname}')
        coder = getattr(module, 'coder', None)
        if isinstance(coder, Coder):
            coders.append(coder)

    _default = CoderRegistry(coders)
    logger.debug('registered %d coders', len(_default))
    return _default


def default_registry() -> CoderRegistry:
    """Return the process-wide default registry."""
    return discover()


def coders_for(extension: str | PathLike, kind: ModelKind | None = None) -> tuple[Coder, ...]:
    return default_registry().coders_for(extension, kind)


def get(name: str) -> Coder:
    """Get a coder by name."""
    return default_registry().coder_named(name)


def decode_bytes(
    data: bytes,
    extension: str | PathLike | None = None,
    coder: Coder | str | None = None,
    kind: ModelKind | None = None,
) -> Model:
    return default_registry().decode_bytes(data, extension=extension, coder=coder, kind=kind)


def decode_path(path: str | PathLike, coder: Coder | str | None = None, kind: ModelKind | None = None) -> Model:
    return default_registry().decode_path(path, coder=coder, kind=kind)


def encode(model: Model, coder: Coder | str) -> bytes:
    return default_registry().encode(model, coder)
