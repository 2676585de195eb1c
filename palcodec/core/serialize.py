"""Canonical dict/JSON interchange for palettes and gradients.

Fields holding their default value are omitted when encoding and treated
as optional-with-default when decoding:

    Palette   name (''), colors ([]), groups ([])
    Group     name ('')
    Color     name (''), colorType ('global'), alpha (1)

Structural problems (wrong types, unknown enum values, bad JSON) raise
FormatError. A component count that does not match the colorspace raises
InvalidComponentCountError from the Color constructor.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from palcodec.core.colors import Color, ColorSpace, ColorType
from palcodec.core.errors import FormatError
from palcodec.core.gradient import Gradient, Gradients, Stop, TransparencyStop
from palcodec.core.palette import Group, Palette

logger = logging.getLogger(__name__)


def _require(obj: dict, key: str, kind: type | tuple[type, ...]):
    if key not in obj:
        logger.error('missing required key %r', key)
        raise FormatError(f'missing required key {key!r}')
    value = obj[key]
    if not isinstance(value, kind):
        raise FormatError(f'key {key!r} has unexpected type {type(value).__name__}')
    return value


def _optional(obj: dict, key: str, kind: type | tuple[type, ...], default):
    value = obj.get(key, default)
    if value is None:
        return default
    if not isinstance(value, kind):
        raise FormatError(f'key {key!r} has unexpected type {type(value).__name__}')
    return value


def _as_dict(obj: Any, what: str) -> dict:
    if not isinstance(obj, dict):
        raise FormatError(f'{what} must be an object')
    return obj


# Color


def color_to_dict(color: Color) -> dict[str, Any]:
    result: dict[str, Any] = {}
    if color.name:
        result['name'] = color.name
    result['colorSpace'] = color.space.value
    result['colorComponents'] = list(color.components)
    if color.color_type is not ColorType.GLOBAL:
        result['colorType'] = color.color_type.value
    if color.alpha != 1.0:
        result['alpha'] = color.alpha
    return result


def color_from_dict(obj: Any) -> Color:
    obj = _as_dict(obj, 'color')
    try:
        space = ColorSpace(_require(obj, 'colorSpace', str))
        color_type = ColorType(_optional(obj, 'colorType', str, ColorType.GLOBAL.value))
    except ValueError as exc:
        raise FormatError(str(exc)) from exc
    components = _require(obj, 'colorComponents', list)
    if not all(isinstance(c, (int, float)) for c in components):
        raise FormatError('colorComponents must be numbers')
    return Color(
        name=_optional(obj, 'name', str, ''),
        space=space,
        components=tuple(components),
        color_type=color_type,
        alpha=_optional(obj, 'alpha', (int, float), 1.0),
    )


# Palette


def palette_to_dict(palette: Palette) -> dict[str, Any]:
    result: dict[str, Any] = {}
    if palette.name:
        result['name'] = palette.name
    if palette.colors:
        result['colors'] = [color_to_dict(c) for c in palette.colors]
    if palette.groups:
        groups = []
        for group in palette.groups:
            entry: dict[str, Any] = {}
            if group.name:
                entry['name'] = group.name
            entry['colors'] = [color_to_dict(c) for c in group.colors]
            groups.append(entry)
        result['groups'] = groups
    return result


def palette_from_dict(obj: Any) -> Palette:
    obj = _as_dict(obj, 'palette')
    groups = []
    for raw in _optional(obj, 'groups', list, []):
        raw = _as_dict(raw, 'group')
        groups.append(
            Group(
                name=_optional(raw, 'name', str, ''),
                colors=[color_from_dict(c) for c in _require(raw, 'colors', list)],
            )
        )
    return Palette(
        name=_optional(obj, 'name', str, ''),
        colors=[color_from_dict(c) for c in _optional(obj, 'colors', list, [])],
        groups=groups,
    )


# Gradients


def gradient_to_dict(gradient: Gradient) -> dict[str, Any]:
    result: dict[str, Any] = {}
    if gradient.name is not None:
        result['name'] = gradient.name
    result['stops'] = [{'position': s.position, 'color': color_to_dict(s.color)} for s in gradient.stops]
    if gradient.transparency_stops is not None:
        result['transparencyStops'] = [
            {'value': t.value, 'position': t.position, 'midpoint': t.midpoint} for t in gradient.transparency_stops
        ]
    return result


def gradient_from_dict(obj: Any) -> Gradient:
    obj = _as_dict(obj, 'gradient')
    stops = []
    for raw in _require(obj, 'stops', list):
        raw = _as_dict(raw, 'stop')
        stops.append(Stop(float(_require(raw, 'position', (int, float))), color_from_dict(_require(raw, 'color', dict))))

    tstops = None
    if obj.get('transparencyStops') is not None:
        tstops = []
        for raw in _require(obj, 'transparencyStops', list):
            raw = _as_dict(raw, 'transparency stop')
            tstops.append(
                TransparencyStop(
                    position=_require(raw, 'position', (int, float)),
                    value=_require(raw, 'value', (int, float)),
                    midpoint=_optional(raw, 'midpoint', (int, float), 0.5),
                )
            )
    return Gradient(name=_optional(obj, 'name', str, None), stops=stops, transparency_stops=tstops)


def gradients_to_dict(gradients: Gradients) -> dict[str, Any]:
    result: dict[str, Any] = {}
    if gradients.name is not None:
        result['name'] = gradients.name
    result['gradients'] = [gradient_to_dict(g) for g in gradients.gradients]
    return result


def gradients_from_dict(obj: Any) -> Gradients:
    obj = _as_dict(obj, 'gradients')
    return Gradients(
        gradients=[gradient_from_dict(g) for g in _optional(obj, 'gradients', list, [])],
        name=_optional(obj, 'name', str, None),
    )


# JSON text


def dumps(obj: dict[str, Any]) -> bytes:
    return json.dumps(obj, indent=2, ensure_ascii=False).encode('utf-8')


def loads(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        logger.error('invalid JSON: %s', exc)
        raise FormatError(f'invalid JSON: {exc}') from exc
