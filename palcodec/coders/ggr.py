"""GIMP gradient (.ggr).

    GIMP Gradient
    Name: Fire
    2
    0.000000 0.250000 0.500000 r0 g0 b0 a0 r1 g1 b1 a1 0 0
    0.500000 0.750000 1.000000 ...

Each line is a segment: left/middle/right positions, left and right RGBA,
the blend function and the color function. Only RGB segments (color
function 0) are supported. A segment that starts exactly where the
previous one ended, with the same color, adds no new stop.
"""

import logging

from palcodec.core.bytestream import BytesReader
from palcodec.core.colors import Color, ColorSpace
from palcodec.core.env import settings_from_environ
from palcodec.core.errors import FormatError, InvalidHeaderError, UnsupportedColorSpaceError, ValidationError
from palcodec.core.gradient import Gradient, Gradients, Stop
from palcodec.core.types import Coder, ModelKind

logger = logging.getLogger(__name__)

coder = Coder(
    name='ggr',
    title='GIMP Gradient',
    extensions=('ggr',),
    type_identifier='org.gimp.ggr',
    kind=ModelKind.GRADIENTS,
)

HEADER = 'GIMP Gradient'
SEGMENT_FIELDS = 13


def _parse_segment(line: str, number: int) -> tuple[Stop, Stop]:
    fields = line.split()
    if len(fields) != SEGMENT_FIELDS:
        logger.error('ggr: segment line %d has %d fields', number, len(fields))
        raise FormatError(f'segment line {number}: expected {SEGMENT_FIELDS} fields, got {len(fields)}')
    try:
        left, _middle, right = (float(v) for v in fields[0:3])
        r0, g0, b0, a0, r1, g1, b1, a1 = (float(v) for v in fields[3:11])
        _blend, color_fn = int(fields[11]), int(fields[12])
    except ValueError as exc:
        raise FormatError(f'segment line {number}: {exc}') from exc
    if color_fn != 0:
        logger.error('ggr: unsupported segment color function %d', color_fn)
        raise UnsupportedColorSpaceError(f'unsupported segment color function {color_fn}')
    return Stop(left, Color.rgb(r0, g0, b0, alpha=a0)), Stop(right, Color.rgb(r1, g1, b1, alpha=a1))


@coder.decoder
def decode(reader: BytesReader) -> Gradients:
    lines = [line for line in reader.read_text().splitlines() if line.strip()]
    if len(lines) < 3 or lines[0].strip() != HEADER:
        logger.error('ggr: missing %r header', HEADER)
        raise InvalidHeaderError(f'missing {HEADER!r} header')
    if not lines[1].startswith('Name:'):
        logger.error('ggr: missing name line')
        raise FormatError('missing Name: line')
    name = lines[1][len('Name:') :].strip()
    try:
        count = int(lines[2])
    except ValueError as exc:
        raise FormatError(f'invalid segment count {lines[2]!r}') from exc
    if len(lines) != count + 3:
        logger.error('ggr: header says %d segments, found %d', count, len(lines) - 3)
        raise FormatError(f'expected {count} segments, found {len(lines) - 3}')

    stops: list[Stop] = []
    for number, line in enumerate(lines[3:], start=1):
        start, end = _parse_segment(line, number)
        if not stops or stops[-1] != start:
            stops.append(start)
        stops.append(end)

    return Gradients([Gradient(name=name, stops=stops)])


def _fmt(value: float) -> str:
    return f'{value:0.5f}'


@coder.encoder
def encode(gradients: Gradients) -> bytes:
    if not gradients.gradients:
        raise ValidationError('no gradient to encode')
    if len(gradients.gradients) > 1:
        logger.warning('ggr holds one gradient, writing the first of %d', len(gradients.gradients))
    gradient = gradients.gradients[0]
    boundary = settings_from_environ().merge_boundary
    export = gradient.merge_transparency_stops(boundary).normalized()

    lines = [HEADER, f'Name: {gradient.name or ""}', str(len(export.stops) - 1)]
    for left, right in zip(export.stops, export.stops[1:]):
        middle = left.position + (right.position - left.position) / 2.0
        lc = left.color.converted(ColorSpace.RGB)
        rc = right.color.converted(ColorSpace.RGB)
        values = [left.position, middle, right.position, *lc.components, lc.alpha, *rc.components, rc.alpha]
        lines.append(' '.join(_fmt(v) for v in values) + ' 0 0')
    return ('\n'.join(lines) + '\n').encode('utf-8')
