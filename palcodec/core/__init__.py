"""palcodec.core: foundation layer.

Contains the color, palette and gradient models, colorspace conversion,
byte-stream primitives, the Coder contract, errors, settings and the JSON
interchange. This module has NO dependencies on palcodec.coders or
palcodec.registry. Only stdlib and numpy are allowed here.
"""
