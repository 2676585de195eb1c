"""Format coders, one module per file format.

Every module in this package that defines a module-level `coder` object is
picked up by palcodec.registry.discover().

The explicit imports below keep the coder modules visible to freezers
(PyInstaller and friends), where pkgutil.iter_modules finds nothing.
"""

# Frozen-binary hidden imports. Keep this list in sync with coder modules
import palcodec.coders.aco as _aco  # noqa: F401
import palcodec.coders.act as _act  # noqa: F401
import palcodec.coders.afpalette as _afpalette  # noqa: F401
import palcodec.coders.ase as _ase  # noqa: F401
import palcodec.coders.ggr as _ggr  # noqa: F401
import palcodec.coders.gimp as _gimp  # noqa: F401
import palcodec.coders.hex as _hex  # noqa: F401
import palcodec.coders.jasc as _jasc  # noqa: F401
import palcodec.coders.json_gradient as _json_gradient  # noqa: F401
import palcodec.coders.json_palette as _json_palette  # noqa: F401
import palcodec.coders.paintnet as _paintnet  # noqa: F401
import palcodec.coders.png as _png  # noqa: F401
import palcodec.coders.riff as _riff  # noqa: F401
