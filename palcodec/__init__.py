"""palcodec: read and write color palettes and gradients in design-tool file formats.

Typical use goes through the registry:

    from palcodec import registry

    palette = registry.decode_path('swatches.ase')
    data = registry.encode(palette, registry.default_registry().coder_named('gimp'))
"""
