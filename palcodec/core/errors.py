"""Exception hierarchy for palcodec.

Four families, all rooted at PaletteCodecError:
  FormatError      the input bytes are not a valid instance of the format.
  ValidationError  a value violates a model invariant.
  ConversionError  a colorspace or gradient transform cannot be performed.
  CapabilityError  the requested operation is not available.
"""


class PaletteCodecError(Exception):
    """Base exception for all palcodec errors."""


# Format


class FormatError(PaletteCodecError):
    """Malformed or unrecognised input data."""


class InvalidHeaderError(FormatError):
    """Magic bytes / BOM did not match."""


class TruncatedDataError(FormatError):
    """The stream ended before a complete field could be read."""


class UnsupportedVersionError(FormatError):
    """A version field holds a value this coder does not understand."""


class UnknownBlockTypeError(FormatError):
    """A block or record tag is not part of the format."""


class UnsupportedColorSpaceError(FormatError):
    """A colorspace tag is valid for the format but not supported."""


class PatternNotFoundError(FormatError):
    """A byte pattern was not found before the end of the stream."""


class GroupAlreadyOpenError(FormatError):
    """A group start block appeared while a group was already open."""

    def __init__(self, message: str = 'group already open'):
        super().__init__(message)


class GroupNotOpenError(FormatError):
    """A group end block appeared with no open group."""

    def __init__(self, message: str = 'group not open'):
        super().__init__(message)


class UnterminatedGroupError(FormatError):
    """The stream ended while a group was still open."""


class UnsupportedFormatError(FormatError):
    """No candidate coder could decode the input."""


# Validation


class ValidationError(PaletteCodecError):
    """A model invariant was violated."""


class InvalidComponentCountError(ValidationError):
    """Component count does not match the colorspace."""


class IndexOutOfRangeError(ValidationError):
    """A referenced index lies outside the decoded table."""


# Conversion


class ConversionError(PaletteCodecError):
    """A colorspace or gradient transform failed."""


class UnsupportedConversionError(ConversionError):
    """No conversion path between the two colorspaces."""


class CannotNormalizeError(ConversionError):
    """Stop positions span a degenerate (zero-width) range."""


class GradientMergeError(ConversionError):
    """A merge position had no bracketing segment (strict boundary policy)."""


# Capability


class CapabilityError(PaletteCodecError):
    """The requested operation is not available."""


class EncodeNotImplementedError(CapabilityError):
    """The coder is decode-only."""


class DecodeNotImplementedError(CapabilityError):
    """The coder is encode-only."""


class NoCoderError(CapabilityError):
    """No coder is registered for the requested extension or name."""
