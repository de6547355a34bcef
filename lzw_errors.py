"""Exceptions raised by the .Z codec."""


class LZWError(ValueError):
    """Base class for every error raised while compressing or decompressing."""


class ConfigurationError(LZWError):
    """Invalid codec parameters (e.g. a max code length outside 9-16)."""


class NotCompressedError(LZWError):
    """Input does not start with the compress magic header."""


class CorruptStreamError(LZWError):
    """
    The code stream cannot be decoded.

    position is the byte offset (from the start of the stream, header
    included) where the offending code starts, index its ordinal among
    the codes read so far.
    """

    def __init__(self, message, code=None, position=None, index=None):
        super().__init__(message)
        self.code = code
        self.position = position
        self.index = index
