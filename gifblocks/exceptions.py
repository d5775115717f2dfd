"""
Errors raised while decoding a GIF stream.

Every decode error is fatal: the decoder never skips or resynchronizes, the first bad byte aborts the load.
I/O failures are not wrapped, they surface as the usual OSError family.
"""

__all__ = (
    "GifStreamException",
    "TruncatedInputError",
    "InvalidSignatureError",
    "InvalidSeparatorError",
    "InvalidExtensionLabelError",
)


class GifStreamException(Exception):
    """
    Raised on errors parsing a GIF file. Base class of all format errors.
    """
    pass


class TruncatedInputError(GifStreamException):
    """
    Fewer bytes remain than a fixed-size field or a declared sub-block length requires.
    """
    def __init__(self, needed: int, position: int, available: int):
        self.needed = needed
        self.position = position
        self.available = available
        msg = "unexpected end of file: needed {} byte(s) at offset {}, {} left"
        super().__init__(msg.format(needed, position, available))


class InvalidSignatureError(GifStreamException):
    """
    The first three bytes are not the literal signature "GIF".
    """
    def __init__(self, signature: bytes):
        self.signature = signature
        super().__init__("Bad signature {!r}".format(signature))


class InvalidSeparatorError(GifStreamException):
    """
    The byte where a block should start is none of image separator, extension introducer or trailer.
    """
    def __init__(self, separator: int, position: int):
        self.separator = separator
        self.position = position
        msg = "fatal: Unknown block with separator {:02X} at offset {}"
        super().__init__(msg.format(separator, position))


class InvalidExtensionLabelError(GifStreamException):
    """
    The byte following an extension introducer is not one of the four known labels.
    """
    def __init__(self, label: int, position: int):
        self.label = label
        self.position = position
        msg = "fatal: Unknown extension label {:02X} at offset {}"
        super().__init__(msg.format(label, position))
