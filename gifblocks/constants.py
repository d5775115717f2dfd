"""
Constants and enums relating to GIF files. These are part of the public API.

Block introducers and labels are plain integers because they are compared against raw bytes. The enums interpret
stored fields for display; the decoded blocks always keep the raw values.
"""

__all__ = (
    "GifVersion",
    "DisposalMethod",
    "GIF_SIGNATURE",
    "GIF_87a",
    "GIF_89a",
    "EXT_INTRODUCER",
    "EXT_GRAPHIC_CONTROL_LABEL",
    "EXT_COMMENT_LABEL",
    "EXT_PLAINTEXT_LABEL",
    "EXT_APPLICATION_LABEL",
    "IMAGE_SEPARATOR",
    "TRAILER_LABEL",
    "BLOCK_TERMINATOR",
)


from enum import Enum
import typing as t


GIF_SIGNATURE = b"GIF"
GIF_87a = b"87a"
GIF_89a = b"89a"

# Introduces an extension block. The byte after this is the extension label.
EXT_INTRODUCER = 0x21

# Extension labels.
EXT_GRAPHIC_CONTROL_LABEL = 0xF9
EXT_COMMENT_LABEL = 0xFE
EXT_PLAINTEXT_LABEL = 0x01
EXT_APPLICATION_LABEL = 0xFF

# Introduces a new image.
IMAGE_SEPARATOR = 0x2C

# Terminates a GIF file.
TRAILER_LABEL = 0x3B

# Zero-length sub-block, ends every sub-block chain.
BLOCK_TERMINATOR = 0x00


class GifVersion(Enum):
    """
    Gif version. In the file this is three ascii characters, which are kept verbatim by the decoder.
    Since there are only two valid GIF versions, the enum is just for presentation.
    """
    GIF87a = 0
    GIF89a = 1

    def __str__(self) -> str:
        return self.name

    @classmethod
    def from_bytes(cls, version: bytes) -> t.Optional["GifVersion"]:
        """
        Look up the enum for raw version bytes. Returns None for anything but 87a and 89a.
        """
        return {
            GIF_87a: cls.GIF87a,
            GIF_89a: cls.GIF89a
        }.get(bytes(version))


class DisposalMethod(Enum):
    """
    Disposal method for animation frames. Tells how to treat the previous frame after it's been displayed.

    See section 23.c.iv, under Graphic Control Extension. Values 4-7 are reserved by the format.
    """
    NONE = 0
    NO_DISPOSE = 1
    RESTORE_BACKGROUND = 2
    RESTORE_PREVIOUS = 3
