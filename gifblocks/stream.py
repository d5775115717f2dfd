"""
Reading side of the codec. `_GifStream` walks a GIF file forward with an mmap cursor and hands back the block
models; `consume_frame` is the block dispatch loop that gathers extensions until an image block closes a frame.
"""

from enum import Enum
import logging
import mmap
import os
import typing as t

from mmaputils import MmapCursor

from .blocks import *
from .constants import *
from .exceptions import *
from .packed import GraphicControlFields, ImageDescriptorFields, ScreenDescriptorFields

logger = logging.getLogger(__name__)


class _ReadOnlyCursor(MmapCursor):
    """
    MmapCursor over a read-only mapping, so files we may not write to can still be loaded.
    Only the reading side of MmapCursor is used on it.
    """
    def __init__(self, path: str, byteorder: t.Literal["big", "little"] = "big"):
        self.fdesc = os.open(path, os.O_RDONLY)
        try:
            self.m = mmap.mmap(self.fdesc, 0, access=mmap.ACCESS_READ)
        except (OSError, ValueError):
            os.close(self.fdesc)
            raise

        self._position = 0
        self.stack: t.List[int] = []
        self.byteorder = byteorder


class _BlockType(Enum):
    """
    Internal block type enum. Used by _GifStream to signal what type of block is next in the stream.
    """
    IMAGE_DATA = 0
    EXT_GRAPHIC_CONTROL = 1
    EXT_COMMENT = 2
    EXT_PLAINTEXT = 3
    EXT_APPLICATION = 4
    TRAILER = 5


_EXTENSION_LABELS = {
    EXT_GRAPHIC_CONTROL_LABEL: _BlockType.EXT_GRAPHIC_CONTROL,
    EXT_COMMENT_LABEL: _BlockType.EXT_COMMENT,
    EXT_PLAINTEXT_LABEL: _BlockType.EXT_PLAINTEXT,
    EXT_APPLICATION_LABEL: _BlockType.EXT_APPLICATION,
}


class _GifStream:
    """
    Internal utility class that streams along a GIF file and returns the higher level block models.

    Every read checks the remaining length first, so running off the end raises TruncatedInputError.
    """
    def __init__(self, path):
        # an empty file cannot be mapped
        if os.path.getsize(path) == 0:
            raise TruncatedInputError(1, 0, 0)

        # gif is little endian
        self.stream = _ReadOnlyCursor(path, byteorder="little")
        self.size = len(self.stream.m)

    def __enter__(self) -> "_GifStream":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

    def _require(self, size: int) -> None:
        position = self.stream.position
        available = self.size - position
        if size > available:
            raise TruncatedInputError(size, position, available)

    def next(self, size: int) -> bytes:
        self._require(size)
        return self.stream.next(size)

    def next_byte(self) -> int:
        self._require(1)
        return self.stream.next_byte()

    def next_u16(self) -> int:
        self._require(2)
        return self.stream.next_int(2, signed=False)

    def consume_header(self) -> Header:
        """
        Consume the GIF header. Only the signature is validated, the version is kept as found.
        """
        signature = self.next(3)

        if signature != GIF_SIGNATURE:
            raise InvalidSignatureError(signature)

        version = self.next(3)

        if GifVersion.from_bytes(version) is None:
            logger.warning("unrecognized GIF version %r", version)

        return Header(signature, version)

    def consume_screen_descriptor(self) -> LogicalScreenDescriptor:
        """
        Consume and return the required logical screen descriptor block. If desc.colortable_exists is True,
        it's expected the color table will be consumed next, with consume_color_table().
        """
        self._require(7)

        return LogicalScreenDescriptor(
            width=self.next_u16(),
            height=self.next_u16(),
            packed_fields=ScreenDescriptorFields.from_byte(self.next_byte()),
            background_color_index=self.next_byte(),
            pixel_aspect_ratio=self.next_byte())

    def consume_color_table(self, size_field: int) -> Colortable:
        """
        Consume and return a color table of 2^(size_field+1) entries. Works for both global and local tables.
        """
        num_colors = 2 ** (size_field + 1)
        raw = self.next(num_colors * 3)

        return tuple(Color(*raw[i:i + 3]) for i in range(0, len(raw), 3))

    def consume_image_descriptor(self) -> ImageDescriptor:
        """
        Consume and return an image descriptor. The separator byte has already been consumed by
        next_blocktype(). If desc.colortable_exists is True, the local color table follows.
        """
        self._require(9)

        return ImageDescriptor(
            leftpos=self.next_u16(),
            toppos=self.next_u16(),
            width=self.next_u16(),
            height=self.next_u16(),
            packed_fields=ImageDescriptorFields.from_byte(self.next_byte()))

    def consume_data(self) -> t.Tuple[SubBlock, ...]:
        """
        Consume data sub-blocks. Each starts with a size byte and is followed by that many bytes of data.

        A zero-length data block terminates the series, and is consumed. The cursor will be over the start of
        whatever the next block is.

        See 15. Data Sub-blocks. in GIF89a spec.
        """
        sub_blocks = []

        data_size = self.next_byte()
        # end when we get to a block size of 0
        while data_size != 0:
            sub_blocks.append(SubBlock(data_size, self.next(data_size)))
            data_size = self.next_byte()

        return tuple(sub_blocks)

    def consume_image_data(self) -> ImageData:
        """
        Image data is just a byte describing LZW code size, and a series of data blocks. The LZW stream itself is
        kept compressed.
        """
        lzw_minimum_code_size = self.next_byte()
        return ImageData(lzw_minimum_code_size, self.consume_data())

    def next_blocktype(self) -> _BlockType:
        """
        Consume the separator, and for extensions the label, of the next block and say what it is.
        If this returns _BlockType.TRAILER, we're at the end.
        """
        position = self.stream.position
        separator = self.next_byte()

        if separator == TRAILER_LABEL:
            return _BlockType.TRAILER

        if separator == IMAGE_SEPARATOR:
            return _BlockType.IMAGE_DATA

        if separator == EXT_INTRODUCER:
            label = self.next_byte()
            blocktype = _EXTENSION_LABELS.get(label)

            if blocktype is None:
                raise InvalidExtensionLabelError(label, position + 1)

            return blocktype

        raise InvalidSeparatorError(separator, position)

    def consume_graphic_control_extension(self) -> GraphicControlExtension:
        """
        Consume and return the graphic control extension. Introducer and label are already consumed.
        """
        self._require(6)

        return GraphicControlExtension(
            block_size=self.next_byte(),
            packed_fields=GraphicControlFields.from_byte(self.next_byte()),
            delay=self.next_u16(),
            transparent_color=self.next_byte(),
            block_terminator=self.next_byte())

    def consume_comment_extension(self) -> CommentExtension:
        block_size = self.next_byte()
        return CommentExtension(block_size, self.consume_data())

    def consume_plaintext_extension(self) -> PlainTextExtension:
        self._require(13)

        return PlainTextExtension(
            block_size=self.next_byte(),
            grid_leftpos=self.next_u16(),
            grid_toppos=self.next_u16(),
            grid_width=self.next_u16(),
            grid_height=self.next_u16(),
            cell_width=self.next_byte(),
            cell_height=self.next_byte(),
            foreground_color_index=self.next_byte(),
            background_color_index=self.next_byte(),
            text_data=self.consume_data())

    def consume_application_extension(self) -> ApplicationExtension:
        self._require(12)

        return ApplicationExtension(
            block_size=self.next_byte(),
            identifier=self.next(8),
            auth_code=self.next(3),
            application_data=self.consume_data())

    def close(self):
        """Close the GIF stream and its associated resources."""
        self.stream.close()


# extension block type -> (GifImage slot, consumer)
_EXTENSION_SLOTS = {
    _BlockType.EXT_GRAPHIC_CONTROL: ("graphic_control", _GifStream.consume_graphic_control_extension),
    _BlockType.EXT_COMMENT: ("comment", _GifStream.consume_comment_extension),
    _BlockType.EXT_PLAINTEXT: ("plain_text", _GifStream.consume_plaintext_extension),
    _BlockType.EXT_APPLICATION: ("application", _GifStream.consume_application_extension),
}


def consume_frame(gifstream: _GifStream) -> t.Optional[GifImage]:
    """
    Consume blocks up to and including the next image, and return them as one frame. Extensions "apply to" the
    image that follows them, so they are collected until an image block closes the frame.

    Returns None when the trailer is reached. Extensions seen right before the trailer belong to no image and
    are dropped.
    """
    extensions: t.Dict[str, t.Any] = {}

    while True:
        position = gifstream.stream.position
        blocktype = gifstream.next_blocktype()

        if blocktype == _BlockType.TRAILER:
            if extensions:
                logger.warning("dropping %d extension(s) with no image before the trailer", len(extensions))
            return None

        if blocktype == _BlockType.IMAGE_DATA:
            break

        slot, consume = _EXTENSION_SLOTS[blocktype]
        if slot in extensions:
            logger.warning("two %s extensions for one image, keeping the last", slot)

        extensions[slot] = consume(gifstream)
        logger.debug("extension %s at offset %d", slot, position)

    descriptor = gifstream.consume_image_descriptor()

    colortable = None
    if descriptor.colortable_exists:
        colortable = gifstream.consume_color_table(descriptor.colortable_size)

    image_data = gifstream.consume_image_data()
    logger.debug("image %dx%d@(%d, %d), %d sub-blocks", descriptor.width, descriptor.height,
                 descriptor.leftpos, descriptor.toppos, len(image_data.sub_blocks))

    return GifImage(
        image_descriptor=descriptor,
        image_data=image_data,
        colortable=colortable,
        **extensions)
