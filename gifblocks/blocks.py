"""
Models of the individual GIF blocks.

Each block is an immutable record holding exactly what was found in the file, including the bytes the format
defines as fixed (block sizes, terminators, reserved bits). `to_bytes()` writes the fields back in file order
without recomputing anything, so a block that was edited by hand is written as-is.
"""

__all__ = (
    "Color",
    "Colortable",
    "SubBlock",
    "Header",
    "LogicalScreenDescriptor",
    "ImageDescriptor",
    "ImageData",
    "GraphicControlExtension",
    "CommentExtension",
    "PlainTextExtension",
    "ApplicationExtension",
    "GifImage",
    "colortable_to_bytes",
    "sub_blocks_to_bytes",
    "chunk_sub_blocks",
)


import struct
import typing as t

from .constants import *
from .packed import GraphicControlFields, ImageDescriptorFields, ScreenDescriptorFields


class Color(t.NamedTuple):
    red: int
    green: int
    blue: int


# A type alias for color tables.
Colortable = t.Tuple[Color, ...]


class SubBlock(t.NamedTuple):
    """
    One data sub-block: a size byte followed by up to 255 bytes of data. The size is stored as read, it is not
    derived from len(data) when written.
    """
    size: int
    data: bytes

    @classmethod
    def of(cls, data: bytes) -> "SubBlock":
        return cls(len(data), bytes(data))

    def to_bytes(self) -> bytes:
        return bytes([self.size]) + self.data


def colortable_to_bytes(table: Colortable) -> bytes:
    return b"".join(bytes(color) for color in table)


def sub_blocks_to_bytes(sub_blocks: t.Sequence[SubBlock]) -> bytes:
    """
    Write a sub-block chain: every stored block, then the zero-length terminator.
    """
    return b"".join(block.to_bytes() for block in sub_blocks) + bytes([BLOCK_TERMINATOR])


def chunk_sub_blocks(data: bytes, chunk_size: int = 255) -> t.Tuple[SubBlock, ...]:
    """
    Split a payload into sub-blocks of at most chunk_size bytes. Used when building blocks from scratch.
    """
    if not 0 < chunk_size <= 255:
        raise ValueError("Sub-block size must be between 1 and 255.")

    return tuple(SubBlock.of(data[i:i + chunk_size]) for i in range(0, len(data), chunk_size))


# Formatting helpers
def _yesno(pred: bool) -> str:
    return "yes" if pred else "no"


def _sortyesno(is_sorted: bool) -> str:
    return "sorted" if is_sorted else "unsorted"


def _print_colortable(
    table: Colortable,
    title: str = "Local Color Table",
    verbose: bool = False
) -> None:
    """
    Prints a color table.
    """
    print("-- {}".format(title))

    if verbose:
        for (r, g, b) in table:
            print("    ({}, {}, {})".format(r, g, b))
    else:
        print("    (omitting {} entries because no --verbose)".format(len(table)))


def _print_sub_blocks(sub_blocks: t.Sequence[SubBlock], verbose: bool = False) -> None:
    if verbose:
        for block in sub_blocks:
            print("    [{:3}] {}".format(block.size, block.data.hex()))
    else:
        total = sum(len(block.data) for block in sub_blocks)
        print("    ({} sub-blocks, {} data bytes)".format(len(sub_blocks), total))


# Built-in formats for pretty_print implementations of the blocks
GLOBAL_COLORTABLE_TEMPLATE = """present, {colortable_size} colors, {sort}
    background index: {bg}"""

LOCAL_COLORTABLE_TEMPLATE = """present, {colortable_size} colors, {sort}"""

SCREEN_DESCRIPTOR_TEMPLATE = """
-- Logical Screen Descriptor
screen size:        {d.width}x{d.height}
pixel aspect ratio: {d.pixel_aspect_ratio}
color resolution:   {d.color_resolution}
global colortable:  {colortable_string}"""

IMAGE_DESCRIPTOR_TEMPLATE = """
-- Image Descriptor
image coords:     {d.width}x{d.height}@({d.leftpos}, {d.toppos})
interlaced:       {yesno_interlaced}
local colortable: {colortable_string}"""

GRAPHIC_CONTROL_EXTENSION_TEMPLATE = """
-- Graphic Control Extension Block
disposal method: {disposal_method}
delay time:      {delay_ms}
transparency:    {transparency_string}
user input flag: {yesno_userinput}"""

COMMENT_EXTENSION_TEMPLATE = """
-- Comment Extension Block
comment: {comment!r}"""

PLAINTEXT_EXTENSION_TEMPLATE = """
-- Plain Text Extension Block
text grid:   {e.grid_width}x{e.grid_height}@({e.grid_leftpos}, {e.grid_toppos})
cell size:   {e.cell_width}x{e.cell_height}
colors:      fg {e.foreground_color_index}, bg {e.background_color_index}"""

APPLICATION_EXTENSION_TEMPLATE = """
-- Application Extension Block
identifier:     {identifier}
authentication: {auth_code}"""


class Header(t.NamedTuple):
    signature: bytes = GIF_SIGNATURE
    version: bytes = GIF_89a

    @property
    def gif_version(self) -> t.Optional[GifVersion]:
        return GifVersion.from_bytes(self.version)

    def to_bytes(self) -> bytes:
        return self.signature + self.version

    def __str__(self) -> str:
        return (self.signature + self.version).decode("ascii", errors="replace")


class LogicalScreenDescriptor(t.NamedTuple):
    """
    Model of the logical screen descriptor. Controls the size of
    the image, BG color, and global color table properties.

    This block is required, and will be available in all GIF versions.
    """
    width: int = 0
    height: int = 0
    packed_fields: ScreenDescriptorFields = ScreenDescriptorFields()
    background_color_index: int = 0
    pixel_aspect_ratio: int = 0

    @property
    def colortable_exists(self) -> bool:
        return self.packed_fields.global_color_table_flag

    @property
    def colortable_size(self) -> int:
        return self.packed_fields.size_of_global_color_table

    @property
    def colortable_is_sorted(self) -> bool:
        return self.packed_fields.sort_flag

    @property
    def color_resolution(self) -> int:
        return self.packed_fields.color_resolution

    def num_colors(self) -> int:
        return 2 ** (self.colortable_size + 1)

    def to_bytes(self) -> bytes:
        return struct.pack("<HHBBB", self.width, self.height, self.packed_fields.to_byte(),
                           self.background_color_index, self.pixel_aspect_ratio)

    def pretty_print(self) -> None:
        if self.colortable_exists:
            colortable_string = GLOBAL_COLORTABLE_TEMPLATE.format(
                colortable_size=self.num_colors(),
                sort=_sortyesno(self.colortable_is_sorted),
                bg=self.background_color_index)
        else:
            colortable_string = "absent"

        print(SCREEN_DESCRIPTOR_TEMPLATE.format(
            d=self,
            colortable_string=colortable_string))


class ImageDescriptor(t.NamedTuple):
    """
    Model of an image descriptor. Controls position and size of the image, and local color table properties.

    There is exactly one image descriptor per image in a GIF. Available in all GIF versions.
    """
    leftpos: int = 0
    toppos: int = 0
    width: int = 0
    height: int = 0
    packed_fields: ImageDescriptorFields = ImageDescriptorFields()

    @property
    def interlaced(self) -> bool:
        return self.packed_fields.interlace_flag

    @property
    def colortable_exists(self) -> bool:
        return self.packed_fields.local_color_table_flag

    @property
    def colortable_size(self) -> int:
        return self.packed_fields.size_of_local_color_table

    @property
    def colortable_is_sorted(self) -> bool:
        return self.packed_fields.sort_flag

    def num_colors(self) -> int:
        return 2 ** (self.colortable_size + 1)

    def to_bytes(self) -> bytes:
        return struct.pack("<B4HB", IMAGE_SEPARATOR, self.leftpos, self.toppos, self.width, self.height,
                           self.packed_fields.to_byte())

    def pretty_print(self) -> None:
        if self.colortable_exists:
            colortable_string = LOCAL_COLORTABLE_TEMPLATE.format(
                colortable_size=self.num_colors(),
                sort=_sortyesno(self.colortable_is_sorted))
        else:
            colortable_string = "absent"

        print(IMAGE_DESCRIPTOR_TEMPLATE.format(
            d=self,
            yesno_interlaced=_yesno(self.interlaced),
            colortable_string=colortable_string))


class ImageData(t.NamedTuple):
    """
    Table based image data. The LZW stream is never decompressed, the sub-blocks are carried verbatim.
    """
    lzw_minimum_code_size: int = 0
    sub_blocks: t.Tuple[SubBlock, ...] = ()

    def payload(self) -> bytes:
        """
        The compressed stream with the sub-block framing removed.
        """
        return b"".join(block.data for block in self.sub_blocks)

    def to_bytes(self) -> bytes:
        return bytes([self.lzw_minimum_code_size]) + sub_blocks_to_bytes(self.sub_blocks)

    def pretty_print(self, verbose: bool = False) -> None:
        print("-- Table Based Image Data")
        print("    LZW minimum code size: {}".format(self.lzw_minimum_code_size))
        _print_sub_blocks(self.sub_blocks, verbose)


class GraphicControlExtension(t.NamedTuple):
    """
    Model of a graphic control extension block. This contains control parameters for animation. There is one
    graphic control block per image. GIF89a only. May not be present even in GIF89a.

    Note that this means each frame gets its own transparency, delay, and disposal method, which can greatly
    complicate processing depending on what you want to do.
    """
    block_size: int = 4
    packed_fields: GraphicControlFields = GraphicControlFields()
    delay: int = 0  # specified in 1/100ths of a second
    transparent_color: int = 0
    block_terminator: int = BLOCK_TERMINATOR

    @property
    def disposal_method(self) -> t.Optional[DisposalMethod]:
        """
        The disposal method, or None if the field holds one of the reserved values 4-7.
        """
        try:
            return DisposalMethod(self.packed_fields.disposal_method)
        except ValueError:
            return None

    @property
    def user_input_flag(self) -> bool:
        return self.packed_fields.user_input_flag

    @property
    def transparent_flag(self) -> bool:
        return self.packed_fields.transparent_color_flag

    def delay_ms(self) -> int:
        return self.delay * 10

    def to_bytes(self) -> bytes:
        return struct.pack("<BBBBHBB", EXT_INTRODUCER, EXT_GRAPHIC_CONTROL_LABEL, self.block_size,
                           self.packed_fields.to_byte(), self.delay, self.transparent_color,
                           self.block_terminator)

    def pretty_print(self) -> None:
        transparency_string = _yesno(self.transparent_flag)

        if self.transparent_flag:
            transparency_string += " (index {})".format(self.transparent_color)

        disposal = self.disposal_method
        if disposal is None:
            disposal_string = "RESERVED ({})".format(self.packed_fields.disposal_method)
        else:
            disposal_string = disposal.name

        print(GRAPHIC_CONTROL_EXTENSION_TEMPLATE.format(
            disposal_method=disposal_string,
            delay_ms=self.delay_ms(),
            transparency_string=transparency_string,
            yesno_userinput=_yesno(self.user_input_flag)))


class CommentExtension(t.NamedTuple):
    """
    Model of a comment extension. The byte after the label is kept as block_size and written back, but the
    comment itself is whatever the following sub-block chain holds.
    """
    block_size: int = 0
    comment_data: t.Tuple[SubBlock, ...] = ()

    def text(self) -> str:
        return b"".join(block.data for block in self.comment_data).decode("latin-1")

    def to_bytes(self) -> bytes:
        return (bytes([EXT_INTRODUCER, EXT_COMMENT_LABEL, self.block_size])
                + sub_blocks_to_bytes(self.comment_data))

    def pretty_print(self) -> None:
        print(COMMENT_EXTENSION_TEMPLATE.format(comment=self.text()))


class PlainTextExtension(t.NamedTuple):
    """
    Model of a plain text extension: a text grid rendered with the given cell size and color indices.
    GIF89a only, and practically never used by decoders, but it round-trips like everything else.
    """
    block_size: int = 12
    grid_leftpos: int = 0
    grid_toppos: int = 0
    grid_width: int = 0
    grid_height: int = 0
    cell_width: int = 0
    cell_height: int = 0
    foreground_color_index: int = 0
    background_color_index: int = 0
    text_data: t.Tuple[SubBlock, ...] = ()

    def text(self) -> str:
        return b"".join(block.data for block in self.text_data).decode("latin-1")

    def to_bytes(self) -> bytes:
        body = struct.pack("<BBB4H4B", EXT_INTRODUCER, EXT_PLAINTEXT_LABEL, self.block_size,
                           self.grid_leftpos, self.grid_toppos, self.grid_width, self.grid_height,
                           self.cell_width, self.cell_height,
                           self.foreground_color_index, self.background_color_index)
        return body + sub_blocks_to_bytes(self.text_data)

    def pretty_print(self, verbose: bool = False) -> None:
        print(PLAINTEXT_EXTENSION_TEMPLATE.format(e=self))
        print("text:        {!r}".format(self.text()))


class ApplicationExtension(t.NamedTuple):
    """
    Model of an application extension, e.g. the NETSCAPE2.0 looping block.
    """
    block_size: int = 11
    identifier: bytes = b"\0" * 8
    auth_code: bytes = b"\0" * 3
    application_data: t.Tuple[SubBlock, ...] = ()

    def to_bytes(self) -> bytes:
        return (bytes([EXT_INTRODUCER, EXT_APPLICATION_LABEL, self.block_size])
                + self.identifier + self.auth_code
                + sub_blocks_to_bytes(self.application_data))

    def pretty_print(self, verbose: bool = False) -> None:
        print(APPLICATION_EXTENSION_TEMPLATE.format(
            identifier=self.identifier.decode("latin-1"),
            auth_code=self.auth_code.decode("latin-1")))
        _print_sub_blocks(self.application_data, verbose)


class GifImage(t.NamedTuple):
    """
    One frame: an image descriptor, its optional local color table and image data, plus the extensions that
    preceded it in the stream. There is one slot per extension kind.
    """
    image_descriptor: ImageDescriptor
    image_data: ImageData
    colortable: t.Optional[Colortable] = None
    graphic_control: t.Optional[GraphicControlExtension] = None
    comment: t.Optional[CommentExtension] = None
    plain_text: t.Optional[PlainTextExtension] = None
    application: t.Optional[ApplicationExtension] = None

    def to_bytes(self) -> bytes:
        # extensions are written in a fixed order ahead of the image
        parts = [ext.to_bytes() for ext in (self.graphic_control, self.comment,
                                            self.plain_text, self.application)
                 if ext is not None]
        parts.append(self.image_descriptor.to_bytes())

        if self.colortable is not None:
            parts.append(colortable_to_bytes(self.colortable))

        parts.append(self.image_data.to_bytes())
        return b"".join(parts)

    def pretty_print(self, verbose: bool) -> None:
        if self.application:
            self.application.pretty_print(verbose)

        if self.comment:
            self.comment.pretty_print()

        if self.plain_text:
            self.plain_text.pretty_print(verbose)

        if self.graphic_control:
            self.graphic_control.pretty_print()

        self.image_descriptor.pretty_print()

        if self.colortable:
            _print_colortable(self.colortable, title="Local Color Table",
                              verbose=verbose)

        self.image_data.pretty_print(verbose)
