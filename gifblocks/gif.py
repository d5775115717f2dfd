import logging
import typing as t

from .blocks import *
from .blocks import _print_colortable
from .constants import *
from .stream import _GifStream, consume_frame

__all__ = (
    "Gif",
    "load",
    "save",
    "reverse",
    "resize",
)

logger = logging.getLogger(__name__)


class Gif(t.NamedTuple):
    """
    A whole decoded GIF: header, logical screen descriptor, optional global color table, the frames and the
    trailer. Image data is kept compressed and is written back verbatim.

    Gif values are never modified in place; reverse() and resize() return new ones that share the untouched
    blocks with the original.
    """
    header: Header
    logical_screen_descriptor: LogicalScreenDescriptor
    colortable: t.Optional[Colortable] = None  # Global color table
    images: t.Tuple[GifImage, ...] = ()
    trailer: int = TRAILER_LABEL

    @property
    def version(self) -> t.Optional[GifVersion]:
        return self.header.gif_version

    @property
    def screen_width(self) -> int:
        return self.logical_screen_descriptor.width

    @property
    def screen_height(self) -> int:
        return self.logical_screen_descriptor.height

    def to_bytes(self) -> bytes:
        """
        Encode the GIF. Fields are written exactly as stored, nothing is recomputed from the payloads.
        """
        parts = [self.header.to_bytes(), self.logical_screen_descriptor.to_bytes()]

        if self.colortable is not None:
            parts.append(colortable_to_bytes(self.colortable))

        parts.extend(image.to_bytes() for image in self.images)
        parts.append(bytes([self.trailer]))

        return b"".join(parts)

    def reverse(self) -> "Gif":
        return reverse(self)

    def resize(self, width: int, height: int) -> "Gif":
        return resize(self, width, height)

    def save(self, path: str) -> None:
        save(self, path)

    def pretty_print(self, verbose: bool) -> None:
        print("{} ({} frames):".format(self.header, len(self.images)))
        self.logical_screen_descriptor.pretty_print()

        if self.colortable:
            print()
            _print_colortable(self.colortable, title="Global Color Table",
                              verbose=verbose)

        for img in self.images:
            img.pretty_print(verbose)


def load(path: str) -> Gif:
    """
    Decode the GIF file at path.

    Raises a GifStreamException subclass on malformed input, and OSError if the file can't be read.
    """
    with _GifStream(path) as gifstream:
        # Consume one-time header info
        header = gifstream.consume_header()
        screen_descriptor = gifstream.consume_screen_descriptor()

        colortable = None
        if screen_descriptor.colortable_exists:
            colortable = gifstream.consume_color_table(screen_descriptor.colortable_size)
        else:
            logger.debug("%s: no global color table", path)

        # Parse remaining blocks, one frame at a time, until the trailer.
        images = []
        image = consume_frame(gifstream)
        while image is not None:
            images.append(image)
            image = consume_frame(gifstream)

    logger.debug("%s: loaded %d frames", path, len(images))

    return Gif(
        header=header,
        logical_screen_descriptor=screen_descriptor,
        colortable=colortable,
        images=tuple(images))


def save(gif: Gif, path: str) -> None:
    """
    Encode gif and write it to path, replacing any existing file.
    """
    with open(path, "wb") as f:
        f.write(gif.to_bytes())


def reverse(gif: Gif) -> Gif:
    """
    Return a copy of gif with its frames in reverse order.
    """
    return gif._replace(images=tuple(reversed(gif.images)))


def resize(gif: Gif, width: int, height: int) -> Gif:
    """
    Return a copy of gif with the logical screen set to width x height. Only the screen descriptor changes, the
    frames are neither moved nor scaled.
    """
    for name, value in (("width", width), ("height", height)):
        if not 0 <= value <= 0xFFFF:
            raise ValueError("{} must fit in 16 bits, got {}".format(name, value))

    descriptor = gif.logical_screen_descriptor._replace(width=width, height=height)
    return gif._replace(logical_screen_descriptor=descriptor)
