import struct

import pytest


def screen(width=1, height=1, packed=0, bg=0, aspect=0):
    return struct.pack("<HHBBB", width, height, packed, bg, aspect)


def image(left=0, top=0, width=1, height=1, packed=0):
    return b"\x2c" + struct.pack("<4HB", left, top, width, height, packed)


def graphic_control(packed=0, delay=0, transparent=0):
    return b"\x21\xf9\x04" + struct.pack("<BHB", packed, delay, transparent) + b"\x00"


def chain(*chunks):
    return b"".join(bytes([len(c)]) + c for c in chunks) + b"\x00"


MINIMAL_GIF = (
    b"GIF89a"
    + screen()
    + image(packed=0x80)
    + b"\x00\x00\x00\xff\xff\xff"
    + b"\x02" + chain(b"\xab")
    + b"\x3b"
)

NETSCAPE = b"\x21\xff\x0bNETSCAPE2.0" + chain(b"\x01\x00\x00")

COMMENT = b"\x21\xfe\x05" + chain(b"hello")

PLAIN_TEXT = (
    b"\x21\x01\x0c"
    + struct.pack("<4H4B", 0, 0, 16, 8, 8, 8, 1, 0)
    + chain(b"hi")
)

# Frames are laid out in the order the encoder writes extensions, so the
# file re-encodes to the same bytes.
ANIMATED_GIF = (
    b"GIF89a"
    + screen(width=4, height=3, packed=0x91, bg=1)
    + bytes(range(12))
    + graphic_control(packed=0x09, delay=10, transparent=3) + COMMENT + NETSCAPE
    + image(width=4, height=3)
    + b"\x02" + chain(b"\x84\x1d", b"\x05")
    + graphic_control(packed=0x04, delay=20)
    + image(left=1, top=1, width=2, height=2, packed=0x40)
    + b"\x02" + chain(b"\x44\x01")
    + graphic_control(packed=0x08, delay=30) + PLAIN_TEXT
    + image(width=1, height=1, packed=0x81)
    + bytes(range(100, 112))
    + b"\x03" + chain(bytes(range(255)), b"\x01")
    + b"\x3b"
)


@pytest.fixture
def write_bytes(tmp_path):
    """
    Write raw bytes to a fresh file under tmp_path and return its path.
    """
    counter = iter(range(1000))

    def write(data, name=None):
        path = tmp_path / (name or "test{}.gif".format(next(counter)))
        path.write_bytes(data)
        return str(path)

    return write


@pytest.fixture
def minimal_gif(write_bytes):
    return write_bytes(MINIMAL_GIF, "minimal.gif")


@pytest.fixture
def animated_gif(write_bytes):
    return write_bytes(ANIMATED_GIF, "animated.gif")
