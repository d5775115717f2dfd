"""
gifblocks is a small library for decoding and re-encoding GIF files block by block. Every structural block is
kept exactly as found, so a decoded GIF can be edited (frames reordered, canvas resized) and written back.
The LZW image data is carried verbatim and never decompressed.

Based on the GIF89a spec, currently hosted here:

https://www.w3.org/Graphics/GIF/spec-gif89a.txt
"""

from .gif import *
from .blocks import *
from .packed import *
from .exceptions import *
from .constants import *

__version__ = "0.2.0"
