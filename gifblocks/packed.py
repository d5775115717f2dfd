"""
Packed fields. A few GIF blocks squeeze several flags and small integers into one byte; these records unpack
that byte into named fields and pack them back.

Every byte value is a valid bit pattern, so from_byte never fails. Reserved bits are kept as found so that
to_byte(from_byte(b)) == b for every byte.
"""

__all__ = (
    "ScreenDescriptorFields",
    "ImageDescriptorFields",
    "GraphicControlFields",
)


import typing as t


class ScreenDescriptorFields(t.NamedTuple):
    """
    Packed fields of the logical screen descriptor.

        bit 7:    global color table flag
        bits 6-4: color resolution
        bit 3:    sort flag
        bits 2-0: size of global color table
    """
    global_color_table_flag: bool = False
    color_resolution: int = 0
    sort_flag: bool = False
    size_of_global_color_table: int = 0

    @classmethod
    def from_byte(cls, packed_fields: int) -> "ScreenDescriptorFields":
        return cls(
            global_color_table_flag=bool((packed_fields >> 7) & 0x1),
            color_resolution=(packed_fields >> 4) & 0x7,
            sort_flag=bool((packed_fields >> 3) & 0x1),
            size_of_global_color_table=packed_fields & 0x7)

    def to_byte(self) -> int:
        return ((int(self.global_color_table_flag) & 0x1) << 7
                | (self.color_resolution & 0x7) << 4
                | (int(self.sort_flag) & 0x1) << 3
                | (self.size_of_global_color_table & 0x7))


class ImageDescriptorFields(t.NamedTuple):
    """
    Packed fields of an image descriptor.

        bit 7:    local color table flag
        bit 6:    interlace flag
        bit 5:    sort flag
        bits 4-3: reserved
        bits 2-0: size of local color table
    """
    local_color_table_flag: bool = False
    interlace_flag: bool = False
    sort_flag: bool = False
    reserved: int = 0
    size_of_local_color_table: int = 0

    @classmethod
    def from_byte(cls, packed_fields: int) -> "ImageDescriptorFields":
        return cls(
            local_color_table_flag=bool((packed_fields >> 7) & 0x1),
            interlace_flag=bool((packed_fields >> 6) & 0x1),
            sort_flag=bool((packed_fields >> 5) & 0x1),
            reserved=(packed_fields >> 3) & 0x3,
            size_of_local_color_table=packed_fields & 0x7)

    def to_byte(self) -> int:
        return ((int(self.local_color_table_flag) & 0x1) << 7
                | (int(self.interlace_flag) & 0x1) << 6
                | (int(self.sort_flag) & 0x1) << 5
                | (self.reserved & 0x3) << 3
                | (self.size_of_local_color_table & 0x7))


class GraphicControlFields(t.NamedTuple):
    """
    Packed fields of a graphic control extension.

        bits 7-5: reserved
        bits 4-2: disposal method
        bit 1:    user input flag
        bit 0:    transparent color flag
    """
    reserved: int = 0
    disposal_method: int = 0
    user_input_flag: bool = False
    transparent_color_flag: bool = False

    @classmethod
    def from_byte(cls, packed_fields: int) -> "GraphicControlFields":
        return cls(
            reserved=(packed_fields >> 5) & 0x7,
            disposal_method=(packed_fields >> 2) & 0x7,
            user_input_flag=bool((packed_fields >> 1) & 0x1),
            transparent_color_flag=bool(packed_fields & 0x1))

    def to_byte(self) -> int:
        return ((self.reserved & 0x7) << 5
                | (self.disposal_method & 0x7) << 2
                | (int(self.user_input_flag) & 0x1) << 1
                | (int(self.transparent_color_flag) & 0x1))
