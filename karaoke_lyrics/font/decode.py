from __future__ import annotations

import logging

from construct import Array, ConstructError, Int8ub, Int16ub, Int16ul, Int32ub, Padding, Struct

from karaoke_lyrics.errors import InvalidOffset, TruncatedBuffer

from .model import Font, Glyph

logger = logging.getLogger(__name__)

FONT_COUNT = 3

# offsets first, then lengths (grouped by kind, not interleaved)
BitmapFontHeader = Struct(
    "offsets" / Array(FONT_COUNT, Int32ub),
    "lengths" / Array(FONT_COUNT, Int32ub),
)

BitmapFontSectionHeader = Struct(
    Padding(8),
    "ptr_table_size" / Int32ub,
    "header_size" / Int32ub,
    "section_size" / Int32ub,
)
SECTION_HEADER_SIZE = 20

GlyphRecord = Struct(
    Padding(8),
    "code" / Int16ub,
    "advance" / Int8ub,
    "size" / Int8ub,
    "width" / Int8ub,
    "height" / Int8ub,
    "stride" / Int16ub,
    Padding(6),
    "bitmap_length" / Int16ul,  # the only little-endian field in the container
)
GLYPH_RECORD_SIZE = 24


def _parse(fmt: Struct, data: memoryview, offset: int, what: str):
    try:
        return fmt.parse(data[offset : offset + fmt.sizeof()])
    except ConstructError as e:
        raise TruncatedBuffer(f"{what} at offset {offset} runs past the end of the buffer") from e


def _decode_glyph(section: memoryview, glyph_offset: int) -> Glyph:
    if glyph_offset >= len(section):
        raise InvalidOffset(f"Glyph offset {glyph_offset} outside section of {len(section)} bytes")

    rec = _parse(GlyphRecord, section, glyph_offset, "Glyph record")
    start = glyph_offset + GLYPH_RECORD_SIZE
    end = start + rec.bitmap_length
    if end > len(section):
        raise TruncatedBuffer(
            f"Glyph bitmap {start}..{end} runs past the end of the section ({len(section)} bytes)"
        )

    return Glyph(
        code=rec.code,
        advance=rec.advance,
        size=rec.size,
        width=rec.width,
        height=rec.height,
        stride=rec.stride,
        bitmap=bytes(section[start:end]),
    )


def decode_font_section(section: bytes | memoryview) -> Font:
    view = memoryview(section)
    hdr = _parse(BitmapFontSectionHeader, view, 0, "Section header")
    if hdr.ptr_table_size % 4:
        raise InvalidOffset(f"Pointer table size {hdr.ptr_table_size} is not a multiple of 4")

    count = hdr.ptr_table_size // 4
    table_end = SECTION_HEADER_SIZE + hdr.ptr_table_size
    if table_end > len(view):
        raise TruncatedBuffer(f"Glyph pointer table ({count} entries) runs past the end of the section")
    glyph_offsets = Array(count, Int32ub).parse(view[SECTION_HEADER_SIZE:table_end])

    glyphs = tuple(_decode_glyph(view, off) for off in glyph_offsets)
    logger.debug("Decoded font section: %d glyphs (header_size=%d)", len(glyphs), hdr.header_size)
    return Font(glyphs=glyphs)


def _section_bounds(data: memoryview, index: int) -> tuple[int, int]:
    hdr = _parse(BitmapFontHeader, data, 0, "Bitmap font header")
    offset, length = hdr.offsets[index], hdr.lengths[index]
    if offset + length > len(data):
        raise InvalidOffset(
            f"Font section {index} ({offset}+{length}) outside buffer of {len(data)} bytes"
        )
    return offset, length


def decode_bitmap_font(data: bytes, index: int) -> Font:
    if not (0 <= index < FONT_COUNT):
        raise InvalidOffset(f"Font index {index} out of range (0..{FONT_COUNT - 1})")
    view = memoryview(data)
    offset, length = _section_bounds(view, index)
    return decode_font_section(view[offset : offset + length])


def decode_bitmap_fonts(data: bytes) -> tuple[Font, ...]:
    """
    Decode all three font sections of a bitmap font container.

    Each section is decoded independently and bounded to its declared length;
    glyph offsets in a section's pointer table are relative to the section start.
    """
    fonts = tuple(decode_bitmap_font(data, i) for i in range(FONT_COUNT))
    logger.debug("Decoded bitmap font container: %s glyphs", [len(f) for f in fonts])
    return fonts
