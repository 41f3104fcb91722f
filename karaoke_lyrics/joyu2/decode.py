from __future__ import annotations

import logging

from construct import Array, Bytes, ConstructError, Int8ub, Int16ub, Int32ub, Padding, PrefixedArray, Struct, this

from karaoke_lyrics.errors import InvalidOffset, MalformedSequence, TruncatedBuffer

from .model import FuriganaGroup, JoyU2Track, LyricsBlock, RawTimingEvent, TrackOffsets
from .vlq import read_delta

logger = logging.getLogger(__name__)

TRACK_COUNT = 3
COLOR_TABLE_SIZE = 30  # 15 RGB15 entries
PRESENTATION_DELAY_MS = 1800

# "JOY-U2" magic, then the offset table starting at byte 6
JoyU2Header = Struct(
    "magic" / Bytes(6),
    "metadata_offset" / Int32ub,
    # lyrics1, timing1, lyrics2, timing2, lyrics3, timing3, extra
    "offsets" / Array(2 * TRACK_COUNT + 1, Int32ub),
)

LyricsBlockRecord = Struct(
    "size" / Int16ub,
    "flags" / Int16ub,
    "x_pos" / Int16ub,
    "y_pos" / Int16ub,
    Padding(8),  # fill/border colour indices and two unknown positions
    "chars" / PrefixedArray(
        Int16ub,
        Struct(
            "font" / Int8ub,
            "glyph" / Int16ub,
        ),
    ),
    "furigana" / PrefixedArray(
        Int16ub,
        Struct(
            "count" / Int16ub,
            "x_pos" / Int16ub,
            "glyphs" / Array(this.count, Int16ub),
        ),
    ),
)


def read_track_table(data: bytes | memoryview) -> tuple[TrackOffsets, ...]:
    try:
        hdr = JoyU2Header.parse(data[: JoyU2Header.sizeof()])
    except ConstructError as e:
        raise TruncatedBuffer(f"JOY-U2 header needs {JoyU2Header.sizeof()} bytes, got {len(data)}") from e
    if hdr.magic != b"JOY-U2":
        logger.debug("Unexpected JOY-U2 magic %r", bytes(hdr.magic))

    offs = hdr.offsets
    return tuple(
        TrackOffsets(lyrics=offs[2 * k], timing=offs[2 * k + 1], timing_end=offs[2 * k + 2])
        for k in range(TRACK_COUNT)
    )


def _decode_block(section: memoryview, cursor: int) -> LyricsBlock:
    if cursor + 2 > len(section):
        raise TruncatedBuffer(f"Lyrics block size at offset {cursor} runs past the end of the section")
    size = Int16ub.parse(section[cursor : cursor + 2])
    if size == 0:
        raise InvalidOffset(f"Lyrics block at offset {cursor} has zero size")
    if cursor + size > len(section):
        raise InvalidOffset(
            f"Lyrics block at offset {cursor} claims {size} bytes, section has {len(section) - cursor} left"
        )

    try:
        rec = LyricsBlockRecord.parse(section[cursor : cursor + size])
    except ConstructError as e:
        raise TruncatedBuffer(f"Lyrics block at offset {cursor} overruns its declared size {size}") from e

    return LyricsBlock(
        x_pos=rec.x_pos,
        y_pos=rec.y_pos,
        glyphs=tuple(c.glyph for c in rec.chars),
        furigana=tuple(FuriganaGroup(x_pos=f.x_pos, glyphs=tuple(f.glyphs)) for f in rec.furigana),
        size=size,
    )


def decode_lyrics_section(section: bytes | memoryview) -> tuple[LyricsBlock, ...]:
    view = memoryview(section)
    if len(view) < COLOR_TABLE_SIZE:
        raise TruncatedBuffer(f"Lyrics section of {len(view)} bytes is shorter than its colour table")

    blocks: list[LyricsBlock] = []
    cursor = COLOR_TABLE_SIZE  # colours are not used
    while cursor < len(view):
        block = _decode_block(view, cursor)
        blocks.append(block)
        cursor += block.size
    return tuple(blocks)


def decode_timing_section(
    section: bytes | memoryview, presentation_delay: int = PRESENTATION_DELAY_MS
) -> tuple[RawTimingEvent, ...]:
    """
    Decode the timing section into events with absolute times.

    Each record is a variable-length delta, a signed payload size byte and the
    payload itself. Event times are cumulative plus `presentation_delay`.
    """
    view = memoryview(section)
    events: list[RawTimingEvent] = []
    cursor = 0
    now = 0

    while cursor < len(view):
        delta, used = read_delta(view, cursor)
        now += delta
        cursor += used

        if cursor >= len(view):
            raise MalformedSequence(f"Timing event at offset {cursor} is missing its payload size")
        size = view[cursor]
        if size & 0x80:
            raise InvalidOffset(f"Negative payload size {size - 256} at offset {cursor}")
        cursor += 1

        if cursor + size > len(view):
            raise MalformedSequence(
                f"Payload of {size} bytes at offset {cursor} runs past the end of the section"
            )
        events.append(RawTimingEvent(time=now + presentation_delay, payload=bytes(view[cursor : cursor + size])))
        cursor += size

    return tuple(events)


def decode_joyu2(
    data: bytes, track: int, *, presentation_delay: int = PRESENTATION_DELAY_MS
) -> JoyU2Track:
    if not (0 <= track < TRACK_COUNT):
        raise InvalidOffset(f"Track index {track} out of range (0..{TRACK_COUNT - 1})")

    view = memoryview(data)
    offs = read_track_table(view)[track]
    if not (offs.lyrics <= offs.timing <= offs.timing_end <= len(view)):
        raise InvalidOffset(
            f"Track {track} sections out of range: lyrics={offs.lyrics} timing={offs.timing} "
            f"end={offs.timing_end} buffer={len(view)}"
        )

    blocks = decode_lyrics_section(view[offs.lyrics : offs.timing])
    events = decode_timing_section(view[offs.timing : offs.timing_end], presentation_delay)
    logger.debug("Decoded JOY-U2 track %d: %d blocks, %d events", track, len(blocks), len(events))
    return JoyU2Track(blocks=blocks, events=events)
