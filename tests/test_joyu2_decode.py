from __future__ import annotations

import pytest

from karaoke_lyrics.errors import InvalidOffset, MalformedSequence, TruncatedBuffer
from karaoke_lyrics.joyu2.decode import (
    decode_joyu2,
    decode_lyrics_section,
    decode_timing_section,
    read_track_table,
)
from karaoke_lyrics.joyu2.model import FuriganaGroup
from tests.mocks.containers import joyu2_container, lyrics_block, lyrics_section, timing_section


def test_lyrics_blocks_and_furigana():
    section = lyrics_section(
        [
            lyrics_block(100, 500, [3, 4, 5], furigana=[(24, [7, 8]), (48, [9])]),
            lyrics_block(120, 560, [6]),
        ]
    )
    blocks = decode_lyrics_section(section)
    assert len(blocks) == 2

    first = blocks[0]
    assert (first.x_pos, first.y_pos) == (100, 500)
    assert first.glyphs == (3, 4, 5)
    assert first.furigana == (FuriganaGroup(x_pos=24, glyphs=(7, 8)), FuriganaGroup(x_pos=48, glyphs=(9,)))
    assert first.glyphs_romaji is None
    assert first.scroll_events == ()
    assert first.fadein_time is None and first.fadeout_time is None

    assert blocks[1].glyphs == (6,)
    assert blocks[1].furigana == ()


def test_glyph_index_is_second_and_third_byte_of_triple():
    raw = bytearray(lyrics_section([lyrics_block(0, 0, [0x0102])]))
    # block starts at 30, glyph triple at +18
    raw[30 + 18] = 0x7F
    assert decode_lyrics_section(bytes(raw))[0].glyphs == (0x0102,)


def test_empty_lyrics_section():
    assert decode_lyrics_section(lyrics_section([])) == ()


def test_lyrics_section_shorter_than_colour_table():
    with pytest.raises(TruncatedBuffer):
        decode_lyrics_section(bytes(10))


def test_block_size_past_section_end():
    section = lyrics_section([lyrics_block(0, 0, [1], size=200)])
    with pytest.raises(InvalidOffset):
        decode_lyrics_section(section)


def test_zero_block_size():
    section = lyrics_section([lyrics_block(0, 0, [1], size=0)])
    with pytest.raises(InvalidOffset):
        decode_lyrics_section(section)


def test_block_content_overruns_declared_size():
    block = lyrics_block(0, 0, [1, 2, 3])
    short = lyrics_block(0, 0, [1, 2, 3], size=len(block) - 4)
    with pytest.raises(TruncatedBuffer):
        decode_lyrics_section(lyrics_section([short]) + bytes(4))


def test_timing_events_are_cumulative_plus_delay():
    section = timing_section([(0, [6, 1]), (128, [0, 5]), (72, [1, 7]), (0, [5, 1])])
    events = decode_timing_section(section)
    assert [e.time for e in events] == [1800, 1928, 2000, 2000]
    assert [e.payload for e in events] == [b"\x06\x01", b"\x00\x05", b"\x01\x07", b"\x05\x01"]
    assert events[1].code == 0 and events[1].operand == 5


def test_timing_custom_delay_and_empty_payload():
    events = decode_timing_section(timing_section([(10, []), (5, [0xC0])]), presentation_delay=0)
    assert [e.time for e in events] == [10, 15]
    assert events[0].code is None and events[0].operand is None
    assert events[1].code == 0xC0 and events[1].operand is None


def test_timing_payload_past_end():
    section = timing_section([(0, [6, 1])])[:-1]
    with pytest.raises(MalformedSequence):
        decode_timing_section(section)


def test_timing_missing_payload_size():
    with pytest.raises(MalformedSequence):
        decode_timing_section(b"\x05")


def test_timing_unterminated_delta():
    with pytest.raises(MalformedSequence):
        decode_timing_section(b"\x85")


def test_timing_negative_payload_size():
    with pytest.raises(InvalidOffset):
        decode_timing_section(b"\x00\xff\x01")


def test_track_table_layout():
    data = joyu2_container(
        [
            (lyrics_section([lyrics_block(1, 1, [1])]), timing_section([(0, [6, 1])])),
        ]
    )
    table = read_track_table(data)
    assert len(table) == 3
    assert table[0].lyrics == 38
    assert table[0].timing_end == table[1].lyrics
    assert table[2].timing_end == len(data)


def test_decode_selected_track():
    data = joyu2_container(
        [
            (lyrics_section([lyrics_block(1, 1, [1])]), timing_section([(0, [6, 1])])),
            (lyrics_section([]), b""),
            (lyrics_section([lyrics_block(9, 9, [2, 3]), lyrics_block(9, 40, [4])]), timing_section([(5, [6, 2])])),
        ]
    )
    track = decode_joyu2(data, 2)
    assert [b.glyphs for b in track.blocks] == [(2, 3), (4,)]
    assert [e.time for e in track.events] == [1805]

    empty = decode_joyu2(data, 1)
    assert empty.blocks == () and empty.events == ()


def test_track_index_out_of_range():
    with pytest.raises(InvalidOffset):
        decode_joyu2(joyu2_container([]), 3)


def test_track_offsets_outside_buffer():
    data = joyu2_container([])
    with pytest.raises(InvalidOffset):
        decode_joyu2(data[:-5], 2)


def test_truncated_header():
    with pytest.raises(TruncatedBuffer):
        read_track_table(b"JOY-U2\x00\x00")
