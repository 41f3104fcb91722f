from __future__ import annotations

import pytest

from karaoke_lyrics.errors import MalformedSequence
from karaoke_lyrics.joyu2.model import LyricsBlock, RawTimingEvent, ScrollEvent
from karaoke_lyrics.timeline.projector import TimelineProjector, project_timeline


def _blocks(n: int) -> tuple[LyricsBlock, ...]:
    return tuple(LyricsBlock(x_pos=100, y_pos=40 * i, glyphs=(i,)) for i in range(n))


def _events(*items: tuple[int, list[int]]) -> list[RawTimingEvent]:
    return [RawTimingEvent(time=t, payload=bytes(p)) for t, p in items]


def test_show_scroll_hide_single_block():
    events = _events((1000, [6, 1]), (2000, [0, 5]), (3000, [1, 7]), (4000, [5, 1]))
    first, second = project_timeline(events, _blocks(2))

    assert first.fadein_time == 1000
    assert first.scroll_events == (ScrollEvent(2000, 50), ScrollEvent(3000, 70))
    assert first.fadeout_time == 4000

    assert second.fadein_time is None
    assert second.fadeout_time is None
    assert second.scroll_events == ()


def test_fine_speed_codes_and_scroll_target_advance():
    events = _events(
        (1000, [6, 2]),
        (1100, [12, 30]),
        (1200, [13, 45]),
        (1300, [0, 3]),
        (1400, [13, 2]),
    )
    a, b = project_timeline(events, _blocks(2))
    assert a.scroll_events == (ScrollEvent(1100, 30), ScrollEvent(1200, 45))
    assert b.scroll_events == (ScrollEvent(1300, 30), ScrollEvent(1400, 2))


def test_fade_out_pops_oldest_visible_first():
    events = _events(
        (1000, [6, 2]),
        (2000, [5, 1]),
        (2500, [6, 1]),
        (3000, [5, 2]),
    )
    a, b, c = project_timeline(events, _blocks(3))
    assert (a.fadein_time, a.fadeout_time) == (1000, 2000)
    assert (b.fadein_time, b.fadeout_time) == (1000, 3000)
    assert (c.fadein_time, c.fadeout_time) == (2500, 3000)


def test_other_codes_are_ignored():
    events = _events((500, [0xC0]), (600, []), (700, [4]), (800, [0x17, 9]), (1000, [6, 1]))
    (block,) = project_timeline(events, _blocks(1))
    assert block.fadein_time == 1000
    assert block.scroll_events == ()


def test_projection_returns_new_blocks():
    blocks = _blocks(1)
    project_timeline(_events((1000, [6, 1]), (1200, [0, 1])), blocks)
    assert blocks[0].fadein_time is None
    assert blocks[0].scroll_events == ()


def test_state_is_explicit():
    projector = TimelineProjector(_blocks(3))
    for ev in _events((1000, [6, 2]), (1100, [0, 1]), (1500, [5, 1])):
        projector.feed(ev)
    assert list(projector.state.visible) == [1]
    assert projector.state.next_fadein == 2
    assert projector.state.scroll_target == 0


@pytest.mark.parametrize(
    "items",
    [
        [(1000, [1, 5])],  # speed change before any block started scrolling
        [(1000, [0, 5]), (1100, [0, 5])],  # more scroll starts than blocks
        [(1000, [5, 1])],  # nothing visible to hide
        [(1000, [6, 2])],  # more blocks shown than exist
        [(1000, [6])],  # missing operand
        [(1000, [6, 1]), (1000, [5, 1])],  # hidden at the instant it appears
    ],
)
def test_malformed_streams_fail_fast(items):
    with pytest.raises(MalformedSequence):
        project_timeline(_events(*items), _blocks(1))
