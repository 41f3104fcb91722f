from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass

from karaoke_lyrics.joyu2.model import LyricsBlock


def scroll_offset(block: LyricsBlock, t_ms: int) -> float:
    """Horizontal scroll distance covered by `block` at time `t_ms`."""
    events = block.scroll_events
    x = 0.0
    for i, ev in enumerate(events):
        if t_ms < ev.time:
            break
        nxt = events[i + 1] if i + 1 < len(events) else None
        end = t_ms if nxt is None or t_ms < nxt.time else nxt.time
        x += (end - ev.time) / 1000 * ev.speed
    return x


def is_visible(block: LyricsBlock, t_ms: int) -> bool:
    # a block missing either fade time is never on screen
    if block.fadein_time is None or block.fadeout_time is None:
        return False
    return block.fadein_time <= t_ms < block.fadeout_time


@dataclass(slots=True)
class BlockTracker:
    """
    Visible-block lookup by presentation time: bisect over fade-in times,
    report only when the visible set changes.
    """

    fadein_ms: list[int]
    fadeout_ms: list[int]
    indices: list[int]
    last_visible: tuple[int, ...] | None = None

    @classmethod
    def from_blocks(cls, blocks: tuple[LyricsBlock, ...] | list[LyricsBlock]) -> "BlockTracker":
        scheduled = sorted(
            (b.fadein_time, b.fadeout_time, i)
            for i, b in enumerate(blocks)
            if b.fadein_time is not None and b.fadeout_time is not None
        )
        return cls(
            fadein_ms=[s[0] for s in scheduled],
            fadeout_ms=[s[1] for s in scheduled],
            indices=[s[2] for s in scheduled],
        )

    def visible_indices(self, now_ms: int) -> tuple[int, ...]:
        n = bisect_right(self.fadein_ms, now_ms)
        return tuple(sorted(self.indices[i] for i in range(n) if now_ms < self.fadeout_ms[i]))

    def changed_indices(self, now_ms: int) -> tuple[int, ...] | None:
        vis = self.visible_indices(now_ms)
        if vis != self.last_visible:
            self.last_visible = vis
            return vis
        return None
