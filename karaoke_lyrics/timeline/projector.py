from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field, replace
from typing import Iterable, Sequence

from karaoke_lyrics.errors import MalformedSequence
from karaoke_lyrics.joyu2.model import LyricsBlock, RawTimingEvent, ScrollEvent

logger = logging.getLogger(__name__)

# 00 XX / 0c XX: start scrolling the next block at XX*10 / XX
# 01 XX / 0d XX: change the current block's speed to XX*10 / XX
SCROLL_CODES = frozenset({0, 1, 12, 13})
FADE_OUT = 5  # 05 XX: hide the XX oldest visible blocks
FADE_IN = 6  # 06 XX: show the next XX blocks


@dataclass(slots=True)
class ProjectorState:
    visible: deque[int] = field(default_factory=deque)
    next_fadein: int = 0
    scroll_target: int = -1


@dataclass(slots=True)
class _BlockSchedule:
    scroll_events: list[ScrollEvent] = field(default_factory=list)
    fadein_time: int | None = None
    fadeout_time: int | None = None


class TimelineProjector:
    """
    Reduces the raw event stream to per-block scroll and fade schedules.

    Feed events in stream order, then call `result()` for the scheduled blocks.
    """

    def __init__(self, blocks: Sequence[LyricsBlock]):
        self.blocks = tuple(blocks)
        self.state = ProjectorState()
        self._schedules = [_BlockSchedule() for _ in self.blocks]

    def feed(self, event: RawTimingEvent) -> None:
        code = event.code
        if code in SCROLL_CODES:
            self._scroll(event, code)
        elif code == FADE_OUT:
            self._fade_out(event)
        elif code == FADE_IN:
            self._fade_in(event)
        else:
            logger.debug("Ignoring event code %s at %d", code, event.time)

    def _operand(self, event: RawTimingEvent) -> int:
        if event.operand is None:
            raise MalformedSequence(f"Event code {event.code} at {event.time} has no operand")
        return event.operand

    def _scroll(self, event: RawTimingEvent, code: int) -> None:
        speed = self._operand(event) * (10 if code <= 1 else 1)
        if code % 2 == 0:
            self.state.scroll_target += 1

        target = self.state.scroll_target
        if not (0 <= target < len(self.blocks)):
            raise MalformedSequence(f"Scroll event at {event.time} targets missing block {target}")
        self._schedules[target].scroll_events.append(ScrollEvent(time=event.time, speed=speed))

    def _fade_out(self, event: RawTimingEvent) -> None:
        for _ in range(self._operand(event)):
            if not self.state.visible:
                raise MalformedSequence(f"Fade-out at {event.time} with no visible blocks")
            idx = self.state.visible.popleft()
            sched = self._schedules[idx]
            # zero-length blocks (hidden the instant they appear) are rejected
            if sched.fadein_time is not None and event.time <= sched.fadein_time:
                raise MalformedSequence(
                    f"Block {idx} fades out at {event.time}, not after its fade-in at {sched.fadein_time}"
                )
            sched.fadeout_time = event.time

    def _fade_in(self, event: RawTimingEvent) -> None:
        for _ in range(self._operand(event)):
            idx = self.state.next_fadein
            if idx >= len(self.blocks):
                raise MalformedSequence(f"Fade-in at {event.time} past the last block ({len(self.blocks)})")
            self._schedules[idx].fadein_time = event.time
            self.state.visible.append(idx)
            self.state.next_fadein += 1

    def result(self) -> tuple[LyricsBlock, ...]:
        return tuple(
            replace(
                block,
                scroll_events=tuple(s.scroll_events),
                fadein_time=s.fadein_time,
                fadeout_time=s.fadeout_time,
            )
            for block, s in zip(self.blocks, self._schedules)
        )


def project_timeline(
    events: Iterable[RawTimingEvent], blocks: Sequence[LyricsBlock]
) -> tuple[LyricsBlock, ...]:
    projector = TimelineProjector(blocks)
    count = 0
    for ev in events:
        projector.feed(ev)
        count += 1
    out = projector.result()
    logger.debug(
        "Projected %d events onto %d blocks (%d shown)",
        count,
        len(out),
        sum(1 for b in out if b.fadein_time is not None),
    )
    return out
