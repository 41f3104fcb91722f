from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FuriganaGroup:
    x_pos: int  # relative to the owning block
    glyphs: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class ScrollEvent:
    time: int
    speed: int  # layout units per second


@dataclass(frozen=True, slots=True)
class LyricsBlock:
    x_pos: int
    y_pos: int
    glyphs: tuple[int, ...]
    furigana: tuple[FuriganaGroup, ...] = ()
    size: int = 0

    # filled in by the romanize and project stages
    glyphs_romaji: tuple[str | None, ...] | None = None
    furigana_romaji: tuple[str, ...] | None = None
    scroll_events: tuple[ScrollEvent, ...] = ()
    fadein_time: int | None = None
    fadeout_time: int | None = None

    @property
    def is_scheduled(self) -> bool:
        return self.fadein_time is not None and self.fadeout_time is not None


@dataclass(frozen=True, slots=True)
class RawTimingEvent:
    time: int
    payload: bytes

    @property
    def code(self) -> int | None:
        return self.payload[0] if self.payload else None

    @property
    def operand(self) -> int | None:
        return self.payload[1] if len(self.payload) > 1 else None


@dataclass(frozen=True, slots=True)
class TrackOffsets:
    lyrics: int
    timing: int
    timing_end: int


@dataclass(frozen=True, slots=True)
class JoyU2Track:
    blocks: tuple[LyricsBlock, ...]
    events: tuple[RawTimingEvent, ...]
