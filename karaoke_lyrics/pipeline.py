from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from karaoke_lyrics.config import AppConfig
from karaoke_lyrics.font.decode import decode_bitmap_font
from karaoke_lyrics.font.model import Font
from karaoke_lyrics.joyu2.decode import PRESENTATION_DELAY_MS, decode_joyu2
from karaoke_lyrics.joyu2.model import LyricsBlock, RawTimingEvent
from karaoke_lyrics.romaji.romanizer import KanaToRomaji, PykakasiRomaji, Romanizer
from karaoke_lyrics.timeline.projector import project_timeline

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class KaraokeTrack:
    font: Font
    blocks: tuple[LyricsBlock, ...]
    events: tuple[RawTimingEvent, ...]


def load_track(
    bitmap_data: bytes,
    joyu2_data: bytes,
    *,
    track: int = 2,
    font_index: int | None = None,
    presentation_delay: int = PRESENTATION_DELAY_MS,
    to_romaji: KanaToRomaji | None = None,
) -> KaraokeTrack:
    """
    decode -> romanize -> project.

    Each stage returns new blocks; nothing downstream sees a block before the
    previous stage has finished with it.
    """
    font = decode_bitmap_font(bitmap_data, track if font_index is None else font_index)

    decoded = decode_joyu2(joyu2_data, track, presentation_delay=presentation_delay)
    blocks = Romanizer(font, to_romaji).annotate_all(decoded.blocks)
    blocks = project_timeline(decoded.events, blocks)

    logger.info(
        "Loaded track %d: %d blocks, %d events, font with %d glyphs",
        track,
        len(blocks),
        len(decoded.events),
        len(font),
    )
    return KaraokeTrack(font=font, blocks=blocks, events=decoded.events)


def load_track_files(bitmap_path: Path, joyu2_path: Path, cfg: AppConfig) -> KaraokeTrack:
    return load_track(
        bitmap_path.read_bytes(),
        joyu2_path.read_bytes(),
        track=cfg.track,
        font_index=cfg.font_index,
        presentation_delay=cfg.presentation_delay_ms,
        to_romaji=PykakasiRomaji(cfg.romaji_system),
    )
