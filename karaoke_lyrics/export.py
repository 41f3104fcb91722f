from __future__ import annotations

import json

from karaoke_lyrics.font.model import Font
from karaoke_lyrics.joyu2.model import LyricsBlock
from karaoke_lyrics.pipeline import KaraokeTrack


def block_text(font: Font, block: LyricsBlock) -> str:
    """
    Romaji line for a block: per-glyph romaji and furigana romaji ordered by
    their horizontal position within the block.
    """
    parts: list[tuple[int, str]] = []

    x = 0
    for glyph, romaji in zip(block.glyphs, block.glyphs_romaji or ()):
        if romaji:
            parts.append((x, romaji))
        x += font.glyph(glyph).advance

    for group, romaji in zip(block.furigana, block.furigana_romaji or ()):
        if romaji:
            parts.append((group.x_pos, romaji))

    parts.sort(key=lambda p: p[0])
    return "".join(text for _x, text in parts)


def export_json(track: KaraokeTrack) -> str:
    return json.dumps(
        {
            "glyph_count": len(track.font),
            "blocks": [
                {
                    "x_pos": b.x_pos,
                    "y_pos": b.y_pos,
                    "glyphs": list(b.glyphs),
                    "glyphs_romaji": list(b.glyphs_romaji or ()),
                    "furigana": [
                        {"x_pos": f.x_pos, "glyphs": list(f.glyphs), "romaji": r}
                        for f, r in zip(b.furigana, b.furigana_romaji or ("",) * len(b.furigana))
                    ],
                    "fadein_ms": b.fadein_time,
                    "fadeout_ms": b.fadeout_time,
                    "scroll": [{"t_ms": s.time, "speed": s.speed} for s in b.scroll_events],
                    "text": block_text(track.font, b),
                }
                for b in track.blocks
            ],
        },
        ensure_ascii=False,
        indent=2,
    )


def _fmt_srt_time(ms: int) -> str:
    # HH:MM:SS,mmm
    h, rem = divmod(ms, 3_600_000)
    m, rem = divmod(rem, 60_000)
    s, ms2 = divmod(rem, 1_000)
    return f"{h:02d}:{m:02d}:{s:02d},{ms2:03d}"


def export_srt(track: KaraokeTrack) -> str:
    """
    One cue per block shown on screen, from fade-in to fade-out.
    Blocks that are never shown are left out.
    """
    shown = sorted(
        (b for b in track.blocks if b.is_scheduled),
        key=lambda b: b.fadein_time,
    )
    out: list[str] = []
    for i, b in enumerate(shown, start=1):
        out.append(str(i))
        out.append(f"{_fmt_srt_time(b.fadein_time)} --> {_fmt_srt_time(b.fadeout_time)}")
        out.append(block_text(track.font, b))
        out.append("")
    return "\n".join(out)
