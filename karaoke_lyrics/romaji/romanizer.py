from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Protocol, Sequence

import pykakasi

from karaoke_lyrics.font.model import Font
from karaoke_lyrics.joyu2.model import LyricsBlock

from .kana import combines, glyph_code_to_kana

logger = logging.getLogger(__name__)

ROMAJI_SYSTEMS = ("hepburn", "kunrei", "passport")


class KanaToRomaji(Protocol):
    """
    Transliterates one transcription unit to lowercase ASCII.

    A unit is a single kana, or a pair made of a sokuon and a kana, or a kana
    and a following sutegana.
    """

    def __call__(self, kana: str) -> str: ...


class PykakasiRomaji:
    def __init__(self, system: str = "hepburn"):
        if system not in ROMAJI_SYSTEMS:
            raise ValueError(f"Unknown romanization system: {system}")
        self.system = system
        self._kks = pykakasi.kakasi()

    def __call__(self, kana: str) -> str:
        return "".join(item[self.system] for item in self._kks.convert(kana))


def get_romaji_for_glyphs(
    font: Font, glyphs: Sequence[int], to_romaji: KanaToRomaji
) -> tuple[str | None, ...]:
    """
    Transcribe a glyph run.

    The result has one slot per glyph; a slot is set only at the first glyph
    of each transcribed unit. Glyphs without a kana mapping stay None.
    """
    out: list[str | None] = [None] * len(glyphs)
    kana = [glyph_code_to_kana(font.glyph(g).code) for g in glyphs]

    i = 0
    while i < len(kana):
        current = kana[i]
        if current is None:
            i += 1
            continue

        nxt = kana[i + 1] if i + 1 < len(kana) else None
        if nxt is not None and combines(current, nxt):
            out[i] = to_romaji(current + nxt)
            i += 2
        else:
            out[i] = to_romaji(current)
            i += 1

    return tuple(out)


class Romanizer:
    def __init__(self, font: Font, to_romaji: KanaToRomaji | None = None):
        self.font = font
        self.to_romaji = to_romaji or PykakasiRomaji()

    def annotate(self, block: LyricsBlock) -> LyricsBlock:
        glyphs_romaji = get_romaji_for_glyphs(self.font, block.glyphs, self.to_romaji)
        # furigana romaji is drawn as one string per group
        furigana_romaji = tuple(
            "".join(r for r in get_romaji_for_glyphs(self.font, f.glyphs, self.to_romaji) if r)
            for f in block.furigana
        )
        return replace(block, glyphs_romaji=glyphs_romaji, furigana_romaji=furigana_romaji)

    def annotate_all(self, blocks: Iterable[LyricsBlock]) -> tuple[LyricsBlock, ...]:
        out = tuple(self.annotate(b) for b in blocks)
        logger.debug("Romanized %d lyrics blocks", len(out))
        return out
