from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from karaoke_lyrics.errors import InvalidOffset


@dataclass(frozen=True, slots=True)
class Glyph:
    code: int
    advance: int
    size: int
    width: int
    height: int
    stride: int  # bytes per bitmap row
    bitmap: bytes

    def rows(self) -> Iterator[bytes]:
        for y in range(self.height):
            yield self.bitmap[y * self.stride : (y + 1) * self.stride]


@dataclass(frozen=True, slots=True)
class Font:
    glyphs: tuple[Glyph, ...]

    def __len__(self) -> int:
        return len(self.glyphs)

    def __getitem__(self, index: int) -> Glyph:
        return self.glyphs[index]

    def glyph(self, index: int) -> Glyph:
        if not (0 <= index < len(self.glyphs)):
            raise InvalidOffset(f"Glyph index {index} out of range (font has {len(self.glyphs)} glyphs)")
        return self.glyphs[index]
