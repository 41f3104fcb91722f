from __future__ import annotations

# (first code, last code, first code of the target Unicode block)
_KANA_RANGES: tuple[tuple[int, int, int], ...] = (
    (0xA021, 0xA073, 0x3041),  # hiragana
    (0xA121, 0xA176, 0x30A1),  # katakana
    (0xA321, 0xA373, 0x3041),  # hiragana (alternate set)
    (0xA421, 0xA476, 0x30A1),  # katakana (alternate set)
)

SUTEGANA: frozenset[str] = frozenset(
    [
        "ぁ", "ぃ", "ぅ", "ぇ", "ぉ", "ゃ", "ゅ", "ょ", "ゎ", "ゕ", "ゖ",
        "ァ", "ィ", "ゥ", "ェ", "ォ", "ヵ", "ヶ", "ャ", "ュ", "ョ", "ヮ",
        "ㇰ", "ㇱ", "ㇲ", "ㇳ", "ㇴ", "ㇵ", "ㇶ", "ㇷ", "ㇷ゚", "ㇸ", "ㇹ", "ㇺ",
        "ㇻ", "ㇼ", "ㇽ", "ㇾ", "ㇿ",
    ]
)

SOKUON: frozenset[str] = frozenset(["っ", "ッ"])


def glyph_code_to_kana(code: int) -> str | None:
    for first, last, target in _KANA_RANGES:
        if first <= code <= last:
            return chr(code - first + target)
    return None


def combines(kana: str, next_kana: str) -> bool:
    """True when two adjacent kana are transcribed as one unit."""
    return kana in SOKUON or next_kana in SUTEGANA
