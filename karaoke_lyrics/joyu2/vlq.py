from __future__ import annotations

from karaoke_lyrics.errors import MalformedSequence


def read_delta(data: bytes | memoryview, offset: int) -> tuple[int, int]:
    """
    Read one variable-length delta time starting at `offset`.

    Big-endian 7-bit groups; a set high bit means another byte follows.
    Returns (delta, bytes consumed).
    """
    value = 0
    pos = offset
    while True:
        if pos >= len(data):
            raise MalformedSequence(f"Delta time starting at offset {offset} is not terminated")
        b = data[pos]
        value = (value << 7) | (b & 0x7F)
        pos += 1
        if not b & 0x80:
            return value, pos - offset


def encode_delta(value: int) -> bytes:
    if value < 0:
        raise ValueError(f"Delta time must be non-negative: {value}")
    groups = [value & 0x7F]
    value >>= 7
    while value:
        groups.append((value & 0x7F) | 0x80)
        value >>= 7
    return bytes(reversed(groups))
