from __future__ import annotations


class DecodeError(ValueError):
    pass


class TruncatedBuffer(DecodeError):
    """A read would run past the end of the buffer."""


class InvalidOffset(DecodeError):
    """A decoded offset, length or index is out of range."""


class MalformedSequence(DecodeError):
    """A variable-length sequence or event stream cannot be interpreted."""
