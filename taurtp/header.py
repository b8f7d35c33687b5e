"""RTP fixed header layout and header extension sizes."""

from __future__ import annotations

FIXED_HEADER_SIZE = 12
EXTENSION_HEADER_SIZE = 4
_WORD_SIZE = 4

_VERSION_BITS = 0b1000_0000
_PADDING_BIT = 0b0010_0000
_EXTENSION_BIT = 0b0001_0000
_CSRC_COUNT_MASK = 0b0000_1111


def header_extension_size(length_in_words: int) -> int:
    """Return the size in bytes of a header extension of ``length_in_words`` words.

    The size includes the 4-byte extension header; no words means no extension.
    """
    if length_in_words > 0:
        return EXTENSION_HEADER_SIZE + _WORD_SIZE * length_in_words
    return 0


def build_fixed_header(
    extension: bool = False, padding: bool = False, csrc_count: int = 0
) -> int:
    """Return the first byte of an RTP fixed header (version 2)."""
    return (
        _VERSION_BITS
        | (_PADDING_BIT if padding else 0)
        | (_EXTENSION_BIT if extension else 0)
        | (csrc_count & _CSRC_COUNT_MASK)
    )