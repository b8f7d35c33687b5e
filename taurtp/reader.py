"""Validation and field access for RTP packets."""

from __future__ import annotations

from taurtp.header import EXTENSION_HEADER_SIZE, FIXED_HEADER_SIZE, header_extension_size
from taurtp.netorder import read16, read32

_WORD_SIZE = 4


def _version(first: int) -> int:
    return first >> 6


def _has_padding(first: int) -> bool:
    return bool(first & 0b0010_0000)


def _has_extension(first: int) -> bool:
    return bool(first & 0b0001_0000)


def _csrc_count(first: int) -> int:
    return first & 0b0000_1111


def _extension_length(data, offset: int) -> int:
    return header_extension_size(read16(data, offset + 2))


def validate(data) -> bool:
    """Tell whether ``data`` holds a well-formed RTP packet."""
    view = memoryview(data).cast("B") if not isinstance(data, memoryview) else data
    size = len(view)
    if size < FIXED_HEADER_SIZE:
        return False

    first = view[0]
    if _version(first) != 2:
        return False

    min_size = FIXED_HEADER_SIZE + _csrc_count(first) * _WORD_SIZE
    if _has_extension(first):
        if size < min_size + EXTENSION_HEADER_SIZE:
            return False
        min_size += _extension_length(view, min_size)

    if _has_padding(first):
        if size <= min_size:
            return False
        min_size += max(1, view[size - 1])

    return size >= min_size


class Reader:
    """Read the fields of an RTP packet that has passed :func:`validate`."""

    def __init__(self, data) -> None:
        view = memoryview(data)
        self._view = view if view.format == "B" else view.cast("B")

    def pt(self) -> int:
        return self._view[1] & 0x7F

    def ssrc(self) -> int:
        return read32(self._view, 8)

    def sn(self) -> int:
        return read16(self._view, 2)

    def ts(self) -> int:
        return read32(self._view, 4)

    def marker(self) -> bool:
        return bool(self._view[1] & 0x80)

    def padding(self) -> int:
        """Number of padding bytes at the end of the packet."""
        if _has_padding(self._view[0]):
            return max(1, self._view[-1])
        return 0

    def _extension_offset(self) -> int:
        return FIXED_HEADER_SIZE + _csrc_count(self._view[0]) * _WORD_SIZE

    def payload(self) -> memoryview:
        """View of the payload, between the headers and the padding."""
        offset = self._extension_offset()
        if _has_extension(self._view[0]):
            offset += _extension_length(self._view, offset)
        end = len(self._view) - self.padding()
        return self._view[offset:end]

    def extensions(self) -> memoryview:
        """View of the header extension with its 4-byte header; empty if absent."""
        if not _has_extension(self._view[0]):
            return self._view[0:0]
        offset = self._extension_offset()
        return self._view[offset : offset + _extension_length(self._view, offset)]