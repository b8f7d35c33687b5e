"""Writing RTP headers into byte buffers."""

from __future__ import annotations

from dataclasses import dataclass

from taurtp.header import (
    EXTENSION_HEADER_SIZE,
    FIXED_HEADER_SIZE,
    build_fixed_header,
    header_extension_size,
)
from taurtp.netorder import write16, write32

ONE_BYTE_EXTENSION_PROFILE = 0xBEDE


@dataclass
class WriterOptions:
    """Header fields of an RTP packet to write."""

    pt: int
    ssrc: int
    ts: int
    sn: int
    marker: bool
    extension_length_in_words: int = 0


@dataclass
class WriteResult:
    """Outcome of :func:`write`."""

    size: int
    payload_offset: int
    payload: memoryview
    extension: memoryview


def write(data, options: WriterOptions) -> WriteResult:
    """Write an RTP header at the start of the writable buffer ``data``.

    Raise ValueError if the buffer cannot hold the header.
    """
    view = memoryview(data)
    extension_size = header_extension_size(options.extension_length_in_words)
    size = FIXED_HEADER_SIZE + extension_size
    if len(view) < size:
        raise ValueError(f"buffer of {len(view)} bytes cannot hold a {size}-byte RTP header")

    view[0] = build_fixed_header(options.extension_length_in_words > 0)
    view[1] = (options.pt & 0x7F) | (0x80 if options.marker else 0)
    write16(view, 2, options.sn)
    write32(view, 4, options.ts)
    write32(view, 8, options.ssrc)

    if options.extension_length_in_words:
        write16(view, FIXED_HEADER_SIZE, ONE_BYTE_EXTENSION_PROFILE)
        write16(view, FIXED_HEADER_SIZE + 2, options.extension_length_in_words)
        extension = view[FIXED_HEADER_SIZE + EXTENSION_HEADER_SIZE : size]
    else:
        extension = view[0:0]

    return WriteResult(
        size=size,
        payload_offset=size,
        payload=view[size:size],
        extension=extension,
    )