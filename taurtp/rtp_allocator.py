"""Pool of packet buffers that come with a ready RTP header."""

from __future__ import annotations

from dataclasses import dataclass, replace

from taurtp.buffer import Buffer, PoolAllocator
from taurtp.clock import SEC
from taurtp.header import FIXED_HEADER_SIZE, header_extension_size
from taurtp.sn import sn_forward
from taurtp.writer import WriterOptions, write

DEFAULT_PACKET_SIZE = 1500
SRTP_MAX_AUTH_SIZE = 16

_U32_MASK = 0xFFFF_FFFF
_U64_MODULUS = 1 << 64


@dataclass
class RtpAllocatorOptions:
    """Header template, time base and packet size for :class:`RtpAllocator`."""

    header: WriterOptions
    base_tp: int
    clock_rate: int
    size: int = DEFAULT_PACKET_SIZE


class RtpAllocator:
    """Hands out packet buffers with a written RTP header and advancing sequence number."""

    def __init__(self, options: RtpAllocatorOptions) -> None:
        self._header = replace(options.header)
        self._base_tp = options.base_tp
        self._clock_rate = options.clock_rate
        self._size = options.size
        self._base_rtp_ts = options.header.ts & _U32_MASK
        self._pool = PoolAllocator(options.size)

    def allocate(self, tp: int, marker: bool = False) -> Buffer:
        """Return a packet whose size is its header, stamped for timepoint ``tp``.

        Raise ValueError if a packet cannot hold the header.
        """
        packet = Buffer(self._pool)
        self._header.ts = self._calc_ts(tp)
        self._header.marker = marker
        try:
            result = write(packet.view_with_capacity(), self._header)
        except ValueError:
            packet.release()
            raise
        self._header.sn = sn_forward(self._header.sn, 1)
        packet.size = result.size
        return packet

    def deallocate(self, buffer: Buffer) -> None:
        """Give a packet from :meth:`allocate` back to the pool."""
        if buffer.allocator is not self._pool:
            raise ValueError("buffer was not allocated by this allocator")
        buffer.release()

    def max_rtp_payload(self) -> int:
        """Largest payload that fits a packet, leaving room for SRTP authentication."""
        return (
            self._size
            - FIXED_HEADER_SIZE
            - header_extension_size(self._header.extension_length_in_words)
            - SRTP_MAX_AUTH_SIZE
        )

    def _calc_ts(self, tp: int) -> int:
        elapsed = (tp - self._base_tp) % _U64_MODULUS
        ticks = (elapsed * self._clock_rate) % _U64_MODULUS // SEC
        return (self._base_rtp_ts + ticks) & _U32_MASK