"""Send-side history of RTP packets kept for retransmission."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

from taurtp.buffer import Buffer
from taurtp.sn import in_range, sn_delta, sn_forward

DEFAULT_SIZE = 256
MIN_SIZE = 4
MAX_SIZE = 4096


@dataclass
class SendStats:
    """Counters of a :class:`SendBuffer`."""

    packets: int = 0
    rtx: int = 0
    bytes: int = 0


class SendBuffer:
    """Send packets through ``callback`` and keep the latest ones for retransmission."""

    DEFAULT_SIZE = DEFAULT_SIZE

    def __init__(
        self,
        size: int = DEFAULT_SIZE,
        callback: Optional[Callable[[Buffer], None]] = None,
    ) -> None:
        self._size = min(max(size, MIN_SIZE), MAX_SIZE)
        self.callback = callback
        self._sn_begin = 0
        self._index = 0
        self._packets: List[Buffer] = []
        self._stats = SendStats()

    @property
    def size(self) -> int:
        """Number of packets kept for retransmission."""
        return self._size

    @property
    def stats(self) -> SendStats:
        return self._stats

    def push(self, packet: Buffer, sn: int) -> None:
        """Store ``packet`` with sequence number ``sn`` and send a copy of it.

        When the history is full the oldest packet is released.
        """
        if self.callback is None:
            raise RuntimeError("no callback set")
        if len(self._packets) == self._size:
            oldest = self._packets[self._index]
            self._packets[self._index] = packet
            oldest.release()
            self._sn_begin = sn_forward(self._sn_begin, 1)
            self._index = (self._index + 1) % self._size
        else:
            if not self._packets:
                self._sn_begin = sn
                self._index = 0
            self._packets.append(packet)

        self._send_copy(self._packets[self._index_by_sn(sn)])

    def send_rtx(self, sn: int) -> bool:
        """Send a copy of the stored packet ``sn`` again; False if it is not stored."""
        if not self._packets:
            return False
        sn_end = sn_forward(self._sn_begin, len(self._packets) - 1)
        if not in_range(sn, self._sn_begin, sn_end):
            return False
        if self.callback is None:
            raise RuntimeError("no callback set")
        self._send_copy(self._packets[self._index_by_sn(sn)])
        self._stats.rtx += 1
        return True

    def _send_copy(self, stored: Buffer) -> None:
        self.callback(stored.copy())
        self._stats.packets += 1
        self._stats.bytes += stored.size

    def _index_by_sn(self, sn: int) -> int:
        return (self._index + sn_delta(sn, self._sn_begin)) % len(self._packets)