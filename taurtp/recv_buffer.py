"""Receive-side jitter buffer that puts RTP packets back in sequence order."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Set

from taurtp.buffer import Buffer
from taurtp.sn import in_range, sn_backward, sn_delta, sn_forward, sn_lesser

DEFAULT_SIZE = 256
MIN_SIZE = 4
MAX_SIZE = 4096


class PacketType(Enum):
    """What :meth:`RecvBuffer.push` did with a packet."""

    OK = "ok"
    DISCARDED = "discarded"
    RESET = "reset"


@dataclass
class RecvStats:
    """Counters of a :class:`RecvBuffer`."""

    packets: int = 0
    discarded: int = 0
    lost: int = 0
    bytes: int = 0


class RecvBuffer:
    """Reorder packets by sequence number and hand them to ``callback`` in order.

    Missing sequence numbers are remembered as candidates for recovery until the
    buffer moves past them, at which point they count as lost.
    """

    DEFAULT_SIZE = DEFAULT_SIZE

    def __init__(
        self,
        size: int = DEFAULT_SIZE,
        callback: Optional[Callable[[Buffer], None]] = None,
    ) -> None:
        self._size = min(max(size, MIN_SIZE), MAX_SIZE)
        self.callback = callback

        self._first_packet = True
        self._sn_next = 0
        self._sn_end: Optional[int] = None

        self._index = 0
        self._packets: List[Optional[Buffer]] = [None] * self._size
        self._sns_to_recover: Set[int] = set()
        self._stats = RecvStats()

    @property
    def size(self) -> int:
        """Number of packet slots."""
        return self._size

    @property
    def sns_to_recover(self) -> frozenset:
        """Sequence numbers still missing inside the buffered window."""
        return frozenset(self._sns_to_recover)

    @property
    def stats(self) -> RecvStats:
        return self._stats

    def push(self, packet: Buffer, sn: int) -> PacketType:
        """Take a packet with sequence number ``sn`` and release what is now in order."""
        if self.callback is None:
            raise RuntimeError("no callback set")
        result = self._insert_packet(packet, sn)
        while self._packets[self._index] is not None:
            self._send_and_process_next()
        return result

    def flush(self) -> None:
        """Release every buffered packet, counting the gaps as lost."""
        if self._sn_end is not None:
            expected_sn_end = sn_forward(self._sn_end, 1)
            while self._sn_next != expected_sn_end:
                self._send_and_process_next()

    def _insert_packet(self, packet: Buffer, sn: int) -> PacketType:
        self._stats.packets += 1
        self._stats.bytes += packet.size

        if self._first_packet:
            self._first_packet = False
            self._do_reset(packet, sn)
            return PacketType.OK

        sn_end = self._sn_end if self._sn_end is not None else self._sn_next
        if in_range(sn, self._sn_next, sn_end):
            return self._on_in_range_packet(packet, sn)

        max_sn_end = sn_forward(sn_end, self._size - 1)
        if in_range(sn, sn_end, max_sn_end):
            return self._on_ordered_packet(packet, sn)

        min_sn_late = sn_backward(sn_end, self._size * 2)
        if in_range(sn, min_sn_late, self._sn_next):
            self._stats.discarded += 1
            return PacketType.DISCARDED

        self._do_reset(packet, sn)
        return PacketType.RESET

    def _on_in_range_packet(self, packet: Buffer, sn: int) -> PacketType:
        index = self._index_by_sn(sn)
        if self._packets[index] is None:
            self._packets[index] = packet
            self._sns_to_recover.discard(sn)
            return PacketType.OK
        self._stats.discarded += 1
        return PacketType.DISCARDED

    def _on_ordered_packet(self, packet: Buffer, sn: int) -> PacketType:
        expected_sn_next = sn_backward(sn, self._size - 1)
        while sn_lesser(self._sn_next, expected_sn_next):
            self._send_and_process_next()

        if self._sn_end is not None:
            sn_to_recover = sn_forward(self._sn_end, 1)
        else:
            sn_to_recover = self._sn_next
        while sn_to_recover != sn:
            self._sns_to_recover.add(sn_to_recover)
            sn_to_recover = sn_forward(sn_to_recover, 1)

        self._packets[self._index_by_sn(sn)] = packet
        self._sn_end = sn
        return PacketType.OK

    def _do_reset(self, packet: Buffer, sn: int) -> None:
        self.flush()
        self.callback(packet)
        self._sn_next = sn_forward(sn, 1)
        self._sn_end = None

    def _send_and_process_next(self) -> None:
        packet = self._packets[self._index]
        if packet is not None:
            self._packets[self._index] = None
            self.callback(packet)
        else:
            self._sns_to_recover.discard(self._sn_next)
            self._stats.lost += 1
        self._increase_sn_state()

    def _increase_sn_state(self) -> None:
        if self._sn_end is not None and self._sn_next == self._sn_end:
            self._sn_end = None
        self._sn_next = sn_forward(self._sn_next, 1)
        self._index = (self._index + 1) % self._size

    def _index_by_sn(self, sn: int) -> int:
        return (self._index + sn_delta(sn, self._sn_next)) % self._size