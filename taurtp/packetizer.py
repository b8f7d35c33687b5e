"""Splitting H.264 NAL units into RTP packets (single NAL unit and FU-A modes)."""

from __future__ import annotations

from typing import Callable, Optional

from taurtp.buffer import Buffer
from taurtp.nalu import (
    NaluType,
    create_fua_header,
    create_fua_indicator,
    nalu_forbidden,
    nalu_type,
)
from taurtp.numeric import div_ceil
from taurtp.rtp_allocator import RtpAllocator

_NALU_HEADER_SIZE = 1
_FUA_OVERHEAD = 2


class H264Packetizer:
    """Turn NAL units into RTP packets handed to ``callback``."""

    def __init__(
        self,
        allocator: RtpAllocator,
        callback: Optional[Callable[[Buffer], None]] = None,
    ) -> None:
        self._allocator = allocator
        self._max_payload = allocator.max_rtp_payload()
        self.callback = callback

    def process(self, nal_unit: Buffer, last: bool) -> bool:
        """Packetize one NAL unit; ``last`` sets the marker on its final packet.

        Return False if the NAL unit is header-only, has the forbidden bit set,
        or is of an aggregation/fragmentation type.
        """
        if self.callback is None:
            raise RuntimeError("no callback set")
        view = nal_unit.view()
        if len(view) <= _NALU_HEADER_SIZE:
            return False
        header = view[0]
        if nalu_forbidden(header) or nalu_type(header) >= NaluType.STAP_A:
            return False

        tp = nal_unit.info.tp
        if len(view) <= self._max_payload:
            self._process_single(view, tp, last)
        else:
            self._process_fua(view, tp, last)
        return True

    def _process_single(self, view: memoryview, tp: int, last: bool) -> None:
        packet = self._allocator.allocate(tp, last)
        header_size = packet.size
        packet.view_with_capacity()[header_size : header_size + len(view)] = view
        packet.size = header_size + len(view)
        self.callback(packet)

    def _process_fua(self, view: memoryview, tp: int, last: bool) -> None:
        nalu_header = view[0]
        remaining = view[_NALU_HEADER_SIZE:]
        max_fua_payload = self._max_payload - _FUA_OVERHEAD
        packets_count = div_ceil(len(remaining), max_fua_payload)

        for number in range(1, packets_count + 1):
            is_final = number == packets_count
            packet = self._allocator.allocate(tp, last and is_final)
            header_size = packet.size
            data = packet.view_with_capacity()
            data[header_size] = create_fua_indicator(nalu_header)
            data[header_size + 1] = create_fua_header(number == 1, is_final, nalu_header)

            chunk_size = min(
                len(remaining), div_ceil(len(remaining), packets_count + 1 - number)
            )
            start = header_size + _FUA_OVERHEAD
            data[start : start + chunk_size] = remaining[:chunk_size]
            packet.size = start + chunk_size
            self.callback(packet)

            remaining = remaining[chunk_size:]