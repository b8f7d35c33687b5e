"""Reassembling H.264 NAL units from RTP payloads (single, STAP-A and FU-A)."""

from __future__ import annotations

from typing import Callable, List, Optional

from taurtp.buffer import Allocator, Buffer
from taurtp.nalu import NaluType, create_nal_unit_header, nalu_forbidden, nalu_type
from taurtp.netorder import read16
from taurtp.reader import Reader

Frame = List[Buffer]

_NALU_HEADER_SIZE = 1
_FUA_OVERHEAD = 2
_STAP_SIZE_FIELD = 2
_FUA_START_BIT = 0b1000_0000
_FUA_END_BIT = 0b0100_0000


def _nri(header: int) -> int:
    return (header >> 5) & 0b11


class H264Depacketizer:
    """Turn frames of RTP packets into NAL units handed to ``callback``."""

    NALU_MAX_SIZE_DEFAULT = 0x1_0000

    def __init__(
        self,
        allocator: Allocator,
        callback: Optional[Callable[[Buffer], None]] = None,
    ) -> None:
        self._allocator = allocator
        self.callback = callback
        self._nalu_max_size = self.NALU_MAX_SIZE_DEFAULT
        self._fua_nal_unit: Optional[Buffer] = None

    def process(self, frame: Frame) -> bool:
        """Depacketize every packet of ``frame``; return False if any was malformed."""
        if self.callback is None:
            raise RuntimeError("no callback set")
        self._nalu_max_size = max(
            sum(packet.size for packet in frame), self.NALU_MAX_SIZE_DEFAULT
        )
        ok = True
        for packet in frame:
            payload = Reader(packet.view()).payload()
            ok = self._process_payload(payload) and ok
        return ok

    def _process_payload(self, payload: memoryview) -> bool:
        if len(payload) == 0:
            return False
        header = payload[0]
        if nalu_forbidden(header):
            return False

        kind = nalu_type(header)
        if kind == NaluType.FU_A:
            return self._process_fua(payload)
        self._drop_fua()

        if kind == NaluType.STAP_A:
            return self._process_stap_a(payload)
        if kind < NaluType.STAP_A:
            self._emit_copy(payload)
            return True
        return False

    def _emit_copy(self, data: memoryview) -> None:
        nalu = Buffer(self._allocator, len(data))
        nalu.view_with_capacity()[: len(data)] = data
        nalu.size = len(data)
        self.callback(nalu)

    def _drop_fua(self) -> None:
        if self._fua_nal_unit is not None:
            self._fua_nal_unit.release()
            self._fua_nal_unit = None

    def _valid_fua(self, payload: memoryview) -> bool:
        if len(payload) <= _FUA_OVERHEAD:
            return False
        fua_header = payload[1]
        start = bool(fua_header & _FUA_START_BIT)
        end = bool(fua_header & _FUA_END_BIT)
        if start and end:
            return False
        if not start and self._fua_nal_unit is None:
            return False
        return nalu_type(fua_header) < NaluType.STAP_A

    def _process_fua(self, payload: memoryview) -> bool:
        if not self._valid_fua(payload):
            self._drop_fua()
            return False
        indicator, fua_header = payload[0], payload[1]
        if fua_header & _FUA_START_BIT:
            self._drop_fua()
            nalu = Buffer(self._allocator, self._nalu_max_size)
            nalu.view_with_capacity()[0] = create_nal_unit_header(
                nalu_type(fua_header), _nri(indicator)
            )
            nalu.size = _NALU_HEADER_SIZE
            self._fua_nal_unit = nalu

        nalu = self._fua_nal_unit
        fragment = payload[_FUA_OVERHEAD:]
        used = nalu.size
        if used + len(fragment) > nalu.capacity:
            self._drop_fua()
            return False
        nalu.view_with_capacity()[used : used + len(fragment)] = fragment
        nalu.size = used + len(fragment)

        if fua_header & _FUA_END_BIT:
            self._fua_nal_unit = None
            self.callback(nalu)
        return True

    def _process_stap_a(self, payload: memoryview) -> bool:
        rest = payload[_NALU_HEADER_SIZE:]
        while len(rest) > _STAP_SIZE_FIELD:
            nalu_size = read16(rest, 0)
            if nalu_size == 0 or len(rest) < _STAP_SIZE_FIELD + nalu_size:
                break
            rest = rest[_STAP_SIZE_FIELD:]
            self._emit_copy(rest[:nalu_size])
            rest = rest[nalu_size:]
        return len(rest) == 0