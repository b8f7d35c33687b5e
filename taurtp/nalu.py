"""H.264 NAL unit header, FU-A indicator and FU-A header bytes."""

from __future__ import annotations

from enum import IntEnum

_TYPE_MASK = 0b0001_1111
_NRI_MASK = 0b0110_0000
_FORBIDDEN_BIT = 0b1000_0000
_FUA_START_BIT = 0b1000_0000
_FUA_END_BIT = 0b0100_0000


class NaluType(IntEnum):
    """NAL unit types, including the RTP aggregation and fragmentation types."""

    NONE = 0
    NON_IDR = 1
    IDR = 5
    SEI = 6
    SPS = 7
    PPS = 8
    AUD = 9
    STAP_A = 24
    STAP_B = 25
    MTAP16 = 26
    MTAP24 = 27
    FU_A = 28
    FU_B = 29


def nalu_type(header: int) -> int:
    """Return the 5-bit type field of a NAL unit header (or FU-A header) byte."""
    return header & _TYPE_MASK


def nalu_forbidden(header: int) -> bool:
    """Tell whether the forbidden-zero bit of a NAL unit header byte is set."""
    return bool(header & _FORBIDDEN_BIT)


def create_nal_unit_header(nalu_type: int, nri: int) -> int:
    """Build a NAL unit header byte from a type and a 2-bit NRI."""
    return ((nri & 0b11) << 5) | (nalu_type & _TYPE_MASK)


def create_fua_indicator(nalu_header: int) -> int:
    """Build the FU-A indicator byte for fragments of the NAL unit with ``nalu_header``."""
    return (nalu_header & _NRI_MASK) | NaluType.FU_A


def create_fua_header(start: bool, end: bool, nalu_header: int) -> int:
    """Build the FU-A header byte for a fragment of the NAL unit with ``nalu_header``."""
    return (
        (_FUA_START_BIT if start else 0)
        | (_FUA_END_BIT if end else 0)
        | (nalu_header & _TYPE_MASK)
    )