"""Big-endian (network order) integer access on byte buffers."""

from __future__ import annotations

import struct

_U16 = struct.Struct(">H")
_U32 = struct.Struct(">I")


def read16(data, offset: int = 0) -> int:
    """Read an unsigned 16-bit big-endian integer at ``offset``."""
    return _U16.unpack_from(data, offset)[0]


def read32(data, offset: int = 0) -> int:
    """Read an unsigned 32-bit big-endian integer at ``offset``."""
    return _U32.unpack_from(data, offset)[0]


def write16(data, offset: int, value: int) -> None:
    """Write ``value`` truncated to 16 bits, big-endian, at ``offset``."""
    _U16.pack_into(data, offset, value & 0xFFFF)


def write32(data, offset: int, value: int) -> None:
    """Write ``value`` truncated to 32 bits, big-endian, at ``offset``."""
    _U32.pack_into(data, offset, value & 0xFFFFFFFF)