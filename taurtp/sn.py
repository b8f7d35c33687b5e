"""Arithmetic on 16-bit RTP sequence numbers with wrap-around."""

from __future__ import annotations

SN_NEGATIVE_THRESHOLD = 0x8000
_SN_MASK = 0xFFFF


def sn_forward(sn: int, delta: int) -> int:
    """Return ``sn`` moved ``delta`` steps forward."""
    return (sn + delta) & _SN_MASK


def sn_backward(sn: int, delta: int) -> int:
    """Return ``sn`` moved ``delta`` steps backward."""
    return (sn - delta) & _SN_MASK


def sn_delta(a: int, b: int) -> int:
    """Return ``a - b`` modulo 2**16."""
    return (a - b) & _SN_MASK


def sn_lesser(a: int, b: int) -> bool:
    """Tell whether ``a`` comes before ``b`` in sequence order."""
    return sn_delta(a, b) >= SN_NEGATIVE_THRESHOLD


def sn_greater(a: int, b: int) -> bool:
    """Tell whether ``a`` comes after ``b`` in sequence order."""
    return sn_lesser(b, a)


def in_range(sn: int, left: int, right: int) -> bool:
    """Tell whether ``sn`` lies in the closed range ``[left, right]``."""
    return not (sn_lesser(sn, left) or sn_lesser(right, sn))