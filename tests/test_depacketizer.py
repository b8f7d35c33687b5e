from dataclasses import dataclass, field

import pytest

from taurtp.buffer import Buffer, SystemAllocator
from taurtp.clock import SteadyClock
from taurtp.depacketizer import H264Depacketizer
from taurtp.header import FIXED_HEADER_SIZE
from taurtp.nalu import NaluType, create_fua_header, create_nal_unit_header, nalu_type
from taurtp.packetizer import H264Packetizer
from taurtp.rtp_allocator import RtpAllocator, RtpAllocatorOptions
from taurtp.writer import WriterOptions

CLOCK_RATE = 90_000
FUA_INDICATOR_SIZE = 1
_PATTERN = bytes(range(256))


@dataclass
class Context:
    allocator: RtpAllocator
    packetizer: H264Packetizer
    depacketizer: H264Depacketizer
    rtp_packets: list = field(default_factory=list)
    nal_units: list = field(default_factory=list)


@pytest.fixture
def ctx():
    header = WriterOptions(pt=96, ssrc=0x11223344, ts=1234567890, sn=65535, marker=False)
    allocator = RtpAllocator(
        RtpAllocatorOptions(
            header=header,
            base_tp=SteadyClock().now(),
            clock_rate=CLOCK_RATE,
            size=1200,
        )
    )
    context = Context(
        allocator, H264Packetizer(allocator), H264Depacketizer(SystemAllocator())
    )
    context.packetizer.callback = context.rtp_packets.append
    context.depacketizer.callback = context.nal_units.append
    return context


def create_nalu(kind, size):
    nalu = Buffer(SystemAllocator(), size)
    view = nalu.view_with_capacity()
    view[0] = create_nal_unit_header(kind, 0b11)
    view[1:size] = (_PATTERN * (size // 256 + 1))[1:size]
    nalu.size = size
    return nalu


def create_rtp_packet(ctx, rtp_payload):
    packet = ctx.allocator.allocate(1234567890, False)
    header_size = packet.size
    data = bytes(rtp_payload)
    packet.view_with_capacity()[header_size : header_size + len(data)] = data
    packet.size = header_size + len(data)
    return packet


def assert_nal_unit(nal_unit, target_type, target_size):
    assert nal_unit.size == target_size
    view = nal_unit.view()
    assert nalu_type(view[0]) == target_type
    assert bytes(view[1:]) == bytes(range(1, target_size))


def stap_a_payload(second_size):
    return [
        create_nal_unit_header(NaluType.STAP_A, 0b11),
        0, 2,
        create_nal_unit_header(NaluType.SPS, 0b11), 1,
        *second_size,
        create_nal_unit_header(NaluType.PPS, 0b11), 1, 2,
        0, 4,
        create_nal_unit_header(NaluType.IDR, 0b11), 1, 2, 3,
    ]


def test_empty_frame(ctx):
    assert ctx.depacketizer.process([]) is True
    assert ctx.nal_units == []


def test_stap_a(ctx):
    ctx.rtp_packets.append(create_rtp_packet(ctx, stap_a_payload((0, 3))))
    assert ctx.depacketizer.process(ctx.rtp_packets) is True
    assert len(ctx.nal_units) == 3
    assert_nal_unit(ctx.nal_units[0], NaluType.SPS, 2)
    assert_nal_unit(ctx.nal_units[1], NaluType.PPS, 3)
    assert_nal_unit(ctx.nal_units[2], NaluType.IDR, 4)


def test_stap_a_incomplete(ctx):
    ctx.rtp_packets.append(
        create_rtp_packet(ctx, [create_nal_unit_header(NaluType.STAP_A, 0b11), 0, 1])
    )
    assert ctx.depacketizer.process(ctx.rtp_packets) is False
    assert ctx.nal_units == []


def test_stap_a_zero_size(ctx):
    ctx.rtp_packets.append(create_rtp_packet(ctx, stap_a_payload((0, 0))))
    assert ctx.depacketizer.process(ctx.rtp_packets) is False
    assert len(ctx.nal_units) == 1
    assert_nal_unit(ctx.nal_units[0], NaluType.SPS, 2)


def test_stap_a_malformed_size(ctx):
    ctx.rtp_packets.append(create_rtp_packet(ctx, stap_a_payload((3, 0))))
    assert ctx.depacketizer.process(ctx.rtp_packets) is False
    assert len(ctx.nal_units) == 1
    assert_nal_unit(ctx.nal_units[0], NaluType.SPS, 2)


def test_skip_fua_without_end(ctx):
    nalu1 = create_nalu(NaluType.IDR, 2222)
    nalu2 = create_nalu(NaluType.SEI, 777)
    assert ctx.packetizer.process(nalu1, False) is True
    ctx.rtp_packets.pop()
    assert ctx.packetizer.process(nalu2, True) is True

    assert ctx.depacketizer.process(ctx.rtp_packets) is True
    assert len(ctx.nal_units) == 1
    assert bytes(ctx.nal_units[0]) == bytes(nalu2)


def test_skip_fua_without_start(ctx):
    nalu1 = create_nalu(NaluType.IDR, 2222)
    nalu2 = create_nalu(NaluType.SEI, 777)
    assert ctx.packetizer.process(nalu1, False) is True
    del ctx.rtp_packets[0]
    assert ctx.packetizer.process(nalu2, True) is True

    assert ctx.depacketizer.process(ctx.rtp_packets) is False
    assert len(ctx.nal_units) == 1
    assert bytes(ctx.nal_units[0]) == bytes(nalu2)


def test_skip_fua_with_start_and_stop(ctx):
    nalu = create_nalu(NaluType.SEI, 3333)
    assert ctx.packetizer.process(nalu, True) is True
    assert len(ctx.rtp_packets) == 3

    ctx.rtp_packets[0].view()[FIXED_HEADER_SIZE + FUA_INDICATOR_SIZE] = create_fua_header(
        True, True, NaluType.SEI
    )
    assert ctx.depacketizer.process(ctx.rtp_packets) is False
    assert ctx.nal_units == []


def test_skip_incomplete_fua_packet(ctx):
    nalu = create_nalu(NaluType.SEI, 3333)
    assert ctx.packetizer.process(nalu, True) is True
    assert len(ctx.rtp_packets) == 3

    ctx.rtp_packets[1].size = FIXED_HEADER_SIZE + FUA_INDICATOR_SIZE
    assert ctx.depacketizer.process(ctx.rtp_packets) is False
    assert ctx.nal_units == []


def test_skip_fua_with_wrong_type(ctx):
    nalu = create_nalu(NaluType.SEI, 3333)
    assert ctx.packetizer.process(nalu, True) is True
    assert len(ctx.rtp_packets) == 3

    ctx.rtp_packets[1].view()[FIXED_HEADER_SIZE + FUA_INDICATOR_SIZE] = create_fua_header(
        False, False, NaluType.FU_A
    )
    assert ctx.depacketizer.process(ctx.rtp_packets) is False
    assert ctx.nal_units == []


def test_nalu_forbidden_bit(ctx):
    nalu = create_nalu(NaluType.SEI, 777)
    assert ctx.packetizer.process(nalu, True) is True
    assert len(ctx.rtp_packets) == 1

    ctx.rtp_packets[0].view()[FIXED_HEADER_SIZE] |= 0b10000000
    assert ctx.depacketizer.process(ctx.rtp_packets) is False
    assert ctx.nal_units == []


def test_fua_reassembly(ctx):
    nalu = create_nalu(NaluType.IDR, 23456)
    assert ctx.packetizer.process(nalu, True) is True
    assert len(ctx.rtp_packets) > 1
    assert ctx.depacketizer.process(ctx.rtp_packets) is True
    assert len(ctx.nal_units) == 1
    assert bytes(ctx.nal_units[0]) == bytes(nalu)


def test_missing_callback_raises(ctx):
    ctx.depacketizer.callback = None
    with pytest.raises(RuntimeError):
        ctx.depacketizer.process([])