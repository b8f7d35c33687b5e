# taurtp

A small library with no runtime dependencies for working with RTP media
streams carrying H.264 video:

- reading and validating RTP packets (`taurtp.reader`)
- writing RTP fixed headers with an optional one-byte (`0xBEDE`) header
  extension (`taurtp.writer`)
- handing out packet buffers that already carry an RTP header with a running
  sequence number and a media timestamp (`taurtp.rtp_allocator`)
- H.264 packetization into single NAL unit and FU-A packets (`taurtp.packetizer`)
- H.264 depacketization of single NAL unit, STAP-A and FU-A packets
  (`taurtp.depacketizer`)
- a receive buffer that puts packets back in order, discards duplicates and
  late arrivals, and tracks the sequence numbers still missing
  (`taurtp.recv_buffer`)
- a send buffer that keeps recent packets for retransmission
  (`taurtp.send_buffer`)

## Installation

```
pip install taurtp
```

Python 3.10 or later is required.

## Writing and reading a packet

```python
from taurtp.writer import WriterOptions, write
from taurtp.reader import Reader, validate

data = bytearray(1500)
options = WriterOptions(pt=96, ssrc=0x11223344, ts=90000, sn=12345, marker=True)
result = write(data, options)          # result.size == 12

packet = bytes(data[: result.size])
assert validate(packet)

reader = Reader(packet)
print(reader.pt(), reader.ssrc(), reader.sn(), reader.ts(), reader.marker())
print(len(reader.payload()), len(reader.extensions()), reader.padding())
```

`write` raises `ValueError` when the buffer is too small for the header.
`validate` checks the RTP version, the CSRC list, the header extension and
the padding against the packet length; build a `Reader` only on data that
passed it. `Reader.payload()` and `Reader.extensions()` return memoryviews
into the packet.

## Packetizing and depacketizing H.264

```python
from taurtp.buffer import Buffer, SystemAllocator
from taurtp.depacketizer import H264Depacketizer
from taurtp.nalu import NaluType, create_nal_unit_header
from taurtp.packetizer import H264Packetizer
from taurtp.rtp_allocator import RtpAllocator, RtpAllocatorOptions
from taurtp.writer import WriterOptions

rtp = RtpAllocator(RtpAllocatorOptions(
    header=WriterOptions(pt=96, ssrc=0x11223344, ts=0, sn=0, marker=False),
    base_tp=0,
    clock_rate=90_000,
    size=1200,
))

packets = []
packetizer = H264Packetizer(rtp, callback=packets.append)

nalu = Buffer(SystemAllocator(), 5000)
nalu.view_with_capacity()[0] = create_nal_unit_header(NaluType.IDR, 0b11)
nalu.size = 5000
packetizer.process(nalu, last=True)    # FU-A packets, marker set on the last one

nal_units = []
depacketizer = H264Depacketizer(SystemAllocator(), callback=nal_units.append)
assert depacketizer.process(packets)
assert bytes(nal_units[0]) == bytes(nalu)
```

`RtpAllocator.max_rtp_payload()` is the packet size minus the fixed header,
the header extension and 16 bytes kept free for SRTP authentication. NAL units
up to that size go into a single packet; larger ones are split into FU-A
fragments of nearly equal size. Timestamps are derived from the buffer's
`info.tp` (nanoseconds) relative to `base_tp`, at `clock_rate` ticks per
second, wrapping at 32 bits.

`H264Packetizer.process` returns `False` for header-only NAL units, NAL units
with the forbidden bit set and aggregation/fragmentation types.
`H264Depacketizer.process` returns `False` if any packet of the frame was
malformed (bad STAP-A sizes, FU-A fragments without a start, with both start
and end bits, or with an invalid type); the NAL units that could be recovered
are still handed to the callback.

## Receive and send buffers

```python
from taurtp.recv_buffer import PacketType, RecvBuffer
from taurtp.send_buffer import SendBuffer

received = []
recv = RecvBuffer(callback=received.append)   # 256 slots by default
kind = recv.push(packet, sn)                  # PacketType.OK, DISCARDED or RESET
recv.sns_to_recover                           # missing sequence numbers
recv.flush()                                  # release everything, gaps count as lost
recv.stats                                    # RecvStats(packets, discarded, lost, bytes)

sent = []
send = SendBuffer(size=256, callback=sent.append)
send.push(packet, sn)                         # stores the packet, sends a copy
send.send_rtx(sn)                             # True if sn is still stored
send.stats                                    # SendStats(packets, rtx, bytes)
```

Buffer sizes are clamped to 4..4096 packets. A packet far outside the receive
window resets the buffer: what is held is flushed and the new packet starts a
fresh sequence.

## Memory

`taurtp.buffer.Buffer` is a block with a capacity and a used `size` (setting a
size above the capacity clamps it). `view()` and `view_with_capacity()`
return writable memoryviews, `copy()` duplicates the buffer, and `release()`
(or leaving a `with` block) gives the block back to its allocator.
`SystemAllocator` creates fresh blocks; `PoolAllocator` is a thread-safe pool
of equally sized blocks (rounded up to a multiple of 8) and raises
`ValueError` for a request larger than its chunk size.

## Sequence numbers

```python
from taurtp.sn import sn_forward, sn_backward, in_range

sn_forward(100, 65526)        # 90, wraps around
sn_backward(100, 10000)       # 55636
in_range(3, 65531, 200)       # True: the range crosses zero
```

## Modules

| Module | Contents |
| --- | --- |
| `taurtp.clock` | `Clock`, `SteadyClock`, `duration_sec`, `SEC`, `MS`, `MICRO` (nanoseconds) |
| `taurtp.numeric` | `align`, `div_ceil`, `near` |
| `taurtp.netorder` | big-endian `read16`, `read32`, `write16`, `write32` |
| `taurtp.buffer` | `Buffer`, `BufferInfo`, `Allocator`, `SystemAllocator`, `PoolAllocator` |
| `taurtp.header` | `header_extension_size`, `build_fixed_header` |
| `taurtp.sn` | `sn_forward`, `sn_backward`, `sn_delta`, `sn_lesser`, `sn_greater`, `in_range` |
| `taurtp.reader` | `validate`, `Reader` |
| `taurtp.writer` | `write`, `WriterOptions`, `WriteResult` |
| `taurtp.rtp_allocator` | `RtpAllocator`, `RtpAllocatorOptions` |
| `taurtp.nalu` | `NaluType` and NAL unit / FU-A header helpers |
| `taurtp.packetizer` | `H264Packetizer` |
| `taurtp.depacketizer` | `H264Depacketizer` |
| `taurtp.recv_buffer` | `RecvBuffer`, `RecvStats`, `PacketType` |
| `taurtp.send_buffer` | `SendBuffer`, `SendStats` |

## What it does not do

The package works on packets in memory only. It has no command-line tool, it
opens no sockets and reads no capture files, and it does not handle RTCP,
SRTP encryption or writing RTP padding.

## Running the tests

```
pip install -e ".[test]"
pytest
```