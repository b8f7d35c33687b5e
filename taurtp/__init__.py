"""RTP packet reading and writing, H.264 packetization and send/receive buffers."""

__version__ = "0.1.0"