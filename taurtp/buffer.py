"""Memory allocators and sized byte buffers."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass

from taurtp.numeric import align

_SIZE_T = 8


class Allocator(ABC):
    """Hands out and takes back raw memory blocks."""

    @property
    @abstractmethod
    def chunk_size(self) -> int:
        """Size of a block handed out when no size is requested."""

    @abstractmethod
    def allocate(self, size: int | None = None) -> bytearray:
        """Return a block of at least ``size`` bytes (``chunk_size`` if omitted)."""

    @abstractmethod
    def deallocate(self, block: bytearray) -> None:
        """Take back a block handed out by :meth:`allocate`."""


class SystemAllocator(Allocator):
    """Allocates fresh blocks of any size."""

    DEFAULT_SIZE = 0x1_0000

    @property
    def chunk_size(self) -> int:
        return self.DEFAULT_SIZE

    def allocate(self, size: int | None = None) -> bytearray:
        return bytearray(self.DEFAULT_SIZE if size is None else size)

    def deallocate(self, block: bytearray) -> None:
        """Blocks are reclaimed by the garbage collector."""


class PoolAllocator(Allocator):
    """Thread-safe pool of equally sized blocks."""

    def __init__(self, block_size: int) -> None:
        self._chunk_size = align(block_size, _SIZE_T)
        self._free: list[bytearray] = []
        self._lock = threading.Lock()

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    def allocate(self, size: int | None = None) -> bytearray:
        """Return a pooled block; raise ValueError if ``size`` exceeds the chunk size."""
        if size is not None and size > self._chunk_size:
            raise ValueError(
                f"requested {size} bytes, pool chunk size is {self._chunk_size}"
            )
        with self._lock:
            if self._free:
                return self._free.pop()
        return bytearray(self._chunk_size)

    def deallocate(self, block: bytearray) -> None:
        with self._lock:
            self._free.append(block)


@dataclass(frozen=True)
class BufferInfo:
    """Metadata carried with a buffer."""

    tp: int = 0


class Buffer:
    """A block of memory with a capacity and a used size."""

    def __init__(
        self,
        allocator: Allocator,
        capacity: int | None = None,
        info: BufferInfo | None = None,
    ) -> None:
        self._allocator = allocator
        if capacity is None:
            self._block: bytearray | None = allocator.allocate()
            self._capacity = allocator.chunk_size
        else:
            self._block = allocator.allocate(capacity)
            self._capacity = capacity
        self._size = 0
        self.info = info if info is not None else BufferInfo()

    @property
    def allocator(self) -> Allocator:
        return self._allocator

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def size(self) -> int:
        return self._size

    @size.setter
    def size(self, value: int) -> None:
        self._size = min(value, self._capacity)

    @property
    def released(self) -> bool:
        return self._block is None

    def _live_block(self) -> bytearray:
        if self._block is None:
            raise RuntimeError("buffer has been released")
        return self._block

    def view(self) -> memoryview:
        """Writable view of the used bytes."""
        return memoryview(self._live_block())[: self._size]

    def view_with_capacity(self) -> memoryview:
        """Writable view of the whole capacity."""
        return memoryview(self._live_block())[: self._capacity]

    def copy(self) -> Buffer:
        """Return a new buffer from the same allocator with the same content."""
        duplicate = Buffer(self._allocator, self._capacity, self.info)
        duplicate.size = self._size
        duplicate.view()[:] = self.view()
        return duplicate

    def release(self) -> None:
        """Give the block back to its allocator; later calls do nothing."""
        if self._block is not None:
            block, self._block = self._block, None
            self._allocator.deallocate(block)

    def __enter__(self) -> Buffer:
        return self

    def __exit__(self, *exc_info) -> None:
        self.release()

    def __len__(self) -> int:
        return self._size

    def __bytes__(self) -> bytes:
        return bytes(self.view())