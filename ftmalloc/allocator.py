"""The allocator: tiny and small zones plus individually mapped large blocks."""

from __future__ import annotations

import threading

from .layout import (
    ALIGNED_HEADER_SIZE,
    SMALL_ALLOC_SIZE,
    SMALL_BLOCK_SIZE,
    TINY_ALLOC_SIZE,
    TINY_BLOCK_SIZE,
    aligned_large_block_size,
)
from .memory import AddressSpace, MappingFailed
from .zones import Block, Zone, ZoneList


class Allocator:
    """A thread-safe malloc/free/realloc over a simulated address space.

    Requests up to ``TINY_ALLOC_SIZE`` bytes come from tiny zones, requests up
    to ``SMALL_ALLOC_SIZE`` bytes from small zones, and larger ones get a
    mapping of their own which is kept for reuse once freed.
    """

    def __init__(self, space: AddressSpace | None = None) -> None:
        self.space = space if space is not None else AddressSpace()
        self.lock = threading.RLock()
        self._tiny = ZoneList(TINY_BLOCK_SIZE)
        self._small = ZoneList(SMALL_BLOCK_SIZE)
        self._used_large: list[Block] = []
        self._free_large: list[Block] = []
        self._large_lengths: dict[int, int] = {}
        self._blocks: dict[int, Block] = {}

    @property
    def tiny_zones(self) -> tuple[Zone, ...]:
        """Tiny zones, newest first."""
        return tuple(self._tiny)

    @property
    def small_zones(self) -> tuple[Zone, ...]:
        """Small zones, newest first."""
        return tuple(self._small)

    @property
    def used_large_blocks(self) -> tuple[Block, ...]:
        """Large blocks in use, most recently allocated first."""
        return tuple(self._used_large)

    @property
    def free_large_blocks(self) -> tuple[Block, ...]:
        """Freed large blocks kept for reuse, most recently freed first."""
        return tuple(self._free_large)

    def malloc(self, size: int) -> int:
        """Allocate ``size`` bytes and return the address of the buffer."""
        with self.lock:
            return self._malloc(size)

    def free(self, address: int | None) -> None:
        """Release the buffer at ``address``; ``None`` is ignored."""
        if address is None:
            return
        with self.lock:
            self._free(address)

    def realloc(self, address: int | None, size: int) -> int | None:
        """Resize the buffer at ``address``, moving it when it does not fit.

        A ``None`` address allocates; a size of zero frees and returns ``None``.
        """
        with self.lock:
            return self._realloc(address, size)

    def block(self, address: int) -> Block:
        """Return the block whose buffer starts at ``address``."""
        with self.lock:
            return self._lookup(address)

    def read(self, address: int, size: int) -> bytes:
        """Read ``size`` bytes of memory at ``address``."""
        return self.space.read(address, size)

    def write(self, address: int, data: bytes) -> None:
        """Write ``data`` to memory at ``address``."""
        self.space.write(address, data)

    def _lookup(self, address: int) -> Block:
        try:
            return self._blocks[address]
        except KeyError:
            raise ValueError(f"{address:#x} is not an allocated buffer") from None

    def _malloc(self, size: int) -> int:
        if size < 0:
            raise ValueError("size must not be negative")
        if size <= TINY_ALLOC_SIZE:
            block = self._zone_alloc(self._tiny, size)
        elif size <= SMALL_ALLOC_SIZE:
            block = self._zone_alloc(self._small, size)
        else:
            block = self._large_alloc(size)
        self._blocks[block.buffer] = block
        return block.buffer

    def _zone_alloc(self, zones: ZoneList, size: int) -> Block:
        block = zones.alloc(size)
        if block is None:
            try:
                zone = zones.add_zone(self.space)
            except MappingFailed as exc:
                raise MemoryError(f"cannot allocate {size} bytes") from exc
            block = zone.alloc(size)
            if block is None:
                raise MemoryError(f"cannot allocate {size} bytes")
        return block

    def _large_alloc(self, size: int) -> Block:
        length = aligned_large_block_size(size, self.space.page_size)
        for block in self._free_large:
            if self._large_lengths[block.address] == length:
                self._free_large.remove(block)
                block.size = size
                self._used_large.insert(0, block)
                return block
        try:
            address = self.space.map(length)
        except MappingFailed as exc:
            raise MemoryError(f"cannot allocate {size} bytes") from exc
        block = Block(address, size)
        self._large_lengths[address] = length
        self._used_large.insert(0, block)
        return block

    def _free(self, address: int) -> None:
        block = self._lookup(address)
        del self._blocks[address]
        if block.zone is not None:
            zones = self._tiny if any(zone is block.zone for zone in self._tiny) else self._small
            zones.release(block)
        else:
            self._used_large.remove(block)
            self._free_large.insert(0, block)

    def _realloc(self, address: int | None, size: int) -> int | None:
        if address is None:
            return self._malloc(size)
        if size < 0:
            raise ValueError("size must not be negative")
        if size == 0:
            self._free(address)
            return None

        block = self._lookup(address)
        if block.zone is not None:
            if block.size >= size:
                return address
        elif self._large_lengths[block.address] - ALIGNED_HEADER_SIZE >= size:
            block.size = size
            return address

        old_size = block.size
        new_address = self._malloc(size)
        self.space.write(new_address, self.space.read(address, min(old_size, size)))
        self._free(address)
        return new_address