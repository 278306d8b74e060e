"""Zones: pools of small blocks carved out of one mapping."""

from __future__ import annotations

import bisect
from dataclasses import dataclass, field
from typing import Iterator

from .layout import (
    ALIGNED_HEADER_SIZE,
    MIN_ALIGNMENT,
    MIN_FRAGMENTATION_SIZE,
    ZONE_HEADER_SIZE,
    align,
    zone_size,
)
from .memory import AddressSpace


@dataclass(eq=False)
class Block:
    """A block: a header at ``address`` followed by ``size`` usable bytes."""

    address: int
    size: int
    zone: Zone | None = field(default=None, repr=False)

    @property
    def buffer(self) -> int:
        """Address of the first usable byte."""
        return self.address + ALIGNED_HEADER_SIZE

    @property
    def end(self) -> int:
        """Address just past the last usable byte."""
        return self.buffer + self.size


class Zone:
    """One mapping split into used and free blocks; free blocks stay in address order."""

    def __init__(self, address: int, size: int) -> None:
        first = align(address + ZONE_HEADER_SIZE, MIN_ALIGNMENT)
        if first + ALIGNED_HEADER_SIZE >= address + size:
            raise ValueError(f"zone of {size} bytes is too small")
        self.address = address
        self.size = size
        self._free = [Block(first, address + size - (first + ALIGNED_HEADER_SIZE), self)]
        self._used: dict[int, Block] = {}

    def __repr__(self) -> str:
        return (
            f"Zone(address={self.address:#x}, size={self.size}, "
            f"used={len(self._used)}, free={len(self._free)})"
        )

    @property
    def end(self) -> int:
        return self.address + self.size

    @property
    def free_blocks(self) -> tuple[Block, ...]:
        """Free blocks in address order."""
        return tuple(self._free)

    @property
    def used_blocks(self) -> tuple[Block, ...]:
        """Used blocks, most recently allocated first."""
        return tuple(reversed(self._used.values()))

    def owns(self, address: int) -> bool:
        """Whether ``address`` lies inside this zone."""
        return self.address <= address < self.end

    def alloc(self, size: int) -> Block | None:
        """Take the first free block that fits ``size``, splitting off the rest."""
        if size < 0:
            raise ValueError("size must not be negative")
        for index, candidate in enumerate(self._free):
            if candidate.size < size:
                continue
            if candidate.size > size + MIN_FRAGMENTATION_SIZE:
                rest_address = align(candidate.buffer + size, MIN_ALIGNMENT)
                rest = Block(rest_address, candidate.end - (rest_address + ALIGNED_HEADER_SIZE), self)
                candidate.size = rest_address - candidate.buffer
                self._free[index] = rest
            else:
                del self._free[index]
            self._used[candidate.address] = candidate
            return candidate
        return None

    def release(self, block: Block) -> None:
        """Return ``block`` to the free list, merging it with adjacent free blocks."""
        if self._used.get(block.address) is not block:
            raise ValueError(f"block at {block.address:#x} is not in use in this zone")
        del self._used[block.address]

        index = bisect.bisect_left(self._free, block.address, key=lambda b: b.address)
        if index > 0 and self._free[index - 1].end == block.address:
            merged = self._free[index - 1]
            merged.size += ALIGNED_HEADER_SIZE + block.size
            index -= 1
        else:
            merged = block
            self._free.insert(index, block)

        following = index + 1
        if following < len(self._free) and merged.end == self._free[following].address:
            merged.size += ALIGNED_HEADER_SIZE + self._free[following].size
            del self._free[following]


class ZoneList:
    """All zones of one size class, newest first."""

    def __init__(self, block_size: int) -> None:
        if block_size <= ZONE_HEADER_SIZE:
            raise ValueError("block size must be larger than the zone header")
        self.block_size = block_size
        self._zones: list[Zone] = []

    def __iter__(self) -> Iterator[Zone]:
        return iter(self._zones)

    def __len__(self) -> int:
        return len(self._zones)

    def add_zone(self, space: AddressSpace) -> Zone:
        """Map a new zone from ``space`` and put it at the front of the list."""
        size = zone_size(self.block_size, space.page_size)
        zone = Zone(space.map(size), size)
        self._zones.insert(0, zone)
        return zone

    def alloc(self, size: int) -> Block | None:
        """Allocate from the first zone with room, or return None."""
        for zone in self._zones:
            block = zone.alloc(size)
            if block is not None:
                return block
        return None

    def release(self, block: Block) -> None:
        """Return ``block`` to the zone it came from."""
        if block.zone is None or not any(zone is block.zone for zone in self._zones):
            raise ValueError(f"block at {block.address:#x} does not belong to this list")
        block.zone.release(block)