"""A simulated address space handing out zero-filled, page-aligned mappings."""

from __future__ import annotations

import bisect

from .layout import PAGE_SIZE, align

DEFAULT_BASE = 0x100000000


class MappingFailed(OSError):
    """Raised when a mapping cannot be created."""


class AddressSpace:
    """Anonymous private mappings addressed by integers.

    Each mapping is followed by an unmapped guard page, so two mappings are
    never adjacent.
    """

    def __init__(
        self,
        page_size: int = PAGE_SIZE,
        limit: int | None = None,
        base: int = DEFAULT_BASE,
    ) -> None:
        align(0, page_size)  # validates the page size
        self.page_size = page_size
        self.limit = limit
        self.mapped = 0
        self._next = align(base, page_size)
        self._starts: list[int] = []
        self._regions: list[bytearray] = []

    def map(self, size: int) -> int:
        """Map at least ``size`` zero bytes and return the start address."""
        if size <= 0:
            raise MappingFailed(f"cannot map {size} bytes")
        length = align(size, self.page_size)
        if self.limit is not None and self.mapped + length > self.limit:
            raise MappingFailed(f"cannot map {length} bytes: limit of {self.limit} reached")
        address = self._next
        self._starts.append(address)
        self._regions.append(bytearray(length))
        self._next = address + length + self.page_size
        self.mapped += length
        return address

    def _locate(self, address: int, size: int) -> tuple[bytearray, int]:
        index = bisect.bisect_right(self._starts, address) - 1
        if index < 0:
            raise IndexError(f"address {address:#x} is not mapped")
        region = self._regions[index]
        offset = address - self._starts[index]
        if offset + size > len(region):
            raise IndexError(f"range {address:#x}+{size} is not mapped")
        return region, offset

    def read(self, address: int, size: int) -> bytes:
        """Return ``size`` bytes starting at ``address``."""
        if size < 0:
            raise ValueError("size must not be negative")
        region, offset = self._locate(address, size)
        return bytes(region[offset:offset + size])

    def write(self, address: int, data: bytes) -> None:
        """Store ``data`` starting at ``address``."""
        region, offset = self._locate(address, len(data))
        region[offset:offset + len(data)] = data