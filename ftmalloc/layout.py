"""Sizes, alignments and size classes shared by the allocator."""

import mmap

MIN_ALIGNMENT = 16
MIN_FRAGMENTATION_SIZE = 64

# A block header holds a size and three pointers; a zone header holds four
# pointers and a size (64-bit layout).
BLOCK_HEADER_SIZE = 32
ZONE_HEADER_SIZE = 40

TINY_BLOCK_SIZE = 256
SMALL_BLOCK_SIZE = 2048
MIN_BLOCK_COUNT_IN_ZONE = 128

PAGE_SIZE = mmap.PAGESIZE


def _check_alignment(alignment: int) -> None:
    if alignment <= 0 or alignment & (alignment - 1):
        raise ValueError(f"alignment must be a positive power of two, got {alignment}")


def align(value: int, alignment: int) -> int:
    """Round ``value`` up to the next multiple of ``alignment``."""
    _check_alignment(alignment)
    return (value + alignment - 1) & ~(alignment - 1)


ALIGNED_HEADER_SIZE = align(BLOCK_HEADER_SIZE, MIN_ALIGNMENT)
TINY_ALLOC_SIZE = TINY_BLOCK_SIZE - ALIGNED_HEADER_SIZE
SMALL_ALLOC_SIZE = SMALL_BLOCK_SIZE - ALIGNED_HEADER_SIZE


def aligned_large_block_size(size: int, page_size: int) -> int:
    """Bytes mapped for a large allocation of ``size`` bytes, header included."""
    return align(size + ALIGNED_HEADER_SIZE, page_size)


def zone_size(block_size: int, page_size: int) -> int:
    """Bytes mapped for a zone holding blocks of ``block_size`` bytes."""
    return align(block_size * MIN_BLOCK_COUNT_IN_ZONE, page_size)