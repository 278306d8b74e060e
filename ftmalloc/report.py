"""A listing of the blocks currently in use."""

from __future__ import annotations

import sys
from typing import Iterable, TextIO

from .allocator import Allocator
from .zones import Block, Zone


def _block_lines(blocks: Iterable[Block]) -> tuple[list[str], int]:
    lines = []
    total = 0
    for block in sorted(blocks, key=lambda b: b.address):
        lines.append(f"0x{block.buffer:X} - 0x{block.end:X} : {block.size} bytes\n")
        total += block.size
    return lines, total


def _zone_lines(zones: Iterable[Zone], name: str) -> tuple[list[str], int]:
    lines = []
    total = 0
    for zone in sorted(zones, key=lambda z: z.address):
        if not zone.used_blocks:
            continue
        lines.append(f"{name} : 0x{zone.address:X}\n")
        block_lines, block_total = _block_lines(zone.used_blocks)
        lines.extend(block_lines)
        total += block_total
    return lines, total


def format_alloc_mem(allocator: Allocator) -> str:
    """Describe every used block by size class and address, with a total."""
    with allocator.lock:
        lines = []
        total = 0
        for zones, name in ((allocator.tiny_zones, "TINY"), (allocator.small_zones, "SMALL")):
            zone_lines, zone_total = _zone_lines(zones, name)
            lines.extend(zone_lines)
            total += zone_total
        if allocator.used_large_blocks:
            lines.append("LARGE :\n")
            large_lines, large_total = _block_lines(allocator.used_large_blocks)
            lines.extend(large_lines)
            total += large_total
        lines.append(f"Total allocated: {total} bytes\n")
        return "".join(lines)


def show_alloc_mem(allocator: Allocator, stream: TextIO | None = None) -> None:
    """Write the listing of used blocks to ``stream`` (standard output by default)."""
    out = stream if stream is not None else sys.stdout
    out.write(format_alloc_mem(allocator))
    out.flush()