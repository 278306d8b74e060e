"""Command that exercises the allocator and prints its state."""

from __future__ import annotations

import argparse
import random
import sys
from typing import Sequence, TextIO

from .allocator import Allocator
from .report import show_alloc_mem


def _cstring(allocator: Allocator, address: int) -> bytes:
    data = allocator.read(address, allocator.block(address).size)
    return data.split(b"\0", 1)[0]


def _strcat(allocator: Allocator, address: int, text: bytes) -> None:
    end = address + len(_cstring(allocator, address))
    allocator.write(end, text + b"\0")


def run_classic(allocator: Allocator, rng: random.Random, stream: TextIO) -> None:
    """Allocate, grow and free a string, then list twenty random allocations."""
    try:
        address = allocator.malloc(15)
    except MemoryError:
        stream.write("Memory allocation failed\n")
        return
    allocator.write(address, b"Hello, World!\0")
    content = _cstring(allocator, address).decode()
    stream.write(f"Allocated memory at {address:#x} with content: {content}\n")

    for size, suffix in ((40, b" Welcome to ft_malloc!"), (10000, b" This is a large allocation test.")):
        try:
            address = allocator.realloc(address, size)
        except MemoryError:
            stream.write("Memory reallocation failed\n")
            return
        _strcat(allocator, address, suffix)
        content = _cstring(allocator, address).decode()
        stream.write(f"Reallocated memory at {address:#x} with content: {content}\n")

    allocator.free(address)
    stream.write(f"Freed memory at {address:#x}\n")

    addresses = [allocator.malloc(rng.randint(1, 7000)) for _ in range(20)]
    stream.write("\n")
    show_alloc_mem(allocator, stream)
    for item in addresses:
        allocator.free(item)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="ftmalloc", description=run_classic.__doc__)
    parser.add_argument("--seed", type=int, default=None, help="seed for the random sizes")
    args = parser.parse_args(argv)
    run_classic(Allocator(), random.Random(args.seed), sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())