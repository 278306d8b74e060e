import io
import re

import pytest

from ftmalloc.allocator import Allocator
from ftmalloc.layout import SMALL_ALLOC_SIZE
from ftmalloc.memory import AddressSpace
from ftmalloc.report import format_alloc_mem, show_alloc_mem

BLOCK_LINE = re.compile(r"^0x([0-9A-F]+) - 0x([0-9A-F]+) : (\d+) bytes$")


@pytest.fixture
def allocator():
    return Allocator(AddressSpace(page_size=4096))


def _block_entries(text):
    entries = []
    for line in text.splitlines():
        match = BLOCK_LINE.match(line)
        if match:
            entries.append((int(match[1], 16), int(match[2], 16), int(match[3])))
    return entries


def test_empty_allocator(allocator):
    assert format_alloc_mem(allocator) == "Total allocated: 0 bytes\n"


def test_single_tiny_block(allocator):
    address = allocator.malloc(20)
    block = allocator.block(address)
    lines = format_alloc_mem(allocator).splitlines()
    assert lines[0] == f"TINY : 0x{block.zone.address:X}"
    assert _block_entries("\n".join(lines)) == [(address, address + block.size, block.size)]
    assert lines[-1] == f"Total allocated: {block.size} bytes"


def test_sections_in_order(allocator):
    allocator.malloc(SMALL_ALLOC_SIZE + 1)
    allocator.malloc(1000)
    allocator.malloc(10)
    text = format_alloc_mem(allocator)
    assert text.index("TINY :") < text.index("SMALL :") < text.index("LARGE :\n")


def test_blocks_sorted_and_total_matches(allocator):
    for size in (300, 20, 5000, 100, 1500, 9000):
        allocator.malloc(size)
    text = format_alloc_mem(allocator)
    entries = _block_entries(text)
    assert len(entries) == 6
    tiny_small = entries[:4]
    assert [e[0] for e in tiny_small[:2]] == sorted(e[0] for e in tiny_small[:2])
    assert all(end - start == size for start, end, size in entries)
    total = int(re.search(r"Total allocated: (\d+) bytes", text)[1])
    assert total == sum(size for _, _, size in entries)


def test_freed_blocks_not_listed(allocator):
    address = allocator.malloc(50)
    large = allocator.malloc(SMALL_ALLOC_SIZE + 10)
    allocator.free(address)
    allocator.free(large)
    assert format_alloc_mem(allocator) == "Total allocated: 0 bytes\n"


def test_hex_is_upper_case(allocator):
    allocator.malloc(10)
    text = format_alloc_mem(allocator)
    hex_digits = re.findall(r"0x([0-9A-Fa-f]+)", text)
    assert hex_digits
    assert all(digits == digits.upper() for digits in hex_digits)


def test_show_alloc_mem_writes_listing(allocator):
    allocator.malloc(10)
    allocator.malloc(4000)
    stream = io.StringIO()
    show_alloc_mem(allocator, stream)
    assert stream.getvalue() == format_alloc_mem(allocator)


def test_show_alloc_mem_defaults_to_stdout(allocator, capsys):
    allocator.malloc(10)
    show_alloc_mem(allocator)
    assert capsys.readouterr().out == format_alloc_mem(allocator)